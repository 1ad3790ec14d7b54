"""Model-assisted category suggestions.

The hosted model only picks ids and confidences; everything it returns goes
through :func:`gigcat.validation.validate_suggestions` before reaching callers.
Falling back to :mod:`gigcat.keywords` is left to the caller.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Iterable, Mapping, Sequence

from gigcat.models import CategoryNode, CategorySuggestion, LeafCategory
from gigcat.tree import leaf_categories
from gigcat.validation import MAX_SUGGESTIONS, validate_suggestions

logger = logging.getLogger(__name__)

Generate = Callable[[str], str]

# Greedy on purpose: first "[" to last "]", so nested arrays stay intact.
JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def build_prompt(title: str, description: str, leaves: Sequence[LeafCategory]) -> str:
    category_list = "\n".join(
        f"{idx}. {leaf.path} (ID: {leaf.id})" for idx, leaf in enumerate(leaves, start=1)
    )
    return (
        "Based on the following service request, suggest the top 3-5 most relevant "
        "categories from the list below.\n\n"
        "IMPORTANT: The service request may be in Portuguese or English. Match it to the "
        "most appropriate category regardless of the input language.\n\n"
        f'Service Title: "{title or ""}"\n'
        f'Service Description: "{description or ""}"\n\n'
        'Available Categories (formatted as "Main → Subgroup → Service"):\n'
        f"{category_list}\n\n"
        "Return ONLY a JSON array of suggestions in this exact format:\n"
        '[\n  {\n    "id": "category-id",\n    "confidence": 0.95\n  }\n]\n\n'
        "Rules:\n"
        f"- Return 3-{MAX_SUGGESTIONS} suggestions maximum\n"
        "- Confidence must be between 0 and 1\n"
        "- Order by confidence (highest first)\n"
        "- Only include category IDs that exist in the list above\n"
        "- Prefer the most specific service that fits the request\n"
        "- Return ONLY the JSON array, no other text"
    )


def _strip_code_fences(text: str) -> str:
    t = text.strip()
    if t.startswith("```"):
        # remove leading ```lang
        t = t.split("\n", 1)[1] if "\n" in t else ""
        # remove trailing ```
        if "```" in t:
            t = t.rsplit("```", 1)[0]
    return t.strip()


def extract_candidates(raw: str) -> list[Any]:
    """Parse the JSON array out of raw model text; ``[]`` when there is none."""
    text = raw or ""
    match = JSON_ARRAY_RE.search(text)
    blob = match.group(0) if match else _strip_code_fences(text)
    try:
        data = json.loads(blob)
    except (json.JSONDecodeError, TypeError, ValueError):
        logger.warning("Unparseable model output: %s", text[:500])
        return []
    if not isinstance(data, list):
        logger.warning("Model output is not a JSON array: %s", text[:500])
        return []
    return data


class ModelClassifier:
    """Ranks leaf categories for a request by asking a text-generation model.

    Without an explicit ``generate`` the hosted Hugging Face client is used and
    its configuration is checked here, so a missing token raises
    :class:`gigcat.hf_client.ConfigurationError` at construction time.
    """

    def __init__(self, generate: Generate | None = None) -> None:
        if generate is None:
            from gigcat import hf_client

            hf_client.ensure_configured()
            generate = hf_client.generate
        self._generate = generate

    def classify(
        self,
        title: str,
        description: str,
        leaves: Sequence[LeafCategory],
    ) -> list[CategorySuggestion]:
        if not leaves:
            return []

        prompt = build_prompt(title, description, leaves)
        try:
            raw = self._generate(prompt)
        except Exception as e:
            # Model failures must never break the request flow.
            logger.warning("Model call failed: %s: %s", type(e).__name__, e)
            return []

        candidates = extract_candidates(str(raw or ""))
        suggestions = validate_suggestions(candidates, leaves, limit=MAX_SUGGESTIONS)
        logger.debug("Model returned %s candidates, %s valid", len(candidates), len(suggestions))
        return suggestions


def suggest_categories(
    title: str,
    description: str,
    categories: Iterable[Mapping[str, Any] | CategoryNode],
    *,
    generate: Generate | None = None,
) -> list[CategorySuggestion]:
    """Index ``categories`` and classify the request against its leaves.

    Returns ``[]`` without calling the model when there are no leaves.
    """
    leaves = leaf_categories(categories)
    if not leaves:
        return []
    return ModelClassifier(generate).classify(title, description, leaves)
