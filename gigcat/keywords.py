"""Deterministic keyword fallback for category suggestions.

Used when the hosted model is unavailable or returns nothing usable. Matching is
plain lowercase substring search of each request word inside the leaf path, so
"eletricista" does not match "Eletricidade".
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from gigcat.models import CategoryNode, CategorySuggestion, LeafCategory
from gigcat.tree import leaf_categories
from gigcat.validation import MAX_SUGGESTIONS, validate_suggestions

FALLBACK_CONFIDENCE_CAP = 0.8
MIN_TOKEN_LENGTH = 3


def _tokens(title: str, description: str) -> list[str]:
    return f"{title or ''} {description or ''}".lower().split()


def score_fallback(
    title: str,
    description: str,
    leaves: Sequence[LeafCategory],
) -> list[CategorySuggestion]:
    words = [word for word in _tokens(title, description) if len(word) > MIN_TOKEN_LENGTH]

    scored: list[CategorySuggestion] = []
    for leaf in leaves:
        path = leaf.path.lower()
        # Repeated words count once per occurrence.
        score = sum(1 for word in words if word in path)
        confidence = min(score / 10, FALLBACK_CONFIDENCE_CAP)
        if confidence > 0:
            scored.append(CategorySuggestion(id=leaf.id, name=leaf.name, path=leaf.path, confidence=confidence))

    # sorted() is stable: equal confidences keep leaf order.
    ranked = sorted(scored, key=lambda suggestion: suggestion.confidence, reverse=True)
    return validate_suggestions(ranked, leaves, limit=MAX_SUGGESTIONS)


def suggest_categories_keyword_fallback(
    title: str,
    description: str,
    categories: Iterable[Mapping[str, Any] | CategoryNode],
) -> list[CategorySuggestion]:
    return score_fallback(title, description, leaf_categories(categories))
