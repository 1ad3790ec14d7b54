from __future__ import annotations

import logging
import math
from typing import Any, Hashable, Iterable, Mapping, Sequence

from gigcat.models import Candidate, CategorySuggestion, LeafCategory

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5


def _as_candidate(entry: Any) -> Candidate | None:
    if isinstance(entry, Candidate):
        return entry
    if isinstance(entry, CategorySuggestion):
        return Candidate(id=entry.id, confidence=entry.confidence)
    if isinstance(entry, Mapping):
        return Candidate(id=entry.get("id"), confidence=entry.get("confidence"))
    return None


def _valid_confidence(value: Any) -> float | None:
    # bool is an int subclass; `true` from a model is not a confidence.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    confidence = float(value)
    if math.isnan(confidence) or not 0.0 <= confidence <= 1.0:
        return None
    return confidence


class _LeafLookup:
    """Resolves candidate ids to leaves: exact id first, then its text form."""

    def __init__(self, leaves: Iterable[LeafCategory]) -> None:
        self._exact: dict[Hashable, int] = {}
        self._by_text: dict[str, int] = {}
        self.leaves: list[LeafCategory] = []
        for leaf in leaves:
            if leaf.id in self._exact:
                continue
            position = len(self.leaves)
            self.leaves.append(leaf)
            self._exact[leaf.id] = position
            text = str(leaf.id)
            if text in self._by_text:
                logger.warning(
                    "Leaf ids %r and %r share the text form %r; only exact matches reach %r",
                    self.leaves[self._by_text[text]].id,
                    leaf.id,
                    text,
                    leaf.id,
                )
                continue
            self._by_text[text] = position

    def position(self, category_id: Hashable) -> int | None:
        # A model echoing ID 7 as "7" still matches via the text form.
        position = self._exact.get(category_id)
        if position is None:
            position = self._by_text.get(str(category_id))
        return position


def validate_suggestions(
    candidates: Iterable[Any],
    leaves: Sequence[LeafCategory],
    *,
    limit: int = MAX_SUGGESTIONS,
) -> list[CategorySuggestion]:
    """Keep only candidates that name a known leaf with a confidence in [0, 1].

    Name and path always come from the leaf record, never from the candidate.
    Candidate order is preserved; repeated leaves keep their first occurrence and
    the result is truncated to ``limit`` entries.
    """
    lookup = _LeafLookup(leaves)
    validated: list[CategorySuggestion] = []
    seen: set[int] = set()
    dropped = 0

    for entry in candidates:
        candidate = _as_candidate(entry)
        if candidate is None or candidate.id is None or isinstance(candidate.id, (dict, list, bool)):
            dropped += 1
            continue
        position = lookup.position(candidate.id)
        confidence = _valid_confidence(candidate.confidence)
        if position is None or confidence is None or position in seen:
            dropped += 1
            continue
        seen.add(position)
        leaf = lookup.leaves[position]
        validated.append(
            CategorySuggestion(id=leaf.id, name=leaf.name, path=leaf.path, confidence=confidence)
        )

    if dropped:
        logger.debug("Dropped %s invalid suggestion candidates", dropped)
    return validated[: max(0, limit)]
