from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Hashable, Mapping


@dataclass(frozen=True)
class CategoryNode:
    id: Hashable
    name: str
    parent_id: Hashable | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | "CategoryNode") -> "CategoryNode":
        if isinstance(payload, CategoryNode):
            return payload
        # Rows come straight from the store (parent_id) or from JS clients (parentId).
        parent_id = payload.get("parent_id", payload.get("parentId"))
        return cls(id=payload["id"], name=str(payload.get("name") or ""), parent_id=parent_id)


@dataclass(frozen=True)
class LeafCategory:
    id: Hashable
    name: str
    path: str


@dataclass(frozen=True)
class Candidate:
    """An unvalidated (id, confidence) pair emitted by a producer."""

    id: Any
    confidence: Any


@dataclass(frozen=True)
class CategorySuggestion:
    id: Hashable
    name: str
    path: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
