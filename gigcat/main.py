from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import Depends, FastAPI
from pydantic import AliasChoices, BaseModel, Field

from gigcat.classifier import ModelClassifier
from gigcat.config import settings
from gigcat.hf_client import ConfigurationError
from gigcat.keywords import score_fallback
from gigcat.models import CategoryNode
from gigcat.tree import index_categories

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("gigcat")

app = FastAPI(title="Gigcat")

CategoryId = str | int


class CategoryIn(BaseModel):
    id: CategoryId
    name: str
    parent_id: CategoryId | None = Field(
        default=None, validation_alias=AliasChoices("parent_id", "parentId")
    )

    def to_node(self) -> CategoryNode:
        return CategoryNode(id=self.id, name=self.name, parent_id=self.parent_id)


class SuggestRequest(BaseModel):
    title: str = ""
    description: str = ""
    categories: list[CategoryIn] = Field(default_factory=list)


class LeavesRequest(BaseModel):
    categories: list[CategoryIn] = Field(default_factory=list)


class SuggestResponse(BaseModel):
    source: Literal["model", "keyword", "none"]
    suggestions: list[dict[str, Any]]


def get_classifier() -> ModelClassifier | None:
    """The classifier for a request, or None when the hosted model cannot be built."""
    try:
        return ModelClassifier()
    except ConfigurationError as e:
        logger.info("Model classifier unavailable: %s", e)
        return None
    except Exception as e:
        # Client construction talks to the hub; failures degrade to the keyword fallback.
        logger.warning("Model client construction failed: %s: %s", type(e).__name__, e)
        return None


@app.get("/health")
def health() -> dict:
    return {"ok": True, "env": settings.app_env}


@app.post("/categories/leaves")
def leaves(body: LeavesRequest) -> list[dict[str, Any]]:
    index = index_categories(category.to_node() for category in body.categories)
    return [{"id": leaf.id, "name": leaf.name, "path": leaf.path} for leaf in index.leaves]


@app.post("/categories/suggest", response_model=SuggestResponse)
def suggest(
    body: SuggestRequest,
    classifier: ModelClassifier | None = Depends(get_classifier),
) -> SuggestResponse:
    index = index_categories(category.to_node() for category in body.categories)
    if not index.leaves:
        return SuggestResponse(source="none", suggestions=[])

    # 1) Hosted model
    if classifier is not None:
        suggestions = classifier.classify(body.title, body.description, index.leaves)
        if suggestions:
            logger.info("Returning %s model suggestions", len(suggestions))
            return SuggestResponse(source="model", suggestions=[s.to_dict() for s in suggestions])

    # 2) Keyword fallback
    if settings.keyword_fallback_enabled:
        suggestions = score_fallback(body.title, body.description, index.leaves)
        if suggestions:
            logger.info("Returning %s keyword fallback suggestions", len(suggestions))
            return SuggestResponse(source="keyword", suggestions=[s.to_dict() for s in suggestions])

    return SuggestResponse(source="none", suggestions=[])
