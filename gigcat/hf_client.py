from __future__ import annotations

import logging
from functools import lru_cache

from gigcat.config import settings

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when the hosted model cannot be configured (e.g. missing token)."""


@lru_cache(maxsize=1)
def _chat():
    if not settings.hf_token:
        raise ConfigurationError("HUGGINGFACEHUB_API_TOKEN is not set")

    from langchain_huggingface import ChatHuggingFace, HuggingFaceEndpoint

    llm = HuggingFaceEndpoint(
        repo_id=settings.hf_endpoint_model,
        huggingfacehub_api_token=settings.hf_token,
        temperature=settings.hf_temperature,
        max_new_tokens=settings.hf_max_new_tokens,
        timeout=settings.hf_timeout_seconds,
    )
    logger.info("Initialised hosted chat model %s", settings.hf_endpoint_model)
    return ChatHuggingFace(llm=llm)


def ensure_configured() -> None:
    """Build (or reuse) the chat client, raising :class:`ConfigurationError` if it cannot exist."""
    _chat()


def generate(prompt: str) -> str:
    """Send a single-turn prompt to the hosted model and return its raw text."""
    from langchain_core.messages import HumanMessage, SystemMessage

    system = (
        "You are a service categorization expert for a services marketplace. "
        "Answer with JSON only."
    )
    resp = _chat().invoke([SystemMessage(content=system), HumanMessage(content=prompt)])
    return str(getattr(resp, "content", "") or "")
