from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from gigcat import hf_client
from gigcat.classifier import ModelClassifier
from gigcat.hf_client import ConfigurationError


@pytest.fixture(autouse=True)
def _reset_chat_cache():
    hf_client._chat.cache_clear()
    yield
    hf_client._chat.cache_clear()


def test_missing_token_fails_at_classifier_construction(monkeypatch) -> None:
    monkeypatch.setattr(hf_client.settings, "hf_token", None)

    with pytest.raises(ConfigurationError):
        ModelClassifier()


def test_generate_returns_model_text(monkeypatch) -> None:
    chat = MagicMock()
    chat.invoke.return_value = SimpleNamespace(content='[{"id": "B", "confidence": 0.9}]')
    monkeypatch.setattr(hf_client, "_chat", lambda: chat)

    assert hf_client.generate("prompt") == '[{"id": "B", "confidence": 0.9}]'
    messages = chat.invoke.call_args.args[0]
    assert messages[-1].content == "prompt"


def test_classifier_uses_hosted_client_when_configured(monkeypatch) -> None:
    chat = MagicMock()
    chat.invoke.return_value = SimpleNamespace(content="[]")
    monkeypatch.setattr(hf_client, "_chat", lambda: chat)

    classifier = ModelClassifier()

    assert classifier._generate is hf_client.generate


def test_chat_client_is_built_with_configured_timeout(monkeypatch) -> None:
    import langchain_huggingface

    endpoint = MagicMock(name="HuggingFaceEndpoint")
    chat = MagicMock(name="ChatHuggingFace")
    monkeypatch.setattr(langchain_huggingface, "HuggingFaceEndpoint", endpoint)
    monkeypatch.setattr(langchain_huggingface, "ChatHuggingFace", chat)
    monkeypatch.setattr(hf_client.settings, "hf_token", "hf_test_token")
    monkeypatch.setattr(hf_client.settings, "hf_timeout_seconds", 7)

    client = hf_client._chat()

    endpoint.assert_called_once()
    kwargs = endpoint.call_args.kwargs
    assert kwargs["timeout"] == 7
    assert kwargs["repo_id"] == hf_client.settings.hf_endpoint_model
    assert kwargs["huggingfacehub_api_token"] == "hf_test_token"
    chat.assert_called_once_with(llm=endpoint.return_value)
    assert client is chat.return_value
    # Memoized for the process lifetime.
    assert hf_client._chat() is client
    endpoint.assert_called_once()
