"""Tests for the chat-completions adapter."""

from unittest.mock import MagicMock

import pytest
import requests

from focusflow.adapters.chat_api import ChatCompletionsService
from focusflow.core.enrichment import Fallback, enrich
from focusflow.core.errors import EnrichmentError


def response(status=200, payload=None, json_error=False):
    resp = MagicMock()
    resp.status_code = status
    resp.text = "body"
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def service(session):
    return ChatCompletionsService("key", base_url="https://llm.example.com/", timeout=5, session=session)


class TestGenerate:
    def test_returns_first_choice(self, service, session):
        session.post.return_value = response(payload={"choices": [{"message": {"content": "hello"}}]})

        assert service.generate("prompt") == "hello"

        args, kwargs = session.post.call_args
        assert args[0] == "https://llm.example.com/v1/chat/completions"
        assert kwargs["headers"] == {"Authorization": "Bearer key"}
        assert kwargs["timeout"] == 5
        body = kwargs["json"]
        assert body["model"] == "deepseek-chat"
        assert body["stream"] is False
        assert body["messages"][-1] == {"role": "user", "content": "prompt"}

    def test_missing_key(self, session):
        service = ChatCompletionsService("", session=session)
        with pytest.raises(EnrichmentError, match="No API key"):
            service.generate("prompt")
        session.post.assert_not_called()

    def test_timeout(self, service, session):
        session.post.side_effect = requests.Timeout()
        with pytest.raises(EnrichmentError, match="timed out after 5s"):
            service.generate("prompt")

    def test_connection_error(self, service, session):
        session.post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(EnrichmentError, match="request failed"):
            service.generate("prompt")

    def test_bad_status(self, service, session):
        session.post.return_value = response(status=503)
        with pytest.raises(EnrichmentError, match="503"):
            service.generate("prompt")

    def test_non_json_payload(self, service, session):
        session.post.return_value = response(json_error=True)
        with pytest.raises(EnrichmentError, match="non-JSON"):
            service.generate("prompt")

    def test_error_field(self, service, session):
        session.post.return_value = response(payload={"error": {"message": "quota exceeded"}})
        with pytest.raises(EnrichmentError, match="quota exceeded"):
            service.generate("prompt")

    @pytest.mark.parametrize("payload", [{}, {"choices": []}, {"choices": [{"message": {}}]}, []])
    def test_missing_content(self, service, session, payload):
        session.post.return_value = response(payload=payload)
        with pytest.raises(EnrichmentError, match="missing"):
            service.generate("prompt")

    @pytest.mark.parametrize("content", [None, 42, {"text": "hi"}])
    def test_non_text_content(self, service, session, content):
        session.post.return_value = response(payload={"choices": [{"message": {"content": content}}]})
        with pytest.raises(EnrichmentError, match="non-text content"):
            service.generate("prompt")

    def test_null_content_falls_back_through_enrich(self, service, session):
        session.post.return_value = response(payload={"choices": [{"message": {"content": None}}]})
        assert enrich({"a": 1}, "prompt", service) == Fallback({"a": 1})
