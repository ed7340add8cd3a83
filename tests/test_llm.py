"""
Tests for the Groq chat wrapper. The openai client is mocked; no network.
"""

from types import SimpleNamespace
from unittest.mock import Mock

import httpx
import openai
import pytest

from doubtsolver.config import LLM_EMPTY_FALLBACK
from doubtsolver.errors import UpstreamError
from doubtsolver.tutor.llm import GroqChat, build_messages


def _completion(content, usage=True):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=8, total_tokens=20) if usage else None,
    )


def _client(**create_kwargs):
    client = Mock()
    client.chat.completions.create = Mock(**create_kwargs)
    return client


REQUEST = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")


class TestBuildMessages:

    def test_system_prompt_prepended(self):
        conversation = [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]
        messages = build_messages("Be kind.", conversation)
        assert messages[0] == {"role": "system", "content": "Be kind."}
        assert messages[1:] == conversation


class TestGroqChat:

    def test_returns_stripped_text(self):
        client = _client(return_value=_completion("  Two plus two is four.  "))
        result = GroqChat(client).generate([], model="m", temperature=0.4)
        assert result.text == "Two plus two is four."
        assert result.model == "m"
        assert result.usage["total_tokens"] == 20

    def test_passes_generation_settings(self):
        client = _client(return_value=_completion("ok"))
        messages = [{"role": "user", "content": "q"}]
        GroqChat(client).generate(messages, model="llama", temperature=0.2, max_tokens=700)
        client.chat.completions.create.assert_called_once_with(
            model="llama", messages=messages, temperature=0.2, max_tokens=700,
        )

    def test_no_token_cap_when_unset(self):
        client = _client(return_value=_completion("ok"))
        GroqChat(client).generate([], model="llama", temperature=0.4)
        assert "max_tokens" not in client.chat.completions.create.call_args.kwargs

    def test_empty_reply_uses_fallback(self):
        client = _client(return_value=_completion(None, usage=False))
        result = GroqChat(client).generate([], model="m", temperature=0.4)
        assert result.text == LLM_EMPTY_FALLBACK
        assert result.usage == {}

    @pytest.mark.parametrize("error", [
        openai.APIConnectionError(request=REQUEST),
        openai.APITimeoutError(request=REQUEST),
        openai.RateLimitError(
            "rate limited", response=httpx.Response(429, request=REQUEST), body=None,
        ),
        openai.AuthenticationError(
            "bad key", response=httpx.Response(401, request=REQUEST), body=None,
        ),
    ])
    def test_provider_errors_become_upstream_error(self, error):
        client = _client(side_effect=error)
        with pytest.raises(UpstreamError) as exc_info:
            GroqChat(client).generate([], model="m", temperature=0.4)
        assert exc_info.value.message == "AI error"
        assert client.chat.completions.create.call_count == 1
