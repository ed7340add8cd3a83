"""
Doubt Solver: LLM Abstraction Layer
Chat completions through Groq's OpenAI-compatible endpoint.
One attempt per request, explicit timeout, no retries.
"""

import time
import logging
from typing import Protocol, Optional
from dataclasses import dataclass

import openai
from openai import OpenAI

from doubtsolver.config import (
    GROQ_API_KEY, LLM_BASE_URL, LLM_TIMEOUT, LLM_EMPTY_FALLBACK,
)
from doubtsolver.errors import UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class LLMResult:
    text: str
    latency_ms: int
    model: str
    usage: dict


class LLMProvider(Protocol):
    def generate(
        self,
        messages: list[dict],
        model: str,
        temperature: float,
        max_tokens: Optional[int] = None,
    ) -> LLMResult: ...


def build_messages(system_prompt: str, conversation: list[dict]) -> list[dict]:
    """Fixed system preamble first, then the conversation as sent by the client."""
    return [{"role": "system", "content": system_prompt}, *conversation]


# ─── Groq (OpenAI-compatible) ────────────────────────────────────────────────

class GroqChat:
    def __init__(self, client: Optional[OpenAI] = None):
        self._client = client or OpenAI(
            api_key=GROQ_API_KEY,
            base_url=LLM_BASE_URL,
            timeout=LLM_TIMEOUT,
            max_retries=0,
        )

    def generate(
        self,
        messages: list[dict],
        model: str,
        temperature: float,
        max_tokens: Optional[int] = None,
    ) -> LLMResult:
        params = {"model": model, "messages": messages, "temperature": temperature}
        if max_tokens:
            params["max_tokens"] = max_tokens

        start = time.perf_counter()
        try:
            response = self._client.chat.completions.create(**params)
        except openai.APIError as e:
            elapsed = int((time.perf_counter() - start) * 1000)
            logger.error(f"LLM error after {elapsed}ms ({type(e).__name__}): {e}")
            raise UpstreamError() from e

        elapsed = int((time.perf_counter() - start) * 1000)
        content = response.choices[0].message.content if response.choices else None
        text = (content or "").strip() or LLM_EMPTY_FALLBACK

        usage = {}
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
        logger.info(f"LLM response: {elapsed}ms, model={model}, {usage.get('total_tokens', '?')} tokens")
        return LLMResult(text=text, latency_ms=elapsed, model=model, usage=usage)


# ─── Provider Factory ────────────────────────────────────────────────────────

_instance: Optional[GroqChat] = None


def get_llm() -> LLMProvider:
    """Get the configured LLM provider (singleton). Also the FastAPI dependency."""
    global _instance
    if _instance is None:
        _instance = GroqChat()
    return _instance
