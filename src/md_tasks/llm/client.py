# src/md_tasks/llm/client.py

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
import openai
from openai import OpenAI

from ..config import get_settings
from ..core.errors import MissingAPIKeyError
from ..core.ports import Improvement, Outcome

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Human: You are a helpful assistant. Take the following raw task and improve it for a markdown task list.\n"
    "Make it clearer and more actionable. Add a single '- [ ] 📋' prefix. "
    'Raw task: "{raw}"\n\nAssistant:'
)

# Errors that mean "no usable answer came back" rather than "the service said no".
_UNAVAILABLE_ERRORS = (
    openai.APIConnectionError,  # includes APITimeoutError
    openai.APIResponseValidationError,
    json.JSONDecodeError,
    httpx.DecodingError,
)


def build_prompt(raw: str) -> str:
    return PROMPT_TEMPLATE.format(raw=raw)


class OpenRouterCompletionClient:
    """
    Single-shot text completion against OpenRouter (OpenAI-compatible API).

    - The API key is checked at construction: no key, no network call.
    - Automatic retries are disabled; one request per task.
    - Failures are reported as an Improvement outcome, never as a fallback string:
      the caller decides what text to write.
    """

    def __init__(self, settings=None, *, http_client: httpx.Client | None = None) -> None:
        if settings is None:
            settings = get_settings()

        api_key = getattr(settings, "openrouter_api_key", None)
        if not api_key or not str(api_key).strip():
            raise MissingAPIKeyError()

        self._model: str = settings.llm_model
        self._max_tokens: int = int(settings.llm_max_tokens)
        self._headers: dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})

        kwargs: dict[str, Any] = {
            "base_url": str(settings.openrouter_base_url),
            "api_key": str(api_key).strip(),
            "max_retries": 0,
        }
        timeout = getattr(settings, "llm_timeout", None)
        if timeout is not None:
            kwargs["timeout"] = httpx.Timeout(timeout)
        if http_client is not None:
            kwargs["http_client"] = http_client

        self._client = OpenAI(**kwargs)

    def improve(self, raw: str) -> Improvement:
        logger.info("LLM: requesting completion model=%s max_tokens=%d", self._model, self._max_tokens)
        try:
            resp = self._client.completions.create(
                model=self._model,
                prompt=build_prompt(raw),
                max_tokens=self._max_tokens,
                extra_headers=self._headers or None,
            )
        except openai.APIStatusError as e:
            logger.error("Error from LLM API: %s", e.status_code)
            logger.error("Response body: %s", e.response.text)
            return Improvement(Outcome.API_ERROR, detail=f"HTTP {e.status_code}")
        except _UNAVAILABLE_ERRORS as e:
            logger.warning("Failed to call LLM API: %s. Using original task.", e)
            return Improvement(Outcome.UNAVAILABLE, detail=f"{e.__class__.__name__}: {e}")

        # The SDK does not validate strictly, so malformed bodies come back as
        # partial objects or plain strings.
        choices = getattr(resp, "choices", None)
        if not isinstance(choices, list):
            logger.warning("LLM API response has no choices list: %.200r. Using original task.", resp)
            return Improvement(Outcome.UNAVAILABLE, detail="undecodable response: missing choices")
        if not choices:
            logger.debug("LLM: empty choices list, keeping the raw task")
            return Improvement(Outcome.EMPTY)

        text = getattr(choices[0], "text", None)
        if not isinstance(text, str):
            logger.warning("LLM API choice has no text: %.200r. Using original task.", choices[0])
            return Improvement(Outcome.UNAVAILABLE, detail="undecodable response: choice without text")

        text = text.strip()
        logger.debug("LLM: completed with model=%s", self._model)
        return Improvement(Outcome.IMPROVED, text=text)
