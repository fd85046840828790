# summary_assistant/summarizer/gateway.py
"""
OpenAI access for summary generation.

Two request dialects are supported, selected by model family:
Chat Completions for the GPT-4.1 line (and its fine-tunes) and the Responses
API for GPT-5 models, which take no temperature and expose reasoning and
verbosity controls instead.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import httpx
import orjson

from summary_assistant.config import Settings
from summary_assistant.constants import RequestDefaults
from summary_assistant.log import SummaryLogger
from summary_assistant.summarizer.errors import (
    INVALID_RESPONSE_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    network_error_message,
    status_message,
)
from summary_assistant.summarizer.models import (
    ApiMessage,
    ErrorKind,
    ModelFamily,
    Summary,
    SummaryError,
    SummaryResult,
)
from summary_assistant.summarizer.models_catalog import model_family
from summary_assistant.summarizer.text import count_words


def build_request_body(
    family: ModelFamily,
    model: str,
    messages: Sequence[ApiMessage],
    max_tokens: int = RequestDefaults.MAX_TOKENS,
    temperature: float = RequestDefaults.TEMPERATURE,
) -> Dict[str, Any]:
    payload = [message.as_dict() for message in messages]
    if family is ModelFamily.RESPONSES:
        return {
            "model": model,
            "input": payload,
            "max_output_tokens": max_tokens,
            "reasoning": {"effort": RequestDefaults.REASONING_EFFORT},
            "text": {"verbosity": RequestDefaults.TEXT_VERBOSITY},
            "store": False,
        }
    return {
        "model": model,
        "messages": payload,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }


def extract_chat_completions_text(data: Dict[str, Any]) -> Optional[str]:
    """``choices[0].message.content`` or None when the path is missing."""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if content is None or isinstance(content, (dict, list)):
        return None
    return str(content)


def extract_responses_text(data: Dict[str, Any]) -> Optional[str]:
    """
    Prefer the ``output_text`` convenience field; otherwise return the first
    ``output_text`` part of the first message item in ``output``.
    """
    output_text = data.get("output_text")
    if isinstance(output_text, str):
        return output_text

    output = data.get("output")
    if not isinstance(output, list):
        return None
    for item in output:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        content = item.get("content")
        if not isinstance(content, list):
            continue
        for part in content:
            if (
                isinstance(part, dict)
                and part.get("type") == "output_text"
                and part.get("text") is not None
            ):
                return str(part["text"])
    return None


class ApiGateway:
    """Sends one summarization request and maps every outcome to a result."""

    def __init__(
        self,
        settings: Settings,
        logger: Optional[SummaryLogger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.logger = logger or SummaryLogger(settings.debug_mode)
        self._transport = transport

    def endpoint_for(self, family: ModelFamily) -> str:
        if family is ModelFamily.RESPONSES:
            return self.settings.responses_url
        return self.settings.chat_completions_url

    async def send(
        self,
        messages: List[ApiMessage],
        word_limit: int,
        model_id: str,
        api_key: str,
    ) -> SummaryResult:
        family = model_family(model_id)
        endpoint = self.endpoint_for(family)

        self.logger.debug(
            "Starting API request",
            {
                "model": model_id,
                "word_limit": word_limit,
                "api_type": family.value,
                "endpoint": endpoint,
            },
        )

        if not api_key:
            self.logger.error("API key is missing")
            return SummaryError(ErrorKind.MISSING_API_KEY, MISSING_API_KEY_MESSAGE)

        body = build_request_body(
            family,
            model_id,
            messages,
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
        )
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.api_timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    endpoint, content=orjson.dumps(body), headers=headers
                )
        except httpx.DecodingError as exc:
            self.logger.error(f"Undecodable API response body: {exc}")
            return SummaryError(ErrorKind.INVALID_RESPONSE, INVALID_RESPONSE_MESSAGE)
        except httpx.RequestError as exc:
            detail = str(exc) or exc.__class__.__name__
            self.logger.error(f"API request failed: {detail}")
            return SummaryError(ErrorKind.NETWORK_ERROR, network_error_message(detail))

        if not response.is_success:
            self.logger.error(f"API error: HTTP {response.status_code}")
            return SummaryError(
                ErrorKind.API_ERROR,
                status_message(response.status_code),
                status_code=response.status_code,
            )

        try:
            data = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            self.logger.error("Invalid JSON response from API")
            return SummaryError(ErrorKind.INVALID_RESPONSE, INVALID_RESPONSE_MESSAGE)
        if not isinstance(data, dict):
            self.logger.error("Invalid JSON response from API")
            return SummaryError(ErrorKind.INVALID_RESPONSE, INVALID_RESPONSE_MESSAGE)

        if family is ModelFamily.RESPONSES:
            text = extract_responses_text(data)
        else:
            text = extract_chat_completions_text(data)

        if text is None:
            self.logger.error(f"Invalid {family.value} API response structure")
            return SummaryError(ErrorKind.INVALID_RESPONSE, INVALID_RESPONSE_MESSAGE)

        text = text.strip()
        word_count = count_words(text)
        self.logger.debug("Summary generated", {"word_count": word_count})
        return Summary(text=text, word_count=word_count)
