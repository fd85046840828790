import json

import httpx
import pytest
from pydantic import ValidationError

from summary_assistant.config import Settings
from summary_assistant.summarizer.gateway import ApiGateway
from summary_assistant.summarizer.models import ApiMessage, ErrorKind, ModelFamily
from summary_assistant.summarizer.models_catalog import (
    base_model,
    is_supported_model,
    model_family,
)

MESSAGES = [
    ApiMessage(role="system", content="Maximaal 100 woorden."),
    ApiMessage(role="user", content="Het artikel."),
]


class RecordingHandler:
    def __init__(self, status_code=200, body=None, content=None):
        self.status_code = status_code
        self.body = body
        self.content = content
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)


def make_gateway(handler):
    settings = Settings(_env_file=None, api_key="sk-test", model="gpt-4.1")
    return ApiGateway(settings, transport=httpx.MockTransport(handler))


def test_model_family_dispatch():
    assert model_family("gpt-5.1") is ModelFamily.RESPONSES
    assert model_family("GPT-5.2") is ModelFamily.RESPONSES
    assert model_family("gpt-4.1-mini") is ModelFamily.CHAT_COMPLETIONS
    assert model_family("ft:gpt-4.1:org:suffix:abc") is ModelFamily.CHAT_COMPLETIONS
    # Not configurable, but still classified by its base
    assert model_family("ft:gpt-5.1:org:x") is ModelFamily.RESPONSES


def test_base_model_and_support_checks():
    assert base_model("ft:gpt-4.1-nano:org:suffix:abc") == "gpt-4.1-nano"
    assert base_model("gpt-5.1") == "gpt-5.1"
    assert is_supported_model("ft:gpt-4.1:org:suffix:abc")
    assert not is_supported_model("ft:gpt-5.1:org:x")
    assert not is_supported_model("gpt-3.5-turbo")


def test_settings_reject_fine_tuned_gpt5():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, model="ft:gpt-5.1:org:x")


@pytest.mark.anyio
async def test_chat_completions_request_and_extraction():
    handler = RecordingHandler(
        body={"choices": [{"message": {"role": "assistant", "content": "  Een samenvatting.\n"}}]}
    )
    gateway = make_gateway(handler)

    result = await gateway.send(MESSAGES, 100, "ft:gpt-4.1:org:suffix:abc", "sk-test")

    assert result.ok
    assert result.text == "Een samenvatting."
    request = handler.requests[0]
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body == {
        "model": "ft:gpt-4.1:org:suffix:abc",
        "messages": [
            {"role": "system", "content": "Maximaal 100 woorden."},
            {"role": "user", "content": "Het artikel."},
        ],
        "max_tokens": 2048,
        "temperature": 0.7,
    }


@pytest.mark.anyio
async def test_responses_request_has_no_temperature_and_prefers_output_text():
    handler = RecordingHandler(
        body={
            "output_text": "Direct antwoord.",
            "output": [
                {"type": "message", "content": [{"type": "output_text", "text": "Andere tekst."}]}
            ],
        }
    )
    gateway = make_gateway(handler)

    result = await gateway.send(MESSAGES, 100, "gpt-5.1", "sk-test")

    assert result.ok and result.text == "Direct antwoord."
    request = handler.requests[0]
    assert str(request.url) == "https://api.openai.com/v1/responses"
    body = json.loads(request.content)
    assert "temperature" not in body
    assert body["input"][0]["role"] == "system"
    assert body["max_output_tokens"] == 2048
    assert body["reasoning"] == {"effort": "low"}
    assert body["text"] == {"verbosity": "medium"}
    assert body["store"] is False


@pytest.mark.anyio
async def test_responses_extraction_scans_output_items():
    handler = RecordingHandler(
        body={
            "output": [
                {"type": "reasoning", "summary": []},
                {"type": "message", "content": [{"type": "refusal", "refusal": "nee"}]},
                {
                    "type": "message",
                    "content": [
                        {"type": "output_text", "text": " Gevonden tekst. "},
                        {"type": "output_text", "text": "Tweede."},
                    ],
                },
            ]
        }
    )
    result = await make_gateway(handler).send(MESSAGES, 100, "gpt-5.2", "sk-test")
    assert result.ok and result.text == "Gevonden tekst."


@pytest.mark.anyio
async def test_missing_api_key_makes_no_request():
    handler = RecordingHandler(body={})
    result = await make_gateway(handler).send(MESSAGES, 100, "gpt-4.1", "")
    assert not result.ok
    assert result.kind is ErrorKind.MISSING_API_KEY
    assert handler.requests == []


@pytest.mark.anyio
@pytest.mark.parametrize(
    "status_code, message",
    [
        (401, "API-sleutel klopt niet"),
        (404, "AI-model bestaat niet"),
        (429, "API-limiet bereikt - wacht even"),
        (418, "API fout: HTTP 418"),
    ],
)
async def test_non_success_status_maps_to_api_error(status_code, message):
    handler = RecordingHandler(status_code=status_code, body={"error": {"message": "x"}})
    result = await make_gateway(handler).send(MESSAGES, 100, "gpt-4.1", "sk-test")
    assert result.kind is ErrorKind.API_ERROR
    assert result.status_code == status_code
    assert result.message == message


@pytest.mark.anyio
async def test_undecodable_body_is_invalid_response():
    handler = RecordingHandler(content=b"<html>oops</html>")
    result = await make_gateway(handler).send(MESSAGES, 100, "gpt-4.1", "sk-test")
    assert result.kind is ErrorKind.INVALID_RESPONSE


@pytest.mark.anyio
async def test_missing_extraction_path_is_invalid_response():
    handler = RecordingHandler(body={"choices": []})
    result = await make_gateway(handler).send(MESSAGES, 100, "gpt-4.1", "sk-test")
    assert result.kind is ErrorKind.INVALID_RESPONSE

    handler = RecordingHandler(body={"output": [{"type": "message", "content": []}]})
    result = await make_gateway(handler).send(MESSAGES, 100, "gpt-5.1", "sk-test")
    assert result.kind is ErrorKind.INVALID_RESPONSE


@pytest.mark.anyio
async def test_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("Name or service not known", request=request)

    result = await make_gateway(handler).send(MESSAGES, 100, "gpt-4.1", "sk-test")
    assert result.kind is ErrorKind.NETWORK_ERROR
    assert "Name or service not known" in result.message


@pytest.mark.anyio
async def test_corrupt_content_encoding_is_invalid_response():
    def handler(request):
        return httpx.Response(
            200, content=b"not gzip", headers={"content-encoding": "gzip"}
        )

    result = await make_gateway(handler).send(MESSAGES, 100, "gpt-4.1", "sk-test")
    assert result.ok is False
    assert result.kind is ErrorKind.INVALID_RESPONSE


@pytest.mark.anyio
async def test_other_request_errors_are_network_errors():
    def handler(request):
        raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)

    result = await make_gateway(handler).send(MESSAGES, 100, "gpt-4.1", "sk-test")
    assert result.kind is ErrorKind.NETWORK_ERROR
    assert result.message.startswith("Netwerkfout")


def test_api_key_falls_back_to_openai_env(monkeypatch):
    monkeypatch.delenv("SUMMARY_ASSISTANT_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
    assert Settings(_env_file=None).api_key == "sk-from-env"


def test_prefixed_api_key_wins_over_openai_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
    monkeypatch.setenv("SUMMARY_ASSISTANT_API_KEY", "sk-prefixed")
    assert Settings(_env_file=None).api_key == "sk-prefixed"
    assert Settings(_env_file=None, api_key="sk-init").api_key == "sk-init"
