from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import pytest
import requests
from openai import OpenAIError

from app.core.config import InferenceConfig, Settings, parse_timeout
from app.core.dependencies import init_inference_client
from app.core.exceptions import ConfigurationError, UpstreamError
from app.services.external.inference import (
    AnthropicInferenceClient,
    OpenAIInferenceClient,
    build_content_parts,
    create_inference_client,
)


def _anthropic_config(**overrides) -> InferenceConfig:
    values = dict(
        provider="anthropic",
        api_key="test-key",
        model="claude-haiku-4-5",
        api_url="https://api.anthropic.com/v1/messages",
        api_version="2023-06-01",
        timeout_seconds=None,
    )
    values.update(overrides)
    return InferenceConfig(**values)


def _openai_config(**overrides) -> InferenceConfig:
    values = dict(
        provider="openai",
        api_key="sk-test",
        model="gpt-4o",
        api_url="",
        api_version="",
        timeout_seconds=30.0,
    )
    values.update(overrides)
    return InferenceConfig(**values)


def _response(ok: bool = True, status_code: int = 200, payload=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload
    return response


def test_content_parts_put_prompt_last() -> None:
    parts = build_content_parts(["a", "b"], "PROMPT")
    assert parts == [("image", "a"), ("image", "b"), ("text", "PROMPT")]


def test_content_parts_label_frames() -> None:
    parts = build_content_parts(["a", "b", "c"], "PROMPT", label_frames=True)
    assert parts == [
        ("image", "a"),
        ("text", "Frame 1 of 3"),
        ("image", "b"),
        ("text", "Frame 2 of 3"),
        ("image", "c"),
        ("text", "Frame 3 of 3"),
        ("text", "PROMPT"),
    ]


def test_anthropic_payload_shape() -> None:
    client = AnthropicInferenceClient(_anthropic_config())
    payload = client.build_payload(["IMG"], "PROMPT", 512)
    assert payload["model"] == "claude-haiku-4-5"
    assert payload["max_tokens"] == 512
    assert payload["messages"] == [
        {
            "role": "user",
            "content": [
                {"type": "image", "source": {"type": "base64", "media_type": "image/jpeg", "data": "IMG"}},
                {"type": "text", "text": "PROMPT"},
            ],
        }
    ]


def test_anthropic_invoke_returns_first_text_block() -> None:
    client = AnthropicInferenceClient(_anthropic_config(timeout_seconds=20.0))
    envelope = {"content": [{"type": "text", "text": '{"is_made": true}'}]}
    with patch("app.services.external.inference.requests.post", return_value=_response(payload=envelope)) as post:
        text = client.invoke(["IMG"], "PROMPT", 512)

    assert text == '{"is_made": true}'
    _, kwargs = post.call_args
    assert post.call_args.args[0] == "https://api.anthropic.com/v1/messages"
    assert kwargs["headers"]["x-api-key"] == "test-key"
    assert kwargs["headers"]["anthropic-version"] == "2023-06-01"
    assert kwargs["timeout"] == 20.0
    assert kwargs["json"]["max_tokens"] == 512


def test_anthropic_non_success_status_raises() -> None:
    client = AnthropicInferenceClient(_anthropic_config())
    response = _response(ok=False, status_code=529, text='{"error": "overloaded"}')
    with patch("app.services.external.inference.requests.post", return_value=response):
        with pytest.raises(UpstreamError) as exc_info:
            client.invoke(["IMG"], "PROMPT", 256)
    assert "529" in str(exc_info.value)


def test_anthropic_network_failure_raises() -> None:
    client = AnthropicInferenceClient(_anthropic_config())
    with patch(
        "app.services.external.inference.requests.post",
        side_effect=requests.ConnectionError("connection reset"),
    ):
        with pytest.raises(UpstreamError):
            client.invoke(["IMG"], "PROMPT", 256)


@pytest.mark.parametrize("envelope", [{}, {"content": []}, {"content": [{"type": "tool_use"}]}, ["not", "a", "dict"]])
def test_anthropic_missing_text_raises(envelope) -> None:
    client = AnthropicInferenceClient(_anthropic_config())
    with patch("app.services.external.inference.requests.post", return_value=_response(payload=envelope)):
        with pytest.raises(UpstreamError):
            client.invoke(["IMG"], "PROMPT", 256)


def test_anthropic_non_json_envelope_raises() -> None:
    client = AnthropicInferenceClient(_anthropic_config())
    response = _response()
    response.json.side_effect = ValueError("not json")
    with patch("app.services.external.inference.requests.post", return_value=response):
        with pytest.raises(UpstreamError):
            client.invoke(["IMG"], "PROMPT", 256)


def test_openai_invoke_sends_data_urls() -> None:
    sdk = MagicMock()
    sdk.chat.completions.create.return_value = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content='{"is_water": true}'))]
    )
    client = OpenAIInferenceClient(_openai_config(), client=sdk)

    text = client.invoke(["F1", "F2"], "PROMPT", 512, label_frames=True)

    assert text == '{"is_water": true}'
    kwargs = sdk.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["max_tokens"] == 512
    content = kwargs["messages"][0]["content"]
    assert content[0] == {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,F1", "detail": "high"}}
    assert content[1] == {"type": "text", "text": "Frame 1 of 2"}
    assert content[-1] == {"type": "text", "text": "PROMPT"}


def test_openai_error_raises_upstream_error() -> None:
    sdk = MagicMock()
    sdk.chat.completions.create.side_effect = OpenAIError("service unavailable")
    client = OpenAIInferenceClient(_openai_config(), client=sdk)
    with pytest.raises(UpstreamError):
        client.invoke(["IMG"], "PROMPT", 256)


def test_openai_empty_content_raises() -> None:
    sdk = MagicMock()
    sdk.chat.completions.create.return_value = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=None))]
    )
    client = OpenAIInferenceClient(_openai_config(), client=sdk)
    with pytest.raises(UpstreamError):
        client.invoke(["IMG"], "PROMPT", 256)


def test_factory_builds_anthropic_client() -> None:
    assert isinstance(create_inference_client(_anthropic_config()), AnthropicInferenceClient)


def test_factory_builds_openai_client() -> None:
    assert isinstance(create_inference_client(_openai_config()), OpenAIInferenceClient)


def test_factory_requires_api_key() -> None:
    with pytest.raises(ConfigurationError):
        create_inference_client(_anthropic_config(api_key=""))


def test_factory_rejects_unknown_provider() -> None:
    with pytest.raises(ConfigurationError):
        create_inference_client(_anthropic_config(provider="gemini"))


def test_openai_server_error_is_not_retried() -> None:
    hits = []

    def handler(request: httpx.Request) -> httpx.Response:
        hits.append(request.url.path)
        return httpx.Response(500, json={"error": {"message": "internal error"}})

    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    client = OpenAIInferenceClient(_openai_config(), http_client=http_client)

    with pytest.raises(UpstreamError):
        client.invoke(["IMG"], "PROMPT", 256)

    assert hits == ["/v1/chat/completions"]


def test_anthropic_server_error_is_not_retried() -> None:
    client = AnthropicInferenceClient(_anthropic_config())
    with patch(
        "app.services.external.inference.requests.post",
        return_value=_response(ok=False, status_code=500, text="internal error"),
    ) as post:
        with pytest.raises(UpstreamError):
            client.invoke(["IMG"], "PROMPT", 256)
    assert post.call_count == 1


@pytest.mark.parametrize(("raw", "expected"), [("", None), ("  ", None), ("30", 30.0), ("2.5", 2.5)])
def test_parse_timeout(raw: str, expected) -> None:
    assert parse_timeout(raw) == expected


@pytest.mark.parametrize("raw", ["soon", "-1", "0"])
def test_malformed_timeout_is_a_configuration_error(raw: str) -> None:
    with pytest.raises(ConfigurationError, match="UPSTREAM_TIMEOUT_SECONDS"):
        parse_timeout(raw)


def test_malformed_timeout_leaves_app_without_client() -> None:
    app_settings = Settings()
    app_settings.ANTHROPIC_API_KEY = "test-key"
    app_settings.UPSTREAM_TIMEOUT_SECONDS = "soon"
    with pytest.raises(ConfigurationError):
        app_settings.inference_config()

    app = SimpleNamespace(state=SimpleNamespace())
    assert init_inference_client(app, app_settings) is None
    assert app.state.inference_client is None
