import json

import httpx
import pytest

from aitranslate.ai import AIService, TranslationError, validate_ai_config
from aitranslate.ai.service import unwrap_code_fence
from aitranslate.config import PLACEHOLDER_API_KEY
from aitranslate.core import TranslationRequest

OPENAI_URL = "https://api.test/v1/chat/completions"
GEMINI_URL = "https://gemini.test/v1beta/models"


def make_config(**overrides):
    config = {
        "ai_provider": "openai",
        "openai": {
            "api_key": "sk-test",
            "models": ["gpt-4o", "gpt-4o-mini"],
            "timeout": 5,
            "api_url": OPENAI_URL,
        },
        "gemini": {
            "api_key": "g-test",
            "models": ["gemini-2.5-flash"],
            "timeout": 5,
            "api_url": GEMINI_URL,
        },
    }
    config.update(overrides)
    return config


def chat_response(content, prompt_tokens=10, completion_tokens=2):
    return httpx.Response(200, json={
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": prompt_tokens, "completion_tokens": completion_tokens},
    })


def make_service(handler, **kwargs):
    return AIService(config=kwargs.pop("config", make_config()), transport=httpx.MockTransport(handler), **kwargs)


REQUEST = TranslationRequest(
    source_language="en",
    target_language="fr",
    context="Menu item",
    hints={"Settings": "Réglages"},
)


@pytest.mark.unit
def test_openai_request_and_response():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return chat_response("Ouvrir **Réglages**")

    service = make_service(handler)
    assert service.translate("Open **Settings**", REQUEST) == "Ouvrir **Réglages**"

    assert seen["url"] == OPENAI_URL
    assert seen["auth"] == "Bearer sk-test"
    body = seen["body"]
    assert body["model"] == "gpt-4o"
    roles = [m["role"] for m in body["messages"]]
    assert roles == ["system", "system", "user"]
    assert "translator tool" in body["messages"][0]["content"]
    assert json.loads(body["messages"][1]["content"]) == {
        "sourceLanguage": "en",
        "targetLanguage": "fr",
        "context": "Menu item",
        "existingTranslations": {"Settings": "Réglages"},
    }
    assert body["messages"][2]["content"] == "Open **Settings**"


@pytest.mark.unit
def test_model_override_is_used():
    seen = {}

    def handler(request):
        seen["model"] = json.loads(request.content)["model"]
        return chat_response("Bonjour")

    make_service(handler, model_override="gpt-4o-mini").translate("Hello", REQUEST)
    assert seen["model"] == "gpt-4o-mini"


@pytest.mark.unit
def test_token_usage_accumulates():
    service = make_service(lambda request: chat_response("Bonjour", 10, 2))

    service.translate("Hello", REQUEST)
    service.translate("Goodbye", REQUEST)

    assert service.get_last_token_usage() == {"prompt_tokens": 10, "completion_tokens": 2}
    assert service.get_total_token_usage() == {"prompt_tokens": 20, "completion_tokens": 4}


@pytest.mark.unit
def test_http_error_raises_translation_error():
    def handler(request):
        return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

    with pytest.raises(TranslationError) as exc_info:
        make_service(handler).translate("Hello", REQUEST)

    assert exc_info.value.code == "http_error"
    assert exc_info.value.details["status_code"] == 429
    assert "Rate limit reached" in str(exc_info.value)


@pytest.mark.unit
def test_timeout_raises_translation_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TranslationError) as exc_info:
        make_service(handler).translate("Hello", REQUEST)

    assert exc_info.value.code == "timeout"


@pytest.mark.unit
@pytest.mark.parametrize("content", ["", "   \n"])
def test_blank_response_raises_translation_error(content):
    with pytest.raises(TranslationError) as exc_info:
        make_service(lambda request: chat_response(content)).translate("Hello", REQUEST)

    assert exc_info.value.code == "empty_response"


@pytest.mark.unit
def test_response_without_choices_raises_translation_error():
    def handler(request):
        return httpx.Response(200, json={"choices": []})

    with pytest.raises(TranslationError) as exc_info:
        make_service(handler).translate("Hello", REQUEST)

    assert exc_info.value.code == "empty_response"


@pytest.mark.unit
def test_fenced_response_is_unwrapped():
    service = make_service(lambda request: chat_response("```text\nBonjour\n```"))
    assert service.translate("Hello", REQUEST) == "Bonjour"


@pytest.mark.unit
def test_unwrap_code_fence_keeps_fenced_source():
    fenced = "```\nprint('hi')\n```"
    assert unwrap_code_fence(fenced, fenced) == fenced
    assert unwrap_code_fence("Bonjour", "Hello") == "Bonjour"


@pytest.mark.unit
def test_gemini_request_and_response():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"text": "Hallo"}]}}],
            "usageMetadata": {"promptTokenCount": 7, "totalTokenCount": 9},
        })

    service = make_service(handler, provider_override="gemini")
    request = TranslationRequest(source_language="en", target_language="de")

    assert service.translate("Hello", request) == "Hallo"
    assert seen["url"] == f"{GEMINI_URL}/gemini-2.5-flash:generateContent"
    assert seen["key"] == "g-test"
    assert seen["body"]["contents"] == [{"role": "user", "parts": [{"text": "Hello"}]}]
    system_parts = seen["body"]["systemInstruction"]["parts"]
    assert json.loads(system_parts[1]["text"]) == {"sourceLanguage": "en", "targetLanguage": "de"}
    assert service.get_total_token_usage() == {"prompt_tokens": 7, "completion_tokens": 2}


@pytest.mark.unit
def test_gemini_http_error():
    def handler(request):
        return httpx.Response(500, text="upstream failure")

    with pytest.raises(TranslationError) as exc_info:
        make_service(handler, provider_override="gemini").translate("Hello", REQUEST)

    assert exc_info.value.code == "http_error"


@pytest.mark.unit
def test_custom_provider_uses_chat_completions():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return chat_response("Hola")

    config = make_config(**{"local-llm": {
        "api_key": "local",
        "models": ["qwen"],
        "api_url": "http://localhost:8080/v1/chat/completions",
    }})
    service = make_service(handler, config=config, provider_override="local-llm")

    assert service.translate("Hello", REQUEST) == "Hola"
    assert seen["url"] == "http://localhost:8080/v1/chat/completions"


@pytest.mark.unit
def test_validate_ai_config_accepts_complete_provider():
    assert validate_ai_config(make_config()) == "openai"
    assert validate_ai_config(make_config(), "gemini") == "gemini"


@pytest.mark.unit
def test_validate_ai_config_rejects_placeholder_key():
    config = make_config()
    config["openai"]["api_key"] = PLACEHOLDER_API_KEY

    with pytest.raises(TranslationError) as exc_info:
        validate_ai_config(config)

    assert exc_info.value.code == "ai_config_missing"
    assert exc_info.value.details["missing_field"] == "api_key"


@pytest.mark.unit
def test_validate_ai_config_rejects_unknown_provider():
    with pytest.raises(TranslationError) as exc_info:
        validate_ai_config(make_config(), "nope")
    assert exc_info.value.code == "ai_config_missing"


@pytest.mark.unit
def test_validate_ai_config_requires_url_for_custom_provider():
    config = make_config(custom={"api_key": "k", "models": ["m"]})

    with pytest.raises(TranslationError) as exc_info:
        validate_ai_config(config, "custom")

    assert exc_info.value.details["missing_field"] == "api_url"
