"""
AI Provider API Implementations

This module contains the API call implementations for each provider family:
- OpenAI-compatible chat completions (OpenAI, DeepSeek, custom providers)
- Gemini generateContent

Each function takes an AIService instance and a list of chat messages
({"role": ..., "content": ...}) and returns the text response.
"""

from typing import Any, Dict, List

import httpx

from aitranslate.config import DEFAULT_TIMEOUT, PLACEHOLDER_API_KEY
from aitranslate.logger import get_logger
from aitranslate.ai.exceptions import TranslationError

logger = get_logger(__name__)

DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "deepseek": "deepseek-chat",
    "gemini": "gemini-2.5-flash",
}


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number (read timeout) or a dict with
            connect, write, read, pool keys

    Returns:
        httpx.Timeout object
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10.0),
            write=timeout_config.get('write', 30.0),
            read=timeout_config.get('read', float(DEFAULT_TIMEOUT)),
            pool=timeout_config.get('pool', 10.0),
        )
    else:
        timeout_value = float(timeout_config) if timeout_config else float(DEFAULT_TIMEOUT)
        return httpx.Timeout(
            connect=10.0,
            write=30.0,
            read=timeout_value,
            pool=10.0,
        )


def handle_http_error(e: httpx.HTTPStatusError, provider: str):
    """Raise a TranslationError carrying the provider's error message."""
    status_code = e.response.status_code
    error_text = "Unknown error"

    try:
        error_json = e.response.json()
        if isinstance(error_json, dict) and "error" in error_json:
            error_detail = error_json["error"]
            if isinstance(error_detail, dict):
                error_text = error_detail.get("message", str(error_detail))
            else:
                error_text = str(error_detail)
    except ValueError:
        error_text = e.response.text[:500] or "No details"

    raise TranslationError(
        f"{provider} API error ({status_code}): {error_text}",
        code="http_error",
        details={"provider": provider, "status_code": status_code},
    )


def _require_api_key(provider_config: Dict[str, Any], provider: str) -> str:
    api_key = provider_config.get('api_key', '')
    if not api_key or api_key == PLACEHOLDER_API_KEY:
        raise TranslationError(
            f"{provider} API key not configured",
            code="ai_config_missing",
            details={"provider": provider, "missing_field": "api_key"},
        )
    return api_key


def call_openai_compatible_api(service, messages: List[Dict[str, str]]) -> str:
    """
    Call a chat completions endpoint (OpenAI, DeepSeek or a custom provider).
    """
    provider = service.provider
    provider_config = service.config.get(provider, {})
    api_key = _require_api_key(provider_config, provider)
    model = service._get_model(provider_config, DEFAULT_MODELS.get(provider, ''))
    timeout = provider_config.get('timeout', DEFAULT_TIMEOUT)
    api_url = provider_config.get('api_url', '')

    if not api_url:
        raise TranslationError(
            f"Provider '{provider}' API URL not configured",
            code="ai_config_missing",
            details={"provider": provider, "missing_field": "api_url"},
        )
    if not model:
        raise TranslationError(
            f"Provider '{provider}' model not configured",
            code="ai_config_missing",
            details={"provider": provider, "missing_field": "models"},
        )

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json"
    }

    body = {
        "model": model,
        "messages": messages,
    }

    logger.debug(f"  Calling {provider} API (model: {model})...")

    try:
        with httpx.Client(timeout=get_httpx_timeout(timeout), transport=service.transport) as client:
            response = client.post(api_url, headers=headers, json=body)
            response.raise_for_status()

            result = response.json()

            # Extract token usage (if available)
            usage = result.get('usage') or {}
            service._last_token_usage = {
                'prompt_tokens': usage.get('prompt_tokens', 0),
                'completion_tokens': usage.get('completion_tokens', 0),
            }
            service.accumulate_tokens()

            choices = result.get('choices') or []
            if choices:
                content = (choices[0].get('message') or {}).get('content') or ''
                logger.debug(f"  Received {len(content)} chars from {provider} (tokens: {service._last_token_usage})")
                return content

            raise TranslationError(f"No content in {provider} response", code="empty_response")

    except TranslationError:
        raise
    except httpx.HTTPStatusError as e:
        handle_http_error(e, provider)
    except httpx.TimeoutException:
        raise TranslationError(f"{provider} API request timeout", code="timeout")
    except Exception as e:
        raise TranslationError(f"{provider} API call failed: {e}")


def call_gemini_api(service, messages: List[Dict[str, str]]) -> str:
    """Call Gemini generateContent. System messages become the system instruction."""
    provider_config = service.config.get('gemini', {})
    api_key = _require_api_key(provider_config, 'gemini')
    model = service._get_model(provider_config, DEFAULT_MODELS['gemini'])
    timeout = provider_config.get('timeout', DEFAULT_TIMEOUT)
    base_url = provider_config.get('api_url', 'https://generativelanguage.googleapis.com/v1beta/models')

    url = f"{base_url.rstrip('/')}/{model}:generateContent"

    system_parts = [{"text": m["content"]} for m in messages if m["role"] == "system"]
    contents = [
        {"role": "user", "parts": [{"text": m["content"]}]}
        for m in messages if m["role"] == "user"
    ]

    body: Dict[str, Any] = {"contents": contents}
    if system_parts:
        body["systemInstruction"] = {"parts": system_parts}

    logger.debug(f"  Calling Gemini API (model: {model})...")

    try:
        with httpx.Client(timeout=get_httpx_timeout(timeout), transport=service.transport) as client:
            response = client.post(url, headers={"x-goog-api-key": api_key}, json=body)
            response.raise_for_status()

            result = response.json()

            usage_metadata = result.get('usageMetadata') or {}
            prompt_tokens = usage_metadata.get('promptTokenCount', 0)
            completion_tokens = usage_metadata.get('candidatesTokenCount', 0)

            # Fallback: calculate from total if candidatesTokenCount is missing
            if completion_tokens == 0 and prompt_tokens > 0:
                total_tokens = usage_metadata.get('totalTokenCount', 0)
                if total_tokens > prompt_tokens:
                    completion_tokens = total_tokens - prompt_tokens

            service._last_token_usage = {
                'prompt_tokens': prompt_tokens,
                'completion_tokens': completion_tokens,
            }
            service.accumulate_tokens()

            candidates = result.get('candidates') or []
            if candidates:
                parts = (candidates[0].get('content') or {}).get('parts') or []
                if parts:
                    return "".join(part.get('text', '') for part in parts)

            raise TranslationError(f"Unexpected Gemini API response format: {result}", code="empty_response")

    except TranslationError:
        raise
    except httpx.HTTPStatusError as e:
        handle_http_error(e, "Gemini")
    except httpx.TimeoutException:
        raise TranslationError("Gemini API request timeout", code="timeout")
    except Exception as e:
        raise TranslationError(f"Gemini API call failed: {e}")
