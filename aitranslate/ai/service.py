"""
AI Translation Service Module

This module provides the translation service used by the catalog engine:
- AIService class that turns one string + TranslationRequest into a translation
- Configuration validation
- Token usage tracking

There is no retry here: a failed call raises TranslationError and the
caller records the failure. Re-running with --force is the retry.

For provider-specific API implementations, see ai/providers.py
"""

import json
from typing import Any, Dict, List, Optional

import httpx

from aitranslate.config import (
    BUILTIN_PROVIDERS,
    BUILTIN_PROVIDER_DISPLAY_NAMES,
    PLACEHOLDER_API_KEY,
    get_prompt,
    load_config,
)
from aitranslate.core.catalog import TranslationRequest
from aitranslate.logger import get_logger
from aitranslate.ai.exceptions import TranslationError

logger = get_logger(__name__)


def _provider_display(provider: str) -> str:
    if provider in BUILTIN_PROVIDER_DISPLAY_NAMES:
        return BUILTIN_PROVIDER_DISPLAY_NAMES[provider]
    return provider.replace('-', ' ').title()


def validate_ai_config(config: Dict[str, Any], provider_override: Optional[str] = None) -> str:
    """
    Validate that AI provider configuration is properly set up.

    Args:
        config: Loaded configuration
        provider_override: Optional provider to validate instead of the default.

    Returns:
        The provider name that was validated

    Raises:
        TranslationError: If configuration is invalid or missing, with code and details.
    """
    provider = provider_override if provider_override else config.get('ai_provider', 'openai')

    provider_config = config.get(provider)
    if not isinstance(provider_config, dict) or not provider_config:
        raise TranslationError(
            f"AI provider '{provider}' configuration not found",
            code="ai_config_missing",
            details={"provider": provider}
        )

    api_key = provider_config.get('api_key', '')
    if not api_key or api_key == PLACEHOLDER_API_KEY:
        raise TranslationError(
            f"{_provider_display(provider)} API key not configured. "
            f"Pass --openai-key or set {provider.upper().replace('-', '_')}_API_KEY.",
            code="ai_config_missing",
            details={"provider": provider, "missing_field": "api_key"}
        )

    models = provider_config.get('models', [])
    model = provider_config.get('model', '')
    valid_models = [m for m in models if m and isinstance(m, str)] if isinstance(models, list) else []
    if not valid_models and not model:
        raise TranslationError(
            f"{_provider_display(provider)} model not configured",
            code="ai_config_missing",
            details={"provider": provider, "missing_field": "models"}
        )

    if provider not in BUILTIN_PROVIDERS and not provider_config.get('api_url'):
        raise TranslationError(
            f"{_provider_display(provider)} API URL not configured",
            code="ai_config_missing",
            details={"provider": provider, "missing_field": "api_url"}
        )

    return provider


def unwrap_code_fence(response: str, source_text: str) -> str:
    """
    Remove a markdown code fence the model wrapped around its answer.

    Left alone when the source text was itself a fenced block.
    """
    if source_text.lstrip().startswith('```'):
        return response

    clean_text = response.strip()
    if not clean_text.startswith('```'):
        return response

    lines = clean_text.split('\n')
    # Remove first line (```text or ```)
    lines = lines[1:]
    # Remove last line if it's closing ```
    if lines and lines[-1].strip() == '```':
        lines = lines[:-1]
    return '\n'.join(lines)


class AIService:
    """AI service for translating catalog strings."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        model_override: Optional[str] = None,
        provider_override: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config if config is not None else load_config()
        # Use provider_override if specified, otherwise use config default
        self.provider = provider_override if provider_override else self.config.get('ai_provider', 'openai')
        self.model_override = model_override
        # Custom transport (tests use httpx.MockTransport)
        self.transport = transport
        # Token usage tracking
        self._last_token_usage = {'prompt_tokens': 0, 'completion_tokens': 0}
        self.total_prompt_tokens = 0
        self.total_completion_tokens = 0
        if model_override or provider_override:
            logger.info(f"Initialized AI service with provider: {self.provider}, model override: {model_override}")
        else:
            logger.info(f"Initialized AI service with provider: {self.provider}")

    def _get_model(self, provider_config: Dict[str, Any], default_model: str = "") -> str:
        """
        Get the model to use for translation.

        Priority:
        1. model_override (if set)
        2. First model from 'models' array
        3. 'model' field
        4. default_model
        """
        if self.model_override:
            return self.model_override

        models = provider_config.get('models', [])
        if models and isinstance(models, list) and models[0]:
            return models[0]

        return provider_config.get('model', default_model)

    def get_last_token_usage(self) -> Dict[str, int]:
        """Get token usage from the last API call."""
        return self._last_token_usage.copy()

    def get_total_token_usage(self) -> Dict[str, int]:
        """Get accumulated token usage."""
        return {
            'prompt_tokens': self.total_prompt_tokens,
            'completion_tokens': self.total_completion_tokens,
        }

    def accumulate_tokens(self):
        """Add last call's tokens to total."""
        self.total_prompt_tokens += self._last_token_usage.get('prompt_tokens', 0)
        self.total_completion_tokens += self._last_token_usage.get('completion_tokens', 0)

    def build_messages(self, text: str, request: TranslationRequest) -> List[Dict[str, str]]:
        """System prompt, the request as JSON, then the text to translate."""
        return [
            {"role": "system", "content": get_prompt('catalog_translation_prompt')['prompt']},
            {"role": "system", "content": json.dumps(request.to_dict(), ensure_ascii=False, sort_keys=True)},
            {"role": "user", "content": text},
        ]

    def translate(self, text: str, request: TranslationRequest) -> str:
        """
        Translate a single string.

        Args:
            text: Source text
            request: Languages, context and glossary hints

        Returns:
            The translated text

        Raises:
            TranslationError: If the provider fails, times out or returns nothing usable
        """
        messages = self.build_messages(text, request)
        logger.debug(f"  Request to AI: {messages[1]['content']}")

        response_text = self._call_ai_api_text(messages)
        translation = unwrap_code_fence(response_text, text)

        if not translation.strip():
            raise TranslationError(
                f"Empty translation returned for {request.target_language}",
                code="empty_response",
                details={"provider": self.provider},
            )
        return translation

    def _call_ai_api_text(self, messages: List[Dict[str, str]]) -> str:
        """Dispatch to the provider implementation."""
        from aitranslate.ai.providers import call_gemini_api, call_openai_compatible_api

        if self.provider == 'gemini':
            return call_gemini_api(self, messages)
        # OpenAI, DeepSeek and custom providers share the chat completions format
        return call_openai_compatible_api(self, messages)
