
import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from aitranslate.logger import get_logger

logger = get_logger(__name__)

# Translation configuration constants
DEFAULT_TIMEOUT = 60  # Seconds to wait for a single translation
BACKUP_SUFFIX = ".original"
STALE_EXTRACTION_STATE = "stale"

# Provider configuration constants
BUILTIN_PROVIDERS = ["openai", "deepseek", "gemini"]

BUILTIN_PROVIDER_DISPLAY_NAMES = {
    "openai": "OpenAI",
    "deepseek": "DeepSeek",
    "gemini": "Gemini"
}

PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"

# Config file lookup
CONFIG_ENV_VAR = "AITRANSLATE_CONFIG"
DEFAULT_CONFIG_FILE = Path("config") / "config.json"

# Default prompts
DEFAULT_PROMPTS = {
    "catalog_translation_prompt": {
        "version": "1.0",
        "description": "System prompt for translating a single catalog string",
        "prompt": """You are a translator tool that translates UI strings for a software application.
System inputs are:
- source language
- target language
- context (optional)
- Existing translations (optional): A dictionary of translations. Always use the values in this dictionary for the translation of certain words. Keys in this dictionary should always be translated to the corresponding values.

User will send you the original text for translation.
In your response include only the translation. Do not wrap it in any markup or escape characters.
If the original text is markdown, maintain its heading and format.
Make sure that links, images, and code blocks are preserved in the translation.
Text inside images should be translated. i.e. ![Hello World](hello-world) should be translated to ![Bonjour le monde](hello-world) if the language is fr."""
    }
}

# Default configuration templates
DEFAULT_CONFIG = {
    "ai_provider": "openai",
    "openai": {
        "api_key": PLACEHOLDER_API_KEY,
        "models": ["gpt-4o", "gpt-4o-mini"],  # First is default
        "timeout": DEFAULT_TIMEOUT,
        "api_url": "https://api.openai.com/v1/chat/completions"
    },
    "deepseek": {
        "api_key": PLACEHOLDER_API_KEY,
        "models": ["deepseek-chat"],
        "timeout": DEFAULT_TIMEOUT,
        "api_url": "https://api.deepseek.com/chat/completions"
    },
    "gemini": {
        "api_key": PLACEHOLDER_API_KEY,
        "models": ["gemini-2.5-flash"],
        "timeout": DEFAULT_TIMEOUT,
        "api_url": "https://generativelanguage.googleapis.com/v1beta/models"
    },
    "log_mode": "info",
    "log_file": None
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base, recursing into nested dicts."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def resolve_config_path(path: Optional[str] = None) -> Optional[Path]:
    """
    Find the config file to use.

    Priority:
    1. Explicit path
    2. AITRANSLATE_CONFIG environment variable
    3. config/config.json in the working directory, if it exists
    """
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    if DEFAULT_CONFIG_FILE.exists():
        return DEFAULT_CONFIG_FILE
    return None


def _apply_env_api_keys(config: Dict[str, Any]) -> None:
    """Fill placeholder API keys from <PROVIDER>_API_KEY environment variables."""
    for provider, provider_config in config.items():
        if not isinstance(provider_config, dict) or "api_key" not in provider_config:
            continue
        env_name = f"{provider.upper().replace('-', '_')}_API_KEY"
        env_value = os.environ.get(env_name)
        api_key = provider_config.get("api_key")
        if env_value and (not api_key or api_key == PLACEHOLDER_API_KEY):
            provider_config["api_key"] = env_value
            logger.debug(f"Using {env_name} for provider '{provider}'")


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the configuration, layering a JSON config file over the defaults.

    A file that is explicitly requested but missing or malformed raises
    ValueError. The auto-discovered file is optional.
    """
    config_path = resolve_config_path(path)
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is not None:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
        except FileNotFoundError:
            raise ValueError(f"Config file not found: {config_path}")
        except (OSError, UnicodeDecodeError) as e:
            raise ValueError(f"Failed to read config file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse config file {config_path}: {e}")

        if not isinstance(file_config, dict):
            raise ValueError(f"Config file must contain a JSON object: {config_path}")

        config = _deep_merge(config, file_config)
        logger.debug(f"Configuration loaded from {config_path}")

    _apply_env_api_keys(config)
    return config


def get_prompt(prompt_name: str = "catalog_translation_prompt") -> Dict[str, Any]:
    """Get a specific prompt by name."""
    return DEFAULT_PROMPTS.get(prompt_name, DEFAULT_PROMPTS["catalog_translation_prompt"]).copy()
