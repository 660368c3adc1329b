"""
AI Module

This module provides the AI translation service and related utilities.
"""

from aitranslate.ai.exceptions import TranslationError
from aitranslate.ai.service import AIService, validate_ai_config

__all__ = ['TranslationError', 'AIService', 'validate_ai_config']
