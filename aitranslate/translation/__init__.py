"""
Translation module - Catalog translation workflow

This module provides:
- TranslationManager: Main translation run over a catalog
- EntrySelector: Per entry/language translate-or-skip decisions
- ProgressReporter / TranslationProgress: 10% progress notifications
- Utilities for pass-through text and context joining
"""

from aitranslate.translation.progress import (
    ProgressReporter,
    TranslationProgress,
)
from aitranslate.translation.selector import (
    EntrySelector,
    Selection,
    TRANSLATE,
    SKIP_ALREADY_TRANSLATED,
    SKIP_UNSUPPORTED_FORMAT,
    SKIP_FILTERED_OUT,
)
from aitranslate.translation.utils import (
    is_passthrough_text,
    join_context,
)
from aitranslate.translation.manager import TranslationManager
