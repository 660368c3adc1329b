"""
Entry selection.

Decides, for one entry and one target language, whether the pair is sent
for translation or skipped, and with which source text.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from aitranslate.core.catalog import Entry
from aitranslate.logger import get_logger

logger = get_logger(__name__)

TRANSLATE = "translate"
SKIP_ALREADY_TRANSLATED = "skip_already_translated"
SKIP_UNSUPPORTED_FORMAT = "skip_unsupported_format"
SKIP_FILTERED_OUT = "skip_filtered_out"


@dataclass
class Selection:
    """Outcome of EntrySelector.select."""
    action: str
    source_text: Optional[str] = None

    @property
    def should_translate(self) -> bool:
        return self.action == TRANSLATE


class EntrySelector:
    """
    Applies the selection rules, first match wins:

    1. key not in the allowlist (when one is set), or marked shouldTranslate=false
    2. existing unit uses variations/substitutions
    3. existing unit already translated and force is off
    4. translate, from the source-language value or else the key
    """

    def __init__(self, source_language: str, keys: Optional[Iterable[str]] = None, force: bool = False):
        self.source_language = source_language
        self.keys = set(keys) if keys else None
        self.force = force

    def source_text_for(self, entry: Entry) -> str:
        """The entry's source-language value if it has one, otherwise its key."""
        value = entry.get_value(self.source_language)
        return value if value is not None else entry.key

    def select(self, entry: Entry, language: str) -> Selection:
        if self.keys is not None and entry.key not in self.keys:
            return Selection(SKIP_FILTERED_OUT)
        if not entry.should_translate:
            logger.debug(f"Skipping '{entry.key}': marked as not translatable")
            return Selection(SKIP_FILTERED_OUT)

        unit = entry.localizations.get(language)
        if unit is not None and not unit.is_supported:
            logger.warning(f"[⚠️] Unsupported format in entry with key: {entry.key} ({language})")
            return Selection(SKIP_UNSUPPORTED_FORMAT)

        if unit is not None and unit.is_translated and not self.force:
            return Selection(SKIP_ALREADY_TRANSLATED)

        return Selection(TRANSLATE, source_text=self.source_text_for(entry))
