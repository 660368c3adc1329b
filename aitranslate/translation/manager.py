"""
Translation Manager Module

Main TranslationManager class that coordinates a catalog translation run:
- Select the entry/language pairs that need work
- Build requests with context and glossary hints
- Translate each pair through the translation service
- Merge results back into the catalog
"""

import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from aitranslate.core.catalog import Catalog, Entry, TranslationRequest, Unit
from aitranslate.glossary import HintResolver, extract_from_texts
from aitranslate.logger import get_logger
import aitranslate.language_codes as lc

from aitranslate.translation.progress import ProgressReporter, TranslationProgress
from aitranslate.translation.selector import (
    EntrySelector,
    SKIP_ALREADY_TRANSLATED,
    SKIP_FILTERED_OUT,
    SKIP_UNSUPPORTED_FORMAT,
)
from aitranslate.translation.utils import is_passthrough_text, join_context

logger = get_logger(__name__)


class TranslationManager:
    """
    Runs one pass over a catalog.

    Pairs are processed strictly in order, one service call at a time, so a
    translation written for an earlier entry is available as a hint for
    later ones. A failed call marks that single unit as an error and the
    run continues.
    """

    def __init__(
        self,
        service,
        languages: Iterable[str],
        keys: Optional[Iterable[str]] = None,
        existing_translation_keys: Optional[Iterable[str]] = None,
        additional_context: str = "",
        force: bool = False,
        progress_callback: Optional[Callable[[TranslationProgress], None]] = None,
    ):
        """
        Args:
            service: Object with translate(text, request) -> str, raising on failure
            languages: Target language codes
            keys: Only translate these keys (all keys when empty)
            existing_translation_keys: Catalog keys always sent as hints
            additional_context: Context prepended to every entry's comment
            force: Retranslate units that are already translated
            progress_callback: Receives a TranslationProgress per 10% boundary
        """
        self.service = service
        self.languages = list(languages)
        self.keys = list(keys) if keys else []
        self.existing_translation_keys = list(existing_translation_keys or [])
        self.additional_context = additional_context or ""
        self.force = force
        self.progress_callback = progress_callback
        self.failed_items: List[Dict[str, Any]] = []
        self.start_time: Optional[float] = None

    def _resolve_target_languages(self, source_language: str) -> List[str]:
        """Trim, deduplicate and drop the catalog's own source language."""
        resolved: List[str] = []
        for code in self.languages:
            if not isinstance(code, str):
                continue
            trimmed = code.strip()
            if not trimmed or trimmed in resolved:
                continue
            if trimmed == source_language:
                logger.warning(f"Skipping {trimmed}: it is the catalog's source language")
                continue
            if not lc.is_valid_language_code(trimmed):
                logger.warning(f"Unknown language code '{trimmed}', translating anyway")
            resolved.append(trimmed)
        return resolved

    def build_request(
        self,
        catalog: Catalog,
        entry: Entry,
        source_text: str,
        language: str,
        resolver: HintResolver,
    ) -> TranslationRequest:
        """Assemble the request for one entry/language pair."""
        # Explicit keys first so they win when an extracted term resolves to the same key
        terms = self.existing_translation_keys + sorted(extract_from_texts(source_text, entry.comment))
        hints = resolver.resolve(terms, language)

        return TranslationRequest(
            source_language=catalog.source_language,
            target_language=language,
            context=join_context(self.additional_context, entry.comment),
            hints=hints or None,
        )

    def _build_result(
        self,
        translated_count: int,
        failure_count: int,
        skipped: Dict[str, int],
        languages: List[str],
    ) -> Dict[str, Any]:
        """Build the result dictionary."""
        elapsed_time = time.time() - self.start_time if self.start_time else 0

        result = {
            "success": failure_count == 0,
            "languages": languages,
            "total_translated": translated_count,
            "total_failed": failure_count,
            "total_skipped": dict(skipped),
            "failed_items": self.failed_items,
            "elapsed_time": elapsed_time,
        }

        token_usage = None
        if hasattr(self.service, "get_total_token_usage"):
            token_usage = self.service.get_total_token_usage()
            result["token_usage"] = token_usage

        logger.info(
            "Translation completed in %.1f seconds (success=%d, failed=%d%s)",
            elapsed_time,
            translated_count,
            failure_count,
            f", tokens: {token_usage}" if token_usage else "",
        )

        return result

    def translate_entry(
        self,
        catalog: Catalog,
        entry: Entry,
        language: str,
        source_text: str,
        resolver: HintResolver,
    ) -> bool:
        """
        Translate one pair and write the resulting unit.

        Returns:
            True if the unit ended up translated, False if it was marked as error
        """
        if is_passthrough_text(source_text):
            logger.debug(f"[{language}] '{entry.key}' has nothing to translate, copying as is")
            entry.localizations[language] = Unit.translated(source_text)
            return True

        request = self.build_request(catalog, entry, source_text, language, resolver)
        if request.hints:
            logger.debug(f"[🔍] Existing translations: {request.hints}")

        try:
            translation = self.service.translate(source_text, request)
        except Exception as e:
            logger.error(f"[❌] Failed to translate '{entry.key}' into {lc.describe_language(language)}: {e}")
            entry.localizations[language] = Unit.failed()
            self.failed_items.append({
                "key": entry.key,
                "language_code": language,
                "source_text": source_text,
                "error": str(e),
            })
            return False

        logger.debug(f"[{language}] {source_text} -> {translation}")
        entry.localizations[language] = Unit.translated(translation)
        return True

    def run(self, catalog: Catalog) -> Dict[str, Any]:
        """
        Translate every pending entry/language pair of a catalog in place.

        Returns:
            Dict with counts, failed items, elapsed time and token usage
        """
        self.start_time = time.time()
        self.failed_items = []

        languages = self._resolve_target_languages(catalog.source_language)
        selector = EntrySelector(catalog.source_language, keys=self.keys, force=self.force)
        resolver = HintResolver(catalog)

        translated_count = 0
        failure_count = 0
        skipped = {
            SKIP_ALREADY_TRANSLATED: 0,
            SKIP_UNSUPPORTED_FORMAT: 0,
            SKIP_FILTERED_OUT: 0,
        }

        logger.info(
            f"Translating {len(catalog.entries)} entries into "
            f"{', '.join(lc.describe_language(code) for code in languages) or 'no languages'}"
        )

        reporter = ProgressReporter(len(catalog.entries) * len(languages), self.progress_callback)
        reporter.start()

        for entry in list(catalog.entries.values()):
            for language in languages:
                selection = selector.select(entry, language)
                if not selection.should_translate:
                    skipped[selection.action] += 1
                    continue

                if self.translate_entry(catalog, entry, language, selection.source_text, resolver):
                    translated_count += 1
                else:
                    failure_count += 1

            # Counted per entry, whatever happened to its individual languages
            reporter.advance(len(languages))

        return self._build_result(translated_count, failure_count, skipped, languages)
