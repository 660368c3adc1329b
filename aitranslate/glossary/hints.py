"""
Hint resolution.

Turns raw glossary terms into the "existing translations" dictionary sent
with each request: canonical catalog key -> approved translation (or None
when the term has no approved translation yet).
"""

from typing import Dict, Iterable, Optional

from aitranslate.core.catalog import Catalog
from aitranslate.logger import get_logger

logger = get_logger(__name__)


def build_lowercase_index(keys: Iterable[str]) -> Dict[str, str]:
    """
    Map lowercase forms to canonical keys.

    A key is left out when its lowercase form is another literal key, or when
    several keys share a lowercase form; those are ambiguous and stay
    unresolved.
    """
    keys = list(keys)
    literal = set(keys)
    index: Dict[str, str] = {}
    ambiguous = set()

    for key in keys:
        lowered = key.lower()
        if lowered != key and lowered in literal:
            continue
        if lowered in index and index[lowered] != key:
            ambiguous.add(lowered)
            continue
        index[lowered] = key

    for lowered in ambiguous:
        del index[lowered]
    return index


class HintResolver:
    """
    Resolves glossary terms against one catalog.

    The lowercase index is built on first use and kept: keys do not change
    during a run. Translations are always read from the live catalog.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self._index: Optional[Dict[str, str]] = None

    @property
    def index(self) -> Dict[str, str]:
        if self._index is None:
            self._index = build_lowercase_index(self.catalog.entries.keys())
        return self._index

    def canonical_key(self, term: str) -> str:
        """Catalog key a term refers to; the trimmed term itself if none matches."""
        trimmed = term.strip()
        if trimmed in self.catalog.entries:
            return trimmed
        return self.index.get(trimmed.lower(), trimmed)

    def approved_translation(self, key: str, language: str) -> Optional[str]:
        """Translated value for key in language, or None if there isn't one."""
        entry = self.catalog.entries.get(key)
        if entry is None:
            return None
        unit = entry.localizations.get(language)
        if unit is None or not unit.is_translated or not unit.value:
            return None
        return unit.value

    def resolve(self, terms: Iterable[str], language: str) -> Dict[str, Optional[str]]:
        """
        Build the hint mapping for a target language.

        Terms are resolved in the order given; when two terms resolve to the
        same key, the first one wins. An empty input gives an empty mapping.
        """
        terms = list(terms)
        if not terms:
            return {}

        hints: Dict[str, Optional[str]] = {}
        for term in terms:
            key = self.canonical_key(term)
            if not key or key in hints:
                continue
            hints[key] = self.approved_translation(key, language)

        logger.debug(f"Resolved {len(terms)} glossary terms into {len(hints)} hints for {language}")
        return hints
