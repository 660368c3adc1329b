"""
String catalog data model.

Mirrors the on-disk layout of an .xcstrings file:

    {
      "sourceLanguage": "en",
      "strings": {
        "<key>": {
          "comment": "...",
          "extractionState": "stale",
          "localizations": {
            "fr": {"stringUnit": {"state": "translated", "value": "..."}},
            "de": {"variations": {...}}
          }
        }
      },
      "version": "1.0"
    }

Fields the engine does not interpret are kept in ``extra`` (or, for
unsupported localizations, in ``raw``) and written back unchanged.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

UNIT_STATE_NEW = "new"
UNIT_STATE_TRANSLATED = "translated"
UNIT_STATE_ERROR = "error"


@dataclass
class Unit:
    """One language's translation of an entry."""
    state: str = UNIT_STATE_NEW
    value: str = ""
    # Opaque payload for localizations using variations/substitutions
    raw: Optional[Dict[str, Any]] = None

    @property
    def is_supported(self) -> bool:
        return self.raw is None

    @property
    def is_translated(self) -> bool:
        return self.is_supported and self.state == UNIT_STATE_TRANSLATED

    @classmethod
    def translated(cls, value: str) -> "Unit":
        return cls(state=UNIT_STATE_TRANSLATED, value=value)

    @classmethod
    def failed(cls) -> "Unit":
        return cls(state=UNIT_STATE_ERROR, value="")

    @classmethod
    def from_dict(cls, data: Any) -> "Unit":
        """Parse a localization object; anything but a lone stringUnit is unsupported."""
        if isinstance(data, dict) and set(data.keys()) == {"stringUnit"}:
            string_unit = data["stringUnit"]
            if (isinstance(string_unit, dict)
                    and isinstance(string_unit.get("state", UNIT_STATE_NEW), str)
                    and isinstance(string_unit.get("value", ""), str)
                    and set(string_unit.keys()) <= {"state", "value"}):
                return cls(
                    state=string_unit.get("state", UNIT_STATE_NEW),
                    value=string_unit.get("value", ""),
                )
        return cls(raw=copy.deepcopy(data))

    def to_dict(self) -> Any:
        if self.raw is not None:
            return copy.deepcopy(self.raw)
        return {"stringUnit": {"state": self.state, "value": self.value}}


@dataclass
class Entry:
    """One translatable string and its per-language units."""
    key: str
    comment: Optional[str] = None
    extraction_state: Optional[str] = None
    localizations: Dict[str, Unit] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)
    # An explicit empty "localizations" object is written back as-is
    keep_empty_localizations: bool = False

    @property
    def should_translate(self) -> bool:
        return self.extra.get("shouldTranslate", True) is not False

    def get_value(self, language: str) -> Optional[str]:
        """Value of the supported unit for a language, or None."""
        unit = self.localizations.get(language)
        if unit is None or not unit.is_supported:
            return None
        return unit.value

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "Entry":
        extra = {k: copy.deepcopy(v) for k, v in data.items()
                 if k not in ("comment", "extractionState", "localizations")}
        localizations = {
            lang: Unit.from_dict(unit_data)
            for lang, unit_data in (data.get("localizations") or {}).items()
        }
        return cls(
            key=key,
            comment=data.get("comment"),
            extraction_state=data.get("extractionState"),
            localizations=localizations,
            extra=extra,
            keep_empty_localizations=isinstance(data.get("localizations"), dict),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = copy.deepcopy(self.extra)
        if self.comment is not None:
            data["comment"] = self.comment
        if self.extraction_state is not None:
            data["extractionState"] = self.extraction_state
        if self.localizations or self.keep_empty_localizations:
            data["localizations"] = {lang: unit.to_dict() for lang, unit in self.localizations.items()}
        return data


@dataclass
class Catalog:
    """A whole string catalog, owned by a single run."""
    source_language: str
    entries: Dict[str, Entry] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Catalog":
        """
        Build a catalog from decoded JSON.

        Raises:
            ValueError: If the data does not have the catalog shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Catalog must be a JSON object, got {type(data).__name__}")

        source_language = data.get("sourceLanguage")
        if not isinstance(source_language, str) or not source_language:
            raise ValueError("Catalog is missing 'sourceLanguage'")

        strings = data.get("strings", {})
        if not isinstance(strings, dict):
            raise ValueError("Catalog 'strings' must be an object")

        entries: Dict[str, Entry] = {}
        for key, entry_data in strings.items():
            if not isinstance(entry_data, dict):
                raise ValueError(f"Entry '{key}' must be an object")
            localizations = entry_data.get("localizations")
            if localizations is not None and not isinstance(localizations, dict):
                raise ValueError(f"Entry '{key}' has invalid 'localizations'")
            for field_name in ("comment", "extractionState"):
                if entry_data.get(field_name) is not None and not isinstance(entry_data[field_name], str):
                    raise ValueError(f"Entry '{key}' has invalid '{field_name}'")
            entries[key] = Entry.from_dict(key, entry_data)

        extra = {k: copy.deepcopy(v) for k, v in data.items() if k not in ("sourceLanguage", "strings")}
        return cls(source_language=source_language, entries=entries, extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = copy.deepcopy(self.extra)
        data["sourceLanguage"] = self.source_language
        data["strings"] = {key: entry.to_dict() for key, entry in self.entries.items()}
        return data


@dataclass
class TranslationRequest:
    """Everything the translation service needs besides the text itself."""
    source_language: str
    target_language: str
    context: Optional[str] = None
    hints: Optional[Dict[str, Optional[str]]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "sourceLanguage": self.source_language,
            "targetLanguage": self.target_language,
        }
        if self.context is not None:
            data["context"] = self.context
        if self.hints is not None:
            data["existingTranslations"] = dict(self.hints)
        return data
