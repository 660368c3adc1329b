import json
import sys
from pathlib import Path

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from aitranslate.ai.exceptions import TranslationError  # noqa: E402


class FakeTranslationService:
    """Records calls; translates to '<lang>:<text>' unless told to fail."""

    def __init__(self, fail_on=None):
        # Set of (text, language) pairs that raise
        self.fail_on = set(fail_on or [])
        self.calls = []

    def translate(self, text, request):
        self.calls.append((text, request))
        if (text, request.target_language) in self.fail_on:
            raise TranslationError("provider unavailable", code="timeout")
        return f"{request.target_language}:{text}"


@pytest.fixture
def fake_service():
    return FakeTranslationService()


@pytest.fixture
def make_service():
    return FakeTranslationService


def string_unit(value, state="translated"):
    return {"stringUnit": {"state": state, "value": value}}


@pytest.fixture
def catalog_data():
    return {
        "sourceLanguage": "en",
        "strings": {
            "Hello": {
                "comment": "Greeting on the home screen",
                "localizations": {
                    "fr": string_unit("Bonjour"),
                },
            },
            "Open **Settings**": {},
            "Old label": {
                "extractionState": "stale",
            },
            "%lld items": {
                "localizations": {
                    "fr": {
                        "variations": {
                            "plural": {
                                "one": string_unit("%lld élément"),
                                "other": string_unit("%lld éléments"),
                            }
                        }
                    }
                }
            },
        },
        "version": "1.0",
    }


@pytest.fixture
def write_catalog(tmp_path):
    def _write(data, name="Localizable.xcstrings"):
        path = tmp_path / name
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        return path
    return _write
