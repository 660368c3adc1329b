"""
Language code mappings and utilities.

String catalogs use Apple's localization identifiers:
- ISO 639-1 base codes (en, fr, ja)
- Script variants for Chinese (zh-Hans, zh-Hant)
- Region variants (en-GB, pt-BR, es-419)

Codes are matched exactly when deciding what to translate; names are only
used for log output.
"""

from typing import List, Optional

# ISO 639-1 codes offered by Xcode for string catalogs
BASE_LANGUAGES = {
    'ar': 'Arabic',
    'bg': 'Bulgarian',
    'ca': 'Catalan',
    'cs': 'Czech',
    'da': 'Danish',
    'de': 'German',
    'el': 'Greek',
    'en': 'English',
    'es': 'Spanish',
    'fi': 'Finnish',
    'fr': 'French',
    'he': 'Hebrew',
    'hi': 'Hindi',
    'hr': 'Croatian',
    'hu': 'Hungarian',
    'id': 'Indonesian',
    'it': 'Italian',
    'ja': 'Japanese',
    'kk': 'Kazakh',
    'ko': 'Korean',
    'lt': 'Lithuanian',
    'ms': 'Malay',
    'nb': 'Norwegian Bokmål',
    'nl': 'Dutch',
    'pl': 'Polish',
    'pt': 'Portuguese',
    'ro': 'Romanian',
    'ru': 'Russian',
    'sk': 'Slovak',
    'sl': 'Slovenian',
    'sv': 'Swedish',
    'th': 'Thai',
    'tr': 'Turkish',
    'uk': 'Ukrainian',
    'vi': 'Vietnamese',
    'zh': 'Chinese',
}

# Script and region variants
VARIANT_LANGUAGES = {
    'zh-Hans': 'Chinese (Simplified)',
    'zh-Hant': 'Chinese (Traditional)',
    'zh-HK': 'Chinese (Hong Kong)',

    'en-AU': 'English (Australia)',
    'en-GB': 'English (United Kingdom)',
    'en-IN': 'English (India)',

    'es-419': 'Spanish (Latin America)',
    'es-MX': 'Spanish (Mexico)',

    'fr-CA': 'French (Canada)',

    'pt-BR': 'Portuguese (Brazil)',
    'pt-PT': 'Portuguese (Portugal)',
}

# Combined mapping
ALL_LANGUAGE_CODES = {**BASE_LANGUAGES, **VARIANT_LANGUAGES}


def is_valid_language_code(code: str) -> bool:
    """
    Check if a language code is known.

    Examples:
        >>> is_valid_language_code('zh-Hans')
        True
        >>> is_valid_language_code('klingon')
        False
    """
    return code in ALL_LANGUAGE_CODES


def get_language_name(code: str) -> Optional[str]:
    """Get the display name for a code, or None if unknown."""
    return ALL_LANGUAGE_CODES.get(code)


def describe_language(code: str) -> str:
    """Format a code for log output, e.g. 'French (fr)'."""
    name = get_language_name(code)
    return f"{name} ({code})" if name else code


def parse_language_list(value: str) -> List[str]:
    """
    Split a comma separated list of language codes.

    Whitespace around codes is trimmed, empty items are dropped and
    duplicates are removed while keeping the first occurrence.

    Examples:
        >>> parse_language_list('fr, de,,fr')
        ['fr', 'de']
    """
    codes: List[str] = []
    for item in value.split(','):
        trimmed = item.strip()
        if trimmed and trimmed not in codes:
            codes.append(trimmed)
    return codes
