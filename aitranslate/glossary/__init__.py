"""
Glossary module - Terminology consistency

This module provides:
- extractor: Glossary terms from markdown (strong emphasis, headings, image alt text)
- hints: Resolution of terms to catalog keys and their approved translations
"""

from aitranslate.glossary.extractor import (
    extract_glossary_terms,
    extract_from_texts,
)

from aitranslate.glossary.hints import (
    HintResolver,
    build_lowercase_index,
)
