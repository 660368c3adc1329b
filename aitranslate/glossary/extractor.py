"""
Glossary term extraction.

Finds the spans of a markdown string whose translation has to stay
consistent between runs: strong emphasis, headings and image alt text.
The markdown is rendered to HTML with markdown2 and the tree is walked with
BeautifulSoup.
"""

import re
from typing import Optional, Set

import markdown2
from bs4 import BeautifulSoup, NavigableString, Tag

from aitranslate.logger import get_logger

logger = get_logger(__name__)

NODE_TEXT = "text"
NODE_EMPHASIS = "emphasis"
NODE_HEADING = "heading"
NODE_IMAGE = "image"
NODE_OTHER = "other"

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
EMPHASIS_TAGS = {"strong"}

# Backtick code spans (fences included) are left as written
CODE_SPAN_RE = re.compile(r"(`+).+?\1", re.S)
# Underscore runs with a letter or digit on both sides, e.g. snake__case
INTRAWORD_UNDERSCORES_RE = re.compile(r"(?<=[^\W_])_+(?=[^\W_])")


def _escape_intraword_underscores(text: str) -> str:
    """
    Backslash-escape underscores inside words so they stay literal.

    Intraword `__` never opens or closes emphasis in CommonMark, while
    markdown2 renders it as strong.
    """
    def escape(segment: str) -> str:
        return INTRAWORD_UNDERSCORES_RE.sub(lambda m: "\\_" * len(m.group()), segment)

    parts = []
    position = 0
    for match in CODE_SPAN_RE.finditer(text):
        parts.append(escape(text[position:match.start()]))
        parts.append(match.group())
        position = match.end()
    parts.append(escape(text[position:]))
    return "".join(parts)


def _node_kind(node) -> str:
    if isinstance(node, NavigableString):
        return NODE_TEXT
    if isinstance(node, Tag):
        if node.name in EMPHASIS_TAGS:
            return NODE_EMPHASIS
        if node.name in HEADING_TAGS:
            return NODE_HEADING
        if node.name == "img":
            return NODE_IMAGE
    return NODE_OTHER


def _plain_text(node) -> str:
    """Text of a node as a reader sees it; images contribute their alt text."""
    kind = _node_kind(node)
    if kind == NODE_TEXT:
        return str(node)
    if kind == NODE_IMAGE:
        return node.get("alt", "")
    if isinstance(node, Tag):
        return "".join(_plain_text(child) for child in node.children)
    return ""


def _walk(node, terms: Set[str]) -> None:
    kind = _node_kind(node)
    if kind == NODE_TEXT:
        return

    if kind in (NODE_EMPHASIS, NODE_HEADING, NODE_IMAGE):
        term = _plain_text(node).strip()
        if term:
            terms.add(term)

    # Keep descending: emphasis inside a heading is a term of its own
    if isinstance(node, Tag):
        for child in node.children:
            _walk(child, terms)


def extract_glossary_terms(text: Optional[str]) -> Set[str]:
    """
    Extract glossary terms from markdown text.

    Args:
        text: Markdown source (plain strings are fine too)

    Returns:
        Set of terms, trimmed and deduplicated

    Example:
        >>> sorted(extract_glossary_terms("**Bold** and ![alt](x)\\n\\n# Heading"))
        ['Bold', 'Heading', 'alt']
    """
    if not text or not text.strip():
        return set()

    try:
        html = markdown2.markdown(_escape_intraword_underscores(text))
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        logger.warning(f"Could not parse text for glossary terms, skipping: {e}")
        return set()

    terms: Set[str] = set()
    _walk(soup, terms)
    return terms


def extract_from_texts(*texts: Optional[str]) -> Set[str]:
    """Union of the glossary terms of several texts; None and empty texts are skipped."""
    terms: Set[str] = set()
    for text in texts:
        if text:
            terms |= extract_glossary_terms(text)
    return terms
