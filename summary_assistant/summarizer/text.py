"""Text normalisation applied before prompting, and word counting."""

from __future__ import annotations

import html
import re

_SCRIPT_LIKE = tuple(
    re.compile(rf"<{tag}\b[^>]*>.*?</{tag}>", re.IGNORECASE | re.DOTALL)
    for tag in ("script", "style", "noscript")
)
_BLOCK_CLOSE = re.compile(r"</(p|div|h[1-6]|li|tr|blockquote)>", re.IGNORECASE)
_LINE_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]*>")
_HORIZONTAL_SPACE = re.compile(r"[ \t]+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")

# Letter runs; an apostrophe or hyphen may join two runs ("auto-ongeluk", "zo'n").
_WORD = re.compile(r"[^\W\d_]+(?:['’-][^\W\d_]+)*")


def prepare_content(raw_html: str) -> str:
    """
    Turn an article body into plain text suitable for a prompt.

    Script, style and noscript elements are dropped together with their
    contents. Closing block tags and ``<br>`` become newlines so paragraph
    structure survives, every other tag is removed, entities are decoded and
    whitespace is collapsed.
    """
    content = raw_html
    for pattern in _SCRIPT_LIKE:
        content = pattern.sub("", content)

    content = _BLOCK_CLOSE.sub("\n", content)
    content = _LINE_BREAK.sub("\n", content)

    text = _ANY_TAG.sub("", content)
    text = html.unescape(text)

    text = _HORIZONTAL_SPACE.sub(" ", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


def count_words(text: str) -> int:
    """Count letter-run words; punctuation-only tokens and numbers are ignored."""
    text = text.strip()
    if not text:
        return 0
    return len(_WORD.findall(text))
