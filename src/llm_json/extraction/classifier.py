"""Input classification.

`classify` assigns exactly one `InputType` to a text by testing a fixed list
of rules in priority order; the first rule that matches wins. Structural
evidence is tested before textual and linguistic heuristics, so data
embedded in code or prose is never mistaken for prose.
"""

import json
import re

from llm_json.core.types import InputType

from .literals import KEY, KEY_PREFIX, SEPARATOR, has_fenced_block, has_literal
from .precheck import PROSE_OPENER, has_delimiters, looks_non_structured

_KEY_VALUE_PATTERNS = (
    re.compile(r'"[^"\n]+"\s*:\s*\S'),
    re.compile(KEY_PREFIX + KEY + SEPARATOR + r"\S", re.MULTILINE),
    re.compile(
        r"\w[ \t]*[:：=][ \t]*(?:true|false|null|-?\d+(?:\.\d+)?)\b", re.IGNORECASE
    ),
)

_CJK = re.compile(r"[\u4e00-\u9fff\u3040-\u30ff\uac00-\ud7af]")
_DOMAIN_KEYWORDS = re.compile(
    r"\b(?:title|description|summary|content)\b|标题|描述|简介|内容",
    re.IGNORECASE,
)
_MARKDOWN_HEADING = re.compile(r"^#{1,6}[ \t]+\S", re.MULTILINE)
_SENTENCE_BREAK = re.compile(r"[A-Za-z][.!?][ \t]+[A-Za-z]|[。！？]")


def classify(text: str) -> InputType:
    """Return the `InputType` of `text`. Deterministic and total."""
    if not isinstance(text, str):
        return InputType.MIXED_OR_INVALID

    trimmed = text.strip()
    if not trimmed:
        return InputType.MIXED_OR_INVALID

    if _is_pure_structured(trimmed):
        return InputType.PURE_STRUCTURED
    if has_fenced_block(trimmed):
        return InputType.FENCED_BLOCK
    if has_literal(trimmed):
        return InputType.EMBEDDED_LITERAL
    if looks_like_key_values(trimmed):
        return InputType.KEY_VALUE_TEXT
    if looks_like_natural_language(trimmed):
        return InputType.NATURAL_LANGUAGE
    return InputType.MIXED_OR_INVALID


def _is_pure_structured(trimmed: str) -> bool:
    if not has_delimiters(trimmed):
        return False
    try:
        value = json.loads(trimmed)
    except (json.JSONDecodeError, RecursionError):
        return False
    return isinstance(value, dict | list)


def looks_like_key_values(text: str) -> bool:
    """Return True if `text` has `key: value` / `key = value` style pairs."""
    return any(pattern.search(text) for pattern in _KEY_VALUE_PATTERNS)


def looks_like_natural_language(text: str) -> bool:
    """Return True if `text` shows prose, script, or domain-keyword signals."""
    if looks_non_structured(text):
        return True
    return bool(
        _CJK.search(text)
        or PROSE_OPENER.search(text)
        or _DOMAIN_KEYWORDS.search(text)
        or _MARKDOWN_HEADING.search(text)
        or _SENTENCE_BREAK.search(text)
    )
