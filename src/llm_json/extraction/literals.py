"""Fence, literal and key/value patterns shared across the pipeline.

Patterns are compiled once at import. A compiled pattern carries no match
state, so the same objects are safe to use from concurrent callers.
"""

from collections.abc import Iterator
import functools
import re
from typing import Literal, NamedTuple

from llm_json.core.types import FencedBlock

# ```lang\n ... ``` (language tag optional) or an inline ```...``` run.
FENCE_PATTERN = re.compile(
    r"```[ \t]*(?P<lang>[\w.+#-]*)[ \t]*\r?\n(?P<body>.*?)```"
    r"|```(?P<inline>.*?)```",
    re.DOTALL,
)

JSON_FENCE_LANGUAGES = frozenset({"", "json", "json5", "jsonc"})

# Unquoted key: a word-initial run of up to three words, optionally bulleted
# or bolded, followed by `:`, `：` or `=`. URLs (`://`) are not separators.
KEY_PREFIX = r"^[ \t]*(?:[-*+][ \t]+)?(?:\*\*)?"
KEY = r"[^\W\d][\w\-.]*(?:[ \t][\w\-.]+){0,2}"
SEPARATOR = r"(?:\*\*)?[ \t]*(?::(?!//)|：|=)[ \t]*"
NUMBER = r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?"

_CLOSERS = {"{": "}", "[": "]"}

type Opener = Literal["{", "["]


def iter_fenced_blocks(text: str) -> Iterator[FencedBlock]:
    """Yield every fenced block of `text` in document order."""
    for match in FENCE_PATTERN.finditer(text):
        if match.group("body") is not None:
            language = match.group("lang").lower()
            body = match.group("body")
        else:
            language = ""
            body = match.group("inline")
        yield FencedBlock(language=language, body=body.strip(), start=match.start())


def has_fenced_block(text: str) -> bool:
    """Return True if `text` contains at least one closed fence."""
    return FENCE_PATTERN.search(text) is not None


def iter_literals(text: str, opener: Opener) -> Iterator[tuple[int, str]]:
    """Yield `(offset, literal)` for balanced literals opened by `opener`.

    Only the given delimiter pair is counted, so a brace scan ignores
    brackets and vice versa. Double-quoted strings inside a literal are
    skipped. Literals do not overlap: an enclosed literal is not yielded
    separately, and an opener that never closes is skipped in favour of the
    literals inside it.
    """
    last_end = -1
    for start, end in literal_spans(text, opener).closed:
        if start > last_end:
            yield start, text[start : end + 1]
            last_end = end


def iter_top_level_literals(text: str) -> Iterator[tuple[int, str]]:
    """Yield brace and bracket literals in document order, outermost only."""
    spans = sorted(
        (*literal_spans(text, "{").closed, *literal_spans(text, "[").closed)
    )
    last_end = -1
    for start, end in spans:
        if start > last_end:
            yield start, text[start : end + 1]
            last_end = end


class LiteralSpans(NamedTuple):
    """Matched `(start, end)` offsets (end inclusive) and unclosed openers."""

    closed: tuple[tuple[int, int], ...]
    unclosed: tuple[int, ...]


_LITERAL_TOKENS = {
    "{": re.compile(r'[\\"{}]'),
    "[": re.compile(r'[\\"\[\]]'),
}


@functools.lru_cache(maxsize=8)
def literal_spans(text: str, opener: Opener) -> LiteralSpans:
    """Pair every `opener` in `text` with its closer in a single pass.

    Results are cached per text, so the classifier and the scanner share one
    pass over the same input.
    """
    closer = _CLOSERS[opener]
    closed: list[tuple[int, int]] = []
    stack: list[int] = []
    in_string = False
    escaped_at = -1
    for match in _LITERAL_TOKENS[opener].finditer(text):
        pos = match.start()
        char = match.group()
        if in_string:
            if pos == escaped_at:
                continue
            if char == "\\":
                escaped_at = pos + 1
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            # Quotes only delimit strings inside a literal
            in_string = bool(stack)
        elif char == opener:
            stack.append(pos)
        elif char == closer and stack:
            closed.append((stack.pop(), pos))
    closed.sort()
    return LiteralSpans(closed=tuple(closed), unclosed=tuple(stack))


def first_literal_open_at(text: str, offset: int) -> int | None:
    """Start of the earliest literal still open at `offset`, if any.

    Covers literals that close at or after `offset` and openers that never
    close at all.
    """
    starts = [
        start
        for opener in ("{", "[")
        for start, end in literal_spans(text, opener).closed
        if start < offset <= end
    ]
    starts.extend(
        start
        for opener in ("{", "[")
        for start in literal_spans(text, opener).unclosed
        if start < offset
    )
    return min(starts, default=None)


def is_meaningful_literal(literal: str) -> bool:
    """Reject empty literals and object literals with no key/value separator."""
    inner = literal[1:-1].strip()
    if not inner:
        return False
    if literal.startswith("{"):
        return ":" in inner
    return True


def has_literal(text: str) -> bool:
    """Return True if `text` holds a non-empty brace or bracket literal."""
    for opener in ("{", "["):
        if any(is_meaningful_literal(lit) for _, lit in iter_literals(text, opener)):
            return True
    return False
