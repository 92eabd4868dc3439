"""Extraction strategies.

Each strategy is a small immutable object with a `name` and a single
`attempt(text)` method returning a `Result`. A strategy never raises because
a text did not match; it returns `Failure(ExtractionMiss(...))` and the
dispatcher moves on to the next one.
"""

from collections.abc import Callable, Iterable
import dataclasses
import json
import logging
import re
from typing import Any, ClassVar, Protocol

from llm_json.core.types import (
    ExtractedValue,
    Failure,
    FencedBlock,
    Result,
    StrategyName,
    Success,
)
from llm_json.exceptions import ExtractionMiss

from .literals import (
    KEY,
    KEY_PREFIX,
    NUMBER,
    SEPARATOR,
    iter_fenced_blocks,
    iter_literals,
)
from .repair import parse_repaired, strict_parse
from .scanner import scan
from .text import clean_markdown
from .validation import is_structurally_valid, type_tag

log = logging.getLogger(__name__)

DEFAULT_MIN_DESCRIPTION_LENGTH = 20


class Strategy(Protocol):
    """Protocol for extraction strategies."""

    name: ClassVar[StrategyName]

    def attempt(self, text: str) -> Result[ExtractedValue, ExtractionMiss]:
        """Try to recover a structured value from `text`."""
        ...


type FenceReader = Callable[[str], Iterable[FencedBlock]]


def regex_fence_reader(text: str) -> list[FencedBlock]:
    """Default `FenceReader`: regex-based ``` detection."""
    return list(iter_fenced_blocks(text))


def parse_with_repair(
    text: str, *, allow_repair: bool = True
) -> Result[ExtractedValue, ExtractionMiss]:
    """Strictly parse `text`, retrying once through the repair adapter.

    The parsed value must be an object or array; primitives are rejected as
    if parsing had failed.
    """
    trimmed = text.strip()
    if not trimmed:
        return Failure(ExtractionMiss("Empty text"))

    parsed = strict_parse(trimmed)
    if isinstance(parsed, Failure):
        if not allow_repair:
            return parsed
        parsed = parse_repaired(trimmed)
        if isinstance(parsed, Failure):
            return parsed

    if not is_structurally_valid(parsed.value):
        return Failure(
            ExtractionMiss(
                f"Parsed value is not an object or array: {type_tag(parsed.value)}"
            )
        )
    return parsed


def _miss(strategy: StrategyName, message: str) -> Failure[ExtractionMiss]:
    return Failure(ExtractionMiss(message, strategy=str(strategy)))


# --- Parsing strategies ---


@dataclasses.dataclass(frozen=True, slots=True)
class DirectParseStrategy:
    """Parse the whole trimmed text, with one repair retry."""

    name: ClassVar[StrategyName] = StrategyName.DIRECT_PARSE

    allow_repair: bool = True

    def attempt(self, text: str) -> Result[ExtractedValue, ExtractionMiss]:  # noqa: D102
        result = parse_with_repair(text, allow_repair=self.allow_repair)
        if isinstance(result, Failure):
            return _miss(self.name, str(result.error))
        return result


@dataclasses.dataclass(frozen=True, slots=True)
class FencedBlockStrategy:
    """Parse fenced code blocks in discovery order.

    When a block body does not parse, the first brace literal inside it is
    tried instead. Block discovery goes through `fence_reader`, so a
    markdown-aware reader can replace the regex one as long as it yields the
    same blocks for well-formed fences.
    """

    name: ClassVar[StrategyName] = StrategyName.FENCED_BLOCK

    allow_repair: bool = True
    fence_reader: FenceReader = regex_fence_reader

    def attempt(self, text: str) -> Result[ExtractedValue, ExtractionMiss]:  # noqa: D102
        blocks = list(self.fence_reader(text))
        if not blocks:
            return _miss(self.name, "No fenced blocks found")

        for block in blocks:
            if not block.body:
                continue

            result = parse_with_repair(block.body, allow_repair=self.allow_repair)
            if isinstance(result, Success):
                return result

            first_literal = next(iter_literals(block.body, "{"), None)
            if first_literal is None:
                continue
            result = parse_with_repair(first_literal[1], allow_repair=self.allow_repair)
            if isinstance(result, Success):
                return result
            log.debug(
                "Fenced block at offset %d did not parse: %s", block.start, result.error
            )

        return _miss(self.name, f"None of {len(blocks)} fenced blocks parsed")


@dataclasses.dataclass(frozen=True, slots=True)
class EmbeddedLiteralStrategy:
    """Parse scanner candidates in ranked order."""

    name: ClassVar[StrategyName] = StrategyName.EMBEDDED_LITERAL

    allow_repair: bool = True

    def attempt(self, text: str) -> Result[ExtractedValue, ExtractionMiss]:  # noqa: D102
        candidates = scan(text)
        if not candidates:
            return _miss(self.name, "No candidates found")

        for candidate in candidates:
            result = parse_with_repair(
                candidate.content, allow_repair=self.allow_repair
            )
            if isinstance(result, Success):
                return result

        return _miss(self.name, f"None of {len(candidates)} candidates parsed")


# --- Key/value reconstruction ---

_QUOTED_KEY = r'"(?P<key>[^"\n]+)"\s*:\s*'
_UNQUOTED_KEY = KEY_PREFIX + r"(?P<key>" + KEY + r")" + SEPARATOR
_LINE_END = r"[ \t]*,?[ \t]*$"
_SCALAR_TOKEN = r"(?:" + NUMBER + r"|true|false|null)"

_INTEGER = re.compile(r"-?(?:0|[1-9]\d*)")
_FLOAT = re.compile(NUMBER)


def _unescape(raw: str) -> str:
    try:
        return json.loads(f'"{raw}"')
    except json.JSONDecodeError:
        return raw


def coerce_scalar(raw: str) -> Any:
    """Coerce a bare token to int, float, bool or None; leave anything else."""
    token = raw.strip()
    if token == "true":
        return True
    if token == "false":
        return False
    if token == "null":
        return None
    if _INTEGER.fullmatch(token):
        return int(token)
    if _FLOAT.fullmatch(token):
        return float(token)
    return token


# (pattern, converter) pairs, applied in order across the whole text
_KEY_VALUE_BATTERY: tuple[tuple[re.Pattern[str], Callable[[str], Any]], ...] = (
    (
        re.compile(_QUOTED_KEY + r'"(?P<value>(?:[^"\\\n]|\\.)*)"'),
        _unescape,
    ),
    (
        re.compile(_QUOTED_KEY + r"(?P<value>" + NUMBER + r")(?![\w.])"),
        coerce_scalar,
    ),
    (
        re.compile(_QUOTED_KEY + r"(?P<value>true|false|null)\b"),
        coerce_scalar,
    ),
    (
        re.compile(
            _UNQUOTED_KEY
            + r"(?P<quote>[\"'])(?P<value>[^\n]*?)(?P=quote)"
            + _LINE_END,
            re.MULTILINE,
        ),
        str,
    ),
    (
        re.compile(_UNQUOTED_KEY + r"(?P<value>" + NUMBER + r")" + _LINE_END, re.MULTILINE),
        coerce_scalar,
    ),
    (
        re.compile(
            _UNQUOTED_KEY + r"(?P<value>true|false|null)" + _LINE_END, re.MULTILINE
        ),
        coerce_scalar,
    ),
    (
        re.compile(
            _UNQUOTED_KEY
            + r"(?!"
            + _SCALAR_TOKEN
            + _LINE_END
            + r")(?P<value>[^\s\"'\[{][^\n]*?)"
            + _LINE_END,
            re.MULTILINE,
        ),
        str,
    ),
)


@dataclasses.dataclass(frozen=True, slots=True)
class KeyValueStrategy:
    """Rebuild a mapping from `key: value` style pairs.

    All matches from the battery are ordered by document position, so the
    result keeps first-seen key order and a later pair for the same key wins.
    """

    name: ClassVar[StrategyName] = StrategyName.KEY_VALUE

    def attempt(self, text: str) -> Result[ExtractedValue, ExtractionMiss]:  # noqa: D102
        normalized = text.replace("\r\n", "\n")
        found: list[tuple[int, int, str, Any]] = []

        for order, (pattern, convert) in enumerate(_KEY_VALUE_BATTERY):
            for match in pattern.finditer(normalized):
                key = match.group("key").strip()
                if not key:
                    continue
                found.append(
                    (match.start("key"), order, key, convert(match.group("value")))
                )

        if not found:
            return _miss(self.name, "No key/value pairs found")

        extracted: dict[str, Any] = {}
        for _, _, key, value in sorted(found, key=lambda item: (item[0], item[1])):
            extracted[key] = value
        return Success(extracted)


# --- Natural-language field inference ---


def _labelled_line(labels: str) -> re.Pattern[str]:
    return re.compile(
        r"^[ \t>*#-]*(?:\*\*)?(?:"
        + labels
        + r")(?:\*\*)?[ \t]*[:：][ \t]*(?:\*\*)?[ \t]*"
        + r"[\"“「]?(?P<value>[^\n]*?)[\"”」]?[ \t]*$",
        re.IGNORECASE | re.MULTILINE,
    )


_TITLE_MARKER = _labelled_line(r"title|heading|subject|副本标题|标题|题目")
_HEADING_MARKER = re.compile(r"^#{1,6}[ \t]+(?P<value>[^\n]*?)[ \t#]*$", re.MULTILINE)
_DESCRIPTION_MARKER = _labelled_line(
    r"description|summary|overview|副本描述|描述|简介|摘要"
)


def _first_value(pattern: re.Pattern[str], text: str) -> str | None:
    for match in pattern.finditer(text):
        value = clean_markdown(match.group("value"))
        if value:
            return value
    return None


@dataclasses.dataclass(frozen=True, slots=True)
class NaturalLanguageStrategy:
    """Infer `title` and `description` fields from prose.

    The full original text is always attached as `content`, but content
    alone does not count as an extraction.
    """

    name: ClassVar[StrategyName] = StrategyName.NATURAL_LANGUAGE

    min_description_length: int = DEFAULT_MIN_DESCRIPTION_LENGTH

    def attempt(self, text: str) -> Result[ExtractedValue, ExtractionMiss]:  # noqa: D102
        title = _first_value(_TITLE_MARKER, text) or _first_value(_HEADING_MARKER, text)
        description = _first_value(_DESCRIPTION_MARKER, text)
        if description is None:
            description = self._first_long_line(text)

        if title is None and description is None:
            return _miss(self.name, "No title or description found")

        extracted: dict[str, Any] = {}
        if title is not None:
            extracted["title"] = title
        if description is not None:
            extracted["description"] = description
        extracted["content"] = text
        return Success(extracted)

    def _first_long_line(self, text: str) -> str | None:
        for line in text.splitlines():
            stripped = line.strip()
            if stripped.startswith("```"):
                continue
            if _TITLE_MARKER.match(stripped) or _HEADING_MARKER.match(stripped):
                continue
            cleaned = clean_markdown(stripped)
            if len(cleaned) > self.min_description_length:
                return cleaned
        return None


def build_strategies(
    *,
    allow_repair: bool = True,
    min_description_length: int = DEFAULT_MIN_DESCRIPTION_LENGTH,
    fence_reader: FenceReader | None = None,
) -> dict[StrategyName, Strategy]:
    """Create one instance of every strategy, keyed by name."""
    return {
        StrategyName.DIRECT_PARSE: DirectParseStrategy(allow_repair=allow_repair),
        StrategyName.FENCED_BLOCK: FencedBlockStrategy(
            allow_repair=allow_repair,
            fence_reader=fence_reader or regex_fence_reader,
        ),
        StrategyName.EMBEDDED_LITERAL: EmbeddedLiteralStrategy(
            allow_repair=allow_repair
        ),
        StrategyName.KEY_VALUE: KeyValueStrategy(),
        StrategyName.NATURAL_LANGUAGE: NaturalLanguageStrategy(
            min_description_length=min_description_length
        ),
    }
