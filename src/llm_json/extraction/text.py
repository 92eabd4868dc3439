"""Small text helpers used around extraction"""  # noqa: D415

import re

_HEADING_MARK = re.compile(r"^#+\s*", re.MULTILINE)
_BOLD_MARK = re.compile(r"\*\*")
_BULLET_MARK = re.compile(r"^(\s*)[-*+]\s+", re.MULTILINE)
_NUMBERED_MARK = re.compile(r"^\s*\d+\.\s+", re.MULTILINE)
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def clean_markdown(content: str) -> str:
    """Strip common markdown decoration from `content`.

    Headings and bold markers are removed, bullets become `•`, numbered list
    prefixes are dropped, and runs of blank lines collapse to one.
    """
    content = _HEADING_MARK.sub("", content)
    content = _BOLD_MARK.sub("", content)
    content = _BULLET_MARK.sub(r"\1• ", content)
    content = _NUMBERED_MARK.sub("", content)
    content = _EXTRA_BLANK_LINES.sub("\n\n", content)
    return content.strip()


def clean_json_string(text: str) -> str:
    """Escape `text` for embedding inside a JSON string literal."""
    if not isinstance(text, str) or not text:
        return ""
    return (
        text.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace('"', '\\"')
        .strip()
    )
