"""Cheap structural tests run before any parsing.

Both checks are linear in the text length. `looks_non_structured` is
deliberately conservative: any brace, bracket, or quoted key followed by a
colon makes it return False, whatever the surrounding prose looks like.
"""

import re

_STRUCTURE_EVIDENCE = re.compile(r'[{}\[\]]|"[^"\n]*"\s*:')

PROSE_OPENER = re.compile(
    r"^(?:(?:sure|certainly|okay|of course|here(?:'s| is| are)"
    r"|i(?:'ll| will| can| have| think)|let me|based on|as requested"
    r"|the following)\b"
    r"|我将|我会|让我|好的|以下是|根据|正在|这是)",
    re.IGNORECASE,
)

_NON_STRUCTURED_PATTERNS = (
    re.compile(r"^python\s*\n", re.IGNORECASE),
    re.compile(r"^\s*(?:async\s+)?def\s+\w+\s*\("),
    re.compile(r"^\s*class\s+\w+"),
    re.compile(r"^\s*(?:import\s+\w+|from\s+[\w.]+\s+import\b)"),
    re.compile(r"^\s*function\s+\w+\s*\("),
    re.compile(r"^\s*(?:const|let|var)\s+\w+\s*="),
    re.compile(r"^#{1,6}\s"),
    re.compile(r"^\*\*.*\*\*$"),
    re.compile(r"^(?:note|warning|error|info)\s*:", re.IGNORECASE),
    PROSE_OPENER,
)


def has_delimiters(text: str) -> bool:
    """Return True if trimmed `text` opens with `{`/`[` and closes with `}`/`]`."""
    trimmed = text.strip()
    return len(trimmed) >= 2 and trimmed[0] in "{[" and trimmed[-1] in "}]"


def looks_structured(text: str) -> bool:
    """Return True if `text` is shaped like a single object or array literal.

    Object-shaped text must also contain a quote and a colon, which rules out
    bare braces with no key/value pairs. Array-shaped text only needs its
    delimiters, so `[1, 2, 3]` and `[]` qualify.
    """
    if not isinstance(text, str):
        return False
    trimmed = text.strip()
    if len(trimmed) < 2:
        return False
    if trimmed[0] == "{":
        has_quote = '"' in trimmed or "'" in trimmed
        return trimmed[-1] == "}" and has_quote and ":" in trimmed
    if trimmed[0] == "[":
        return trimmed[-1] == "]"
    return False


def has_structure_evidence(text: str) -> bool:
    """Return True if `text` contains any brace, bracket, or `"key":` run."""
    return _STRUCTURE_EVIDENCE.search(text) is not None


def looks_non_structured(text: str) -> bool:
    """Return True if `text` reads as prose or source code rather than data.

    Blank or non-string input counts as non-structured.
    """
    if not isinstance(text, str) or not text.strip():
        return True
    if has_structure_evidence(text):
        return False
    stripped = text.lstrip()
    return any(pattern.search(stripped) for pattern in _NON_STRUCTURED_PATTERNS)
