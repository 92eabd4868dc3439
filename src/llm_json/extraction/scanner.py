"""Candidate scanning for bracket-delimited substrings.

Three sources feed the scanner, each with a fixed confidence band:

- fenced code blocks (0.9), an explicit authorship signal;
- brace literals (0.7);
- bracket literals (0.6).

Every source is collected in full, then the candidates are sorted by
descending confidence. Python's sort is stable, so ties keep discovery order.
"""

from llm_json.core.types import Candidate

from .literals import is_meaningful_literal, iter_fenced_blocks, iter_literals
from .precheck import looks_non_structured

FENCED_CONFIDENCE = 0.9
BRACE_CONFIDENCE = 0.7
BRACKET_CONFIDENCE = 0.6


def scan(text: str) -> list[Candidate]:
    """Return ranked candidates found in `text`."""
    if not isinstance(text, str) or not text:
        return []

    candidates: list[Candidate] = []

    for block in iter_fenced_blocks(text):
        # Plain code or prose inside a fence cannot hold data worth parsing
        if not block.body or looks_non_structured(block.body):
            continue
        candidates.append(
            Candidate(content=block.body, confidence=FENCED_CONFIDENCE, source="fenced")
        )

    for _, literal in iter_literals(text, "{"):
        if is_meaningful_literal(literal):
            candidates.append(
                Candidate(content=literal, confidence=BRACE_CONFIDENCE, source="braces")
            )

    for _, literal in iter_literals(text, "["):
        if is_meaningful_literal(literal):
            candidates.append(
                Candidate(
                    content=literal, confidence=BRACKET_CONFIDENCE, source="brackets"
                )
            )

    return sorted(candidates, key=lambda c: -c.confidence)
