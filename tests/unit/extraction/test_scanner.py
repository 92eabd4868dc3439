"""Unit tests for literal finding and candidate ranking."""

import time

import pytest

from llm_json.core.types import Candidate, InputType
from llm_json.extraction.classifier import classify
from llm_json.extraction.literals import (
    first_literal_open_at,
    has_fenced_block,
    has_literal,
    is_meaningful_literal,
    iter_fenced_blocks,
    iter_literals,
    iter_top_level_literals,
)
from llm_json.extraction.scanner import (
    BRACE_CONFIDENCE,
    BRACKET_CONFIDENCE,
    FENCED_CONFIDENCE,
    scan,
)


class TestFencedBlocks:
    @pytest.mark.unit
    def test_blocks_are_found_in_document_order_with_language(self):
        text = 'a\n```json\n{"x": 1}\n```\nb\n```python\nprint(1)\n```'

        blocks = list(iter_fenced_blocks(text))

        assert [b.language for b in blocks] == ["json", "python"]
        assert blocks[0].body == '{"x": 1}'
        assert blocks[0].start < blocks[1].start

    @pytest.mark.unit
    def test_untagged_and_inline_fences(self):
        blocks = list(iter_fenced_blocks('```\n[1]\n``` and ```{"a": 2}```'))

        assert [(b.language, b.body) for b in blocks] == [
            ("", "[1]"),
            ("", '{"a": 2}'),
        ]

    @pytest.mark.unit
    def test_language_tag_is_lowercased(self):
        (block,) = iter_fenced_blocks('```JSON\n{"a": 1}\n```')
        assert block.language == "json"

    @pytest.mark.unit
    def test_unclosed_fence_is_not_a_block(self):
        assert not has_fenced_block('```json\n{"a": 1}')
        assert list(iter_fenced_blocks('```json\n{"a": 1}')) == []


class TestLiterals:
    @pytest.mark.unit
    def test_nested_literal_is_returned_whole(self):
        text = 'x {"a": {"b": {"c": 1}}} y'
        assert [lit for _, lit in iter_literals(text, "{")] == ['{"a": {"b": {"c": 1}}}']

    @pytest.mark.unit
    def test_braces_inside_strings_do_not_count(self):
        text = '{"msg": "use } carefully", "n": 1}'
        assert [lit for _, lit in iter_literals(text, "{")] == [text]

    @pytest.mark.unit
    def test_escaped_quote_inside_string(self):
        text = r'{"q": "say \"}\" now"}'
        assert [lit for _, lit in iter_literals(text, "{")] == [text]

    @pytest.mark.unit
    def test_literals_do_not_overlap_and_keep_offsets(self):
        text = '{"a": 1} and {"b": 2}'
        assert list(iter_literals(text, "{")) == [(0, '{"a": 1}'), (13, '{"b": 2}')]

    @pytest.mark.unit
    def test_unclosed_opener_is_skipped(self):
        text = '{ broken and {"ok": true}'
        assert [lit for _, lit in iter_literals(text, "{")] == ['{"ok": true}']

    @pytest.mark.unit
    def test_bracket_scan_ignores_braces(self):
        text = '{"tags": ["x", "y"]}'
        assert [lit for _, lit in iter_literals(text, "[")] == ['["x", "y"]']

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("literal", "expected"),
        [
            ("{}", False),
            ("[ ]", False),
            ("{ no colon }", False),
            ('{"a": 1}', True),
            ("[1]", True),
        ],
    )
    def test_meaningful_literal(self, literal, expected):
        assert is_meaningful_literal(literal) is expected

    @pytest.mark.unit
    def test_has_literal_ignores_empty_ones(self):
        assert not has_literal("nothing here {} []")
        assert has_literal("values [1, 2]")

    @pytest.mark.unit
    def test_many_unclosed_openers_scan_in_linear_time(self):
        text = "{" * 200_000 + '{"a": 1}'

        start = time.perf_counter()
        literals = [lit for _, lit in iter_literals(text, "{")]
        input_type = classify(text)
        candidates = scan(text)
        elapsed = time.perf_counter() - start

        assert literals == ['{"a": 1}']
        assert input_type is InputType.EMBEDDED_LITERAL
        assert [c.content for c in candidates] == ['{"a": 1}']
        assert elapsed < 2.0

    @pytest.mark.unit
    def test_top_level_literals_mix_braces_and_brackets_in_order(self):
        text = 'a {"x": [1]} b [{"y": 2}] c'
        assert [lit for _, lit in iter_top_level_literals(text)] == [
            '{"x": [1]}',
            '[{"y": 2}]',
        ]

    @pytest.mark.unit
    def test_literal_open_at_offset(self):
        text = 'ok {"a": 1} then [1, 2, 3] and { never closed'
        assert first_literal_open_at(text, 5) == 3
        assert first_literal_open_at(text, 12) is None
        assert first_literal_open_at(text, 20) == 17
        assert first_literal_open_at(text, len(text)) == 31


class TestScan:
    @pytest.mark.unit
    def test_fenced_candidate_outranks_literals(self):
        text = 'inline {"a": 1} then\n```json\n{"b": 2}\n```'

        candidates = scan(text)

        assert candidates[0] == Candidate('{"b": 2}', FENCED_CONFIDENCE, "fenced")
        assert [c.source for c in candidates] == ["fenced", "braces", "braces"]

    @pytest.mark.unit
    def test_confidence_is_non_increasing(self):
        text = '[1, 2] {"a": [3]}\n```\n{"c": 1}\n```'
        confidences = [c.confidence for c in scan(text)]
        assert confidences == sorted(confidences, reverse=True)

    @pytest.mark.unit
    def test_ties_keep_discovery_order(self):
        candidates = scan('{"a": 1} {"b": 2} {"c": 3}')
        assert [c.content for c in candidates] == ['{"a": 1}', '{"b": 2}', '{"c": 3}']
        assert {c.confidence for c in candidates} == {BRACE_CONFIDENCE}

    @pytest.mark.unit
    def test_bracket_candidates(self):
        (candidate,) = scan("numbers: [1, 2, 3]")
        assert candidate.source == "brackets"
        assert candidate.confidence == BRACKET_CONFIDENCE

    @pytest.mark.unit
    def test_code_fences_are_skipped(self):
        text = "```python\ndef f():\n    return 1\n```"
        assert scan(text) == []

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["", "no structure at all", "{} []", None])
    def test_nothing_to_scan(self, text):
        assert scan(text) == []
