"""Command-line entry point.

Usage:
    python -m llm_json response.txt
    cat response.txt | python -m llm_json --array
    python -m llm_json response.txt --strict --indent 0
    python -m llm_json --show-config
"""

import argparse
import dataclasses
import json
import sys

from llm_json.api import create_extractor, extract_json_array, safe_parse
from llm_json.config import print_config_audit, resolve_config
from llm_json.exceptions import ConfigurationError

# ruff: noqa: T201


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for `python -m llm_json`."""
    parser = argparse.ArgumentParser(
        description="Extract JSON from a language-model response",
        prog="python -m llm_json",
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=argparse.FileType("r", encoding="utf-8"),
        default=sys.stdin,
        help="File to read (default: stdin)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--array", action="store_true", help="Collect every object into one array"
    )
    mode.add_argument(
        "--strict",
        action="store_true",
        help="Parse without repair and print the parse outcome",
    )
    parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Print extraction diagnostics to stderr",
    )
    parser.add_argument(
        "--indent", type=int, default=2, help="JSON indentation (default: 2)"
    )
    parser.add_argument("--profile", help="Configuration profile to use")
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Print where each setting came from and exit",
    )
    return parser


def _dump(value: object, indent: int) -> str:
    return json.dumps(value, indent=indent or None, ensure_ascii=False)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        if args.show_config:
            print_config_audit(resolve_config(profile=args.profile))
            return 0
        extractor = create_extractor(profile=args.profile)
    except (ConfigurationError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    text = args.file.read()
    if args.file is not sys.stdin:
        args.file.close()

    if args.strict:
        outcome = safe_parse(text, strict=True)
        print(_dump(dataclasses.asdict(outcome), args.indent))
        return 0 if outcome.success else 1

    if args.array:
        items = extract_json_array(text)
        print(_dump(items, args.indent))
        return 0 if items else 1

    value, diagnostics = extractor.extract_with_diagnostics(text)
    if args.diagnostics:
        print(_dump(diagnostics.to_dict(), args.indent), file=sys.stderr)
    if value is None:
        print("No JSON could be extracted", file=sys.stderr)
        return 1
    print(_dump(value, args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
