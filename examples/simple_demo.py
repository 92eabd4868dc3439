#!/usr/bin/env python3  # noqa: EXE001
"""
Minimal demonstration of llm-json

Feeds a handful of typical model responses through `extract_json` and shows
which strategy recovered each one.
"""  # noqa: D212, D415

from llm_json import Extractor

RESPONSES = {
    "plain JSON": '{"answer": 42}',
    "fenced block": 'Here you go:\n```json\n{"answer": 42}\n```',
    "prose + trailing comma": 'The result is {"answer": 42,} as requested.',
    "key/value lines": "answer: 42\nconfidence: 0.9",
    "free prose": "# Tide Pools\n\nA short guide to the creatures living between the tides.",
}


def main():  # noqa: ANN201, D103
    print("llm-json - extraction demo\n")

    extractor = Extractor()
    for label, response in RESPONSES.items():
        value, diagnostics = extractor.extract_with_diagnostics(response)
        print(f"{label:<24} -> {diagnostics.successful_strategy}")
        print(f"{'':<24}    {value}")

    print("\nSee configuration_example.py for settings and profiles.")


if __name__ == "__main__":
    main()
