#!/usr/bin/env python3
"""Example demonstrating the configuration system.

Shows resolve-once, freeze-then-flow configuration: resolving settings,
programmatic overrides, scoped overrides and auditing where each value came
from.
"""

import os

from llm_json import create_extractor
from llm_json.config import config_override, print_config_audit, resolve_config


def main() -> None:
    """Demonstrate configuration usage patterns."""
    print("=== Configuration System Example ===\n")

    # 1. Basic configuration resolution
    print("1. Basic Configuration Resolution:")
    os.environ["LLM_JSON_MAX_TEXT_SIZE"] = "200000"
    try:
        resolved = resolve_config()
        frozen = resolved.to_frozen()

        print(f"   Repair: {frozen.enable_repair}")
        print(f"   Max text size: {frozen.max_text_size}")
        print(f"   Sources: {dict(resolved.origin)}")
    except ValueError as e:
        print(f"   Error: {e}")

    print()

    # 2. Programmatic overrides
    print("2. Programmatic Configuration Override:")
    resolved = resolve_config({"enable_repair": False})
    print(f"   Repair: {resolved.enable_repair}")
    print(f"   Repair Source: {resolved.origin['enable_repair']}")

    print()

    # 3. Scoped overrides
    print("3. Scoped Override:")
    with config_override(exhaustive_fallback=True):
        extractor = create_extractor()
    print(f"   Exhaustive fallback inside scope: {extractor.config.exhaustive_fallback}")
    print(f"   Outside scope: {create_extractor().config.exhaustive_fallback}")

    print()

    # 4. Audit
    print("4. Configuration Audit:")
    print_config_audit(resolve_config())

    print()
    print("=== Configuration Example Complete ===")

    del os.environ["LLM_JSON_MAX_TEXT_SIZE"]


if __name__ == "__main__":
    main()
