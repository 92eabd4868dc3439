#!/usr/bin/env python3
"""Minimal custom telemetry reporter example for llm-json.
Shows how to print timing and metric events as they happen.
"""

import os

os.environ["LLM_JSON_TELEMETRY"] = "1"

from typing import Any

from llm_json import TelemetryReporter, create_extractor


class PrintReporter(TelemetryReporter):
    """A minimal telemetry reporter that prints events to the console."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        """Prints timing events indented by scope depth."""
        indent = "  " * metadata.get("depth", 0)
        print(f"[TIMING] {indent}{scope}: duration={duration:.6f}s")

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        """Prints a generic metric event."""
        print(f"[METRIC] {scope}: {value} (metadata: {metadata})")


def main():
    extractor = create_extractor(reporters=[PrintReporter()])

    response = "Sorry, the earlier answer was cut off:\n```json\n{'items': [1, 2,\n```"

    print("Extracting...")
    print("Result:", extractor.extract(response))


if __name__ == "__main__":
    main()
