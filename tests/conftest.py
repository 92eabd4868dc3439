"""
Global test configuration: markers, environment isolation and shared samples.
"""

from collections.abc import Callable, Generator
from contextlib import contextmanager
import logging
import os
from unittest.mock import patch

import pytest

from llm_json import telemetry


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_llm_json_env(request, monkeypatch):
    """Ensure a clean LLM_JSON_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("LLM_JSON_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def neutral_config_files(request, monkeypatch, tmp_path):
    """Point the home and project config files at isolated temp paths.

    Prevents a developer's ~/.config/llm_json.toml, or any pyproject.toml
    above the checkout, from leaking into tests.
    """
    if request.node.get_closest_marker("allow_real_config_files"):
        return

    isolated = tmp_path / "config_isolated"
    isolated.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("LLM_JSON_CONFIG_HOME", str(isolated / "llm_json.toml"))
    monkeypatch.setenv("LLM_JSON_PYPROJECT_PATH", str(isolated / "pyproject.toml"))


@pytest.fixture
def isolated_config_sources(tmp_path) -> Callable[..., Generator[None]]:
    """Set up explicit project/home/env configuration sources.

    Usage:
        with isolated_config_sources(
            pyproject_content="[tool.llm_json]\\nmax_text_size = 10",
            env_vars={"ENABLE_REPAIR": "false"},
        ):
            resolved = resolve_config()
    """

    @contextmanager
    def _setup(
        *,
        pyproject_content: str = "",
        home_content: str = "",
        env_vars: dict[str, str] | None = None,
    ) -> Generator[None]:
        clean_env = {
            k: v for k, v in os.environ.items() if not k.startswith("LLM_JSON_")
        }
        for key, value in (env_vars or {}).items():
            if not key.startswith("LLM_JSON_"):
                key = f"LLM_JSON_{key.upper()}"
            clean_env[key] = value

        project_dir = tmp_path / "project"
        project_dir.mkdir(exist_ok=True)
        pyproject_path = project_dir / "pyproject.toml"
        home_dir = tmp_path / "home"
        home_dir.mkdir(exist_ok=True)
        home_config_path = home_dir / "llm_json.toml"

        if pyproject_content:
            pyproject_path.write_text(pyproject_content, encoding="utf-8")
        if home_content:
            home_config_path.write_text(home_content, encoding="utf-8")

        clean_env["LLM_JSON_PYPROJECT_PATH"] = str(pyproject_path)
        clean_env["LLM_JSON_CONFIG_HOME"] = str(home_config_path)

        with patch.dict(os.environ, clean_env, clear=True):
            yield

    return _setup


@pytest.fixture
def telemetry_enabled(monkeypatch):
    """Force telemetry on regardless of the import-time environment."""
    monkeypatch.setattr(telemetry, "_TELEMETRY_ENABLED", True)


# --- Logging Fixtures ---
@pytest.fixture
def debug_logs(caplog):
    """Capture DEBUG records from the llm_json loggers."""
    caplog.set_level(logging.DEBUG, logger="llm_json")
    return caplog


# --- Sample Responses ---
@pytest.fixture
def two_fence_response() -> str:
    """A response with two ```json blocks and prose between them."""
    return (
        "First batch:\n"
        "```json\n"
        '[{"id": 1}, {"id": 2}]\n'
        "```\n"
        "And one more:\n"
        "```json\n"
        '{"id": 3}\n'
        "```\n"
    )


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "contract: Invariants every component must keep",
        "characterization: Golden master tests to detect behavior changes.",
        "allow_env_pollution: Keep LLM_JSON_* variables from the real environment",
        "allow_real_config_files: Read the real home and project config files",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)
