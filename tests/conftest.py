"""
Global test configuration for the enhancement pipeline.
"""

import logging
import os

import pytest


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_enhancer_env(request, monkeypatch):
    """Ensure a clean CONTENT_ENHANCER_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("CONTENT_ENHANCER_"):
            monkeypatch.delenv(key, raising=False)
    # Avoid DEBUG toggles switching telemetry on
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def isolated_project_root(request, monkeypatch, tmp_path):
    """Run each test from an empty directory so no pyproject.toml is found.

    Escape hatch: @pytest.mark.allow_project_config.
    """
    if request.node.get_closest_marker("allow_project_config"):
        return
    monkeypatch.chdir(tmp_path)


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with the mock provider",
        "contract: Behavioral contracts of the public surface",
        "allow_env_pollution: Keep CONTENT_ENHANCER_* variables for this test",
        "allow_project_config: Do not chdir into an empty temp directory",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def mock_api_key():
    """Provide a consistent, fake API key for tests."""
    return "sk-test-key-12345-abcdef"
