"""Shared fixtures: isolated home directory and the emulator marker."""

from __future__ import annotations

import os

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "emulator: requires a running Cloud Spanner emulator")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("SPANSCRIPT_TEST_EMULATOR"):
        return

    skip_emulator = pytest.mark.skip(
        reason="Spanner emulator not available (set SPANSCRIPT_TEST_EMULATOR=1)"
    )
    for item in items:
        if "emulator" in item.keywords:
            item.add_marker(skip_emulator)


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch):
    """Keep logs, connections and credentials out of the real home directory."""
    home = tmp_path / "home"
    monkeypatch.setattr("spanscript.querylog._LOG_ROOT", home / "logs")
    monkeypatch.setattr("spanscript.connections._CONNECTIONS_FILE", home / "connections.toml")
    monkeypatch.setattr("spanscript.auth._CREDENTIALS_DIR", home / "credentials")
    return home
