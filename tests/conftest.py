"""Shared fixtures for the collateral test suite."""

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep ambient configuration from leaking into tests."""
    monkeypatch.delenv("COLLATERAL_RUN_DIR", raising=False)
    monkeypatch.delenv("COLLATERAL_MAX_WORKERS", raising=False)


@pytest.fixture
def run_dir(tmp_path):
    d = tmp_path / "runs"
    d.mkdir()
    return d
