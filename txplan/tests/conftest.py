"""Shared fixtures for txplan tests."""

import pytest

from txplan.core import config


@pytest.fixture(autouse=True)
def default_config(monkeypatch, tmp_path):
    """Run every test with built-in configuration.

    Ignores $TXPLAN_CONFIG and any .txplan.local of the developer.
    """
    monkeypatch.delenv(config.CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    config.reset_config()
    yield
    config.reset_config()
