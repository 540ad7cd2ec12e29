# tests/conftest.py
from __future__ import annotations

import pytest

from magicsquare import runtime


@pytest.fixture(autouse=True)
def workspace(tmp_path, monkeypatch):
    """Point the workspace at a fresh temp folder and reset runtime settings."""
    home = tmp_path / "ws"
    monkeypatch.setenv("MAGICSQUARE_HOME", str(home))
    runtime.reset()
    yield home
    runtime.reset()
