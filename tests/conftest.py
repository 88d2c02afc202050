"""Shared pytest fixtures for scanpay tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from scanpay.runtime import clear_rule_caches, reset_paths


@pytest.fixture(autouse=True)
def isolated_project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point configuration lookups at an empty per-test project root."""
    monkeypatch.setenv("SCANPAY_HOME", str(tmp_path))
    reset_paths()
    clear_rule_caches()
    yield tmp_path
    reset_paths()
    clear_rule_caches()
