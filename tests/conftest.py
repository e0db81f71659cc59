"""Pytest configuration for test isolation.

The CLI reads ``DATABASE_URL`` and the ``AF_*`` settings from the environment
and from a ``.env`` in the current working directory, and ``atlas_db.client``
caches one engine per process. Left alone, a developer's shell or a previous
test's database would leak into later tests.

To keep tests hermetic, an autouse fixture clears those variables, runs each
test from its own temporary directory, and disposes the shared engine and
package logging afterwards.
"""

# ruff: noqa: E402, I001
from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Make sure the workspace source dirs are on sys.path when running from a checkout
_ROOT = Path(__file__).resolve().parents[1]
_SRC_DIRS = [_ROOT / "packages", _ROOT / "libs" / "atlas_db" / "src", _ROOT]
sys.path[:0] = [str(p) for p in _SRC_DIRS if str(p) not in sys.path]

from atlas_db.client import dispose_engine
from atlas_finance.logging_setup import reset_logging

_ENV_VARS = (
    "DATABASE_URL",
    "AF_RUNWAY_BASIS",
    "AF_IMPORT_VARIANT",
    "ATLAS_FINANCE_LOG_LEVEL",
)

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Per-test environment: no inherited settings, no shared engine."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # The CLI loads ``./.env``; point the working directory somewhere empty.
    workdir = tmp_path / "work"
    workdir.mkdir(parents=True, exist_ok=True)
    monkeypatch.chdir(workdir)
    dispose_engine()
    yield
    dispose_engine()
    reset_logging()


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def sample_csv(data_dir: Path) -> Path:
    return data_dir / "ledger_sample.csv"
