"""Integration test fixtures.

The CLI is driven end to end through typer's CliRunner with a throwaway cache
directory, no $EDITOR/$PAGER, and every IETF endpoint mocked with respx.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
import respx
import structlog
from typer.testing import CliRunner

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    # The CLI points structlog at the runner's captured stderr, which is closed afterwards.
    yield
    structlog.reset_defaults()


@pytest.fixture()
def cache_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "rfc-cache"
    monkeypatch.setenv("RFCVIEW__CACHE__DIR", str(path))
    monkeypatch.delenv("EDITOR", raising=False)
    monkeypatch.delenv("PAGER", raising=False)
    return path


@pytest.fixture()
def runner(cache_dir: Path) -> CliRunner:
    return CliRunner()


@pytest.fixture()
def ietf() -> Iterator[respx.MockRouter]:
    """Mocked RFC Editor, draft archive and Datatracker."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture()
def opened(monkeypatch: pytest.MonkeyPatch) -> list[Path]:
    """Record viewer launches instead of running a program."""
    paths: list[Path] = []

    def fake_open(path: Path, config: object) -> bool:
        paths.append(path)
        return True

    monkeypatch.setattr("rfcview.cli.open_document", fake_open)
    return paths


@pytest.fixture()
def subprocess_env(cache_dir: Path) -> dict[str, str]:
    """Environment for running ``python -m rfcview`` against the test cache."""
    return dict(os.environ)
