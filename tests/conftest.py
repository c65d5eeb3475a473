"""Minimal pytest configuration: headless matplotlib + isolated artifact root."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


@pytest.fixture(scope="session", autouse=True)
def headless_matplotlib_environment() -> Generator[None, None, None]:
    original = os.environ.get("MPLBACKEND")
    os.environ["MPLBACKEND"] = "Agg"
    yield
    if original is None:
        os.environ.pop("MPLBACKEND", None)
    else:
        os.environ["MPLBACKEND"] = original


@pytest.fixture(name="artifact_root", autouse=True)
def _artifact_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate export output beneath the pytest temp directory."""

    root = tmp_path / "artifacts"
    root.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("PERF_PROFILER_ARTIFACT_ROOT", str(root))
    return root
