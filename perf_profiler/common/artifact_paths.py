"""Artifact root helpers for CSV, report and image exports.

All exporters resolve their default destination through these helpers so the
``PERF_PROFILER_ARTIFACT_ROOT`` override is honoured consistently and the
working directory stays clean.
"""

from __future__ import annotations

import os
from pathlib import Path

_OVERRIDE_ENV = "PERF_PROFILER_ARTIFACT_ROOT"
_ARTIFACT_ROOT_NAME = "output"
_EXPORTS_CATEGORY = "perf-profiler"


def get_artifact_override_root() -> Path | None:
    """Return the override root from the environment, if set.

    Returns:
        Path | None: Absolute override path or ``None`` when the variable is unset or blank.
    """
    raw = os.environ.get(_OVERRIDE_ENV, "").strip()
    if not raw:
        return None
    return Path(raw).expanduser().resolve()


def get_artifact_root() -> Path:
    """Return the artifact root honouring the environment override.

    Returns:
        Path: ``$PERF_PROFILER_ARTIFACT_ROOT`` or ``./output`` resolved to an absolute path.
    """
    override = get_artifact_override_root()
    if override is not None:
        return override
    return (Path.cwd() / _ARTIFACT_ROOT_NAME).resolve()


def ensure_exports_dir(base_root: Path | None = None) -> Path:
    """Return (and create) the export directory below ``base_root``."""

    root = Path(base_root) if base_root is not None else get_artifact_root()
    target = root / _EXPORTS_CATEGORY
    target.mkdir(parents=True, exist_ok=True)
    return target
