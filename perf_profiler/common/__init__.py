"""
Common utilities for the perf_profiler package.

This module provides the logging facade, error handling policy helpers
and artifact path resolution shared by the telemetry engine and the CLI.
"""

from perf_profiler.common.artifact_paths import (
    ensure_exports_dir,
    get_artifact_override_root,
    get_artifact_root,
)
from perf_profiler.common.errors import warn_soft_degrade
from perf_profiler.common.logging import configure_logging

__all__ = [
    "configure_logging",
    "ensure_exports_dir",
    "get_artifact_override_root",
    "get_artifact_root",
    "warn_soft_degrade",
]
