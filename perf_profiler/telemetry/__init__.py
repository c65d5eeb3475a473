"""Telemetry capture and scenario-evaluation engine.

The package centralizes the sample model, the fixed-cadence sampler and its
buffers, record/replay, scenario runs, asset rollups, KPI evaluation and the
CSV exchange format. :class:`ProfilerSession` wires them together behind a
command API that reports failures as data.
"""

from .assets import AssetAggregator
from .comparison import ComparisonSet
from .config import ProfilerConfig
from .csv_codec import export_samples, import_samples, write_kpi_report
from .errors import (
    EmptyBufferOperation,
    MalformedRecord,
    ScenarioAlreadyRunning,
    SourceUnavailable,
    TelemetryError,
    ValidationError,
)
from .history import HistoryStore
from .kpi import KPIThresholds, evaluate
from .models import (
    AssetStat,
    AssetUsage,
    KPIWarning,
    MetricsReading,
    Sample,
    ScenarioRun,
    ScenarioStatus,
    ScenarioSummary,
)
from .recommendations import OptimizationAdvisor, scan
from .recording import Recorder
from .sampler import Sampler
from .scenario import ScenarioRunner, SceneLoader
from .session import CommandResult, ProfilerSession, TickReport
from .sources import FrameCounterSource, MetricsSource, QueuedMetricsSource
from .visualization import heatmap_colors, render_fps_heatmap, render_metric_panel

__all__ = [
    "AssetAggregator",
    "AssetStat",
    "AssetUsage",
    "CommandResult",
    "ComparisonSet",
    "EmptyBufferOperation",
    "FrameCounterSource",
    "HistoryStore",
    "KPIThresholds",
    "KPIWarning",
    "MalformedRecord",
    "MetricsReading",
    "MetricsSource",
    "OptimizationAdvisor",
    "ProfilerConfig",
    "ProfilerSession",
    "QueuedMetricsSource",
    "Recorder",
    "Sample",
    "Sampler",
    "ScenarioAlreadyRunning",
    "ScenarioRun",
    "ScenarioRunner",
    "ScenarioStatus",
    "ScenarioSummary",
    "SceneLoader",
    "SourceUnavailable",
    "TelemetryError",
    "TickReport",
    "ValidationError",
    "evaluate",
    "export_samples",
    "heatmap_colors",
    "import_samples",
    "render_fps_heatmap",
    "render_metric_panel",
    "scan",
    "write_kpi_report",
]
