"""Tests for KPI thresholds and warning evaluation."""

from __future__ import annotations

import pytest

from perf_profiler.telemetry.errors import ValidationError
from perf_profiler.telemetry.kpi import DEFAULT_CUSTOM_KPI_NAME, KPIThresholds, evaluate
from perf_profiler.telemetry.models import BYTES_PER_MB, Sample


def test_fps_and_draw_call_breaches_yield_exactly_two_warnings() -> None:
    sample = Sample(time=1.0, fps=25.0, memory_mb=10.0, draw_calls=150, static_batches=10)
    warnings = evaluate(sample, KPIThresholds(fps=30, draw_calls=100))
    assert [(w.metric, w.observed, w.threshold) for w in warnings] == [
        ("fps", 25.0, 30),
        ("drawCalls", 150, 100),
    ]


def test_all_rules_fire_independently_in_fixed_order() -> None:
    sample = Sample(
        time=0.0,
        fps=5.0,
        memory_mb=600.0,
        draw_calls=500,
        static_batches=80,
        dynamic_batches=150,
    )
    warnings = evaluate(sample, KPIThresholds())
    assert [w.metric for w in warnings] == [
        "fps",
        "drawCalls",
        "memory",
        "staticBatches",
        "dynamicBatches",
    ]
    memory = warnings[2]
    assert memory.observed == 600.0 * BYTES_PER_MB
    assert memory.threshold == 500 * BYTES_PER_MB


def test_values_at_threshold_do_not_warn() -> None:
    sample = Sample(time=0.0, fps=30.0, memory_mb=500.0, draw_calls=100, static_batches=50)
    assert evaluate(sample, KPIThresholds()) == []


def test_undefined_fps_and_missing_sample_do_not_warn() -> None:
    assert evaluate(Sample(time=0.0, fps=None), KPIThresholds()) == []
    assert evaluate(None, KPIThresholds()) == []


def test_disabled_rule_is_skipped() -> None:
    sample = Sample(time=0.0, fps=1.0, draw_calls=1000)
    warnings = evaluate(sample, KPIThresholds(fps=None))
    assert [w.metric for w in warnings] == ["drawCalls"]


def test_custom_kpis_are_stored_but_never_evaluated() -> None:
    # Custom KPIs are advisory values tracked by the operator, not sample rules.
    thresholds = KPIThresholds()
    thresholds.add_custom("fps", 1000.0)
    thresholds.add_custom("loadTimeSec", 0.0)
    sample = Sample(time=0.0, fps=60.0, draw_calls=1)
    assert evaluate(sample, thresholds) == []
    assert thresholds.as_dict()["custom:fps"] == 1000.0


def test_custom_kpi_editing() -> None:
    thresholds = KPIThresholds()
    thresholds.add_custom()
    assert thresholds.custom == {DEFAULT_CUSTOM_KPI_NAME: 0.0}
    with pytest.raises(ValidationError):
        thresholds.add_custom()
    thresholds.set_custom(DEFAULT_CUSTOM_KPI_NAME, 2.5)
    assert thresholds.remove_custom(DEFAULT_CUSTOM_KPI_NAME) == 2.5
    with pytest.raises(ValidationError):
        thresholds.set_custom("missing", 1.0)
