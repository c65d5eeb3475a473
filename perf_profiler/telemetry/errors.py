"""Custom exception types for the telemetry engine.

Every error carries a structured :meth:`TelemetryError.to_dict` payload so the
session facade can hand failures to the dashboard as data instead of raw
exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


class TelemetryError(Exception):
    """Base class for recoverable telemetry failures."""

    kind = "telemetry_error"

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        advice: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})
        self.advice = advice

    def to_dict(self) -> dict[str, object]:
        """Structured representation suitable for logging or dashboard display."""

        payload: dict[str, object] = {
            "kind": self.kind,
            "message": self.message,
        }
        if self.context:
            payload["context"] = dict(self.context)
        if self.advice is not None:
            payload["advice"] = self.advice
        return payload


class ValidationError(TelemetryError, ValueError):
    """Raised for bad command parameters (missing target, non-positive duration)."""

    kind = "validation_error"


class ScenarioAlreadyRunning(ValidationError):
    """Raised when a scenario start is requested while another run is active."""

    kind = "scenario_already_running"


class SourceUnavailable(TelemetryError, RuntimeError):
    """Raised when the metrics source or the scene loader fails."""

    kind = "source_unavailable"


class MalformedRecord(TelemetryError, ValueError):
    """Raised for CSV rows that cannot be parsed; importers skip them."""

    kind = "malformed_record"


class EmptyBufferOperation(TelemetryError, LookupError):
    """Raised when an operation needs samples but the buffer is empty."""

    kind = "empty_buffer"


__all__ = [
    "EmptyBufferOperation",
    "MalformedRecord",
    "ScenarioAlreadyRunning",
    "SourceUnavailable",
    "TelemetryError",
    "ValidationError",
]
