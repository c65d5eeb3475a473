"""Runtime performance telemetry for interactive applications.

The package samples frame rate, memory and render-batch counters on a fixed
cadence, keeps the history in memory, drives timed scenario runs and exchanges
captured data through flat CSV files. See :mod:`perf_profiler.telemetry` for
the engine and :mod:`perf_profiler.cli` for the command-line tooling.
"""

__version__ = "0.3.0"
