"""Developer tools for robust-datafile.

This module provides round-trip performance profiling.
"""

from .profiling import (
    PerformanceProfiler,
    PerformanceReport,
    ProfilingSession,
    StageMeasurement,
    benchmark_configurations,
)

__all__ = [
    "PerformanceProfiler",
    "PerformanceReport",
    "ProfilingSession",
    "StageMeasurement",
    "benchmark_configurations",
]
