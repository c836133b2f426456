"""Performance profiling tools for datafile reading and writing.

Measures wall time and resident memory of the read and write stages of a
round trip, and aggregates measurements into reports.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from robust_datafile.api import DatafileProcessor
from robust_datafile.shared import DatafileConfig, get_logger

# A stage slower than this share of the whole session is reported
BOTTLENECK_SHARE = 0.6
SLOW_SESSION_MS = 1000.0


@dataclass
class StageMeasurement:
    """Performance metrics for one processing stage."""

    stage_name: str
    start_time: float
    end_time: float
    memory_start: int  # bytes
    memory_end: int  # bytes
    operations_count: int = 0

    @property
    def duration_ms(self) -> float:
        """Processing duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Resident memory change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def ops_per_second(self) -> float:
        duration_s = self.end_time - self.start_time
        return self.operations_count / duration_s if duration_s > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage_name": self.stage_name,
            "duration_ms": self.duration_ms,
            "memory_delta": self.memory_delta,
            "operations_count": self.operations_count,
            "ops_per_second": self.ops_per_second,
        }


@dataclass
class ProfilingSession:
    """Container for a complete profiling session."""

    session_id: str
    start_time: float
    end_time: float
    input_size: int  # bytes
    stages: List[StageMeasurement] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def throughput_mb_per_s(self) -> float:
        """Processing throughput in MB/s."""
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return (self.input_size / (1024 * 1024)) / duration_s

    def stage(self, name: str) -> Optional[StageMeasurement]:
        """Return the first stage called ``name``."""
        for measurement in self.stages:
            if measurement.stage_name == name:
                return measurement
        return None


@dataclass
class PerformanceReport:
    """Aggregate of profiling sessions."""

    sessions: List[ProfilingSession]
    generation_time: float

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def average_duration_ms(self) -> float:
        """Average processing duration across sessions."""
        if not self.sessions:
            return 0.0
        return sum(s.total_duration_ms for s in self.sessions) / len(self.sessions)

    @property
    def average_throughput_mb_per_s(self) -> float:
        if not self.sessions:
            return 0.0
        return sum(s.throughput_mb_per_s for s in self.sessions) / len(self.sessions)

    def stage_averages_ms(self) -> Dict[str, float]:
        """Average duration of each stage name across sessions."""
        durations: Dict[str, List[float]] = {}
        for session in self.sessions:
            for stage in session.stages:
                durations.setdefault(stage.stage_name, []).append(stage.duration_ms)
        return {name: sum(values) / len(values) for name, values in durations.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation_time": self.generation_time,
            "summary": {
                "session_count": self.session_count,
                "average_duration_ms": self.average_duration_ms,
                "average_throughput_mb_s": self.average_throughput_mb_per_s,
                "stage_averages_ms": self.stage_averages_ms(),
            },
            "sessions": [
                {
                    "session_id": session.session_id,
                    "input_size": session.input_size,
                    "total_duration_ms": session.total_duration_ms,
                    "throughput_mb_s": session.throughput_mb_per_s,
                    "metadata": session.metadata,
                    "stages": [stage.to_dict() for stage in session.stages],
                }
                for session in self.sessions
            ],
        }


class PerformanceProfiler:
    """Profiler for datafile read and write operations.

    Examples:
        Round trip profiling:
        >>> profiler = PerformanceProfiler()
        >>> session = profiler.profile_roundtrip("a = 1, 2", "small")
        >>> [stage.stage_name for stage in session.stages]
        ['read', 'write']

        Manual stages:
        >>> session = profiler.start_session("manual")
        >>> with profiler.profile_stage(session, "read"):
        ...     root = loads(text)
        >>> profiler.end_session(session)
    """

    def __init__(
        self,
        enable_memory_tracking: bool = True,
        config: Optional[DatafileConfig] = None,
    ):
        """Initialize performance profiler.

        Args:
            enable_memory_tracking: Whether to sample resident memory with psutil
            config: Configuration used by :meth:`profile_roundtrip`
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.config = config or DatafileConfig()
        self.sessions: List[ProfilingSession] = []
        self.current_session: Optional[ProfilingSession] = None
        self.logger = get_logger(__name__, None, "performance_profiler")
        self._process = psutil.Process() if enable_memory_tracking else None

    def memory_rss(self) -> int:
        """Resident set size of this process, or 0 when tracking is off."""
        if self._process is None:
            return 0
        return self._process.memory_info().rss

    def start_session(self, session_id: str, input_size: int = 0) -> ProfilingSession:
        session = ProfilingSession(
            session_id=session_id,
            start_time=time.perf_counter(),
            end_time=0.0,
            input_size=input_size,
        )
        self.current_session = session
        self.logger.info(
            "Started profiling session",
            extra={"session_id": session_id, "input_size": input_size},
        )
        return session

    def end_session(self, session: ProfilingSession) -> None:
        """End a profiling session and store results."""
        session.end_time = time.perf_counter()
        self.sessions.append(session)
        if self.current_session is session:
            self.current_session = None

        self.logger.info(
            "Ended profiling session",
            extra={
                "session_id": session.session_id,
                "duration_ms": session.total_duration_ms,
                "stage_count": len(session.stages),
            },
        )

    def profile_stage(self, session: ProfilingSession, stage_name: str) -> "StageProfiler":
        """Context manager measuring one stage of ``session``."""
        return StageProfiler(self, session, stage_name)

    def profile_session(self, session_id: str, input_size: int = 0) -> "SessionProfiler":
        """Context manager wrapping :meth:`start_session` and :meth:`end_session`."""
        return SessionProfiler(self, session_id, input_size)

    def add_stage_measurement(
        self, session: ProfilingSession, measurement: StageMeasurement
    ) -> None:
        session.stages.append(measurement)
        self.logger.debug(
            "Added stage measurement",
            extra={
                "session_id": session.session_id,
                "stage_name": measurement.stage_name,
                "duration_ms": measurement.duration_ms,
                "memory_delta": measurement.memory_delta,
            },
        )

    def profile_roundtrip(self, text: str, session_id: str) -> ProfilingSession:
        """Parse ``text`` and serialize the result, measuring both stages.

        Args:
            text: Datafile document text
            session_id: Identifier for the session

        Returns:
            The finished ProfilingSession with ``read`` and ``write`` stages
        """
        processor = DatafileProcessor(self.config, correlation_id=session_id)
        with self.profile_session(session_id, len(text.encode("utf-8"))) as session:
            with self.profile_stage(session, "read") as read_stage:
                result = processor.read_text(text)
                read_stage.operations_count = result.performance.lines_processed
            with self.profile_stage(session, "write") as write_stage:
                output = processor.serialize(result.root)
                write_stage.operations_count = len(output)
            session.metadata = {
                "diagnostic_count": len(result.diagnostics),
                "nodes_created": result.performance.nodes_created,
                "output_size": len(output.encode("utf-8")),
                "stable": output == text,
            }
        return session

    def generate_report(self) -> PerformanceReport:
        return PerformanceReport(sessions=self.sessions.copy(), generation_time=time.time())

    def save_report(self, report: PerformanceReport, output_path: Path) -> None:
        """Save performance report to a JSON file."""
        output_path.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        self.logger.info(
            "Saved performance report",
            extra={"output_path": str(output_path), "session_count": report.session_count},
        )

    def get_recommendations(self, report: PerformanceReport) -> List[str]:
        """Point out slow sessions and dominant stages."""
        if not report.sessions:
            return ["No profiling data available for analysis"]

        recommendations = []
        average = report.average_duration_ms
        if average > SLOW_SESSION_MS:
            recommendations.append(
                "Documents take over a second to round trip; consider splitting them"
            )
        for stage_name, stage_average in report.stage_averages_ms().items():
            if average > 0 and stage_average > average * BOTTLENECK_SHARE:
                recommendations.append(
                    f"Stage '{stage_name}' dominates processing time"
                )
        if not recommendations:
            recommendations.append("No performance issues detected")
        return recommendations

    def clear_sessions(self) -> None:
        session_count = len(self.sessions)
        self.sessions.clear()
        self.current_session = None
        self.logger.info("Cleared profiling sessions", extra={"cleared_count": session_count})


class StageProfiler:
    """Context manager for profiling one processing stage."""

    def __init__(self, profiler: PerformanceProfiler, session: ProfilingSession, stage_name: str):
        self.profiler = profiler
        self.session = session
        self.stage_name = stage_name
        self.measurement: Optional[StageMeasurement] = None

    def __enter__(self) -> StageMeasurement:
        self.measurement = StageMeasurement(
            stage_name=self.stage_name,
            start_time=time.perf_counter(),
            end_time=0.0,
            memory_start=self.profiler.memory_rss(),
            memory_end=0,
        )
        return self.measurement

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.measurement is None:
            return
        self.measurement.end_time = time.perf_counter()
        self.measurement.memory_end = self.profiler.memory_rss()
        self.profiler.add_stage_measurement(self.session, self.measurement)


class SessionProfiler:
    """Context manager for profiling a complete session."""

    def __init__(self, profiler: PerformanceProfiler, session_id: str, input_size: int = 0):
        self.profiler = profiler
        self.session_id = session_id
        self.input_size = input_size
        self.session: Optional[ProfilingSession] = None

    def __enter__(self) -> ProfilingSession:
        self.session = self.profiler.start_session(self.session_id, self.input_size)
        return self.session

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            self.profiler.end_session(self.session)


def benchmark_configurations(
    text: str,
    iterations: int = 10,
) -> Dict[str, PerformanceReport]:
    """Round trip ``text`` repeatedly under each configuration preset.

    Returns:
        Dictionary mapping preset names to performance reports
    """
    configurations = {
        "canonical": DatafileConfig.canonical(),
        "space_indented": DatafileConfig.space_indented(),
    }

    results = {}
    for config_name, config in configurations.items():
        profiler = PerformanceProfiler(config=config)
        for i in range(iterations):
            session = profiler.profile_roundtrip(text, f"{config_name}_iteration_{i}")
            session.metadata.update({"configuration": config_name, "iteration": i})
        results[config_name] = profiler.generate_report()
    return results
