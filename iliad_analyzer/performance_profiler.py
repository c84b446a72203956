"""Timing helpers for subgraph construction and metric passes.

Reports are held in a context variable, so concurrent requests each time
their own operation without sharing any in-flight state.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

_enabled = True
_ACTIVE_REPORT: ContextVar[Optional["PerformanceReport"]] = ContextVar(
    "iliad_active_report", default=None
)


@dataclass
class TimingMetric:
    """Container for a single timing measurement."""

    name: str
    duration_ms: float
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        meta_str = ", ".join(f"{k}={v}" for k, v in self.metadata.items()) if self.metadata else ""
        return f"{self.name}: {self.duration_ms:.2f}ms" + (f" ({meta_str})" if meta_str else "")


@dataclass
class PerformanceReport:
    """Phases timed inside one operation."""

    operation: str
    total_duration_ms: float = 0.0
    phases: List[TimingMetric] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_phase(self, phase: TimingMetric) -> None:
        self.phases.append(phase)

    def get_phase_breakdown(self) -> Dict[str, float]:
        """Percentage of the total spent in each phase."""
        if self.total_duration_ms == 0:
            return {}
        return {
            phase.name: (phase.duration_ms / self.total_duration_ms) * 100
            for phase in self.phases
        }

    def format_report(self) -> str:
        lines = [f"{self.operation}: {self.total_duration_ms:.2f}ms"]
        if self.metadata:
            lines[0] += " (" + ", ".join(f"{k}={v}" for k, v in self.metadata.items()) + ")"
        breakdown = self.get_phase_breakdown()
        for phase in sorted(self.phases, key=lambda p: p.duration_ms, reverse=True):
            lines.append(f"  [{breakdown.get(phase.name, 0):5.1f}%] {phase}")
        return "\n".join(lines)


def enable() -> None:
    global _enabled
    _enabled = True


def disable() -> None:
    global _enabled
    _enabled = False


def is_enabled() -> bool:
    return _enabled


def current_report() -> Optional[PerformanceReport]:
    return _ACTIVE_REPORT.get()


@contextmanager
def profile_operation(
    operation: str, metadata: Optional[Dict[str, Any]] = None
) -> Iterator[Optional[PerformanceReport]]:
    """Time a complete operation and collect the phases run inside it.

    Usage:
        with profile_operation("closeness", {"entity_type": "god"}) as report:
            with profile_phase("build_subgraph"):
                ...
    """
    if not _enabled:
        yield None
        return

    report = PerformanceReport(operation=operation, metadata=dict(metadata or {}))
    token = _ACTIVE_REPORT.set(report)
    start = time.perf_counter()
    try:
        yield report
    finally:
        report.total_duration_ms = (time.perf_counter() - start) * 1000
        _ACTIVE_REPORT.reset(token)
        logger.debug(report.format_report())


@contextmanager
def profile_phase(phase_name: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[None]:
    """Time a phase, attaching it to the enclosing operation when there is one."""
    if not _enabled:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        metric = TimingMetric(
            name=phase_name,
            duration_ms=(time.perf_counter() - start) * 1000,
            metadata=dict(metadata or {}),
        )
        report = _ACTIVE_REPORT.get()
        if report is not None:
            report.add_phase(metric)
        logger.debug(f"Phase [{phase_name}]: {metric.duration_ms:.2f}ms")
