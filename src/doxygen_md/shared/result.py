"""Diagnostics and run metrics for Doxygen-to-Markdown generation.

Diagnostics record non-fatal conditions worth surfacing to the operator (for
example a lenient public-header fallback). Metrics summarize one run: how much
input was converted, how many refids were collected, and why refids were
dropped.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional

import psutil


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()


class SkipReason(Enum):
    """Why a collected refid produced no definition record."""

    UNNAMED = "unnamed"
    FILE = "file"
    NAMESPACE = "namespace"
    UNSUPPORTED_KIND = "unsupported_kind"


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "details": self.details or {},
        }


def current_memory_bytes() -> int:
    """Resident set size of the current process."""
    return psutil.Process().memory_info().rss


@dataclass
class RunMetrics:
    """Counters and timings for one generation run."""

    processing_time_ms: float = 0.0
    memory_used_bytes: int = 0
    files_converted: int = 0
    bytes_read: int = 0
    refids_collected: int = 0
    definitions_resolved: int = 0
    workers: int = 0
    skipped: Dict[str, int] = field(
        default_factory=lambda: {reason.value: 0 for reason in SkipReason}
    )

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())

    @property
    def bytes_per_second(self) -> float:
        """Input throughput of the conversion stage."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_read * 1000.0) / self.processing_time_ms

    def record_skip(self, reason: SkipReason) -> None:
        self.skipped[reason.value] = self.skipped.get(reason.value, 0) + 1

    def sample_memory(self) -> None:
        """Record the process's current resident memory."""
        self.memory_used_bytes = current_memory_bytes()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": round(self.processing_time_ms, 3),
            "memory_used_bytes": self.memory_used_bytes,
            "files_converted": self.files_converted,
            "bytes_read": self.bytes_read,
            "refids_collected": self.refids_collected,
            "definitions_resolved": self.definitions_resolved,
            "workers": self.workers,
            "skipped": dict(self.skipped),
        }
