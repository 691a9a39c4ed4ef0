"""Result objects and diagnostic types for LRG report parsing.

Parsing is strict about structural errors (they raise), but anything that is
tolerated along the way is recorded as a diagnostic on the result so callers
can decide whether to trust the tree.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from lrg_report.tree.document import ReportDocument


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    offset: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class ParseMetrics:
    """Performance counters for a single parse."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tokens_generated: int = 0
    nodes_created: int = 0
    text_runs_dropped: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms


@dataclass
class ParseResult:
    """Document tree plus the diagnostics and metrics gathered while building it.

    Building either returns a result or raises MalformedMarkupError, so
    ``success`` is always True on a result returned by ReportTreeBuilder;
    tolerated irregularities show up in ``diagnostics`` instead.
    """

    document: "ReportDocument"
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)
    correlation_id: Optional[str] = None
    success: bool = True

    @property
    def tree(self) -> "ReportDocument":
        """Direct access to the parsed document.

        Examples:
            >>> result = parse_string('<lrg><fixed_annotation/></lrg>')
            >>> result.tree.find_node('fixed_annotation').is_empty
            True
        """
        return self.document

    @property
    def node_count(self) -> int:
        """Get total number of nodes in the document."""
        return self.document.node_count

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        offset: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                offset=offset,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_warnings(self) -> bool:
        """Check if anything was tolerated rather than parsed cleanly."""
        return any(
            diag.severity in (DiagnosticSeverity.WARNING, DiagnosticSeverity.ERROR)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        by_severity: Dict[str, int] = {}
        for diag in self.diagnostics:
            by_severity[diag.severity.name] = by_severity.get(diag.severity.name, 0) + 1

        return {
            "top_level_nodes": len(self.document.children),
            "node_count": self.node_count,
            "processing_time_ms": self.metrics.processing_time_ms,
            "characters_processed": self.metrics.characters_processed,
            "tokens_generated": self.metrics.tokens_generated,
            "text_runs_dropped": self.metrics.text_runs_dropped,
            "diagnostics_by_severity": by_severity,
            "correlation_id": self.correlation_id,
        }
