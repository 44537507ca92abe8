"""Diagnostic records produced while turning parse events into a tree."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()      # Parse cannot produce a tree


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information.

    ``position`` holds ``line`` and ``column`` keys when the tokenizer
    reports where the problem was found.
    """

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    @property
    def line(self) -> Optional[int]:
        """Line reported by the tokenizer, if any."""
        return self.position.get("line") if self.position else None

    @property
    def column(self) -> Optional[int]:
        """Column reported by the tokenizer, if any."""
        return self.position.get("column") if self.position else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to dictionary representation."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.position:
            result["position"] = dict(self.position)
        if self.details:
            result["details"] = dict(self.details)
        if self.correlation_id is not None:
            result["correlation_id"] = self.correlation_id
        return result
