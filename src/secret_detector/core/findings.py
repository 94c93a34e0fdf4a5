# SPDX-License-Identifier: MIT
"""Finding data structures for the secret detector."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class Finding:
    """A secret detected at a specific file and line."""

    file_path: str
    line_number: int  # 1-based
    secret_type: str  # name of the pattern that matched
    # Trimmed source line. Internal context only: never log or serialise it.
    value: str = field(repr=False)
    redacted_value: str  # safe for output, never empty

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a display-safe dictionary (the raw value is omitted)."""
        return {
            "path": self.file_path,
            "line": self.line_number,
            "type": self.secret_type,
            "match": self.redacted_value,
        }


@dataclass(frozen=True)
class ScanError:
    """A file that could not be scanned. Recorded, never fatal."""

    path: str
    reason: str
    error_type: str = "OSError"

    @classmethod
    def from_exception(cls, path: str, exc: BaseException) -> "ScanError":
        reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        return cls(path=path, reason=reason or type(exc).__name__, error_type=type(exc).__name__)

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "reason": self.reason, "type": self.error_type}


@dataclass
class ScanResult:
    """
    Everything one scan produced.

    ``findings`` and ``errors`` are filled concurrently and carry no
    ordering guarantee; sort them before presenting.
    """

    findings: List[Finding] = field(default_factory=list)
    errors: List[ScanError] = field(default_factory=list)
    files_scanned: int = 0

    @property
    def has_errors(self) -> bool:
        """True if any file could not be scanned."""
        return bool(self.errors)

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a display-safe dictionary."""
        return {
            "total": len(self.findings),
            "files_scanned": self.files_scanned,
            "findings": [f.to_dict() for f in self.findings],
            "errors": [e.to_dict() for e in self.errors],
        }
