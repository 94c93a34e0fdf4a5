# SPDX-License-Identifier: MIT
"""Public scanning API.

    from secret_detector.scanner import Scanner, CancellationToken, scan_path
"""

from __future__ import annotations

from typing import Optional

from secret_detector.core.findings import ScanResult
from secret_detector.scanner.cancellation import CancellationToken
from secret_detector.scanner.config import ScannerConfig, load_scanner_config
from secret_detector.scanner.walker import DEFAULT_IGNORE_DIRS, DEFAULT_MAX_WORKERS, Scanner

__all__ = [
    "CancellationToken",
    "DEFAULT_IGNORE_DIRS",
    "DEFAULT_MAX_WORKERS",
    "Scanner",
    "ScannerConfig",
    "load_scanner_config",
    "scan_path",
]


def scan_path(
    root: str,
    config: Optional[ScannerConfig] = None,
    token: Optional[CancellationToken] = None,
) -> ScanResult:
    """Scan *root* with *config* (defaults when omitted) and return the result."""
    config = config or ScannerConfig()
    token = token or CancellationToken()
    return config.build_scanner().scan(token, root)
