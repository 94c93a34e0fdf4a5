# SPDX-License-Identifier: MIT
"""Exceptions raised by the secret detector."""

from __future__ import annotations

from typing import Optional


class SecretDetectorError(Exception):
    """Base exception for all secret detector errors."""


class ConfigError(SecretDetectorError):
    """Raised when configuration is missing or invalid."""

    def __init__(self, message: str, config_path: Optional[str] = None, section: Optional[str] = None):
        self.config_path = config_path
        self.section = section
        super().__init__(message)

    def __str__(self):
        msg = super().__str__()
        if self.config_path:
            msg += f" (config: {self.config_path})"
        if self.section:
            msg += f" (section: {self.section})"
        return msg


class ScanFatalError(SecretDetectorError):
    """The traversal itself failed; the scan produced no usable result."""


class TraversalError(ScanFatalError):
    """Raised when the scan root does not exist or cannot be listed."""

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message)

    def __str__(self):
        return f"{super().__str__()} (path: {self.path})"


class ScanCancelledError(ScanFatalError):
    """Raised when a scan is cancelled before every file was dispatched."""
