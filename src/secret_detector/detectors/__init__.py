# SPDX-License-Identifier: MIT
"""Line detector: applies the pattern registry to file content."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from secret_detector.core.entropy import shannon_entropy
from secret_detector.core.findings import Finding
from secret_detector.core.redaction import REDACTED
from secret_detector.detectors.patterns import Pattern, build_pattern, default_patterns

__all__ = ["Detector", "Pattern", "build_pattern", "default_patterns"]


class Detector:
    """
    Stateless detector applying every pattern to every line.

    Holds nothing but an immutable tuple of patterns, so a single instance
    can be shared by any number of worker threads.
    """

    def __init__(self, patterns: Optional[Sequence[Pattern]] = None):
        self._patterns: Tuple[Pattern, ...] = tuple(patterns) if patterns else default_patterns()

    @property
    def patterns(self) -> Tuple[Pattern, ...]:
        return self._patterns

    def detect(self, content: bytes) -> List[Finding]:
        """
        Scan *content* and return one finding per matching (line, pattern).

        Never raises: undecodable bytes are replaced and content without
        matches simply yields an empty list. ``file_path`` is left empty
        for the caller to fill in.
        """
        text = content.decode("utf-8", errors="replace")
        findings: List[Finding] = []
        # Split on "\n" only so line numbers agree with editors and git.
        for line_number, line in enumerate(text.split("\n"), start=1):
            findings.extend(self._check_line(line, line_number))
        return findings

    def _check_line(self, line: str, line_number: int) -> Iterable[Finding]:
        for pattern in self._patterns:
            m = pattern.regex.search(line)
            if m is None:
                continue
            match = m.group(0)
            if not match:
                continue

            if pattern.min_entropy > 0:
                candidate = pattern.extract_value(match)
                if shannon_entropy(candidate) < pattern.min_entropy:
                    continue

            redacted = pattern.redact(match) if pattern.redact is not None else REDACTED
            yield Finding(
                file_path="",
                line_number=line_number,
                secret_type=pattern.name,
                value=line.strip(),
                redacted_value=redacted or REDACTED,
            )
