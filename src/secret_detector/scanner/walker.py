# SPDX-License-Identifier: MIT
"""
Bounded-concurrency directory scanner.

The calling thread walks the tree and admits one unit of work per file
into a thread pool through a fixed-size admission gate. Once the gate is
saturated the walk blocks instead of queueing, which bounds both open
files and memory. Results from all workers are merged under one lock and
handed back only after every admitted unit has finished.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import stat
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import AbstractSet, Iterable, Iterator, List, Optional, Protocol

from secret_detector.core.exceptions import ScanCancelledError, TraversalError
from secret_detector.core.findings import Finding, ScanError, ScanResult
from secret_detector.detectors import Detector
from secret_detector.scanner.cancellation import CancellationToken

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_DIRS = frozenset(
    {
        # version control metadata
        ".git",
        ".hg",
        ".svn",
        # editor state
        ".idea",
        ".vscode",
        # third-party dependency trees
        "vendor",
        "node_modules",
        # build artifacts
        "bin",
        "__pycache__",
    }
)

DEFAULT_MAX_WORKERS = 100

# How long the walk sleeps on a saturated gate before re-checking cancellation.
_SLOT_POLL_SECONDS = 0.05


class ContentDetector(Protocol):
    def detect(self, content: bytes) -> List[Finding]:
        ...


class _ResultCollector:
    """The only state shared between workers: a ScanResult behind a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._result = ScanResult()
        self.skipped = 0

    def add_findings(self, path: str, findings: Iterable[Finding]) -> None:
        stamped = [dataclasses.replace(f, file_path=path) for f in findings]
        with self._lock:
            self._result.findings.extend(stamped)
            self._result.files_scanned += 1

    def add_error(self, error: ScanError) -> None:
        with self._lock:
            self._result.errors.append(error)

    def mark_skipped(self) -> None:
        with self._lock:
            self.skipped += 1

    def result(self) -> ScanResult:
        with self._lock:
            return self._result


class Scanner:
    """
    Scan a directory tree for secrets with bounded concurrency.

    Args:
        detector: Anything with ``detect(bytes) -> List[Finding]``; the
            default :class:`Detector` when omitted.
        ignore_dirs: Directory names pruned at any depth.
        max_workers: Maximum number of files read and analysed at once.
    """

    def __init__(
        self,
        detector: Optional[ContentDetector] = None,
        ignore_dirs: Optional[AbstractSet[str]] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.detector = detector if detector is not None else Detector()
        self.ignore_dirs = frozenset(DEFAULT_IGNORE_DIRS if ignore_dirs is None else ignore_dirs)
        self.max_workers = max_workers

    def should_ignore_dir(self, name: str) -> bool:
        return name in self.ignore_dirs

    def scan(self, token: CancellationToken, root: str) -> ScanResult:
        """
        Walk *root* and scan every file outside the ignored directories.

        Per-file failures are recorded in ``ScanResult.errors`` and never
        stop the scan.

        Raises:
            TraversalError: *root* does not exist or cannot be listed
            ScanCancelledError: *token* was cancelled before every file was scanned
        """
        root = os.fspath(root)
        collector = _ResultCollector()
        slots = threading.BoundedSemaphore(self.max_workers)
        started = time.monotonic()

        logger.debug("Scanning %s with %d workers", root, self.max_workers)
        token.raise_if_cancelled()

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="secret-scan") as pool:
            # Leaving this block joins every submitted unit, including when
            # the walk raises.
            for path in self._walk(root, collector):
                token.raise_if_cancelled()
                self._acquire_slot(slots, token)
                try:
                    future = pool.submit(self._scan_file, token, path, collector)
                except BaseException:
                    slots.release()
                    raise
                future.add_done_callback(self._unit_done(path, slots, collector))

        # A cancel that arrives after the last unit ran leaves the result whole.
        if collector.skipped:
            raise ScanCancelledError(f"scan cancelled, {collector.skipped} files not scanned")

        result = collector.result()
        logger.info(
            "Scanned %d files in %.2fs: %d findings, %d errors",
            result.files_scanned,
            time.monotonic() - started,
            len(result.findings),
            len(result.errors),
        )
        return result

    @staticmethod
    def _acquire_slot(slots: threading.BoundedSemaphore, token: CancellationToken) -> None:
        """Block until a worker slot frees up, giving up if cancelled."""
        while not slots.acquire(timeout=_SLOT_POLL_SECONDS):
            token.raise_if_cancelled()

    @staticmethod
    def _unit_done(path: str, slots: threading.BoundedSemaphore, collector: _ResultCollector):
        def _done(future: Future) -> None:
            try:
                exc = future.exception()
                if exc is not None:
                    # Anything other than an OSError is a bug in the
                    # detector; keep it attached to the file that caused it.
                    collector.add_error(ScanError.from_exception(path, exc))
            finally:
                slots.release()

        return _done

    def _scan_file(self, token: CancellationToken, path: str, collector: _ResultCollector) -> None:
        if token.cancelled:
            collector.mark_skipped()
            return

        try:
            with open(path, "rb") as f:
                content = f.read()
        except OSError as e:
            collector.add_error(ScanError.from_exception(path, e))
            return

        collector.add_findings(path, self.detector.detect(content))

    def _walk(self, root: str, collector: _ResultCollector) -> Iterator[str]:
        """
        Yield scan candidates under *root*, depth first, in name order.

        Ignored directories are pruned, symlinked directories are not
        followed, and special files are reported rather than opened.
        """
        try:
            st = os.stat(root)
        except OSError as e:
            raise TraversalError(f"cannot scan root: {e.strerror or e}", path=root) from e

        if not stat.S_ISDIR(st.st_mode):
            if stat.S_ISREG(st.st_mode):
                yield root
                return
            raise TraversalError("root is neither a directory nor a regular file", path=root)

        stack = [root]
        while stack:
            directory = stack.pop()
            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as e:
                if directory == root:
                    raise TraversalError(f"cannot list root: {e.strerror or e}", path=root) from e
                collector.add_error(ScanError.from_exception(directory, e))
                continue

            subdirs = []
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        if not self.should_ignore_dir(entry.name):
                            subdirs.append(entry.path)
                    elif entry.is_symlink():
                        if entry.is_dir():
                            logger.debug("Not following directory symlink %s", entry.path)
                        elif entry.is_file() or not os.path.exists(entry.path):
                            # Dangling links are read like any file and
                            # surface as errors.
                            yield entry.path
                        else:
                            collector.add_error(
                                ScanError(path=entry.path, reason="link to a non-regular file", error_type="SpecialFile")
                            )
                    elif entry.is_file(follow_symlinks=False):
                        yield entry.path
                    else:
                        collector.add_error(
                            ScanError(path=entry.path, reason="not a regular file", error_type="SpecialFile")
                        )
                except OSError as e:
                    collector.add_error(ScanError.from_exception(entry.path, e))

            # Reverse so the first subdirectory by name is visited first.
            stack.extend(reversed(subdirs))
