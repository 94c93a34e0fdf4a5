# SPDX-License-Identifier: MIT
"""
Scanner configuration loader.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

import yaml

from secret_detector.core.exceptions import ConfigError
from secret_detector.detectors import Detector
from secret_detector.detectors.patterns import Pattern, build_pattern, default_patterns
from secret_detector.scanner.walker import DEFAULT_IGNORE_DIRS, DEFAULT_MAX_WORKERS, Scanner

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".secret-detector.yml", ".secret-detector.yaml")

_KNOWN_KEYS = {"ignore_dirs", "extra_ignore_dirs", "max_workers", "use_default_patterns", "patterns"}


@dataclass(frozen=True)
class ScannerConfig:
    """Effective scanner settings after defaults have been applied."""

    ignore_dirs: FrozenSet[str] = DEFAULT_IGNORE_DIRS
    max_workers: int = DEFAULT_MAX_WORKERS
    patterns: Tuple[Pattern, ...] = field(default_factory=default_patterns)
    source: Optional[str] = None  # config file the settings came from

    def build_detector(self) -> Detector:
        return Detector(self.patterns)

    def build_scanner(self) -> Scanner:
        return Scanner(
            detector=self.build_detector(),
            ignore_dirs=self.ignore_dirs,
            max_workers=self.max_workers,
        )


def load_scanner_config(config_path: Optional[str] = None, repo_root: str = ".") -> ScannerConfig:
    """
    Load scanner configuration following the search order.

    1. ``config_path`` when given (it must exist)
    2. ``.secret-detector.yml`` / ``.secret-detector.yaml`` in ``repo_root``
    3. built-in defaults

    Args:
        config_path: Explicit config path from the --config CLI flag
        repo_root: Directory searched for a config file

    Returns:
        The effective ScannerConfig

    Raises:
        ConfigError: If the config file is missing (explicit path only) or invalid
    """
    if config_path:
        config_abs_path = Path(config_path).resolve()
        if not config_abs_path.is_file():
            raise ConfigError(
                f"Specified config file not found: {config_abs_path}",
                config_path=str(config_abs_path),
            )
        return _load_from_file(config_abs_path)

    root = Path(repo_root).resolve()
    if root.is_dir():
        for config_name in CONFIG_FILENAMES:
            candidate = root / config_name
            if candidate.is_file():
                return _load_from_file(candidate)

    logger.info("Using default scanner config")
    return get_default_scanner_config()


def get_default_scanner_config() -> ScannerConfig:
    return ScannerConfig()


def _load_from_file(config_path: Path) -> ScannerConfig:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file: {e}", config_path=str(config_path)) from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}", config_path=str(config_path)) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Config must be a mapping", config_path=str(config_path))

    try:
        config = config_from_dict(raw, source=str(config_path))
    except ConfigError as e:
        # Errors raised while parsing sections do not know the file name.
        if e.config_path is None:
            e.config_path = str(config_path)
        raise

    logger.info("Loaded config: %s", config_path)
    return config


def config_from_dict(raw: Dict[str, Any], source: Optional[str] = None) -> ScannerConfig:
    """
    Build a ScannerConfig from a parsed configuration mapping.

    Unknown top-level keys are ignored with a warning.
    """
    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))

    ignore_dirs = set(DEFAULT_IGNORE_DIRS)
    if "ignore_dirs" in raw:
        ignore_dirs = set(_name_list(raw["ignore_dirs"], "ignore_dirs"))
    if "extra_ignore_dirs" in raw:
        ignore_dirs.update(_name_list(raw["extra_ignore_dirs"], "extra_ignore_dirs"))

    max_workers = raw.get("max_workers", DEFAULT_MAX_WORKERS)
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
        raise ConfigError(f"max_workers must be a positive integer, got {max_workers!r}", section="max_workers")

    use_defaults = raw.get("use_default_patterns", True)
    if not isinstance(use_defaults, bool):
        raise ConfigError("use_default_patterns must be true or false", section="use_default_patterns")

    custom = raw.get("patterns") or []
    if not isinstance(custom, list):
        raise ConfigError("patterns must be a list", section="patterns")
    patterns: List[Pattern] = list(default_patterns()) if use_defaults else []
    patterns.extend(build_pattern(spec) for spec in custom)
    if not patterns:
        raise ConfigError("No patterns left: use_default_patterns is false and no patterns are defined", section="patterns")

    return ScannerConfig(
        ignore_dirs=frozenset(ignore_dirs),
        max_workers=max_workers,
        patterns=tuple(patterns),
        source=source,
    )


def _name_list(value: Any, section: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        raise ConfigError(f"{section} must be a list of directory names", section=section)
    return list(value)
