# SPDX-License-Identifier: MIT
"""
Secret signatures recognised by the detector.

Each pattern couples a single-line regex with an optional entropy
threshold, an optional value regex isolating the candidate secret for
entropy scoring, and an optional redaction rule applied to the match.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from secret_detector.core.exceptions import ConfigError
from secret_detector.core.redaction import REDACTORS, redact_key_value

# Generated secrets sit well above this; placeholders and short cycles below.
DEFAULT_MIN_ENTROPY = 3.5


@dataclass(frozen=True)
class Pattern:
    """A named secret signature."""

    name: str
    regex: re.Pattern
    min_entropy: float = 0.0  # only enforced when > 0
    value_regex: Optional[re.Pattern] = None
    redact: Optional[Callable[[str], str]] = None

    def extract_value(self, match: str) -> str:
        """
        Isolate the candidate secret inside *match*.

        Uses the ``value`` named group of the value regex when present,
        otherwise its last capture group, otherwise the whole match.
        """
        if self.value_regex is None:
            return match
        m = self.value_regex.search(match)
        if m is None:
            return match
        if "value" in self.value_regex.groupindex:
            return m.group("value") or match
        if self.value_regex.groups:
            return m.group(self.value_regex.groups) or match
        return match


_AWS_ACCESS_KEY_ID = Pattern(
    name="AWS Access Key ID",
    regex=re.compile(r"(A3T[A-Z0-9]|AKIA|AGPA|AIDA|AROA|AIPA|ANPA|ANVA|ASIA)[A-Z0-9]{16}"),
)

_AWS_SECRET_ACCESS_KEY = Pattern(
    name="AWS Secret Access Key",
    regex=re.compile(r"""(?i)aws_secret_access_key['"?]?\s*(=|:)\s*['"]?[A-Za-z0-9/+=]{40}['"]?"""),
    min_entropy=DEFAULT_MIN_ENTROPY,
    value_regex=re.compile(
        r"""(?i)aws_secret_access_key['"]?\s*(?:=|:)\s*['"]?(?P<value>[A-Za-z0-9/+=]{40})['"]?"""
    ),
    redact=redact_key_value,
)

_PRIVATE_KEY = Pattern(
    name="Private Key",
    regex=re.compile(r"-----BEGIN ((EC|PGP|DSA|RSA|OPENSSH) )?PRIVATE KEY( BLOCK)?-----"),
)

_GENERIC_API_KEY = Pattern(
    name="Generic API Key",
    regex=re.compile(r"""(?i)(api_key|apikey|secret|token)['"]?\s*(=|:)\s*['"]?[a-zA-Z0-9]{16,64}['"]?"""),
    min_entropy=DEFAULT_MIN_ENTROPY,
    value_regex=re.compile(
        r"""(?i)(?:api_key|apikey|secret|token)['"]?\s*(?:=|:)\s*['"]?(?P<value>[a-zA-Z0-9]{16,64})['"]?"""
    ),
    redact=redact_key_value,
)

_DEFAULT_PATTERNS: Tuple[Pattern, ...] = (
    _AWS_ACCESS_KEY_ID,
    _AWS_SECRET_ACCESS_KEY,
    _PRIVATE_KEY,
    _GENERIC_API_KEY,
)


def default_patterns() -> Tuple[Pattern, ...]:
    """Return the built-in patterns in evaluation order."""
    return _DEFAULT_PATTERNS


def _compile(source: Any, name: str, key: str) -> re.Pattern:
    if not isinstance(source, str) or not source:
        raise ConfigError(f"Pattern '{name}' needs a non-empty '{key}' string", section="patterns")
    try:
        return re.compile(source)
    except re.error as e:
        raise ConfigError(f"Pattern '{name}' has an invalid '{key}': {e}", section="patterns") from e


def build_pattern(spec: Dict[str, Any]) -> Pattern:
    """
    Build a :class:`Pattern` from a configuration mapping.

    Recognised keys:
      - name: str (required, becomes Finding.secret_type)
      - pattern: str (required, single-line regex)
      - min_entropy: float (default 0, disabled)
      - value_pattern: str (regex isolating the secret, ideally via a
        ``(?P<value>...)`` group)
      - redact: "full" | "key_value" (default "full")

    Raises:
        ConfigError: If the mapping is incomplete or a regex does not compile
    """
    if not isinstance(spec, dict):
        raise ConfigError("Each custom pattern must be a mapping", section="patterns")

    name = spec.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError("Custom pattern is missing a 'name'", section="patterns")

    regex = _compile(spec.get("pattern"), name, "pattern")

    value_regex = None
    if spec.get("value_pattern") is not None:
        value_regex = _compile(spec.get("value_pattern"), name, "value_pattern")

    try:
        min_entropy = float(spec.get("min_entropy", 0.0) or 0.0)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Pattern '{name}' has a non-numeric 'min_entropy'", section="patterns") from e
    if min_entropy < 0:
        raise ConfigError(f"Pattern '{name}' has a negative 'min_entropy'", section="patterns")

    mode = spec.get("redact", "full")
    if not isinstance(mode, str) or mode not in REDACTORS:
        raise ConfigError(
            f"Pattern '{name}' has unknown redact mode {mode!r} (expected one of {sorted(REDACTORS)})",
            section="patterns",
        )

    return Pattern(
        name=name.strip(),
        regex=regex,
        min_entropy=min_entropy,
        value_regex=value_regex,
        redact=REDACTORS[mode],
    )
