# SPDX-License-Identifier: MIT
"""
Redaction rules for detector matches.

A redaction rule receives the full text matched by a pattern and returns
the string that is safe to show in reports. Rules keep whatever context
identifies the secret (the key name) and drop the secret value itself.
"""

from __future__ import annotations

REDACTED = "[REDACTED]"

_SEPARATORS = ("=", ":")


def redact_full(match: str) -> str:
    """
    Replace the whole match with the redaction marker.

    Used for structurally self-identifying matches such as access key IDs
    or PEM headers, where the entire match is the secret.
    """
    return REDACTED


def redact_key_value(match: str) -> str:
    """
    Keep the key and its separator, replace the value.

    ``token: abc123`` becomes ``token: [REDACTED]`` and
    ``api_key="abc"`` becomes ``api_key= [REDACTED]``. A match without a
    ``=`` or ``:`` separator is redacted in full.

    Args:
        match: Full text matched by the pattern

    Returns:
        Display-safe string
    """
    for idx, ch in enumerate(match):
        if ch in _SEPARATORS:
            return f"{match[:idx + 1].strip()} {REDACTED}"
    return REDACTED


REDACTORS = {
    "full": redact_full,
    "key_value": redact_key_value,
}
