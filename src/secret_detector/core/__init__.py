# SPDX-License-Identifier: MIT
"""Core data structures, entropy and redaction helpers."""
