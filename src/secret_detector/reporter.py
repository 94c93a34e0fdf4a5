# SPDX-License-Identifier: MIT
"""
Render scan results as text, JSON or SARIF.

Only ``Finding.redacted_value`` ever reaches the output; the raw line kept
in ``Finding.value`` is never written.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from secret_detector import __version__
from secret_detector.core.findings import Finding, ScanResult

FORMATS = ("text", "json", "sarif")


def sorted_findings(result: ScanResult) -> List[Finding]:
    return sorted(result.findings, key=lambda f: (f.file_path, f.line_number, f.secret_type))


def report(stream: TextIO, result: ScanResult, fmt: str = "text", root: Optional[str] = None) -> None:
    """Write *result* to *stream* in the requested format."""
    if fmt == "text":
        stream.write(render_text(result))
    elif fmt == "json":
        stream.write(json.dumps(render_json(result), indent=2) + "\n")
    elif fmt == "sarif":
        stream.write(json.dumps(render_sarif(result, root), indent=2) + "\n")
    else:
        raise ValueError(f"unknown output format {fmt!r} (expected one of {', '.join(FORMATS)})")


def render_text(result: ScanResult) -> str:
    findings = sorted_findings(result)
    if not findings:
        return "No secrets found.\n"

    lines = [f"Found {len(findings)} potential secrets:", ""]
    for i, f in enumerate(findings, start=1):
        lines.append(f"[{i}] {f.file_path}:{f.line_number}")
        lines.append(f"    Type: {f.secret_type}")
        lines.append(f"    Match: {f.redacted_value}")
        lines.append("")
    return "\n".join(lines) + "\n"


def render_json(result: ScanResult) -> Dict[str, Any]:
    payload = result.to_dict()
    payload["findings"] = [f.to_dict() for f in sorted_findings(result)]
    payload["errors"] = [e.to_dict() for e in sorted(result.errors, key=lambda e: e.path)]
    return payload


def _relative_uri(path: str, root: Optional[str]) -> str:
    if root:
        try:
            path = str(Path(path).resolve().relative_to(Path(root).resolve()))
        except (ValueError, OSError):
            pass
    return path.replace(os.sep, "/")


def render_sarif(result: ScanResult, root: Optional[str] = None) -> Dict[str, Any]:
    """Convert a scan result to a SARIF 2.1.0 document."""
    rule_ids: Dict[str, int] = {}
    rules = []
    results = []

    for f in sorted_findings(result):
        if f.secret_type not in rule_ids:
            rule_ids[f.secret_type] = len(rules)
            rules.append(
                {
                    "id": f.secret_type,
                    "name": f.secret_type,
                    "shortDescription": {"text": f"{f.secret_type} detected"},
                    "defaultConfiguration": {"level": "error"},
                }
            )

        results.append(
            {
                "ruleId": f.secret_type,
                "ruleIndex": rule_ids[f.secret_type],
                "level": "error",
                "message": {"text": f"Potential {f.secret_type}: {f.redacted_value}"},
                "locations": [
                    {
                        "physicalLocation": {
                            "artifactLocation": {"uri": _relative_uri(f.file_path, root)},
                            "region": {"startLine": max(1, f.line_number)},
                        }
                    }
                ],
            }
        )

    return {
        "version": "2.1.0",
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "secret-detector",
                        "version": __version__,
                        "rules": rules,
                    }
                },
                "results": results,
            }
        ],
    }
