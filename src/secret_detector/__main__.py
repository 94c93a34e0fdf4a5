#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Allow running the detector as a module: python -m secret_detector
"""

from secret_detector.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
