# SPDX-License-Identifier: MIT
"""cicd-secret-detector package metadata."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("cicd-secret-detector")
except PackageNotFoundError:
    __version__ = "0.1.0"
