"""Test CLI module functionality."""

import subprocess
import sys


def test_main_module_importable():
    """Test that the __main__ module can be imported."""
    import secret_detector.__main__  # noqa: F401


def test_main_module_executable():
    """Test that the module can be executed with python -m."""
    result = subprocess.run(
        [sys.executable, "-m", "secret_detector", "--help"],
        capture_output=True,
        text=True,
        timeout=10,
    )
    assert result.returncode == 0
    assert "ImportError" not in result.stderr
    assert "ModuleNotFoundError" not in result.stderr
    assert "scan" in result.stdout
