"""Test ``python -m sieve``."""

import subprocess
import sys


def test_main_module_importable():
    import sieve.__main__  # noqa: F401


def test_main_module_executable(tmp_path):
    result = subprocess.run(
        [sys.executable, "-m", "sieve", "--help"],
        capture_output=True,
        text=True,
        timeout=30,
        cwd=tmp_path,
    )
    assert "ImportError" not in result.stderr
    assert "ModuleNotFoundError" not in result.stderr
    assert result.returncode == 0
    assert "usage: sieve" in result.stdout


def test_main_module_version():
    result = subprocess.run(
        [sys.executable, "-m", "sieve", "version"],
        capture_output=True,
        text=True,
        timeout=30,
    )
    assert result.returncode == 0
    assert result.stdout.strip()
