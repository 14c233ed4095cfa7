"""Sieve package metadata."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("sieve-secrets")
except PackageNotFoundError:
    __version__ = "0.0.1"
