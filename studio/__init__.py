"""Passport photo studio server."""

__version__ = "1.0.0"
