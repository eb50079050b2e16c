"""Command line interface for the maintenance reminder."""

from .__main__ import main

__all__ = ["main"]
