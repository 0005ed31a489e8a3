"""Command line interface for rnbox."""

from .app import app, main


__all__ = ["app", "main"]
