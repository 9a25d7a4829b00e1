"""Command-line interface for cdhit-clstr."""

from .main import cli

__all__ = ["cli"]
