"""Command-line interface for maintcrm."""
from maintcrm.cli.main import main

__all__ = ["main"]
