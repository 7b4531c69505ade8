"""Command-line interface for targeted-id.

Provides commands for validating a filter configuration and deriving
identifiers for a recorded session state.
"""

from .main import cli, main

__all__ = ["cli", "main"]
