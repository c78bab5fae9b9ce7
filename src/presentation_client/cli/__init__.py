"""Command-line interface for presentation-client.

Provides commands for configuring the client and querying hierarchies,
content and labels from a presentation backend.
"""

from .main import cli, main

__all__ = ["cli", "main"]
