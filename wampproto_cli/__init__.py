"""Interoperability CLI for wampproto implementations.

The command surface is implemented with Typer and Rich for better help and
error ergonomics, while command outputs stay a single machine-friendly line.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
