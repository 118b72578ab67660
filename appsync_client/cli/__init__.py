"""
AppSync Client CLI package.

This package provides the ``appsync-client`` command-line interface.
"""

from .main import cli, main

__all__ = ["cli", "main"]
