"""Command line interface for site-deployer"""

from .main import cli, main

__all__ = ["cli", "main"]
