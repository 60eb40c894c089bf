"""LinkVault command line interface."""

from linkvault.cli.typer_app import app

__all__ = ["app"]
