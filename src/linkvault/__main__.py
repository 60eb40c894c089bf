"""Entry point for ``python -m linkvault``."""

from linkvault.cli.typer_app import app

if __name__ == "__main__":
    app()
