"""Entry point for ``python -m adaptive_eda``."""

from adaptive_eda.cli import cli

if __name__ == "__main__":
    cli()
