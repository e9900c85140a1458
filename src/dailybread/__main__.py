"""Main entry point for ``python -m dailybread``."""

from dailybread.cli import app

if __name__ == "__main__":
    app()
