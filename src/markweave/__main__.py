"""Allow ``python -m markweave``."""

from markweave.cli import app

if __name__ == "__main__":
    app()
