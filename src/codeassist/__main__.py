"""Allow ``python -m codeassist``."""

from codeassist.cli import app

if __name__ == "__main__":
    app()
