import sys

from cli._runner import run


def main() -> None:
    """Run linting."""
    sys.exit(run(["uv", "run", "ruff", "check", "."]))


def format() -> None:
    """Run code formatting."""
    sys.exit(run(["uv", "run", "ruff", "format", "."]))
