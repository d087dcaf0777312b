"""Console entry point for the ``finbench`` command."""
from __future__ import annotations

from finbench.cli.commands import app


def main() -> None:
    app(prog_name="finbench")


if __name__ == "__main__":
    main()
