# File: extmodelgen/__main__.py
"""
ExtModelGen — Module entry point.

Allows running the generator directly via::

    python -m extmodelgen --input models.yaml --output ./app/model

This module simply delegates to the CLI entry point defined in ``extmodelgen.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from extmodelgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
