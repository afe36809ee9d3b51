# File: extmodelgen/cli.py
"""
ExtModelGen - Command-Line Interface
======================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Basic generation
    python -m extmodelgen --input models.yaml --output ./app/model

    # Ext JS 4 dialect, pretty-printed, with builtin validations
    python -m extmodelgen -i models.json -o ./out \\
        --output-format extjs4 --debug --include-validation builtin

    # Base class plus create-once subclass per model
    python -m extmodelgen -i models.yaml -o ./out --create-base-and-subclass

    # Render only, print the code instead of writing files
    python -m extmodelgen -i models.yaml --dry-run

Exit codes:
    0 — success
    2 — generation error
    3 — export error
    4 — input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, NoReturn, Optional, Sequence

from extmodelgen.models import ApiQuoteStyle, IncludeValidation, LineEnding, OutputFormat

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root extmodelgen logger based on verbosity level.

    Args:
        verbosity: -1 = ERROR, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    formatter: logging.Formatter = logging.Formatter(fmt, datefmt=datefmt)
    handler.setFormatter(formatter)

    root_logger: logging.Logger = logging.getLogger("extmodelgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _choices(enum_type: type) -> List[str]:
    return [member.value for member in enum_type]


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from extmodelgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="extmodelgen",
        description=(
            "ExtModelGen — Ext JS / Sencha Touch model generator.\n\n"
            "Transforms class metadata descriptors (JSON/YAML) into "
            "Ext.define(...) data model definitions."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -i models.yaml -o ./app/model\n"
            "  %(prog)s -i models.json -o ./out --output-format touch2 --debug\n"
            "  %(prog)s -i models.yaml --dry-run\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"ExtModelGen v{__version__}",
    )

    # --- Required arguments ---
    parser.add_argument(
        "-i", "--input",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the class descriptor file (JSON or YAML).",
    )

    # --- Output ---
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Output directory (defaults to the file's config.output_dir).",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Render every model and print it instead of writing files.",
    )

    # --- Config overrides ---
    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--output-format",
        type=str,
        default=None,
        choices=_choices(OutputFormat),
        help="Target dialect.",
    )
    config_group.add_argument(
        "--include-validation",
        type=str,
        default=None,
        choices=_choices(IncludeValidation),
        help="Which validations to include.",
    )
    config_group.add_argument(
        "--api-quote-style",
        type=str,
        default=None,
        choices=_choices(ApiQuoteStyle),
        help="Quote proxy API method names never, always, or per dialect.",
    )
    config_group.add_argument(
        "--line-ending",
        type=str,
        default=None,
        choices=_choices(LineEnding),
        help="Line-break style of the generated files.",
    )
    config_group.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Pretty-print the generated code.",
    )
    config_group.add_argument(
        "--use-single-quotes",
        action="store_true",
        default=None,
        help="Write single instead of double quotes.",
    )
    config_group.add_argument(
        "--quote-field-names",
        action="store_true",
        default=None,
        help="Quote object keys.",
    )
    config_group.add_argument(
        "--create-base-and-subclass",
        action="store_true",
        default=None,
        help="Write <Name>Base.js plus a create-once <Name>.js subclass.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------

_OVERRIDE_OPTIONS = (
    "output_format",
    "include_validation",
    "api_quote_style",
    "line_ending",
    "debug",
    "use_single_quotes",
    "quote_field_names",
    "create_base_and_subclass",
)


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, object]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, object] = {}
    for option in _OVERRIDE_OPTIONS:
        value = getattr(args, option)
        if value is not None:
            overrides[option] = value
    return overrides


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _run_generation(input_path: Path, args: argparse.Namespace) -> int:
    """
    Run the full generation pipeline.

    Returns the appropriate exit code.
    """
    from extmodelgen.generator import GenerationReport, ModelGenerator

    generator: ModelGenerator = ModelGenerator(write_files=not args.dry_run)

    if args.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    report: GenerationReport = generator.generate_from_file(
        input_path,
        Path(args.output) if args.output is not None else None,
        config_overrides=_build_config_overrides(args) or None,
    )

    if args.dry_run:
        for outcome in report.outcomes:
            if outcome.success:
                print(outcome.code)

    if not args.quiet:
        print(report.summary(), file=sys.stderr if args.dry_run else sys.stdout)

    if not report.success:
        if report.input_errors:
            return EXIT_INPUT_ERROR
        elif report.generation_errors:
            return EXIT_GENERATION_ERROR
        elif report.export_errors:
            return EXIT_EXPORT_ERROR
        return EXIT_GENERATION_ERROR

    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    input_path: Path = Path(args.input).resolve()

    if not input_path.exists():
        logger.error("Descriptor file not found: %s", input_path)
        sys.exit(EXIT_INPUT_ERROR)

    if not input_path.is_file():
        logger.error("Descriptor path is not a file: %s", input_path)
        sys.exit(EXIT_INPUT_ERROR)

    logger.info("Input:   %s", input_path)
    logger.info("Output:  %s", args.output or "(from config)")

    exit_code: int = _run_generation(input_path, args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("extmodelgen.cli loaded.")
