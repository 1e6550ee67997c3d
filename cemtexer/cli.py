"""Command line interface for cemtexer."""
from __future__ import annotations

from pathlib import Path
from typing import Sequence
import argparse
import logging
import sys

from .analyzer import check_file
from .converter import generate_file
from .exceptions import CemtexError, ConfigurationError, RowValidationError, SettingsValidationError, StructuralError
from .reference import ReferenceData, load_reference_data
from .reporter import Reporter
from .settings import template_text, write_template
from .utils import NO_ERRORS_MARKER, configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VALIDATION_ERRORS = 1
EXIT_FATAL = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cemtexer",
        description="Generate and validate ABA (Cemtex) direct entry payment files",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level",
    )
    parser.add_argument(
        "--institutions",
        type=Path,
        help="Bank code table to use instead of the bundled one",
    )
    parser.add_argument(
        "--bsb-table",
        type=Path,
        help="BSB table (one code per line or a BSB directory CSV) to use instead of the bundled one",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    subparsers.add_parser("showtemplate", help="Print the originator settings template")

    gentemplate = subparsers.add_parser("gentemplate", help="Write the originator settings template to a file")
    gentemplate.add_argument("path", type=Path, help="Where to write the template")

    abagen = subparsers.add_parser("abagen", help="Generate an ABA file from settings and a CSV of payments")
    abagen.add_argument("--template", type=Path, required=True, help="Originator settings (YAML)")
    abagen.add_argument("--csv", type=Path, required=True, help="Payment rows (CSV, no header row)")
    abagen.add_argument("--aba", type=Path, required=True, help="ABA file to create")

    abacheck = subparsers.add_parser("abacheck", help="Validate an ABA file and write a report")
    abacheck.add_argument("--aba", type=Path, required=True, help="ABA file to validate")
    abacheck.add_argument("--report", type=Path, required=True, help="Text report to write")
    abacheck.add_argument("--json", type=Path, help="Optional JSON summary to write")
    abacheck.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Threads used to check transaction records (default: 1)",
    )
    return parser.parse_args(argv)


def _reference(args: argparse.Namespace) -> ReferenceData:
    try:
        return load_reference_data(args.institutions, args.bsb_table)
    except OSError as exc:
        raise ConfigurationError(f"Unable to read reference table: {exc}") from exc


def _show_template(args: argparse.Namespace) -> int:
    print(template_text(), end="")
    return EXIT_OK


def _gen_template(args: argparse.Namespace) -> int:
    path = write_template(args.path)
    print(f"Template written to {path}")
    return EXIT_OK


def _abagen(args: argparse.Namespace) -> int:
    batch = generate_file(args.template, args.csv, args.aba, reference=_reference(args))
    print(f"ABA file written to {args.aba}")
    print(f"- Transactions: {batch.count}")
    print(f"- Total (cents): {batch.total_cents}")
    return EXIT_OK


def _abacheck(args: argparse.Namespace) -> int:
    if args.workers < 1:
        raise ConfigurationError("--workers must be at least 1")
    summary, analysis = check_file(args.aba, reference=_reference(args), workers=args.workers)
    paths = Reporter().render(summary, args.report, args.json)

    print(f"Report written to {paths.txt_path}")
    if paths.json_path is not None:
        print(f"- JSON: {paths.json_path}")
    if summary.error_count:
        print(f"{summary.error_count} error(s) found in {args.aba}")
        return EXIT_VALIDATION_ERRORS
    print(NO_ERRORS_MARKER)
    return EXIT_OK


COMMANDS = {
    "showtemplate": _show_template,
    "gentemplate": _gen_template,
    "abagen": _abagen,
    "abacheck": _abacheck,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(getattr(logging, args.log_level.upper(), logging.INFO))

    try:
        return COMMANDS[args.command](args)
    except RowValidationError as exc:
        print(str(exc), file=sys.stderr)
        for row_number, messages in sorted(exc.failures.items()):
            for message in messages:
                print(f"- Row {row_number}: {message}", file=sys.stderr)
        return EXIT_FATAL
    except SettingsValidationError as exc:
        print("Settings validation failed", file=sys.stderr)
        for message in exc.messages:
            print(f"- {message}", file=sys.stderr)
        return EXIT_FATAL
    except StructuralError as exc:
        print(str(exc), file=sys.stderr)
        for issue in exc.issues:
            print(f"- {issue.message}", file=sys.stderr)
        return EXIT_FATAL
    except CemtexError as exc:
        logger.error("%s", exc)
        print(str(exc), file=sys.stderr)
        return EXIT_FATAL


if __name__ == "__main__":
    raise SystemExit(main())
