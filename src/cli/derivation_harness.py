# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""CLI harness deriving record shapes from annotated Python protocols."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table
from rich.text import Text

from recordshape.adapters.python import (
    AdapterError,
    PythonSymbolAdapter,
    RecordInterfaceDecl,
)
from recordshape.diagnostics import format_pin_site
from recordshape.discovery import discover_sources
from recordshape.engine import derive_record_shape
from recordshape.model import DerivationOptions, RecordShape
from recordshape.symbols import Report

logger = logging.getLogger(__name__)

TABLE_COLUMN_RATIOS: dict[str, int] = {
    "component": 2,
    "type": 3,
    "declared_in": 3,
    "origin": 2,
}


class ValidationError(RuntimeError):
    """Represent user input validation failure."""


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="recordshape")
    subparsers = parser.add_subparsers(dest="command", required=True)
    derive_parser = subparsers.add_parser("derive")
    derive_parser.add_argument("--path", required=True, help="Root path to analyze.")
    derive_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    derive_parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
    )
    derive_parser.add_argument(
        "--interface-suffix",
        default="Record",
        help="Suffix appended to the interface name to name the record.",
    )
    derive_parser.add_argument(
        "--builder-suffix",
        default="Builder",
        help="Suffix appended to the record name to name the builder.",
    )
    derive_parser.add_argument(
        "--package",
        required=False,
        help="Namespace override for every derived record.",
    )
    derive_parser.add_argument(
        "--no-builder",
        action="store_true",
        help="Do not request builder companions.",
    )
    derive_parser.add_argument(
        "--strict-overrides",
        action="store_true",
        help="Report same-name components declared with different types.",
    )
    derive_parser.add_argument(
        "--no-initializers",
        action="store_true",
        help="Skip initializer resolution.",
    )
    derive_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Gitignore-style pattern to exclude; may be repeated.",
    )
    derive_parser.add_argument(
        "--interface",
        action="append",
        default=[],
        help="Qualified name of a record interface to derive; may be repeated.",
    )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code: 0 on success, 1 when any derivation reported diagnostics,
        2 on usage errors.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.command == "derive":
        return _run_derive(args=args, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _run_derive(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run derive command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    root_path = Path(args.path)
    try:
        _validate_root(root_path)
        sources = discover_sources(root_path, exclude=args.exclude)
    except ValidationError as exc:
        logger.warning(f"Validation failed (error={exc})")
        stderr.write(f"{exc}\n")
        return 2
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Source discovery failed (path={root_path} error={exc})")
        stderr.write(f"Failed to discover sources: {exc}\n")
        return 2

    adapter = PythonSymbolAdapter.load(root_path=root_path, files=sources)
    try:
        declarations = _select_declarations(
            declarations=adapter.record_interfaces(), requested=args.interface
        )
    except ValidationError as exc:
        logger.warning(f"Validation failed (error={exc})")
        stderr.write(f"{exc}\n")
        return 2

    shapes: list[RecordShape] = []
    for declaration in declarations:
        shape = derive_record_shape(
            adapter, declaration.interface, _build_options(args, declaration)
        )
        if shape is not None:
            shapes.append(shape)
    logger.info(
        f"Derivation completed (path={root_path} interfaces={len(declarations)} "
        f"shapes={len(shapes)} diagnostics={len(adapter.reports)} "
        f"errors={len(adapter.errors)})"
    )

    _write_errors(errors=adapter.errors, stderr=stderr)
    _write_reports(reports=adapter.reports, stderr=stderr)
    payload = _build_payload(
        shapes=shapes, reports=adapter.reports, errors=adapter.errors
    )
    if args.format == "json":
        if args.output:
            try:
                _write_json_file(payload=payload, output_path=Path(args.output))
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return 2
        else:
            _write_json(payload=payload, stdout=stdout)
    else:
        _write_table(shapes=shapes, stdout=stdout)
    return 1 if adapter.reports else 0


def _validate_root(root_path: Path) -> None:
    """Validate the analyzed root path.

    Raises:
        ValidationError: If the path is missing or not a directory.
    """
    if not root_path.exists():
        raise ValidationError(f"Path does not exist: {root_path}")
    if not root_path.is_dir():
        raise ValidationError(f"Path must be a directory: {root_path}")


def _select_declarations(
    declarations: list[RecordInterfaceDecl], requested: list[str]
) -> list[RecordInterfaceDecl]:
    """Restrict declarations to the requested qualified names.

    Raises:
        ValidationError: If a requested name is not a record interface.
    """
    if not requested:
        return declarations
    known = {declaration.interface.qualified_name for declaration in declarations}
    missing = sorted(set(requested) - known)
    if missing:
        raise ValidationError(f"Unknown record interface: {', '.join(missing)}")
    return [
        declaration
        for declaration in declarations
        if declaration.interface.qualified_name in requested
    ]


def _build_options(
    args: argparse.Namespace, declaration: RecordInterfaceDecl
) -> DerivationOptions:
    return DerivationOptions(
        add_builder=declaration.add_builder and not args.no_builder,
        package_override=args.package or declaration.package_override,
        interface_suffix=args.interface_suffix,
        builder_suffix=args.builder_suffix,
        report_conflicting_overrides=args.strict_overrides,
        detect_initializers=not args.no_initializers,
    )


def _build_payload(
    shapes: list[RecordShape], reports: list[Report], errors: list[AdapterError]
) -> dict[str, Any]:
    return {
        "shapes": [_shape_payload(shape) for shape in shapes],
        "diagnostics": [
            {
                "severity": report.severity,
                "message": report.message,
                "site": format_pin_site(report.pin_site),
            }
            for report in reports
        ],
        "errors": [
            {"file_path": error.file_path, "message": error.message}
            for error in errors
        ],
    }


def _shape_payload(shape: RecordShape) -> dict[str, Any]:
    return {
        "interface": shape.interface_name,
        "name": shape.name,
        "package": shape.package_name,
        "type_parameters": [str(param) for param in shape.type_parameters],
        "add_builder": shape.add_builder,
        "builder_name": shape.builder_name,
        "components": [
            {
                "name": component.name,
                "type": str(component.type),
                "declared_in": component.declared_in.qualified_name,
                "origin": format_pin_site(component.origin_method),
            }
            for component in shape.components
        ],
        "initializers": {
            initializer.component: initializer.expression
            for initializer in shape.initializers
        },
    }


def _write_errors(errors: list[AdapterError], stderr: TextIO) -> None:
    for error in errors:
        stderr.write(f"adapter_error: {error.file_path}: {error.message}\n")


def _write_reports(reports: list[Report], stderr: TextIO) -> None:
    for report in reports:
        stderr.write(
            f"{format_pin_site(report.pin_site)}: {report.severity}: {report.message}\n"
        )


def _write_json(payload: dict[str, Any], stdout: TextIO) -> None:
    """Write the payload in JSON format.

    Args:
        payload: Shapes, diagnostics and load errors.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(payload, indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_json_file(payload: dict[str, Any], output_path: Path) -> None:
    """Write raw JSON payload to an output file.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
    )


def _write_table(shapes: list[RecordShape], stdout: TextIO) -> None:
    """Write one table per derived shape.

    Args:
        shapes: Derived record shapes.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    for shape in shapes:
        type_parameters = ", ".join(str(param) for param in shape.type_parameters)
        title = f"{shape.package_name}.{shape.name}" if shape.package_name else shape.name
        if type_parameters:
            title = f"{title}[{type_parameters}]"
        console.rule(Text(title), style=Style(color="cyan"), characters="-")
        console.print(
            f"interface={shape.interface_name} builder={shape.builder_name or '-'}",
            markup=False,
            highlight=False,
        )
        initializers = {
            initializer.component: initializer.expression
            for initializer in shape.initializers
        }
        table = Table(show_header=True, show_lines=True, expand=True)
        for column, ratio in TABLE_COLUMN_RATIOS.items():
            table.add_column(column, ratio=ratio, overflow="fold")
        table.add_column("initializer", ratio=2, overflow="fold")
        for component in shape.components:
            table.add_row(
                Text(component.name),
                Text(str(component.type)),
                Text(component.declared_in.qualified_name),
                Text(format_pin_site(component.origin_method)),
                Text(initializers.get(component.name, "")),
            )
        console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
