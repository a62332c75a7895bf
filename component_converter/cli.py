"""
Command-line interface for the component converter.

Usage::

    component-converter convert Button.tsx -t svelte -o out/
    component-converter convert ui.tsx --all -t vue --format
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console
from rich.table import Table

from . import __version__
from .config import ConverterOptions, Target, load_config
from .converter import ComponentConverter, ConversionResult
from .errors import ConverterError
from .formatting import PrettierFormatter, WhitespaceFormatter
from .plugins import ConverterPlugin, get_plugin, load_entry_point_plugins

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_options(args: argparse.Namespace) -> ConverterOptions:
    config_path = Path(args.config) if args.config else None
    options = load_config(config_path, start=Path(args.input).resolve().parent)
    return options.merged(
        target=Target.parse(args.target) if args.target else None,
        svelte_version=args.svelte_version,
        typescript=False if args.no_typescript else None,
        emit_formatted=True if args.format else None,
    )


def _formatter_for(args: argparse.Namespace):
    if args.prettier:
        return PrettierFormatter()
    return WhitespaceFormatter()


def _extra_plugins(names: Optional[List[str]]) -> List[ConverterPlugin]:
    if not names:
        return []
    loaded = load_entry_point_plugins()
    if loaded:
        logger.debug(f"Loaded entry point plugins: {', '.join(loaded)}")
    return [get_plugin(name)() for name in names]


def _write_results(results: List[ConversionResult], out_dir: Optional[Path]) -> Dict[str, Path]:
    written: Dict[str, Path] = {}
    if out_dir is None:
        return written
    out_dir.mkdir(parents=True, exist_ok=True)
    for result in results:
        if not result.success:
            continue
        destination = out_dir / result.filename
        destination.write_text(result.code, encoding="utf-8")
        written[result.component] = destination
        logger.debug(f"Wrote {destination}")
    return written


def _print_summary(results: List[ConversionResult], written: Dict[str, Path]) -> None:
    table = Table(title=f"Converted components ({len(results)})")
    table.add_column("Component", style="cyan")
    table.add_column("Target")
    table.add_column("Status")
    table.add_column("Output")
    table.add_column("Warnings", justify="right")
    for result in results:
        status = "[green]ok[/green]" if result.success else "[red]failed[/red]"
        output = str(written.get(result.component, result.filename))
        table.add_row(result.component, result.target.value, status, output, str(len(result.warnings)))
    console.print(table)

    for result in results:
        for warning in result.warnings:
            console.print(f"[yellow]warning[/yellow] {result.component}: {warning}", highlight=False)


def cmd_convert(args: argparse.Namespace) -> int:
    """Handle the ``convert`` subcommand."""
    input_path = Path(args.input)
    try:
        source = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        error_console.print(f"[red]Error:[/red] cannot read {input_path}: {exc}")
        return 1

    try:
        options = _build_options(args)
        converter = ComponentConverter(
            options,
            extra_plugins=_extra_plugins(args.plugin),
            formatter=_formatter_for(args),
        )
        if args.all:
            results = list(converter.convert_all_sync(source, path=str(input_path)).values())
        else:
            results = [converter.convert_sync(source, component=args.component, path=str(input_path))]
    except ConverterError as exc:
        error_console.print(f"[red]Error:[/red] {exc.format()}", highlight=False)
        return 1

    out_dir = Path(args.out) if args.out else None
    written = _write_results(results, out_dir)
    if out_dir is None and len(results) == 1 and results[0].success:
        # Single component without an output directory goes to stdout.
        sys.stdout.write(results[0].code)
        if not results[0].code.endswith("\n"):
            sys.stdout.write("\n")
        for warning in results[0].warnings:
            error_console.print(f"[yellow]warning[/yellow] {warning}", highlight=False)
    else:
        _print_summary(results, written)

    return 0 if all(result.success for result in results) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="component-converter",
        description="Convert React TSX components to Svelte or Vue single-file components",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    convert_parser = subparsers.add_parser("convert", help="Convert a TSX source file")
    convert_parser.add_argument("input", help="Path to the .tsx source file")
    convert_parser.add_argument(
        "-t", "--target",
        choices=[target.value for target in Target],
        default=None,
        help="Target framework (default: from configuration, else svelte)",
    )
    convert_parser.add_argument("-o", "--out", default=None, help="Directory for the generated files")
    convert_parser.add_argument(
        "--all", action="store_true", help="Convert every component defined in the file"
    )
    convert_parser.add_argument(
        "-c", "--component", default=None, help="Name of the component to convert"
    )
    convert_parser.add_argument("--format", action="store_true", help="Format the generated code")
    convert_parser.add_argument(
        "--prettier", action="store_true",
        help="Use prettier (via npx) instead of the whitespace formatter; implies --format",
    )
    convert_parser.add_argument(
        "--svelte-version", type=int, choices=[4, 5], default=None,
        help="Svelte major version to target (default: 5)",
    )
    convert_parser.add_argument(
        "--no-typescript", action="store_true", help="Emit plain JavaScript script blocks"
    )
    convert_parser.add_argument(
        "-p", "--plugin", action="append", default=None, metavar="NAME",
        help="Run a registered or entry point plugin in addition to the defaults (repeatable)",
    )
    convert_parser.add_argument("--config", default=None, help="Path to a configuration file")
    convert_parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    convert_parser.set_defaults(func=cmd_convert)
    return parser


def main(argv: Optional[list] = None) -> int:
    """Entry point for the ``component-converter`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    if getattr(args, "prettier", False):
        args.format = True
    _configure_logging(getattr(args, "verbose", False))
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
