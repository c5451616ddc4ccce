#!/usr/bin/env python3
"""
Command-line interface for MARC <-> JSON / YAML / TOML conversion.

Subcommands:
- convert: Convert a file between any two formats (through JSON)
- format: Canonicalize a MARC file, or check that it already is canonical
- roundtrip: Check that a document survives every other format unchanged
- show: Print the four representations of the example document
"""

import os
import time
from pathlib import Path
from typing import Optional, Tuple

import typer
from dotenv import load_dotenv

from marcsync.contexts.conversion import (
    ConversionError,
    Format,
    convert_file,
    get_default_converter,
    validate_roundtrip,
)
from marcsync.contexts.conversion.logger import (
    log_conversion_result,
    log_conversion_start,
    log_roundtrip_result,
    setup_conversion_logger,
)
from marcsync.contexts.sync import SyncSession
from marcsync.contexts.sync.logger import setup_sync_logger
from marcsync.utils.text_processing import get_meaningful_diff
from marcsync.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    add_completion=False,
    help="Convert documents between MARC, JSON, YAML and TOML",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def parse_format(name: Optional[str]) -> Optional[Format]:
    """Resolve a --to/--from option, exiting with an error on unknown names."""
    if name is None:
        return None
    try:
        return Format.from_name(name)
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("convert")
def convert_command(
    input_file: Path = typer.Argument(
        ...,
        help="File to convert (.marc, .json, .yaml, .toml)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    to: str = typer.Option(
        "json",
        "--to",
        "-t",
        help="Target format (marc, json, yaml, toml)",
    ),
    source: str = typer.Option(
        None,
        "--from",
        "-f",
        help="Source format (inferred from the file suffix if omitted)",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path (if not specified, prints to stdout)",
    ),
):
    """
    Convert a document to another format.

    Every conversion goes through JSON, so MARC -> TOML is MARC -> JSON -> TOML.

    Examples:\n

        $ convert_document.py convert config.marc --to toml

        $ convert_document.py convert data.json -t marc -o data.marc

        $ convert_document.py convert notes.txt --from yaml --to json
    """
    target = parse_format(to)
    source_format = parse_format(source)

    log_file = setup_conversion_logger(LOGS_PATH / f"convert_{now()}", command="convert")
    source_name = source_format.display_name if source_format else "auto"
    log_conversion_start(input_file, source_name, target.display_name, log_file)

    start_time = time.time()
    result = convert_file(input_file, target, output_path=output, source=source_format)
    log_conversion_result(result, time.time() - start_time)

    if not result.success:
        typer.secho("\n✗ Conversion failed\n", fg=typer.colors.RED, err=True)
        typer.echo(result.error, err=True)
        raise typer.Exit(code=1)

    if output:
        typer.secho(f"\n✓ Success! {target.display_name} saved to: {output}", fg=typer.colors.GREEN)
    else:
        typer.echo(result.text, nl=False)


@app.command("format")
def format_command(
    marc_file: Path = typer.Argument(
        ...,
        help="Path to .marc file to format",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path (if not specified, modifies in-place)",
    ),
    check: bool = typer.Option(
        False,
        "--check",
        "-c",
        help="Only report whether the file is canonical (exit 1 if not)",
    ),
):
    """
    Rewrite a MARC file in canonical layout.

    Canonical layout: one group per top-level key separated by blank lines,
    `[i]` on the first line of each array element and `[ ]` after, and the
    simplest string quoting that preserves the value. Comments are dropped.

    Examples:\n

        $ convert_document.py format config.marc                 # Format in-place

        $ convert_document.py format config.marc -o tidy.marc    # Save to new file

        $ convert_document.py format config.marc --check         # CI check
    """
    setup_conversion_logger(LOGS_PATH / f"format_{now()}", command="format")
    text = marc_file.read_text(encoding="utf-8")

    try:
        formatted = get_default_converter().canonicalize(text)
    except ConversionError as e:
        typer.secho(f"\n✗ Cannot format {marc_file.name}\n", fg=typer.colors.RED, err=True)
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)

    if check:
        if formatted == text:
            typer.secho(f"✓ {marc_file.name} is canonical", fg=typer.colors.GREEN)
            return
        diff_lines, num_diffs = get_meaningful_diff(
            text, formatted, fromfile=marc_file.name, tofile=f"{marc_file.name} (formatted)"
        )
        typer.secho(f"✗ {marc_file.name} is not canonical", fg=typer.colors.YELLOW, err=True)
        if num_diffs == 0:
            typer.echo("  Only blank-line grouping differs", err=True)
        for line in diff_lines:
            typer.echo(line, err=True)
        raise typer.Exit(code=1)

    output_path = output if output else marc_file
    output_path.write_text(formatted, encoding="utf-8")
    typer.secho(f"✓ Formatted MARC saved to: {output_path}", fg=typer.colors.GREEN)


@app.command("roundtrip")
def roundtrip_command(
    input_file: Path = typer.Argument(
        ...,
        help="Document to check (.marc, .json, .yaml, .toml)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    source: str = typer.Option(
        None,
        "--from",
        "-f",
        help="Source format (inferred from the file suffix if omitted)",
    ),
):
    """
    Check pivot consistency against every other format.

    For each other format B, JSON -> B -> JSON must give back the same value.
    Formats that cannot hold the value at all (e.g. TOML and null) are
    reported as not expressible and do not fail the check.

    Examples:\n

        $ convert_document.py roundtrip config.marc
    """
    source_format = parse_format(source)
    if source_format is None:
        try:
            source_format = Format.from_path(input_file)
        except ValueError as e:
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

    setup_conversion_logger(LOGS_PATH / f"roundtrip_{now()}", command="roundtrip")
    report = validate_roundtrip(source_format, input_file.read_text(encoding="utf-8"))
    log_roundtrip_result(source_format.display_name, report)

    typer.secho(f"\nRoundtrip: {input_file.name} ({report['source']})", fg=typer.colors.BLUE, bold=True)

    if report["error"]:
        typer.secho("✗ Source document failed to load\n", fg=typer.colors.RED, err=True)
        typer.echo(report["error"], err=True)
        raise typer.Exit(code=1)

    for target_name, target in report["targets"].items():
        if not target["expressible"]:
            typer.echo(f"  - {target_name: <5} not expressible: {target['error']}")
        elif target["success"]:
            typer.secho(f"  ✓ {target_name: <5} consistent", fg=typer.colors.GREEN)
        else:
            typer.secho(
                f"  ✗ {target_name: <5} {target['error'] or 'values differ'}",
                fg=typer.colors.RED,
            )

    typer.echo(f"  Time: {report['time_ms']:.1f}ms\n")
    raise typer.Exit(code=0 if report["validation_passed"] else 1)


@app.command("show")
def show_command(
    edit: Tuple[str, str] = typer.Option(
        (None, None),
        "--edit",
        "-e",
        help="Apply an edit first: FORMAT followed by a file holding the new text",
    ),
):
    """
    Print all four representations of the example document.

    With --edit, the file's text replaces one representation first and the
    other three are recomputed, exactly as an editor would.

    Examples:\n

        $ convert_document.py show

        $ convert_document.py show --edit json broken.json
    """
    setup_sync_logger(LOGS_PATH / f"show_{now()}", command="show")
    session = SyncSession()

    edit_name, edit_file = edit
    if edit_name is not None:
        fmt = parse_format(edit_name)
        session.edit(fmt, Path(edit_file).read_text(encoding="utf-8"))

    document = session.document
    for fmt in Format:
        slot = document.slot(fmt)
        marker = " (edited)" if fmt is document.edit_origin else ""
        color = typer.colors.RED if slot.is_error else typer.colors.BLUE
        typer.secho(f"\n=== {fmt.display_name}{marker} ===", fg=color, bold=True)
        typer.echo(slot.text.rstrip("\n"))
    typer.echo("")


if __name__ == "__main__":
    app()
