"""CLI interface for zigimports."""

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
)

from zigimports.core.detector import UnusedImportDetector
from zigimports.core.models import ScanResult
from zigimports.output.formatters.enums import OutputFormat
from zigimports.output.formatters.formatter_factory import get_formatter
from zigimports.output.progress.callbacks import NoOpProgressCallback, RichProgressCallback

app = typer.Typer(
    name="zigimports",
    help="🔍 Find and remove unused imports in Zig source files",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


@app.command()
def check(
    paths: Annotated[
        list[Path],
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=True,
            help="Zig files or directories to scan",
        ),
    ],
    fix: Annotated[
        bool,
        typer.Option(
            "--fix",
            help="Remove unused imports in place",
        ),
    ] = False,
    organize: Annotated[
        bool,
        typer.Option(
            "--organize",
            help="Print each file with its imports sorted and grouped (does not write)",
        ),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--output",
            "-o",
            help="Output format: text, json, csv",
        ),
    ] = OutputFormat.TEXT,
    output_file: Annotated[
        Path | None,
        typer.Option(
            "--output-file",
            "-f",
            help="Save results to file",
        ),
    ] = None,
    jobs: Annotated[
        int,
        typer.Option(
            "--jobs",
            "-j",
            min=1,
            help="Number of files to process in parallel",
        ),
    ] = 1,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose output",
        ),
    ] = False,
) -> None:
    """
    Scan Zig files for unused global imports.

    Every global `const x = @import(...)` that is never referenced in its
    file is reported. With --fix the declarations are deleted, repeating
    until no unused import is left.

    Examples:
        zigimports check src/
        zigimports check --fix src/ build.zig
        zigimports check -o json -f results.json src/
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    if fix and organize:
        err_console.print("[red]--organize cannot be combined with --fix[/red]")
        raise typer.Exit(2)

    detector = UnusedImportDetector(fix=fix, organize=organize, jobs=jobs, verbose=verbose)

    try:
        if err_console.is_terminal and not verbose:
            with Progress(
                MofNCompleteColumn(),
                BarColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=err_console,
                transient=True,
            ) as progress:
                task_id = progress.add_task("Scanning for unused imports...", total=None)
                progress_callback = RichProgressCallback(progress, task_id)
                result = detector.scan(paths, progress_callback=progress_callback)
        else:
            result = detector.scan(paths, progress_callback=NoOpProgressCallback())
    except ValueError as e:
        err_console.print(f"[red]Error during scan: {e}[/red]")
        raise typer.Exit(1)

    formatter = get_formatter(output_format)
    output = formatter.format(result)

    if output_file:
        formatter.save(result, output_file)
        err_console.print(f"[green]Results saved to {output_file}[/green]")
    elif output:
        console.print(output, markup=False, highlight=False, soft_wrap=True)

    if organize and output_format == OutputFormat.TEXT:
        for report in result.reports:
            if report.organized is None:
                continue
            console.rule(str(report.path))
            console.print(report.organized, markup=False, highlight=False, soft_wrap=True, end="")

    _print_summary(result)

    if result.failed_files or (not fix and result.unused_count):
        raise typer.Exit(1)


def _print_summary(result: ScanResult) -> None:
    if result.failed_files:
        err_console.print(f"[red]✗ Failed to process {len(result.failed_files)} file(s)[/red]")
    if result.fix:
        err_console.print(f"[green]✅ Removed {result.removed_count} unused import(s)[/green]")
    elif result.unused_count:
        err_console.print(f"[yellow]⚠️  Found {result.unused_count} unused import(s)[/yellow]")
    else:
        err_console.print("[green]✅ No unused imports found![/green]")


@app.command("version")
def cli_version() -> None:
    """Show version information."""
    try:
        console.print(version("zigimports"))
    except PackageNotFoundError:
        console.print("unknown")


if __name__ == "__main__":
    app()
