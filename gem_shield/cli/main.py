"""Main CLI interface for GemShield."""

import time
from enum import Enum
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..core.exceptions import GemShieldError, NotADirectory
from ..core.matcher import MatchEngine
from ..core.parsers import GemfileLockParser, insecure_sources
from ..database import AdvisoryDatabase, DatabaseConfig
from ..output.formatters import ConsoleFormatter, JSONFormatter, solution
from ..utils.logging import get_logger, setup_logging

app = typer.Typer(
    name="gem-shield",
    help="Audit a Gemfile.lock against the ruby-advisory-db",
    add_completion=False
)

console = Console()
logger = get_logger("CLI")

EXIT_VULNERABLE = 1
EXIT_FATAL = 2

DATABASE_ENV = "GEM_SHIELD_DATABASE"

DOWNLOAD_HINT = "Run 'gem-shield download' to fetch the advisory database"


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


def _database(database_path: Optional[Path]) -> AdvisoryDatabase:
    config = DatabaseConfig(path=database_path) if database_path else DatabaseConfig()
    return AdvisoryDatabase(config)


def _find_lockfile(path: Path, parser: GemfileLockParser) -> Path:
    if path.is_file():
        return path
    for name in parser.file_names:
        candidate = path / name
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(f"No {' or '.join(parser.file_names)} found in {path}")


def _fail(error: Exception) -> NoReturn:
    details = DOWNLOAD_HINT if isinstance(error, NotADirectory) else None
    ConsoleFormatter(console).format_error(str(error), details=details)
    raise typer.Exit(EXIT_FATAL)


@app.command()
def check(
    path: Path = typer.Argument(
        Path("."),
        help="Project directory or lockfile to audit"
    ),
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        "-D",
        envvar=DATABASE_ENV,
        help="Path to the local ruby-advisory-db clone"
    ),
    update: bool = typer.Option(
        False,
        "--update",
        "-u",
        help="Update the advisory database before checking"
    ),
    ignore: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        "-i",
        help="Advisory identifier to ignore (repeatable)"
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        "-F",
        help="Output format"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the JSON report to this file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show advisory descriptions and debug logging"
    ),
    performance: bool = typer.Option(
        False,
        "--performance",
        help="Show performance summary"
    )
) -> None:
    """Check a project's locked gems for known vulnerabilities."""
    setup_logging(verbose=verbose)

    database = _database(database_path)
    parser = GemfileLockParser()

    try:
        if update:
            database.update()

        lockfile = parser.parse(_find_lockfile(path, parser))
        store = database.open_store()
    except (GemShieldError, OSError, ValueError) as e:
        logger.error(f"Check failed: {e}")
        _fail(e)

    engine = MatchEngine(enable_performance_monitoring=performance)
    start_time = time.perf_counter()
    report = engine.scan(
        lockfile.pairs(),
        store,
        insecure_sources=insecure_sources(lockfile.sources),
        ignore=ignore or (),
    )
    scan_time = time.perf_counter() - start_time

    if output_format is OutputFormat.json:
        typer.echo(JSONFormatter().dumps(report))
    else:
        ConsoleFormatter(console, verbose=verbose).format_report(
            report,
            total_dependencies=len(lockfile.pairs()),
            scan_time=scan_time
        )

    if output:
        JSONFormatter(output).save_report(report)

    if performance:
        engine.performance_monitor.print_summary(console)

    if report.vulnerable or report.errors:
        raise typer.Exit(EXIT_VULNERABLE)


@app.command()
def update(
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        "-D",
        envvar=DATABASE_ENV,
        help="Path to the local ruby-advisory-db clone"
    )
) -> None:
    """Update the advisory database, downloading it if needed."""
    database = _database(database_path)
    console.print(f"Updating ruby-advisory-db in {database} ...")
    try:
        database.update()
    except GemShieldError as e:
        _fail(e)
    console.print("[green]Updated ruby-advisory-db[/green]")


@app.command()
def download(
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        "-D",
        envvar=DATABASE_ENV,
        help="Path to the local ruby-advisory-db clone"
    )
) -> None:
    """Download the advisory database."""
    database = _database(database_path)
    if database.exists():
        console.print(f"[yellow]Database already exists at {database}, use 'update' instead[/yellow]")
        return

    console.print(f"Downloading ruby-advisory-db into {database} ...")
    try:
        database.download()
    except GemShieldError as e:
        _fail(e)
    console.print("[green]Downloaded ruby-advisory-db[/green]")


@app.command()
def stats(
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        "-D",
        envvar=DATABASE_ENV,
        help="Path to the local ruby-advisory-db clone"
    )
) -> None:
    """Show advisory database statistics."""
    database = _database(database_path)
    try:
        store = database.open_store()
    except GemShieldError as e:
        _fail(e)

    table = Table(title="ruby-advisory-db")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Path", str(database))
    table.add_row("Advisories", str(store.size()))
    table.add_row("Gems", str(len(store.gems())))

    try:
        table.add_row("Last updated", database.last_updated().strftime("%Y-%m-%d %H:%M:%S %z"))
    except GemShieldError as e:
        logger.debug(f"Could not determine last update: {e}")
        table.add_row("Last updated", "unknown")

    console.print(table)


@app.command()
def lookup(
    name: str = typer.Argument(..., help="Gem name"),
    version: str = typer.Argument(..., help="Gem version"),
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        "-D",
        envvar=DATABASE_ENV,
        help="Path to the local ruby-advisory-db clone"
    )
) -> None:
    """Check a single gem version against the database."""
    try:
        store = _database(database_path).open_store()
        advisories = list(store.check_dependency(name, version))
    except GemShieldError as e:
        _fail(e)

    if not advisories:
        console.print(f"[green]No advisories affect {name} {version}[/green]")
        return

    console.print(f"[red]{len(advisories)} advisories affect {name} {version}[/red]")
    for advisory in advisories:
        console.print(f"  • {advisory.primary_identifier}: {advisory.title} ({solution(advisory)})")
    raise typer.Exit(EXIT_VULNERABLE)


@app.command()
def version() -> None:
    """Show GemShield version."""
    console.print(Panel.fit(
        f"[bold blue]GemShield[/bold blue] {__version__}\n"
        "Audits Gemfile.lock files against the ruby-advisory-db",
        title="Information"
    ))


def main() -> None:
    """Main entry point for GemShield CLI."""
    app()


if __name__ == "__main__":
    main()
