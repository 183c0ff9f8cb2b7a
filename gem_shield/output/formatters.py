"""Output formatters for GemShield reports."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.advisory import Advisory, Criticality
from ..core.matcher import DependencyError, InsecureSource, Report, UnpatchedMatch
from ..utils.logging import get_logger

NO_PATCH_SOLUTION = "remove or disable this gem until a patch is available!"

CRITICALITY_STYLES = {
    Criticality.CRITICAL: "red bold",
    Criticality.HIGH: "red",
    Criticality.MEDIUM: "yellow",
    Criticality.LOW: "blue",
    Criticality.UNKNOWN: "white",
}


def solution(advisory: Advisory) -> str:
    """Remediation advice for an advisory."""
    if not advisory.patched_versions:
        return NO_PATCH_SOLUTION
    return "upgrade to " + ", ".join(f"'{spec}'" for spec in advisory.patched_versions)


class ConsoleFormatter:
    """Rich console formatter for GemShield reports."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False) -> None:
        """Initialize the console formatter.

        Args:
            console: Rich console instance
            verbose: Include advisory descriptions
        """
        self.console = console or Console()
        self.verbose = verbose

    def format_report(self, report: Report, total_dependencies: int, scan_time: float) -> None:
        """Render every result followed by a summary panel.

        Args:
            report: Scan report
            total_dependencies: Number of gems audited
            scan_time: Time taken for scan in seconds
        """
        for result in report:
            if isinstance(result, InsecureSource):
                self._print_insecure_source(result)
            elif isinstance(result, UnpatchedMatch):
                self._print_advisory(result)
            elif isinstance(result, DependencyError):
                self._print_error(result)

        if report.unpatched:
            self.console.print(self._create_vulnerabilities_table(report))

        self.console.print(self._create_summary_panel(report, total_dependencies, scan_time))

    def _print_insecure_source(self, result: InsecureSource) -> None:
        self.console.print(
            Text.assemble(("Insecure Source URI found: ", "yellow bold"), result.source)
        )

    def _print_error(self, result: DependencyError) -> None:
        self.console.print(
            Text.assemble(("Could not audit: ", "magenta bold"), f"{result.name} ({result.version}): {result.message}")
        )

    def _print_advisory(self, result: UnpatchedMatch) -> None:
        advisory = result.advisory
        lines = Text()
        lines.append("Name: ", style="bold")
        lines.append(f"{result.name}\n")
        lines.append("Version: ", style="bold")
        lines.append(f"{result.version}\n")
        lines.append("Advisory: ", style="bold")
        lines.append(f"{', '.join(advisory.identifiers)}\n")
        lines.append("Criticality: ", style="bold")
        lines.append(f"{advisory.criticality.label}\n", style=CRITICALITY_STYLES[advisory.criticality])
        lines.append("URL: ", style="bold")
        lines.append(f"{advisory.url or ''}\n")
        lines.append("Title: ", style="bold")
        lines.append(f"{advisory.title}\n")
        if self.verbose and advisory.description:
            lines.append("Description:\n", style="bold")
            lines.append(f"{advisory.description.strip()}\n")
        lines.append("Solution: ", style="bold")
        lines.append(solution(advisory), style="red" if not advisory.patched_versions else "")

        self.console.print(Panel(lines, border_style=CRITICALITY_STYLES[advisory.criticality]))

    def _create_vulnerabilities_table(self, report: Report) -> Table:
        table = Table(title="Vulnerabilities Found")

        table.add_column("Gem", style="cyan", no_wrap=True)
        table.add_column("Version", style="blue")
        table.add_column("Advisory", style="red")
        table.add_column("Criticality")
        table.add_column("Title", style="white")

        for match in report.unpatched:
            advisory = match.advisory
            title = advisory.title
            table.add_row(
                match.name,
                match.version,
                advisory.primary_identifier,
                Text(advisory.criticality.label, style=CRITICALITY_STYLES[advisory.criticality]),
                title[:50] + "..." if len(title) > 50 else title,
            )

        return table

    def _create_summary_panel(self, report: Report, total_dependencies: int, scan_time: float) -> Panel:
        if report.vulnerable:
            style = "red"
            title = "Vulnerabilities found!"
        elif report.errors:
            style = "yellow"
            title = "Some gems could not be audited"
        else:
            style = "green"
            title = "No vulnerabilities found"

        content = (
            f"Gems scanned: {total_dependencies}\n"
            f"Vulnerable gems: {len(report.vulnerable_gems)}\n"
            f"Unpatched advisories: {len(report.unpatched)}\n"
            f"Insecure sources: {len(report.insecure_sources)}\n"
            f"Unaudited gems: {len(report.errors)}\n"
            f"Scan time: {scan_time:.2f}s"
        )
        return Panel(content, title=title, style=style)

    def format_error(self, error: str, details: Optional[str] = None) -> None:
        """Format and display error message."""
        content = f"[bold red]Error:[/bold red] {escape(error)}"
        if details:
            content += f"\n\n[dim]{escape(details)}[/dim]"

        self.console.print(Panel(content, style="red"))


class JSONFormatter:
    """JSON formatter for GemShield reports."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")

    def format_report(self, report: Report) -> Dict[str, Any]:
        """Convert a report to a JSON-serializable dictionary.

        Args:
            report: Scan report

        Returns:
            Formatted JSON data
        """
        data: Dict[str, Any] = {
            "vulnerable": report.vulnerable,
            "insecure_sources": [],
            "advisories": [],
            "errors": [],
        }

        for result in report:
            if isinstance(result, InsecureSource):
                data["insecure_sources"].append({"url": result.source})
            elif isinstance(result, UnpatchedMatch):
                advisory = result.advisory
                data["advisories"].append({
                    "name": result.name,
                    "version": result.version,
                    "advisory": advisory.primary_identifier,
                    "criticality": advisory.criticality.label,
                    "url": advisory.url,
                    "description": advisory.description,
                    "title": advisory.title,
                    "solution": solution(advisory),
                })
            elif isinstance(result, DependencyError):
                data["errors"].append({
                    "name": result.name,
                    "version": result.version,
                    "message": result.message,
                })

        return data

    def dumps(self, report: Report) -> str:
        return json.dumps(self.format_report(report), indent=2, ensure_ascii=False)

    def save_report(self, report: Report, output_file: Optional[Path] = None) -> None:
        """Save a report to a JSON file.

        Args:
            report: Scan report
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(self.dumps(report))
                f.write("\n")

            self.logger.info(f"Results saved to {file_path}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise
