"""Terminal rendering of ranked file reports."""

from typing import Iterable

from rich.console import Console
from rich.markup import escape

from codewisdom.config import INDEX_BAD_THRESHOLD, INDEX_WARN_THRESHOLD
from codewisdom.services.analysis_types import FileReport

RULE = "=" * 54
THIN_RULE = "-" * 54


def index_style(legacy_index: float) -> str:
    if legacy_index > INDEX_BAD_THRESHOLD:
        return "red"
    if legacy_index > INDEX_WARN_THRESHOLD:
        return "yellow"
    return "green"


def render_report(console: Console, report: FileReport) -> None:
    style = index_style(report.legacy_index)
    coverage = (
        f"[yellow]{report.comment_coverage_ratio:.2f}%[/yellow] "
        f"({report.comment_lines}/{report.total_lines} lines)"
    )

    console.print(f"[white]{RULE}[/white]")
    console.print(f"  Analysis Report for: [cyan]{escape(report.path)}[/cyan]")
    console.print(f"  Legacy Code Index (LCI): [{style}]{report.legacy_index:.2f}[/{style}] (Higher is worse)")
    console.print(f"[white]{THIN_RULE}[/white]")

    if not report.functions:
        console.print("  (No analyzable functions found in this file)")
        console.print(f"  Comment Coverage:          {coverage}")
        console.print(f"  Naming Violations:         [yellow]{report.naming_violations}[/yellow] found")
        console.print()
        return

    console.print(f"  Avg Function Length:       [yellow]{report.avg_function_length:.2f}[/yellow] lines")
    console.print(f"  Avg Cyclomatic Complexity: [yellow]{report.avg_function_complexity:.2f}[/yellow]")
    console.print(f"  Comment Coverage:          {coverage}")
    console.print(f"  Naming Violations:         [yellow]{report.naming_violations}[/yellow] found")
    console.print(f"[white]{THIN_RULE}[/white]")
    console.print(f"Found {len(report.functions)} functions:\n")
    for func in report.functions:
        console.print(f"  - Function: [yellow]{escape(func.name)}[/yellow]")
        console.print(f"    - Length: {func.line_count}, Complexity: {func.complexity}")
    console.print()


def render_ranking(console: Console, reports: Iterable[FileReport]) -> None:
    console.print("[bold white]=============== PROJECT ANALYSIS RANKING (WORST FILES FIRST) ===============[/bold white]\n")
    for report in reports:
        render_report(console, report)
