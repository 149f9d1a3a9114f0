"""Rich terminal formatter for Sanctifier."""

import io
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import AnalysisContext, AnalysisReport, ContractMetrics, SizeWarningLevel
from .base import BaseFormatter


def _level_label(level: SizeWarningLevel) -> str:
    if level is SizeWarningLevel.EXCEEDS_LIMIT:
        return "[red bold]exceeds limit[/red bold]"
    return "[yellow]approaching limit[/yellow]"


def _complexity_label(cc: int) -> str:
    if cc > 20:
        return f"[red bold]{cc}[/red bold]"
    elif cc > 10:
        return f"[red]{cc}[/red]"
    elif cc > 5:
        return f"[yellow]{cc}[/yellow]"
    else:
        return f"[green]{cc}[/green]"


class RichFormatter(BaseFormatter):
    """Rich terminal output: summary panel, then one section per file."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def render(self, reports: List[AnalysisReport], context: AnalysisContext) -> None:
        self._print_summary(reports, context)
        for report in reports:
            self._print_report(report)

    def format(self, reports: List[AnalysisReport], context: AnalysisContext) -> str:
        buffer = io.StringIO()
        previous = self.console
        self.console = Console(file=buffer, width=120, color_system=None)
        try:
            self.render(reports, context)
        finally:
            self.console = previous
        return buffer.getvalue()

    # -- private helpers --

    def _print_summary(self, reports: List[AnalysisReport], context: AnalysisContext) -> None:
        issues = sum(r.issue_count for r in reports)
        colour = "red" if issues else "green"
        summary_text = (
            f"Target [bold]{escape(context.target)}[/bold]  |  "
            f"Scanned [bold]{context.files_scanned}[/bold] files  |  "
            f"[{colour}]{issues}[/{colour}] findings  |  "
            f"Ledger limit: [blue]{context.ledger_limit}[/blue] bytes"
        )
        self.console.print(Panel(summary_text, title="[bold cyan]Sanctifier[/bold cyan]", expand=False))
        self.console.print()

    def _print_report(self, report: AnalysisReport) -> None:
        c = self.console
        has_security = report.issue_count > 0
        if not has_security and not report.gas_estimates and report.metrics is None:
            return

        c.print(f"[bold]{escape(report.path or '<source>')}[/bold]")

        if report.auth_gaps:
            c.print("  [bold]Authorization gaps:[/bold]")
            for gap in report.auth_gaps:
                c.print(f"    [red]![/red] {escape(gap)} mutates storage without require_auth")

        if report.panic_issues:
            c.print("  [bold]Panics:[/bold]")
            for issue in report.panic_issues:
                c.print(f"    [red]![/red] {issue.issue_type.value} at {escape(issue.location)}")

        if report.arithmetic_issues:
            c.print("  [bold]Unchecked arithmetic:[/bold]")
            for issue in report.arithmetic_issues:
                c.print(f"    [yellow]![/yellow] '{escape(issue.operation)}' at {escape(issue.location)}")
                c.print(f"      [green]->[/green] {escape(issue.suggestion)}")

        if report.size_warnings:
            c.print("  [bold]Ledger entry size:[/bold]")
            for warning in report.size_warnings:
                c.print(
                    f"    {escape(warning.struct_name)}: {warning.estimated_size} / {warning.limit} bytes "
                    f"({_level_label(warning.level)})"
                )

        if report.storage_collisions:
            c.print("  [bold]Storage key collisions:[/bold]")
            for issue in report.storage_collisions:
                c.print(f"    [red]![/red] {escape(issue.location)} [dim]({issue.key_type.value})[/dim]")
                c.print(f"      {escape(issue.message)}")

        if report.event_issues:
            c.print("  [bold]Events:[/bold]")
            for issue in report.event_issues:
                c.print(f"    [yellow]![/yellow] {escape(issue.location)}: {escape(issue.message)}")

        if report.upgrade_report.findings:
            c.print("  [bold]Upgrade / admin surface:[/bold]")
            for finding in report.upgrade_report.findings:
                c.print(f"    [yellow]![/yellow] {escape(finding.location)}: {escape(finding.message)}")
                c.print(f"      [green]->[/green] {escape(finding.suggestion)}")

        if report.custom_rule_matches:
            c.print("  [bold]Custom rules:[/bold]")
            for match in report.custom_rule_matches:
                c.print(f"    [magenta]{escape(match.rule_name)}[/magenta] line {match.line}: {escape(match.snippet)}")

        if report.gas_estimates:
            table = Table(title="Gas estimate", expand=False)
            table.add_column("Function", style="yellow")
            table.add_column("Instructions", justify="right")
            table.add_column("Memory (bytes)", justify="right")
            for gas in report.gas_estimates:
                table.add_row(
                    escape(gas.function_name),
                    str(gas.estimated_instructions),
                    str(gas.estimated_memory_bytes),
                )
            c.print(table)

        if report.metrics is not None:
            self._print_metrics(report.metrics)

        if not has_security:
            c.print("  [green]No issues found.[/green]")
        c.print()

    def _print_metrics(self, metrics: ContractMetrics) -> None:
        c = self.console
        c.print(f"  [bold]Dependencies:[/bold] {metrics.dependency_count}")
        if not metrics.functions:
            return
        table = Table(title="Complexity", expand=False)
        table.add_column("Function", style="yellow")
        table.add_column("CC", justify="right")
        table.add_column("Params", justify="right")
        table.add_column("Nesting", justify="right")
        table.add_column("LOC", justify="right")
        for fn in metrics.functions:
            table.add_row(
                escape(fn.name),
                _complexity_label(fn.cyclomatic_complexity),
                str(fn.param_count),
                str(fn.max_nesting_depth),
                str(fn.loc),
            )
        c.print(table)
        for fn in metrics.functions:
            for warning in fn.warnings:
                c.print(f"    [yellow]![/yellow] {escape(fn.name)}: {escape(warning)}")
