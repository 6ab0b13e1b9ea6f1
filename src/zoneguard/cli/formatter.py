# src/zoneguard/cli/formatter.py
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from zoneguard.core.models import RunReport, Verdict

# Results go to stdout, diagnostics (logging) to stderr
console = Console()

VERDICT_STYLES = {
    Verdict.PASS: ("green", "✅"),
    Verdict.FAIL: ("red", "❌"),
    Verdict.SKIPPED: ("dim", "➖"),
    Verdict.PENDING: ("yellow", "⚠️"),
}

FAILURE_REASONS = {
    "exhausted": "No valid baseline found within the round limit",
    "history": "History exhausted before a valid baseline was found",
}


class ZoneFormatter:
    """
    Renders per-file verdicts and the run summary.
    """

    def __init__(self, target_console: Console = None):
        self.console = target_console or console

    def print_header(self, subtitle: str):
        self.console.print(Panel.fit(
            "[bold cyan]ZoneGuard v1.0.0[/bold cyan]\n"
            "══════════════════════════════════════════════",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def print_changed(self, paths: list):
        for path in paths:
            self.console.print(f'File [cyan]"{escape(path)}"[/cyan] changed')

    def print_final_table(self, report: RunReport):
        table = Table(title="Serial Check Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Old Serial", justify="right")
        table.add_column("New Serial", justify="right")
        table.add_column("Status", style="bold")
        table.add_column("Result", justify="center")
        table.add_column("Details")

        for check in report.files:
            color, icon = VERDICT_STYLES[check.verdict]
            table.add_row(
                escape(check.path),
                escape(check.pre_serial or "-"),
                escape(check.post_serial or "-"),
                f"[{color}]{check.verdict.value}[/{color}]",
                icon,
                escape(check.messages[-1]) if check.messages else ""
            )

        self.console.print(table)

    def print_summary(self, report: RunReport):
        status = "[bold green]PASSED[/bold green]" if report.success else "[bold red]FAILED[/bold red]"
        lines = [
            "[bold white]Summary Report[/bold white]",
            "════════════════════════════════════════",
            f"Target:          {escape(report.target)}",
            f"Baseline:        {escape(report.base or '-')}",
            f"Rounds:          {report.rounds}",
            f"Passed:          [green]{report.count(Verdict.PASS)}[/green]",
            f"Failed:          [red]{report.count(Verdict.FAIL)}[/red]",
            f"Skipped:         {report.count(Verdict.SKIPPED)}",
            f"Result:          {status}",
        ]
        if report.failure_reason:
            lines.append(f"[red]{FAILURE_REASONS.get(report.failure_reason, report.failure_reason)}[/red]")
        self.console.print(Panel("\n".join(lines), border_style="dim"))
