# src/kubereplace/cli/formatter.py
import difflib
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table


class KubeFormatter:
    """
    KubeFormatter: the visual side of the CLI.
    Renders diffs, errors and the execution report.
    """

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def display_diff(self, original_text: str, new_text: str, file_name: str):
        """
        Renders a colorized unified diff between the original manifest and
        the replaced output.
        """
        diff_list = list(difflib.unified_diff(
            original_text.splitlines(),
            new_text.splitlines(),
            fromfile=f"original/{file_name}",
            tofile=f"replaced/{file_name}",
            lineterm=""
        ))

        if not diff_list:
            self.console.print(f"[dim]ℹ No replacements changed {file_name}.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"Replacements: {file_name}", border_style="green"))

    def print_error(self, message: str):
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def print_final_table(self, reports: List[Dict[str, Any]]):
        """
        Builds the summary table shown at the end of a run.
        """
        table = Table(title="KubeReplace Execution Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Result", justify="center")

        for r in reports:
            success = r.get("success", False)
            status_color = "green" if success else "red"
            table.add_row(
                str(r.get("file_path")),
                f"[{status_color}]{r.get('status', 'FAILED')}[/{status_color}]",
                "✅" if success else "❌"
            )
        self.console.print(table)

    def print_summary(self, summary: Dict[str, Any]):
        self.console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Total Files:     {summary['total_files']}\n"
            f"Changed:         [green]{summary['changed']}[/green]\n"
            f"Written:         {summary['written_to_disk']}\n"
            f"Errors:          [red]{summary['errors']}[/red]\n"
            f"Backups Created: {summary['backups_created']}",
            border_style="dim"
        ))
