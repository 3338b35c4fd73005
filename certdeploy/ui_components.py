"""
certdeploy - UI Components
Standardized headers and summary tables
"""

from typing import Optional

from rich.console import Console
from rich.table import Table

from certdeploy.models.run import RunState

LOGO = "certdeploy"

# Color scheme
BRAND_COLOR = "cyan"


def show_header(
    title: str,
    certificate: Optional[str] = None,
    details: Optional[dict] = None,
    console: Optional[Console] = None,
):
    """
    Display a standardized command header.

    Args:
        title: Main title (e.g., "Deploy Certificate")
        certificate: Certificate name (if applicable)
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Deploy Certificate",
            certificate="www.example.com",
            details={"Hosts": "fw1.example.com, fw2.example.com"}
        )
    """
    if console is None:
        console = Console()

    prefix = f" [bold color(214)]{LOGO}[/bold color(214)] [dim]›[/dim]"
    console.print(f"{prefix} [bold white]{title}[/bold white]")

    if certificate:
        console.print(f"{prefix} Certificate: [{BRAND_COLOR}]{certificate}[/{BRAND_COLOR}]")

    if details:
        for key, value in details.items():
            console.print(f"{prefix} {key}: [{BRAND_COLOR}]{value}[/{BRAND_COLOR}]")

    console.print()


def render_summary(state: RunState, console: Optional[Console] = None) -> None:
    """Print a per-host result table."""
    if console is None:
        console = Console()

    table = Table(title="Deployment summary", title_style="bold", show_lines=False)
    table.add_column("Host", style=BRAND_COLOR)
    table.add_column("API key")
    table.add_column("Upload")
    table.add_column("Commit")
    table.add_column("Message", style="dim")

    for result in state.results.values():
        key_cell = "[green]✓[/green]" if result.key_obtained else "[red]✗[/red]"
        if not result.key_obtained:
            upload_cell = "[dim]-[/dim]"
        elif result.upload_failure:
            upload_cell = "[red]✗[/red]"
        else:
            upload_cell = "[green]✓[/green]"

        if result.committed:
            commit_cell = "[green]✓[/green]"
        elif result.commit_skipped:
            commit_cell = "[yellow]skipped[/yellow]"
        elif result.key_obtained:
            commit_cell = "[red]✗[/red]"
        else:
            commit_cell = "[dim]-[/dim]"

        table.add_row(
            result.host, key_cell, upload_cell, commit_cell, result.message or ""
        )

    console.print()
    console.print(table)
