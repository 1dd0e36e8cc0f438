"""Rich terminal output for Drupal tasks."""

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .issues import patch_file_name
from .models import IssueDefinition, PatchSelection

console = Console()


def success(message: str, out: Console | None = None):
    (out or console).print(f"[bold green][OK][/bold green] {escape(message)}")


def error(message: str, out: Console | None = None):
    (out or console).print(f"[bold red][ERROR][/bold red] {escape(message)}")


def display_issue_definition(definition: IssueDefinition, out: Console | None = None):
    """Show the resolved patches for an issue, in selection order."""
    title = Text()
    title.append(f"Issue #{definition.issue_id}: ", style="bold")
    title.append(definition.title or "(untitled)", style="bold cyan")

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", width=4, justify="right")
    table.add_column("Patch", style="cyan")
    table.add_column("URL", overflow="fold")
    for idx, url in enumerate(definition.patches or []):
        table.add_row(str(idx), patch_file_name(url), url)

    (out or console).print()
    (out or console).print(table)


def display_selection(selection: PatchSelection, out: Console | None = None):
    for package, patches in selection.items():
        for label, url in patches.items():
            (out or console).print(
                f"  [cyan]{escape(package)}[/cyan]  {escape(label)}\n    {escape(url)}"
            )
