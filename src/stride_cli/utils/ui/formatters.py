"""Output formatters for different formats."""

import json
from datetime import UTC, datetime
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table
from rich.text import Text

from stride_cli.models import DayColumn, Project

console = Console()

STATUS_STYLES = {
    "on-track": "green",
    "delayed": "yellow",
    "completed": "cyan",
}

ROLE_STYLES = {
    "owner": "bold magenta",
    "admin": "magenta",
    "editor": "blue",
    "viewer": "dim",
}

INVITE_STYLES = {
    "pending": "yellow",
    "accepted": "green",
    "declined": "red",
}


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display plain data (dicts/lists) based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        for item in data:
            console.print(f"• {item}")


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        formatted_key = key.replace("_", " ").title()
        if isinstance(value, bool):
            formatted_value = "✓" if value else "✗"
        elif isinstance(value, list):
            formatted_value = ", ".join(str(v) for v in value)
        elif value is None:
            formatted_value = "-"
        else:
            formatted_value = str(value)
        table.add_row(formatted_key, formatted_value)

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


# ============================================================================
# Projects
# ============================================================================


def format_projects(
    projects: tuple[Project, ...] | list[Project],
    output_format: str = "pretty",
    provisional: set[str] | None = None,
) -> None:
    """Display a list of projects."""
    if output_format in ("json", "yaml"):
        format_output([p.model_dump(mode="json") for p in projects], output_format)
        return
    if not projects:
        console.print("[yellow]No projects found[/yellow]")
        return
    if output_format == "table":
        format_projects_table(projects)
        return

    header = Text()
    header.append("Projects ", style="bold cyan")
    header.append(f"({len(projects)})", style="dim")
    console.print(header)
    console.print()
    for project in projects:
        format_project_item(project, pending=bool(provisional and project.id in provisional))


def format_projects_table(projects: tuple[Project, ...] | list[Project]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    for column in ("Id", "Name", "Status", "Mode", "Progress", "Members"):
        table.add_column(column)
    for project in projects:
        table.add_row(
            project.id,
            project.name,
            project.status,
            project.mode,
            f"{project.progress}%",
            str(len(project.members)),
        )
    console.print(table)


def format_project_item(project: Project, pending: bool = False, indent: str = "  ") -> None:
    """Format a single project line with its stats underneath."""
    line = Text()
    line.append(f"{indent}{project.name}", style="bold")
    line.append(f"  {project.id}", style="dim")
    if pending:
        line.append("  (pending)", style="italic yellow")
    console.print(line)

    meta = [
        (
            f"{get_progress_bar(project.progress)} {project.progress}% complete",
            get_completion_color(project.progress),
        ),
        (project.status, STATUS_STYLES.get(project.status, "")),
    ]
    if project.members:
        names = ", ".join(m.initials for m in project.members[:4])
        if len(project.members) > 4:
            names += f" +{len(project.members) - 4} more"
        meta.append((f"Members: {names}", "blue"))
    pending_invites = sum(1 for i in project.invites if i.status == "pending")
    if pending_invites:
        meta.append((f"{pending_invites} pending invite(s)", "yellow"))

    meta_line = Text()
    meta_line.append(f"{indent}   └─ ", style="dim")
    for i, (text, style) in enumerate(meta):
        if i > 0:
            meta_line.append(" • ", style="dim")
        meta_line.append(text, style=style)
    console.print(meta_line)


def format_project_detail(project: Project, output_format: str = "pretty") -> None:
    """Display one project with members, invites, tags and notes."""
    if output_format in ("json", "yaml"):
        format_output(project.model_dump(mode="json"), output_format)
        return

    format_single_item(
        {
            "id": project.id,
            "name": project.name,
            "description": project.description or None,
            "status": project.status,
            "mode": project.mode,
            "view_mode": project.view_mode,
            "progress": f"{project.progress}%",
            "estimated_days": project.estimated_days,
            "tags": [t.label for t in project.tags],
            "created": format_relative_time(project.created_at),
        }
    )

    console.print()
    console.print("MEMBERS", style="bold blue")
    for member in project.members:
        line = Text()
        line.append(f"  {member.initials:<3} ", style="bold")
        line.append(member.name)
        if member.email:
            line.append(f" <{member.email}>", style="dim")
        line.append(f"  {member.role}", style=ROLE_STYLES.get(member.role, ""))
        line.append(f"  {member.id}", style="dim")
        console.print(line)

    if project.invites:
        console.print()
        console.print("INVITES", style="bold blue")
        for invite in project.invites:
            line = Text()
            line.append(f"  {invite.email}", style="bold")
            line.append(f"  {invite.role}", style=ROLE_STYLES.get(invite.role, ""))
            line.append(f"  {invite.status}", style=INVITE_STYLES.get(invite.status, ""))
            line.append(f"  {invite.id}", style="dim")
            console.print(line)

    if project.notes:
        console.print()
        console.print("NOTES", style="bold blue")
        for note in project.notes:
            line = Text()
            line.append(f"  [{note.author_initials}] ", style="bold")
            line.append(note.content)
            line.append(f"  {format_relative_time(note.created_at)}", style="dim")
            line.append(f"  {note.id}", style="dim")
            console.print(line)


# ============================================================================
# Boards
# ============================================================================


def format_board(columns: list[DayColumn], output_format: str = "pretty") -> None:
    """Display a weekly board, one section per day."""
    if output_format in ("json", "yaml"):
        format_output([c.model_dump(mode="json") for c in columns], output_format)
        return

    for index, column in enumerate(columns):
        header = Text()
        header.append(f"[{index}] ", style="dim")
        header.append(column.date.strftime("%a %d %b"), style="bold cyan")
        header.append(f"  ({len(column.tasks)})", style="dim")
        console.print(header)
        for task in column.tasks:
            line = Text()
            line.append("  ✓ " if task.done else "  ○ ", style="green" if task.done else "")
            line.append(task.title, style="dim" if task.done else "")
            if task.priority:
                line.append(f"  {task.priority}", style="yellow")
            console.print(line)


# ============================================================================
# Helpers
# ============================================================================


def format_relative_time(value: datetime | None) -> str:
    """Format timestamp as relative time."""
    if value is None:
        return ""

    now = datetime.now(UTC) if value.tzinfo is not None else datetime.now()
    seconds = (now - value).total_seconds()

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        minutes = int(seconds / 60)
        return f"{minutes}m ago" if minutes > 1 else "1m ago"
    if seconds < 86400:
        hours = int(seconds / 3600)
        return f"{hours}h ago" if hours > 1 else "1h ago"
    days = int(seconds / 86400)
    return f"{days}d ago" if days > 1 else "1d ago"


def get_progress_bar(percentage: float) -> str:
    """Get a progress bar representation."""
    filled = int(percentage / 10)
    empty = 10 - filled
    return "▓" * filled + "░" * empty


def get_completion_color(percentage: float) -> str:
    """Get color based on completion percentage."""
    if percentage >= 80:
        return "green"
    if percentage >= 40:
        return "yellow"
    return "red"
