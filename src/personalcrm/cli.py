from __future__ import annotations

from typing import Optional

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.table import Table

from personalcrm.services import stats
from personalcrm.store import CrmStore

app = typer.Typer(help="Personal CRM — keep in touch with the people you care about")
console = Console()


def _fmt(value) -> str:
    return value.strftime("%b %d, %Y") if value else "—"


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind to"),
    port: int = typer.Option(8000, help="Port to bind to"),
    reload: bool = typer.Option(False, help="Enable auto-reload"),
) -> None:
    """Start the Personal CRM web server."""
    import uvicorn

    uvicorn.run("personalcrm.web:create_app", host=host, port=port, reload=reload, factory=True)


@app.command()
def remind() -> None:
    """Show reminders that are still pending and not yet due."""
    store = CrmStore()
    reminders = stats.upcoming_reminders(store.reminders, limit=None)

    if not reminders:
        console.print("[green]All clear! No upcoming reminders.[/green]")
        return

    table = Table(title="Upcoming Reminders")
    table.add_column("Title", style="cyan")
    table.add_column("Contact", style="magenta")
    table.add_column("Due Date", style="yellow")
    table.add_column("Description", style="dim")
    for r in reminders:
        name = r.contact.full_name if r.contact else r.contact_id
        table.add_row(r.title, name, _fmt(r.date), r.description or "")
    console.print(table)


@app.command()
def dashboard() -> None:
    """Show contact statistics, birthdays and people to reconnect with."""
    store = CrmStore()
    summary = store.get_dashboard_stats()
    contacts = store.contacts

    console.print(f"[bold]Total contacts:[/bold] {summary.total_contacts}")
    console.print(f"[bold]New this month:[/bold] {summary.new_contacts_this_month}")
    console.print(f"[bold]Upcoming reminders:[/bold] {summary.upcoming_reminders}")
    console.print(f"[bold]Recent interactions:[/bold] {summary.recent_interactions}")

    birthdays = stats.upcoming_birthdays(contacts)
    if birthdays:
        table = Table(title="Upcoming Birthdays")
        table.add_column("Contact", style="cyan")
        table.add_column("Birthday", style="yellow")
        for contact, occurs in birthdays:
            table.add_row(contact.full_name, occurs.strftime("%b %d"))
        console.print(table)
    else:
        console.print("[dim]No upcoming birthdays[/dim]")

    stale = stats.contacts_to_reconnect(contacts)
    if stale:
        table = Table(title="Reconnect Suggestions")
        table.add_column("Contact", style="cyan")
        table.add_column("Last Contact", style="yellow")
        for contact in stale:
            table.add_row(contact.full_name, _fmt(contact.last_contacted))
        console.print(table)
    else:
        console.print("[green]You're all caught up![/green]")


@app.command("contacts")
def list_contacts(
    search: str = typer.Option("", help="Match name, email or company"),
    tag: Optional[str] = typer.Option(None, help="Only contacts with this tag"),
) -> None:
    """List contacts."""
    store = CrmStore()
    contacts = stats.filter_contacts(store.contacts, search=search, tag=tag)

    if not contacts:
        console.print("[yellow]No contacts found.[/yellow]")
        return

    table = Table(title="Contacts")
    table.add_column("Name", style="cyan")
    table.add_column("Email")
    table.add_column("Company")
    table.add_column("Tags", style="magenta")
    table.add_column("Last Contact", style="yellow")
    for c in sorted(contacts, key=lambda c: (c.last_name.lower(), c.first_name.lower())):
        table.add_row(
            c.full_name, c.email or "", c.company or "", ", ".join(c.tags), _fmt(c.last_contacted)
        )
    console.print(table)
