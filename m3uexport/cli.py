"""m3u-exporter CLI — export library playlists as M3U files."""

import threading
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.table import Table

app = typer.Typer(
    name="m3uexport",
    help="Export users' music playlists to M3U files under the music library root.",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="debug, info, warning or error"),
):
    """Configure logging before any command runs."""
    from m3uexport.config import get_settings
    from m3uexport.logging_config import LOG_LEVELS, setup_logging

    level = (log_level or get_settings().log_level).upper()
    if level not in LOG_LEVELS:
        choices = ", ".join(name.lower() for name in LOG_LEVELS)
        console.print(f"[red]Error:[/red] Unknown log level '{log_level or level}'. Use one of: {choices}.")
        raise typer.Exit(1)

    setup_logging(level)


@app.command()
def export(
    user: Optional[List[str]] = typer.Option(None, "--user", "-u", help="User ID to export (repeatable)"),
    export_dir: Optional[str] = typer.Option(
        None, "--export-dir", "-e", help="Export directory, relative to the music library root",
    ),
):
    """Export the selected users' playlists."""
    from m3uexport.config import get_settings
    from m3uexport.export.runner import run_export
    from m3uexport.library import SqliteLibrary
    from m3uexport.models import RunStatus

    request = get_settings().export_request(user_ids=user, export_directory=export_dir)
    cancel_event = threading.Event()
    result = {}

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Exporting playlists", total=max(len(request.user_ids), 1))

        def on_progress(update: dict) -> None:
            progress.update(task, completed=update["current"], description=f"[dim]{update['user']}[/dim]")

        def work() -> None:
            result["summary"] = run_export(request, SqliteLibrary(), on_progress, cancel_event)

        worker = threading.Thread(target=work, name="m3u-export", daemon=True)
        worker.start()
        try:
            while worker.is_alive():
                worker.join(0.2)
        except KeyboardInterrupt:
            console.print("[yellow]Cancelling after the current playlist...[/yellow]")
            cancel_event.set()
            worker.join()

    summary = result.get("summary")
    if summary is None:
        console.print("[red]Error:[/red] Export did not finish.")
        raise typer.Exit(1)

    if summary.status == RunStatus.NOTHING_TO_DO:
        console.print(f"[yellow]{summary.message}.[/yellow]")
        raise typer.Exit(0)
    if summary.status == RunStatus.CONFIG_ERROR:
        console.print(f"[red]Error:[/red] {summary.message}.")
        raise typer.Exit(1)

    table = Table(title="Export Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Users processed", f"{summary.users_processed} / {summary.users_total}")
    table.add_row("Users skipped", str(summary.users_skipped))
    table.add_row("Playlists written", str(summary.playlists_written))
    table.add_row("Playlists without audio", str(summary.playlists_skipped))
    table.add_row("Playlists failed", str(summary.playlists_failed))
    table.add_row("Tracks written", str(summary.tracks_written))
    console.print(table)

    if summary.status == RunStatus.CANCELLED:
        console.print("[yellow]Export cancelled.[/yellow]")
    elif summary.errors:
        console.print(f"[yellow]Done with {len(summary.errors)} error(s).[/yellow]")
    else:
        console.print("[green]Done![/green]")


@app.command()
def users():
    """List library users."""
    from m3uexport.db import get_all_users

    all_users = get_all_users()
    if not all_users:
        console.print("[yellow]No users in library. Run 'm3uexport add-user' first.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Users")
    table.add_column("ID", style="dim")
    table.add_column("Username")
    for u in all_users:
        table.add_row(u.id, u.username)
    console.print(table)


@app.command("add-user")
def add_user(
    username: str = typer.Argument(..., help="Username"),
    user_id: Optional[str] = typer.Option(None, "--id", help="UUID to use instead of a generated one"),
):
    """Add a library user."""
    import sqlite3

    from m3uexport.db import create_user

    try:
        created = create_user(username, user_id)
    except ValueError:
        console.print(f"[red]Error:[/red] Not a valid UUID: {user_id}")
        raise typer.Exit(1)
    except sqlite3.IntegrityError:
        console.print(f"[red]Error:[/red] User '{username}' already exists.")
        raise typer.Exit(1)

    console.print(f"[green]Added user[/green] {created.username} ({created.id})")


@app.command()
def roots():
    """List configured library roots."""
    from m3uexport.db import get_library_roots

    all_roots = get_library_roots()
    if not all_roots:
        console.print("[yellow]No library roots configured. Run 'm3uexport add-root' first.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Library Roots")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Locations")
    for root in all_roots:
        table.add_row(root.name, root.collection_type, "\n".join(root.locations))
    console.print(table)


@app.command("add-root")
def add_root(
    name: str = typer.Argument(..., help="Library name"),
    locations: List[str] = typer.Argument(..., help="Filesystem locations of the library"),
    collection_type: str = typer.Option("music", "--type", "-t", help="Library category"),
):
    """Add a library root."""
    import sqlite3

    from m3uexport.db import add_library_root

    resolved = [str(Path(loc).expanduser().resolve()) for loc in locations]
    try:
        root = add_library_root(name, resolved, collection_type)
    except sqlite3.IntegrityError:
        console.print(f"[red]Error:[/red] Library '{name}' already exists.")
        raise typer.Exit(1)

    console.print(f"[green]Added library[/green] {root.name} ({root.collection_type})")


@app.command()
def scan(
    directory: str = typer.Argument(..., help="Directory to scan for audio files"),
):
    """Index all audio files in a directory."""
    from m3uexport.services import scan_directory

    dir_path = Path(directory).expanduser().resolve()
    if not dir_path.is_dir():
        console.print(f"[red]Error:[/red] Not a directory: {dir_path}")
        raise typer.Exit(1)

    console.print(f"Scanning [bold]{dir_path}[/bold] for audio files...")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Indexing tracks", total=None)

        def on_progress(update: dict) -> None:
            progress.update(
                task,
                total=update["total"],
                completed=update["current"],
                description=f"[dim]{update['name']}[/dim]",
            )

        result = scan_directory(str(dir_path), progress_cb=on_progress)

    if not result["total"]:
        console.print("[yellow]No audio files found.[/yellow]")
        raise typer.Exit(0)

    console.print()
    console.print(f"[green]Done![/green] Indexed: {result['indexed']} | Errors: {result['errors']}")


@app.command()
def playlists(
    user_id: str = typer.Argument(..., help="User ID"),
):
    """List a user's playlists."""
    from m3uexport.services import list_playlists

    try:
        rows = list_playlists(user_id)
    except ValueError:
        console.print(f"[red]Error:[/red] Not a valid user ID: {user_id}")
        raise typer.Exit(1)

    if not rows:
        console.print("[yellow]No playlists found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Playlists ({len(rows)})")
    table.add_column("#", style="dim")
    table.add_column("Name")
    table.add_column("Tracks", justify="right")
    for i, (playlist, count) in enumerate(rows, 1):
        table.add_row(str(i), playlist.name, str(count))
    console.print(table)


@app.command("create-playlist")
def create_playlist(
    name: str = typer.Argument(..., help="Playlist name"),
    files: List[str] = typer.Argument(..., help="Audio files, in playlist order"),
    user: str = typer.Option(..., "--user", "-u", help="Owner user ID"),
):
    """Create a playlist from audio files."""
    from m3uexport.services import create_playlist_from_files

    try:
        playlist = create_playlist_from_files(name, user, files)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Playlist '{playlist.name}' created[/green] with {len(playlist.tracks)} track(s).")


if __name__ == "__main__":
    app()
