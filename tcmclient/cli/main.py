"""tcm CLI - Main commands."""
import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tcmclient.core.api.config import DEFAULT_BASE_URL

app = typer.Typer(
    name="tcm",
    help="Test-management backend CLI",
    add_completion=False
)
console = Console()

state = {'base_url': DEFAULT_BASE_URL}


# Session path: ~/.config/tcm/session.session
def get_session_path() -> Path:
    config_dir = Path.home() / ".config" / "tcm"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir / "session"


def make_client():
    from tcmclient import TestCaseClient, APIConfig
    return TestCaseClient(str(get_session_path()), APIConfig(base_url=state['base_url']))


def run_api(call: Callable[[Any], Awaitable[Any]]) -> Any:
    """Run `call(client)` and turn API and input errors into a red message and exit code 1."""
    from tcmclient import TCMError, UnauthorizedError

    async def runner():
        async with make_client() as tcm:
            return await call(tcm)

    try:
        return asyncio.run(runner())
    except UnauthorizedError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        console.print("Run 'tcm login' to store a new token.")
        raise typer.Exit(1)
    except TCMError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        # Invalid input such as an empty upload file
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


def print_items(data: Any, key: str, title: str) -> None:
    """Print data[key] as a table when it is a list of records, else as JSON."""
    items = data.get(key) if isinstance(data, dict) else data
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        console.print_json(data=data)
        return

    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Name")
    for item in items:
        table.add_row(str(item.get('id', '')), str(item.get('name', item.get('title', ''))))
    console.print(table)


@app.callback()
def main_callback(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--base-url", envvar="TCM_BASE_URL", help="Backend API base URL"
    ),
):
    """Test-management backend CLI."""
    state['base_url'] = base_url


@app.command()
def login(
    token: str = typer.Option(None, "--token", "-t", help="Bearer token"),
):
    """Store a bearer token."""
    from tcmclient import SQLiteSession

    if not token:
        token = typer.prompt("Token", hide_input=True)

    with SQLiteSession(str(get_session_path())) as session:
        try:
            session.set(token)
        except ValueError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            raise typer.Exit(1)
        console.print("[green]Token stored[/green]")
        console.print(f"Session saved to: {session.path}")


@app.command()
def logout():
    """Forget the stored token."""
    from tcmclient import SQLiteSession

    with SQLiteSession(str(get_session_path())) as session:
        if session.exists():
            session.clear()
            console.print("[green]Logged out successfully[/green]")
        else:
            console.print("[yellow]No active session[/yellow]")


@app.command()
def whoami():
    """Show the current user."""
    user = run_api(lambda tcm: tcm.get_current_user())
    console.print_json(data=user)


@app.command()
def menus(
    level: int = typer.Option(1, "--level", "-l", help="Menu level"),
    parent: Optional[str] = typer.Option(None, "--parent", "-p", help="List children of this menu"),
    smoke: bool = typer.Option(False, "--smoke", help="Smoke-case menus"),
):
    """List menus."""
    async def fetch(tcm):
        if parent and smoke:
            return await tcm.get_smoke_menu_children(parent)
        if parent:
            return await tcm.get_menu_children(parent)
        if smoke:
            return await tcm.get_smoke_menus(level)
        return await tcm.get_menus_by_level(level)

    print_items(run_api(fetch), 'menus', "Menus")


@app.command()
def cases(
    menu_id: str = typer.Argument(..., help="Menu ID"),
):
    """List test cases of a menu."""
    data = run_api(lambda tcm: tcm.get_test_cases_by_menu(menu_id))
    print_items(data, 'testCases', f"Test cases in {menu_id}")


@app.command()
def stats(
    menu: Optional[str] = typer.Option(None, "--menu", "-m", help="Restrict to a menu"),
):
    """Show result statistics."""
    console.print_json(data=run_api(lambda tcm: tcm.get_stats(menu)))


@app.command()
def search(
    keyword: str = typer.Argument(..., help="Text to find in failure reasons"),
    menu: Optional[str] = typer.Option(None, "--menu", "-m", help="Restrict to a menu"),
):
    """Search failed test cases."""
    data = run_api(lambda tcm: tcm.search_failed_test_cases(keyword, menu))
    print_items(data, 'testCases', f"Failed cases matching '{keyword}'")


@app.command()
def upload(
    menu_id: str = typer.Argument(..., help="Menu receiving the test cases"),
    file_path: Path = typer.Argument(..., help="Test-case file to import", exists=True, dir_okay=False),
    timeout_ms: int = typer.Option(300000, "--timeout-ms", help="Deadline per attempt in milliseconds"),
    retries: int = typer.Option(0, "--retries", "-r", help="Extra attempts after a failure"),
):
    """Import a test-case file into a menu."""
    from tcmclient import UploadOptions, UploadProgress

    def on_progress(p: UploadProgress):
        console.print(f"[yellow]Retrying upload ({p.attempt}/{p.total})...[/yellow]")

    try:
        options = UploadOptions(timeout_ms=timeout_ms, max_retries=retries, on_progress=on_progress)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    async def do_upload(tcm):
        with console.status(f"Uploading {file_path.name}..."):
            return await tcm.upload_test_cases(menu_id, file_path, options)

    result = run_api(do_upload)
    console.print(f"[green]Uploaded:[/green] {file_path.name}")
    console.print_json(data=result)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
