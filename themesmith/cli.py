# themesmith/cli.py
"""
Command-line interface for themesmith.

Runs the rendering service, performs one-shot renders against it, prints the
editable fields of a theme, and hosts an interactive editing session that
re-renders a local HTML page on every committed value. Built with Typer and
Rich.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table
from typing_extensions import Annotated

from themesmith.editor.client import RenderClient
from themesmith.editor.fields import FieldSet, build_fields
from themesmith.editor.observable import ObservableTheme
from themesmith.editor.page import PreviewPage
from themesmith.editor.session import ThemeEditor
from themesmith.exceptions import FieldValueError, ThemesmithError
from themesmith.schemas.settings import get_settings
from themesmith.utils.logger import setup_logger
from themesmith.utils.theme_loader import resolve_theme

app = typer.Typer(
    name="themesmith",
    help="Live Tailwind theme editing: a CSS rendering service and its editor.",
    add_completion=False,
)
console = Console()
logger = setup_logger(__name__)

PageArgument = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="HTML page whose body markup is sent for rendering.",
    ),
]
ThemeOption = Annotated[
    Optional[str],
    typer.Option("--theme", "-t", help="Theme name from the themes directory, or a YAML file."),
]
UrlOption = Annotated[
    Optional[str],
    typer.Option("--url", help="Rendering service URL (defaults to THEMESMITH_SERVICE_URL)."),
]


def _load_theme(theme: Optional[str]) -> dict:
    try:
        return resolve_theme(theme)
    except ThemesmithError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)


def _fields_table(fields: FieldSet, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Kind", style="magenta")
    table.add_column("Value", style="white")
    for field in fields:
        table.add_row(field.key, field.kind, field.display())
    return table


@app.command(name="serve")
def serve() -> None:
    """
    Runs the rendering service (host and port come from THEMESMITH_* settings).
    """
    from themesmith.serve import run_server

    settings = get_settings()
    console.print(
        f"🎨 Serving on [bold cyan]http://{settings.host}:{settings.port}[/bold cyan]"
    )
    run_server()


@app.command(name="show-theme")
def show_theme(theme: ThemeOption = None) -> None:
    """
    Lists every editable field of a theme with the value the editor displays.
    """
    settings = get_settings()
    fields = build_fields(
        ObservableTheme(_load_theme(theme)),
        font_size_unit=settings.font_size_unit,
        weight_policy=settings.weight_policy,
    )
    console.print(_fields_table(fields, f"Theme: {theme or 'default'}"))


@app.command(name="render")
def render(
    page: PageArgument,
    theme: ThemeOption = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the CSS (or the page, with --inject) here."),
    ] = None,
    inject: Annotated[
        bool, typer.Option("--inject", help="Inject the CSS into the page instead of emitting raw CSS.")
    ] = False,
    url: UrlOption = None,
) -> None:
    """
    Renders the page's stylesheet once through the rendering service.
    """
    preview = PreviewPage.from_file(page)
    client = RenderClient(url)
    try:
        css = client.render_sync(preview.body_markup(), _load_theme(theme))
    except ThemesmithError as e:
        console.print(f"[bold red]Render failed:[/bold red] {e}")
        raise typer.Exit(code=1)
    finally:
        client.close()

    if inject:
        preview.apply_stylesheet(css)
        target = preview.write(output or page)
        console.print(f"✅ Stylesheet injected into [bold cyan]{target}[/bold cyan]")
    elif output:
        output.write_text(css, encoding="utf-8")
        console.print(f"✅ Wrote {len(css)} bytes of CSS to [bold cyan]{output}[/bold cyan]")
    else:
        typer.echo(css)


async def edit_session(editor: ThemeEditor, output: Path) -> None:
    """Interactive loop: pick a field, commit a value, re-render, rewrite the preview."""
    editor.on_render(lambda generation, css: editor.page.write(output))
    if not await editor.start():
        console.print(f"[yellow]Initial render failed:[/yellow] {editor.last_error}")

    while True:
        console.print(_fields_table(editor.fields, f"Preview: {output}"))
        key = Prompt.ask("Field to edit ([bold]q[/bold] to quit)")
        if key.strip().lower() in ("q", "quit", "exit"):
            break
        if key not in editor.fields:
            console.print(f"[red]Unknown field:[/red] {key}")
            continue
        field = editor.field(key)
        raw = Prompt.ask(f"New value for {field.key}", default=field.display())
        try:
            changed = editor.commit(field.key, raw)
        except FieldValueError as e:
            console.print(f"[red]Rejected:[/red] {e}")
            continue
        if not changed:
            console.print("[dim]Unchanged.[/dim]")
            continue
        await editor.wait_idle()
        if editor.last_error is not None:
            console.print(f"[yellow]Render failed, keeping previous stylesheet:[/yellow] {editor.last_error}")
        else:
            console.print(f"✅ Render #{editor.applied_generation} applied.")


@app.command(name="edit")
def edit(
    page: PageArgument,
    theme: ThemeOption = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Preview file rewritten after every render."),
    ] = None,
    url: UrlOption = None,
) -> None:
    """
    Edits a theme interactively, live-rendering the page after every change.
    """
    preview = PreviewPage.from_file(page)
    target = output or page.with_name(f"{page.stem}.preview.html")
    editor = ThemeEditor(preview, RenderClient(url), _load_theme(theme))

    async def run() -> None:
        try:
            await edit_session(editor, target)
        finally:
            await editor.close()

    try:
        asyncio.run(run())
    except (KeyboardInterrupt, EOFError):
        console.print("\n[bold blue]--- Editing stopped ---[/bold blue]")
