"""
CLI entry point for flashdrill.
"""

# Standard library imports
import logging
from pathlib import Path
from typing import List, Optional

# Third-party imports
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

# Local application imports
from flashdrill.cli._play_logic import play_logic
from flashdrill.deck_import import load_cards_from_yaml
from flashdrill.deck_store import DeckStore
from flashdrill.exceptions import DeckImportError, UnknownSettingError
from flashdrill.models import Card
from flashdrill.settings import AppConfig, GameSettings, SettingsStore
from flashdrill.storage import JsonCardStorage


console = Console()

app = typer.Typer(
    name="flashdrill",
    help="Flashdrill: timed flashcard drills in the terminal.",
    add_completion=False,
    rich_markup_mode="markdown",
)

cards_app = typer.Typer(name="cards", help="Add, list and delete cards.")
settings_app = typer.Typer(name="settings", help="Show and change settings.")
app.add_typer(cards_app)
app.add_typer(settings_app)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(  # noqa: B008
        None,
        "--data-dir",
        help="Directory holding cards.json and settings.json. "
        "Falls back to FLASHDRILL_DATA_DIR, then ~/.flashdrill.",
        envvar="FLASHDRILL_DATA_DIR",
    ),
):
    """Resolve configuration once for every command."""
    config = AppConfig()
    if data_dir is not None:
        config = config.model_copy(update={"data_dir": data_dir})
    _configure_logging(config.log_level)
    ctx.obj = config


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def _load_deck(config: AppConfig) -> DeckStore:
    deck = DeckStore(JsonCardStorage(config.cards_path))
    deck.load()
    return deck


def _load_settings(config: AppConfig) -> SettingsStore:
    store = SettingsStore(config.settings_path)
    store.load()
    return store


# ---------------------------------------------------------------------------
# Play
# ---------------------------------------------------------------------------


@app.command()
def play(
    ctx: typer.Context,
    duration: Optional[int] = typer.Option(
        None,
        "--duration",
        "-d",
        min=1,
        help="Round length in seconds.",
    ),
):
    """Play a timed round with the saved deck."""
    config: AppConfig = ctx.obj
    try:
        play_logic(config, round_duration=duration)
    except (KeyboardInterrupt, EOFError):
        console.print("\n[bold cyan]Game abandoned.[/bold cyan]")


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


def _display_cards(cards: List[Card]) -> None:
    table = Table(title="Cards (top of deck last)")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Prompt", style="cyan")
    table.add_column("Answer", style="magenta")
    for index, card in enumerate(cards):
        table.add_row(str(index), escape(card.prompt), escape(card.answer))
    console.print(table)


@cards_app.command("list")
def list_cards(ctx: typer.Context):
    """List the saved cards with their positions."""
    deck = _load_deck(ctx.obj)
    if deck.is_empty:
        console.print("[yellow]The deck is empty.[/yellow]")
        return
    _display_cards(list(deck.cards))


@cards_app.command("add")
def add_card(
    ctx: typer.Context,
    prompt: str = typer.Argument(..., help="Question shown on the card."),
    answer: str = typer.Argument(..., help="Answer revealed on request."),
):
    """Add a card at the bottom of the deck."""
    try:
        card = Card(prompt=prompt, answer=answer)
    except ValidationError as e:
        console.print(
            "[bold red]Error: prompt and answer must not be blank.[/bold red]"
        )
        raise typer.Exit(code=1) from e

    deck = _load_deck(ctx.obj)
    deck.add_card(card, at_index=0)
    console.print(
        f"[green]Added[/green] '{escape(card.prompt)}'. "
        f"The deck now has {deck.count} cards."
    )


@cards_app.command("delete")
def delete_cards(
    ctx: typer.Context,
    indices: List[int] = typer.Argument(  # noqa: B008
        ..., help="Positions to delete, as shown by `cards list`."
    ),
):
    """Delete cards by position."""
    deck = _load_deck(ctx.obj)
    try:
        removed = deck.remove_cards(indices)
    except IndexError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    for card in removed:
        console.print(f"[yellow]Deleted[/yellow] '{escape(card.prompt)}'")
    console.print(f"The deck now has {deck.count} cards.")


@cards_app.command("import")
def import_cards(
    ctx: typer.Context,
    file: Path = typer.Argument(  # noqa: B008
        ..., help="YAML file with a `cards` list of `q`/`a` entries."
    ),
):
    """Import cards from a YAML deck file."""
    try:
        cards = load_cards_from_yaml(file)
    except DeckImportError as e:
        console.print(f"[bold red]Import failed:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    deck = _load_deck(ctx.obj)
    added = deck.add_cards(cards, at_index=0)
    console.print(
        f"[bold green]Imported {added} cards.[/bold green] "
        f"The deck now has {deck.count} cards."
    )


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@settings_app.command("show")
def show_settings(ctx: typer.Context):
    """Show the current settings."""
    store = _load_settings(ctx.obj)
    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_column("Description")
    for name, info in GameSettings.model_fields.items():
        table.add_row(
            info.alias,
            str(getattr(store.settings, name)).lower(),
            info.description or "",
        )
    console.print(table)


@settings_app.command("set")
def set_setting(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Setting key, e.g. recycleIncorrectAnswers."),
    value: str = typer.Argument(..., help="true/false, on/off, yes/no or 1/0."),
):
    """Change one setting."""
    store = _load_settings(ctx.obj)
    try:
        store.set(key, value)
    except (UnknownSettingError, ValueError) as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]{key}[/green] set to [bold]{value}[/bold].")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    """
    Run the CLI application.

    If an unexpected exception occurs, print a bold red error message to the console and exit the process with status code 1.
    """
    try:
        app()
    except Exception as e:
        console.print(f"[bold red]UNEXPECTED ERROR: {e}[/bold red]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
