"""
Terminal presentation for playing a round.
"""

import logging
import math
import time
from typing import Callable, Optional, Tuple
from uuid import UUID

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from flashdrill.app import FlashdrillApp
from flashdrill.models import GameState, HapticKind, SessionState

logger = logging.getLogger(__name__)
console = Console()

HELP_TEXT = (
    "[dim]Enter/r: reveal   c: correct   x: incorrect   "
    "+150/-150: swipe   p: pause/resume   s: start again   q: quit[/dim]"
)

_CORRECT_COMMANDS = {"c", "y"}
_INCORRECT_COMMANDS = {"x", "n"}
_REVEAL_COMMANDS = {"", "r"}


class RichPresenter:
    """
    Renders game state with rich.

    The card panel is only redrawn when the top card or its reveal state
    changes; otherwise just the status line is printed.
    """

    def __init__(self, cons: Optional[Console] = None):
        self.console = cons or console
        self._last_card_view: Optional[Tuple[Optional[UUID], bool]] = None

    def render(self, state: GameState) -> None:
        self.console.print(_status_line(state))

        top = state.top_card
        card_view = (top.id if top else None, state.is_answer_revealed)
        if card_view == self._last_card_view:
            return
        self._last_card_view = card_view

        if top is None:
            return
        self.console.print(Panel(escape(top.prompt), title="Prompt", border_style="green"))
        if state.is_answer_revealed:
            self.console.print(Panel(escape(top.answer), title="Answer", border_style="blue"))


class ConsoleHaptics:
    """Stands in for a vibration motor with the terminal bell."""

    _MESSAGES = {
        HapticKind.SUCCESS: "[green]*bzzt*[/green]",
        HapticKind.ERROR: "[red]*bzzt bzzt*[/red]",
        HapticKind.CELEBRATION: "[magenta]*brrrrrrrrr*[/magenta]",
    }

    def __init__(self, cons: Optional[Console] = None):
        self.console = cons or console

    def play(self, kind: HapticKind) -> None:
        self.console.bell()
        self.console.print(self._MESSAGES[kind])


class ConsoleCelebration:
    def __init__(self, cons: Optional[Console] = None):
        self.console = cons or console

    def show(self) -> None:
        self.console.print(
            Panel(
                "[bold yellow]* . * . *  Deck cleared!  * . * . *[/bold yellow]",
                border_style="magenta",
            )
        )


def _status_line(state: GameState) -> str:
    if state.state is SessionState.PAUSED:
        status = "[yellow]Paused[/yellow]"
    elif state.state is SessionState.ENDED:
        status = "[red]Game over[/red]"
    else:
        status = "[green]Playing[/green]"
    return (
        f"[bold]Time: {state.time_remaining}[/bold]  "
        f"Cards left: {state.cards_remaining}  {status}"
    )


def _show_summary(state: GameState) -> None:
    if state.cards_remaining == 0:
        console.print("[bold green]You got through the whole deck![/bold green]")
    else:
        console.print(
            f"[bold red]Time's up![/bold red] {state.cards_remaining} cards left."
        )
    console.print(
        f"Correct: [green]{state.correct_count}[/green]  "
        f"Incorrect: [red]{state.incorrect_count}[/red]"
    )


def _parse_swipe(command: str) -> Optional[float]:
    try:
        value = float(command)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _handle_command(app: FlashdrillApp, command: str) -> bool:
    """
    Apply one player command.

    Returns:
        bool: False when the player asked to quit.
    """
    command = command.strip().lower()

    if command == "q":
        return False
    if command in _REVEAL_COMMANDS:
        if not app.reveal():
            console.print("[yellow]Nothing to reveal.[/yellow]")
        return True
    if command in _CORRECT_COMMANDS or command in _INCORRECT_COMMANDS:
        if app.judge(command in _CORRECT_COMMANDS) is None:
            console.print("[yellow]Reveal the answer first.[/yellow]")
        return True
    if command == "p":
        if app.state.state is SessionState.PAUSED:
            app.foregrounded()
        else:
            app.backgrounded()
        return True
    if command == "s":
        app.start_new_game()
        return True

    delta_x = _parse_swipe(command)
    if delta_x is None:
        console.print(HELP_TEXT)
    elif app.drag_released(delta_x) is None:
        console.print("[dim]The card snaps back.[/dim]")
    return True


def start_play_flow(
    app: FlashdrillApp, clock: Callable[[], float] = time.monotonic
) -> None:
    """
    Runs interactive rounds until the player quits.

    Time that passes while waiting for input is delivered as whole-second
    ticks before the player's command is applied, so the timer and the
    commands are handled one after another on this thread.

    Args:
        app: The wired FlashdrillApp.
        clock: Monotonic clock in seconds.
    """
    console.print("[bold cyan]Starting a new game...[/bold cyan]")
    console.print(HELP_TEXT)
    app.start_new_game()
    last_tick = clock()
    carry = 0.0

    while True:
        state = app.state
        if state.state is SessionState.ENDED:
            _show_summary(state)
            again = console.input("[bold]Play again? (y/N): [/bold]")
            if again.strip().lower() not in ("y", "yes"):
                break
            app.start_new_game()
            last_tick = clock()
            carry = 0.0
            continue

        command = console.input("[bold]> [/bold]")

        now = clock()
        if state.state is SessionState.ACTIVE:
            elapsed = now - last_tick + carry
            seconds = int(elapsed)
            carry = elapsed - seconds
            if seconds:
                app.tick(seconds)
        else:
            carry = 0.0
        last_tick = now

        if app.state.state is SessionState.ENDED:
            logger.debug(f"Ignoring command {command!r}: the round ended.")
            continue
        if not _handle_command(app, command):
            break

    console.print("[bold cyan]Thanks for playing![/bold cyan]")
