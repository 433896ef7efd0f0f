from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import game_defaults, resolve_parameters
from .engine import Card, GameConfig, GameState, Result, SortMode, WinMode
from .engine.card import CELLS_PER_CARD, FREE_COL, FREE_ROW, SIZE, is_free_cell
from .errors import BingoError
from .logging_setup import setup_logging
from .rng import create_rng, derive_seed
from .serialize import dumps, load_state, save_state
from .version import __version__

app = typer.Typer(help="Bingo card and draw tracker")
console = Console()


@dataclass
class Session:
    state_path: Path
    defaults: GameConfig
    seed_engine: str
    seed_value: Optional[int]

    def load(self) -> GameState:
        """Load the saved game.

        With a fixed seed every invocation would otherwise replay the same
        stream, so the seed is mixed with the saved game it continues.
        """
        game = load_state(
            self.state_path, defaults=self.defaults, rng=create_rng(self.seed_engine, self.seed_value)
        )
        if self.seed_value is not None:
            step = len(game.cards) + len(game.drawn_numbers)
            game.use_rng(create_rng(self.seed_engine, derive_seed(self.seed_value, step, dumps(game))))
        return game

    def save(self, state: GameState) -> None:
        save_state(self.state_path, state)


def _session(ctx: typer.Context) -> Session:
    return ctx.obj


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code=1)


def _finish(session: Session, state: GameState, result: Result, message: str) -> None:
    """Persist a successful operation and report it, or report the failure."""
    if result.error is not None:
        _fail(result.error.message)
    session.save(state)
    console.print(message)
    if result.win is not None:
        note = result.win.notification()
        console.print(Panel(escape(note["message"]), title=note["title"], style="bold green"))


def parse_grid(numbers: str) -> List[List[str]]:
    """Turn "1,2,...,25" into a 5x5 grid, row by row.

    24 values skip the free space, 25 values include a placeholder for it.
    """
    values = [part.strip() for part in numbers.replace(";", ",").split(",") if part.strip()]
    if len(values) == CELLS_PER_CARD:
        values.insert(FREE_ROW * SIZE + FREE_COL, "0")
    if len(values) != SIZE * SIZE:
        raise typer.BadParameter(f"expected 24 or 25 comma separated numbers, got {len(values)}")
    return [values[row * SIZE:(row + 1) * SIZE] for row in range(SIZE)]


def render_card(card: Card, drawn: frozenset[int]) -> Table:
    table = Table(title=f"Card #{escape(card.card_id)}", show_lines=True)
    for letter in "BINGO":
        table.add_column(letter, justify="center")
    marks = card.marked_cells(drawn)
    for row in range(SIZE):
        cells = []
        for col in range(SIZE):
            if is_free_cell(row, col):
                cells.append("[bold cyan]FREE[/bold cyan]")
            elif marks[row][col]:
                cells.append(f"[reverse green]{card.numbers[row][col]}[/reverse green]")
            else:
                cells.append(str(card.numbers[row][col]))
        table.add_row(*cells)
    return table


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(0)


@app.callback()
def common_options(
    ctx: typer.Context,
    config: str = typer.Option(None, "--config", help="Path to config file (YAML/JSON)"),
    state: str = typer.Option(None, "--state", help="Path to the saved game (JSON)"),
    seed: int = typer.Option(None, "--seed", help="Seed for card generation and draws"),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG|INFO|WARNING|ERROR"),
    log_file: str = typer.Option(None, "--log-file", help="Log file path"),
    _version: bool = typer.Option(
        False,
        "--version",
        help="Show application version and exit",
        callback=_show_version,
        is_eager=True,
    ),
) -> None:
    cli_overrides: Dict[str, Any] = {}
    if state:
        cli_overrides["state_file"] = state
    if seed is not None:
        cli_overrides["seed.value"] = seed
    if log_level:
        cli_overrides["log_level"] = log_level
    if log_file:
        cli_overrides["log_file"] = log_file

    try:
        resolved, _cfg_path = resolve_parameters(config_path_str=config, cli_overrides=cli_overrides)
        defaults = game_defaults(resolved)
    except (OSError, ValueError, BingoError) as exc:
        _fail(str(exc))

    setup_logging(level=str(resolved.get("log_level", "WARNING")), log_file=resolved.get("log_file"))

    seed_cfg = resolved.get("seed") or {}
    seed_value = seed_cfg.get("value")
    ctx.obj = Session(
        state_path=Path(resolved["state_file"]),
        defaults=defaults,
        seed_engine=str(seed_cfg.get("engine") or "py_random"),
        seed_value=int(seed_value) if seed_value is not None else None,
    )


@app.command("add-card")
def add_card(ctx: typer.Context, card_id: str = typer.Argument(..., help="Card identifier")) -> None:
    """Generate a random card."""
    session = _session(ctx)
    game = session.load()
    result = game.add_card_auto(card_id)
    _finish(session, game, result, f"Added card #{escape(card_id.strip())}.")
    console.print(render_card(result.value, frozenset(game.drawn_numbers)))


@app.command("add-manual")
def add_manual(
    ctx: typer.Context,
    card_id: str = typer.Argument(..., help="Card identifier"),
    numbers: str = typer.Option(..., "--numbers", help="24 or 25 comma separated numbers, row by row"),
) -> None:
    """Add a card from numbers printed on a physical card."""
    session = _session(ctx)
    game = session.load()
    result = game.add_card_manual(card_id, parse_grid(numbers))
    _finish(session, game, result, f"Added card #{escape(card_id.strip())}.")


@app.command("edit-card")
def edit_card(
    ctx: typer.Context,
    card_id: str = typer.Argument(..., help="Card identifier"),
    numbers: str = typer.Option(..., "--numbers", help="24 or 25 comma separated numbers, row by row"),
) -> None:
    """Replace the numbers of an existing card."""
    session = _session(ctx)
    game = session.load()
    result = game.add_card_manual(card_id, parse_grid(numbers), replace=True)
    _finish(session, game, result, f"Updated card #{escape(card_id.strip())}.")


@app.command("delete-card")
def delete_card(
    ctx: typer.Context,
    card_id: str = typer.Argument(..., help="Card identifier"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Remove a card."""
    session = _session(ctx)
    game = session.load()
    if not yes and not typer.confirm(f"Delete card #{card_id}?"):
        raise typer.Exit(0)
    _finish(session, game, game.delete_card(card_id), f"Deleted card #{escape(card_id)}.")


@app.command()
def draw(ctx: typer.Context) -> None:
    """Draw a random number from the remaining pool."""
    session = _session(ctx)
    game = session.load()
    result = game.draw_random()
    number = result.value if result.ok else None
    _finish(session, game, result, f"Drawn: [bold]{number}[/bold]")


@app.command()
def mark(ctx: typer.Context, number: int = typer.Argument(..., help="Number called out")) -> None:
    """Record a number drawn elsewhere."""
    session = _session(ctx)
    game = session.load()
    _finish(session, game, game.mark_number(number), f"Marked: [bold]{number}[/bold]")


@app.command("edit-draw")
def edit_draw(
    ctx: typer.Context,
    position: int = typer.Argument(..., help="Position in the draw history (1 = first draw)"),
    number: int = typer.Argument(..., help="Corrected number"),
) -> None:
    """Correct a number recorded earlier."""
    session = _session(ctx)
    game = session.load()
    result = game.edit_drawn(position - 1, number)
    _finish(session, game, result, f"Position {position}: {result.value} -> {number}")


@app.command()
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Clear drawn numbers and keep the cards."""
    session = _session(ctx)
    game = session.load()
    if not yes and not typer.confirm("Restart the game? Cards are kept, drawn numbers are cleared."):
        raise typer.Exit(0)
    _finish(session, game, game.reset_game(), "Game reset.")


@app.command()
def configure(
    ctx: typer.Context,
    max_number: int = typer.Option(None, "--max-number", help="Highest ball number (25-99)"),
    win_mode: WinMode = typer.Option(None, "--win-mode", help="line|full"),
    sort_mode: SortMode = typer.Option(None, "--sort-mode", help="history|ascending"),
) -> None:
    """Change game settings. A new maximum number resets the draws."""
    session = _session(ctx)
    game = session.load()
    current = game.config
    new_max = current.max_number if max_number is None else max_number
    result = game.set_config(
        new_max,
        win_mode or current.win_mode,
        sort_mode or current.sort_mode,
    )
    if result.ok and new_max != current.max_number:
        message = f"Maximum number changed to {new_max}; drawn numbers cleared."
    else:
        message = "Settings updated."
    _finish(session, game, result, message)


@app.command()
def show(ctx: typer.Context) -> None:
    """Print cards, drawn numbers and the current winner."""
    session = _session(ctx)
    game = session.load()
    cfg = game.config
    drawn = frozenset(game.drawn_numbers)
    console.print(
        f"Max number: {cfg.max_number}  Win mode: {cfg.win_mode.value}  "
        f"Drawn: {len(drawn)}  Remaining: {len(game.available_numbers)}"
    )
    history = "  ".join(f"{idx + 1}:{num}" for idx, num in game.ordered_history())
    console.print(f"Draws ({cfg.sort_mode.value}): {history or '-'}")
    if not game.cards:
        console.print("No cards yet.")
    for card in game.cards:
        console.print(render_card(card, drawn))
    win = game.check_winner()
    if win is not None:
        note = win.notification()
        console.print(Panel(escape(note["message"]), title=note["title"], style="bold green"))


def main(_argv: list[str] | None = None) -> int:
    try:
        app(standalone_mode=True)
        return 0
    except SystemExit as e:
        return int(e.code) if e.code is not None else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
