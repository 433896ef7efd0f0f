"""Game state orchestrating cards, draws and win detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from ..errors import BingoError, DuplicateIdError, NotFoundError, OutOfRangeError, ValidationError
from ..rng import RandomSource, create_rng
from .card import Card, validate_grid
from .draw_pool import DrawPool, SortMode
from .win import Win, WinMode, find_winner

logger = logging.getLogger(__name__)

MIN_MAX_NUMBER = 25
MAX_MAX_NUMBER = 99
DEFAULT_MAX_NUMBER = 75


@dataclass(frozen=True)
class GameConfig:
    max_number: int = DEFAULT_MAX_NUMBER
    win_mode: WinMode = WinMode.LINE
    sort_mode: SortMode = SortMode.HISTORY

    def validate(self) -> "GameConfig":
        if isinstance(self.max_number, bool) or not isinstance(self.max_number, int):
            raise ValidationError(
                f"Maximum number must be a whole number, got {self.max_number!r}.",
                details={"max_number": self.max_number},
            )
        if self.max_number < MIN_MAX_NUMBER or self.max_number > MAX_MAX_NUMBER:
            raise OutOfRangeError(
                f"Please enter a valid number between {MIN_MAX_NUMBER} and {MAX_MAX_NUMBER}.",
                details={"max_number": self.max_number},
            )
        return self


@dataclass
class Result:
    """Outcome of a game operation.

    ``ok`` is False exactly when ``error`` is set; ``win`` is filled by
    draw-affecting operations when a card completes its pattern.
    """

    ok: bool
    value: Any = None
    error: Optional[BingoError] = None
    win: Optional[Win] = None

    @classmethod
    def success(cls, value: Any = None, win: Optional[Win] = None) -> "Result":
        return cls(ok=True, value=value, win=win)

    @classmethod
    def failure(cls, error: BingoError) -> "Result":
        return cls(ok=False, error=error)


def _run(operation: Callable[[], Result]) -> Result:
    try:
        return operation()
    except BingoError as exc:
        logger.debug("Operation rejected: %s (%s)", exc.message, exc.code)
        return Result.failure(exc)


class GameState:
    """Cards, draw history and configuration of one game.

    All mutating operations return a :class:`Result`; a failed operation leaves
    the state unchanged.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        cards: Iterable[Card] = (),
        drawn: Iterable[int] = (),
        rng: Optional[RandomSource] = None,
    ):
        self.config = (config or GameConfig()).validate()
        self.rng = rng if rng is not None else create_rng()
        self.cards: List[Card] = list(cards)
        self._pool = DrawPool(self.config.max_number, self.rng, drawn)

    def use_rng(self, rng: RandomSource) -> None:
        """Swap the random source for card generation and draws."""
        self.rng = rng
        self._pool.use_rng(rng)

    # -- read access -----------------------------------------------------

    @property
    def drawn_numbers(self) -> Tuple[int, ...]:
        return self._pool.history

    @property
    def available_numbers(self) -> List[int]:
        return self._pool.available

    def card(self, card_id: str) -> Optional[Card]:
        for card in self.cards:
            if card.card_id == card_id:
                return card
        return None

    def ordered_history(self) -> List[Tuple[int, int]]:
        return self._pool.ordered_history(self.config.sort_mode)

    def check_winner(self) -> Optional[Win]:
        win = find_winner(self.cards, self._pool.drawn_set, self.config.win_mode)
        if win is not None:
            logger.info("Bingo on card %s: %s", win.card_id, win.pattern.describe())
        return win

    # -- cards -----------------------------------------------------------

    def _clean_id(self, card_id: str) -> str:
        cleaned = (card_id or "").strip()
        if not cleaned:
            raise ValidationError("Please provide a number or identifier for the card.")
        return cleaned

    def _require_new_id(self, card_id: str) -> None:
        if self.card(card_id) is not None:
            raise DuplicateIdError(
                f'A card with the ID "{card_id}" already exists.', details={"id": card_id}
            )

    def add_card_auto(self, card_id: str) -> Result:
        def op() -> Result:
            cid = self._clean_id(card_id)
            self._require_new_id(cid)
            card = Card.generate(cid, self.config.max_number, self.rng)
            self.cards.append(card)
            logger.debug("Generated card %s", cid)
            return Result.success(card)

        return _run(op)

    def add_card_manual(self, card_id: str, grid: Sequence[Sequence[object]], *, replace: bool = False) -> Result:
        """Add a hand-entered card, or with ``replace`` edit an existing one in place."""

        def op() -> Result:
            cid = self._clean_id(card_id)
            existing = self.card(cid)
            if replace and existing is None:
                raise NotFoundError(f'Card "{cid}" not found.', details={"id": cid})
            if not replace:
                self._require_new_id(cid)
            numbers = validate_grid(grid, self.config.max_number)
            if existing is not None:
                existing.numbers = numbers
                logger.debug("Replaced numbers of card %s", cid)
                return Result.success(existing)
            card = Card(card_id=cid, numbers=numbers)
            self.cards.append(card)
            logger.debug("Added manual card %s", cid)
            return Result.success(card)

        return _run(op)

    def delete_card(self, card_id: str) -> Result:
        def op() -> Result:
            for idx, card in enumerate(self.cards):
                if card.card_id == card_id:
                    del self.cards[idx]
                    logger.debug("Deleted card %s", card_id)
                    return Result.success(card)
            raise NotFoundError(f'Card "{card_id}" not found.', details={"id": card_id})

        return _run(op)

    # -- configuration ---------------------------------------------------

    def set_config(
        self,
        max_number: int,
        win_mode: WinMode | str,
        sort_mode: SortMode | str | None = None,
    ) -> Result:
        """Apply new settings.

        A changed ``max_number`` resets the draw pool. A changed win mode is
        stored without re-running win detection.
        """

        def op() -> Result:
            try:
                mode = WinMode(win_mode)
                order = SortMode(sort_mode) if sort_mode is not None else self.config.sort_mode
            except ValueError as exc:
                raise ValidationError(str(exc)) from None
            new_config = GameConfig(max_number=max_number, win_mode=mode, sort_mode=order).validate()
            changed_range = new_config.max_number != self.config.max_number
            self.config = new_config
            if changed_range:
                self._pool = DrawPool(new_config.max_number, self.rng)
                logger.info("Maximum number changed to %d; draws reset", new_config.max_number)
            return Result.success(new_config)

        return _run(op)

    # -- draws -----------------------------------------------------------

    def _after_draw(self, value: int) -> Result:
        return Result.success(value, win=self.check_winner())

    def draw_random(self) -> Result:
        return _run(lambda: self._after_draw(self._pool.draw_random()))

    def mark_number(self, n: int) -> Result:
        return _run(lambda: self._after_draw(self._pool.mark_number(n)))

    def edit_drawn(self, index: int, value: int) -> Result:
        """Correct a past draw; the result value is the replaced number."""
        return _run(lambda: self._after_draw(self._pool.edit_drawn(index, value)))

    def reset_game(self) -> Result:
        self._pool.reset()
        logger.info("Game reset; %d card(s) kept", len(self.cards))
        return Result.success()


def new_game(
    *,
    max_number: int = DEFAULT_MAX_NUMBER,
    win_mode: WinMode | str = WinMode.LINE,
    sort_mode: SortMode | str = SortMode.HISTORY,
    cards: Iterable[Card] = (),
    drawn: Iterable[int] = (),
    rng: Optional[RandomSource] = None,
) -> GameState:
    config = GameConfig(max_number=max_number, win_mode=WinMode(win_mode), sort_mode=SortMode(sort_mode))
    return GameState(config=config, cards=list(cards), drawn=tuple(drawn), rng=rng)
