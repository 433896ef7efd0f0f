"""Win detection over tracked cards."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Collection, Dict, Iterable, List, Optional, Tuple

from .card import FREE_SPACE, SIZE, Card, is_free_cell


class WinMode(str, Enum):
    LINE = "line"
    FULL = "full"


class PatternKind(str, Enum):
    HORIZONTAL = "Horizontal"
    VERTICAL = "Vertical"
    DIAGONAL_MAIN = "Diagonal-Main"
    DIAGONAL_ANTI = "Diagonal-Anti"
    FULL_CARD = "Full-Card"


@dataclass(frozen=True)
class WinPattern:
    kind: PatternKind
    index: Optional[int] = None

    def describe(self) -> str:
        if self.kind == PatternKind.HORIZONTAL:
            return f"Horizontal (row {self.index})"
        if self.kind == PatternKind.VERTICAL:
            return f"Vertical (column {self.index})"
        if self.kind == PatternKind.DIAGONAL_MAIN:
            return "Diagonal (main)"
        if self.kind == PatternKind.DIAGONAL_ANTI:
            return "Diagonal (anti)"
        return "Full card"


@dataclass(frozen=True)
class Win:
    card_id: str
    pattern: WinPattern

    def notification(self) -> Dict[str, str]:
        return {
            "title": "BINGO!",
            "message": f"Bingo on card #{self.card_id}!\nType: {self.pattern.describe()}",
        }


def is_marked(value: int, drawn: Collection[int]) -> bool:
    return value == FREE_SPACE or value in drawn


def _lines() -> Iterable[Tuple[WinPattern, List[Tuple[int, int]]]]:
    """All candidate lines in evaluation order."""
    for row in range(SIZE):
        yield WinPattern(PatternKind.HORIZONTAL, row), [(row, col) for col in range(SIZE)]
    for col in range(SIZE):
        yield WinPattern(PatternKind.VERTICAL, col), [(row, col) for row in range(SIZE)]
    yield WinPattern(PatternKind.DIAGONAL_MAIN), [(i, i) for i in range(SIZE)]
    yield WinPattern(PatternKind.DIAGONAL_ANTI), [(i, SIZE - 1 - i) for i in range(SIZE)]


LINES: List[Tuple[WinPattern, List[Tuple[int, int]]]] = list(_lines())


def check_full(card: Card, drawn: Collection[int]) -> bool:
    for row in range(SIZE):
        for col in range(SIZE):
            if is_free_cell(row, col):
                continue
            if card.numbers[row][col] not in drawn:
                return False
    return True


def check_card(card: Card, drawn: Collection[int], win_mode: WinMode) -> Optional[WinPattern]:
    """First winning pattern on ``card`` or ``None``.

    Line mode scans rows, then columns, then the main and anti diagonals.
    """
    if win_mode == WinMode.FULL:
        return WinPattern(PatternKind.FULL_CARD) if check_full(card, drawn) else None
    for pattern, cells in LINES:
        if all(is_marked(card.numbers[row][col], drawn) for row, col in cells):
            return pattern
    return None


def find_winner(cards: Iterable[Card], drawn: Collection[int], win_mode: WinMode) -> Optional[Win]:
    # only the first winning card is reported
    for card in cards:
        pattern = check_card(card, drawn, win_mode)
        if pattern is not None:
            return Win(card_id=card.card_id, pattern=pattern)
    return None
