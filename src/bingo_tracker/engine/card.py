"""Card generation and manual grid validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Collection, List, Sequence, Tuple

from ..errors import CardValidationError
from ..rng import RandomSource

SIZE = 5
FREE_ROW = 2
FREE_COL = 2
FREE_SPACE = 0
CELLS_PER_CARD = SIZE * SIZE - 1

Grid = List[List[int]]


def sample_without_replacement(rng: RandomSource, low: int, high: int, count: int) -> List[int]:
    """Pick ``count`` distinct integers uniformly from ``[low, high]``.

    The returned order is the draw order, so callers may place the values
    positionally without reshuffling.
    """
    span = high - low + 1
    if count < 0 or count > span:
        raise ValueError(f"cannot sample {count} distinct values from [{low}, {high}]")
    return rng.sample(list(range(low, high + 1)), count)


def column_ranges(max_number: int) -> List[Tuple[int, int]]:
    """Disjoint inclusive ranges for the five columns.

    Column ``c`` covers ``[c*w + 1, (c+1)*w]`` with ``w = max_number // 5``;
    the last column absorbs the remainder up to ``max_number``.
    """
    width = max_number // SIZE
    if width < SIZE:
        raise ValueError(f"max_number {max_number} too small for a {SIZE}x{SIZE} card")
    ranges: List[Tuple[int, int]] = []
    for col in range(SIZE):
        start = col * width + 1
        end = max_number if col == SIZE - 1 else start + width - 1
        ranges.append((start, end))
    return ranges


def generate_numbers(max_number: int, rng: RandomSource) -> Grid:
    grid: Grid = [[FREE_SPACE] * SIZE for _ in range(SIZE)]
    for col, (start, end) in enumerate(column_ranges(max_number)):
        values = sample_without_replacement(rng, start, end, SIZE)
        for row in range(SIZE):
            grid[row][col] = values[row]
    grid[FREE_ROW][FREE_COL] = FREE_SPACE
    return grid


def is_free_cell(row: int, col: int) -> bool:
    return row == FREE_ROW and col == FREE_COL


def _coerce_cell(raw: object, row: int, col: int) -> int:
    # text comes from CLI inputs; bool is rejected even though it is an int
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            pass
    raise CardValidationError(
        f"Cell ({row},{col}) is not a whole number: {raw!r}", details={"row": row, "col": col}
    )


def validate_grid(grid: Sequence[Sequence[object]], max_number: int) -> Grid:
    """Check a manually entered grid and return a normalized copy.

    Non-free cells must be whole numbers in ``[1, max_number]`` and pairwise
    distinct. Column ranges are not enforced. Whatever was entered at the
    center is replaced by the free space.
    """
    if len(grid) != SIZE or any(len(row) != SIZE for row in grid):
        raise CardValidationError(f"Card must be a {SIZE}x{SIZE} grid")

    numbers: Grid = [[FREE_SPACE] * SIZE for _ in range(SIZE)]
    used: set[int] = set()
    for row in range(SIZE):
        for col in range(SIZE):
            if is_free_cell(row, col):
                continue
            value = _coerce_cell(grid[row][col], row, col)
            if value < 1 or value > max_number:
                raise CardValidationError(
                    f"Numbers must be between 1 and {max_number}; got {value} at ({row},{col})",
                    details={"row": row, "col": col, "value": value},
                )
            if value in used:
                raise CardValidationError(
                    f"Number {value} is duplicated", details={"row": row, "col": col, "value": value}
                )
            used.add(value)
            numbers[row][col] = value
    return numbers


@dataclass
class Card:
    card_id: str
    numbers: Grid = field(default_factory=list)

    @classmethod
    def generate(cls, card_id: str, max_number: int, rng: RandomSource) -> "Card":
        return cls(card_id=card_id, numbers=generate_numbers(max_number, rng))

    def values(self) -> List[int]:
        """The 24 non-free cell values, row by row."""
        return [
            self.numbers[row][col]
            for row in range(SIZE)
            for col in range(SIZE)
            if not is_free_cell(row, col)
        ]

    def marked_cells(self, drawn: Collection[int]) -> List[List[bool]]:
        return [
            [is_free_cell(row, col) or self.numbers[row][col] in drawn for col in range(SIZE)]
            for row in range(SIZE)
        ]

    def to_dict(self) -> dict:
        return {"id": self.card_id, "numbers": [list(row) for row in self.numbers]}
