"""Draw history and the pool of numbers not yet drawn."""

from __future__ import annotations

import bisect
import logging
from enum import Enum
from typing import Iterable, List, Tuple

from ..errors import AlreadyDrawnError, DuplicateError, EmptyPoolError, NotFoundError, OutOfRangeError
from ..rng import RandomSource

logger = logging.getLogger(__name__)


class SortMode(str, Enum):
    HISTORY = "history"
    ASCENDING = "ascending"


class DrawPool:
    """Ordered draw history plus its complement within ``[1, max_number]``.

    The available pool is kept sorted and updated incrementally; it is only
    rebuilt from scratch on construction and reset.
    """

    def __init__(self, max_number: int, rng: RandomSource, history: Iterable[int] = ()):
        self.max_number = max_number
        self._rng = rng
        self._history: List[int] = list(history)
        self._drawn = set(self._history)
        if len(self._drawn) != len(self._history):
            raise DuplicateError("Draw history contains duplicates")
        for n in self._history:
            self._check_range(n)
        self._available: List[int] = self._full_range(exclude=self._drawn)

    def use_rng(self, rng: RandomSource) -> None:
        self._rng = rng

    def _full_range(self, exclude: set[int] | None = None) -> List[int]:
        exclude = exclude or set()
        return [n for n in range(1, self.max_number + 1) if n not in exclude]

    def _check_range(self, n: int) -> None:
        if n < 1 or n > self.max_number:
            raise OutOfRangeError(
                f"Please enter a number between 1 and {self.max_number}.",
                details={"value": n, "max_number": self.max_number},
            )

    @property
    def history(self) -> Tuple[int, ...]:
        return tuple(self._history)

    @property
    def available(self) -> List[int]:
        return list(self._available)

    @property
    def drawn_set(self) -> frozenset[int]:
        return frozenset(self._drawn)

    def __len__(self) -> int:
        return len(self._history)

    def draw_random(self) -> int:
        if not self._available:
            raise EmptyPoolError("All numbers have already been drawn!")
        index = self._rng.randint(0, len(self._available) - 1)
        number = self._available.pop(index)
        self._history.append(number)
        self._drawn.add(number)
        logger.debug("Drew %d (%d left)", number, len(self._available))
        return number

    def mark_number(self, n: int) -> int:
        self._check_range(n)
        if n in self._drawn:
            raise AlreadyDrawnError(f"Number {n} has already been drawn.", details={"value": n})
        idx = bisect.bisect_left(self._available, n)
        if idx < len(self._available) and self._available[idx] == n:
            del self._available[idx]
        self._history.append(n)
        self._drawn.add(n)
        logger.debug("Marked %d (%d left)", n, len(self._available))
        return n

    def edit_drawn(self, index: int, new_value: int) -> int:
        """Replace the history entry at ``index``; returns the old value."""
        if index < 0 or index >= len(self._history):
            raise NotFoundError(
                f"No drawn number at position {index}.", details={"index": index}
            )
        self._check_range(new_value)
        old_value = self._history[index]
        if new_value == old_value:
            return old_value
        if new_value in self._drawn:
            raise DuplicateError(
                f"Number {new_value} has already been drawn.", details={"value": new_value}
            )

        self._history[index] = new_value
        self._drawn.discard(old_value)
        self._drawn.add(new_value)
        # history has no duplicates, so the old value is free again
        bisect.insort(self._available, old_value)
        idx = bisect.bisect_left(self._available, new_value)
        if idx < len(self._available) and self._available[idx] == new_value:
            del self._available[idx]
        logger.debug("Edited position %d: %d -> %d", index, old_value, new_value)
        return old_value

    def reset(self) -> None:
        self._history = []
        self._drawn = set()
        self._available = self._full_range()
        logger.debug("Draw pool reset to 1..%d", self.max_number)

    def ordered_history(self, sort_mode: SortMode = SortMode.HISTORY) -> List[Tuple[int, int]]:
        """``(original_index, number)`` pairs in display order.

        The original index is kept so an edit picked from a sorted view still
        targets the right history entry.
        """
        pairs = list(enumerate(self._history))
        if sort_mode == SortMode.ASCENDING:
            pairs.sort(key=lambda pair: pair[1])
        return pairs
