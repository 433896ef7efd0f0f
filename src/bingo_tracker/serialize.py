from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .engine.card import Card, validate_grid
from .engine.draw_pool import SortMode
from .engine.game import MAX_MAX_NUMBER, MIN_MAX_NUMBER, GameConfig, GameState
from .engine.win import WinMode
from .errors import ValidationError
from .rng import RandomSource

logger = logging.getLogger(__name__)

# persisted sort mode labels differ from the in-memory enum values
_SORT_TO_RECORD = {SortMode.HISTORY: "history", SortMode.ASCENDING: "asc"}
_SORT_FROM_RECORD = {"history": SortMode.HISTORY, "asc": SortMode.ASCENDING, "ascending": SortMode.ASCENDING}


def ensure_parent(path: Path, *, mkdirs: bool) -> None:
    parent = path.parent
    if not parent.exists() and mkdirs:
        parent.mkdir(parents=True, exist_ok=True)


def to_record(state: GameState) -> Dict[str, Any]:
    """Serializable snapshot of a game. The available pool is not stored."""
    return {
        "cards": [card.to_dict() for card in state.cards],
        "drawnNumbers": list(state.drawn_numbers),
        "maxNumber": state.config.max_number,
        "bingoType": state.config.win_mode.value,
        "sortMode": _SORT_TO_RECORD[state.config.sort_mode],
    }


def _read_max_number(data: Mapping[str, Any], default: int) -> int:
    value = data.get("maxNumber")
    if isinstance(value, int) and not isinstance(value, bool) and MIN_MAX_NUMBER <= value <= MAX_MAX_NUMBER:
        return value
    if value is not None:
        logger.warning("Ignoring invalid maxNumber %r", value)
    return default


def _read_cards(raw: Any) -> List[Card]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Ignoring malformed cards field")
        return []
    cards: List[Card] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, Mapping):
            logger.warning("Skipping malformed card entry %r", item)
            continue
        card_id = str(item.get("id", "")).strip()
        if not card_id or card_id in seen:
            logger.warning("Skipping card with missing or duplicate id %r", card_id)
            continue
        # cards may predate a change of maxNumber, so only the widest bound applies
        try:
            numbers = validate_grid(item.get("numbers") or [], MAX_MAX_NUMBER)
        except (ValidationError, TypeError) as exc:
            logger.warning("Skipping card %s: %s", card_id, exc)
            continue
        seen.add(card_id)
        cards.append(Card(card_id=card_id, numbers=numbers))
    return cards


def _read_drawn(raw: Any, max_number: int) -> List[int]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Ignoring malformed drawnNumbers field")
        return []
    drawn: List[int] = []
    seen: set[int] = set()
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= max_number or value in seen:
            logger.warning("Skipping invalid drawn number %r", value)
            continue
        seen.add(value)
        drawn.append(value)
    return drawn


def from_record(
    data: Any,
    *,
    defaults: Optional[GameConfig] = None,
    rng: Optional[RandomSource] = None,
) -> GameState:
    """Rebuild a game from a persisted record.

    Absent or malformed fields fall back to ``defaults``; a record that is not
    a mapping yields a fresh game. The available pool is always recomputed.
    """
    defaults = defaults or GameConfig()
    if not isinstance(data, Mapping):
        if data is not None:
            logger.warning("Saved state is not a mapping; starting a new game")
        return GameState(config=defaults, rng=rng)

    max_number = _read_max_number(data, defaults.max_number)
    try:
        win_mode = WinMode(data.get("bingoType", defaults.win_mode.value))
    except ValueError:
        logger.warning("Ignoring invalid bingoType %r", data.get("bingoType"))
        win_mode = defaults.win_mode
    sort_mode = _SORT_FROM_RECORD.get(str(data.get("sortMode")), defaults.sort_mode)

    config = GameConfig(max_number=max_number, win_mode=win_mode, sort_mode=sort_mode)
    return GameState(
        config=config,
        cards=_read_cards(data.get("cards")),
        drawn=_read_drawn(data.get("drawnNumbers"), max_number),
        rng=rng,
    )


def dumps(state: GameState) -> str:
    return json.dumps(to_record(state), ensure_ascii=True, indent=2)


def loads(text: str, *, defaults: Optional[GameConfig] = None, rng: Optional[RandomSource] = None) -> GameState:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        logger.warning("Saved state is not valid JSON (%s); starting a new game", exc)
        data = None
    return from_record(data, defaults=defaults, rng=rng)


def save_state(path: Path, state: GameState, *, mkdirs: bool = True) -> None:
    ensure_parent(path, mkdirs=mkdirs)
    path.write_text(dumps(state) + "\n", encoding="utf-8")


def load_state(
    path: Path, *, defaults: Optional[GameConfig] = None, rng: Optional[RandomSource] = None
) -> GameState:
    if not path.exists():
        return GameState(config=defaults or GameConfig(), rng=rng)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read saved state %s (%s); starting a new game", path, exc)
        return GameState(config=defaults or GameConfig(), rng=rng)
    return loads(text, defaults=defaults, rng=rng)
