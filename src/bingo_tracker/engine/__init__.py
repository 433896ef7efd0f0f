"""Core module for bingo game tracking."""

from .card import Card, generate_numbers, sample_without_replacement, validate_grid
from .draw_pool import DrawPool, SortMode
from .game import GameConfig, GameState, Result, new_game
from .win import PatternKind, Win, WinMode, WinPattern, check_card, find_winner

__all__ = [
    "Card",
    "DrawPool",
    "GameConfig",
    "GameState",
    "PatternKind",
    "Result",
    "SortMode",
    "Win",
    "WinMode",
    "WinPattern",
    "check_card",
    "find_winner",
    "generate_numbers",
    "new_game",
    "sample_without_replacement",
    "validate_grid",
]
