from __future__ import annotations

import pytest

from bingo_tracker.engine.card import Card
from bingo_tracker.engine.win import PatternKind, WinMode, WinPattern, check_card, find_winner


def canonical_card(card_id="1"):
    # column c holds c*15+1 .. c*15+5 top to bottom
    grid = [[col * 15 + row + 1 for col in range(5)] for row in range(5)]
    grid[2][2] = 0
    return Card(card_id, grid)


def test_first_row_wins_horizontally():
    card = canonical_card()
    assert card.numbers[0] == [1, 16, 31, 46, 61]
    pattern = check_card(card, {1, 16, 31, 46, 61}, WinMode.LINE)
    assert pattern == WinPattern(PatternKind.HORIZONTAL, 0)


def test_rows_are_checked_before_columns_and_diagonals():
    card = canonical_card()
    drawn = set(card.numbers[0]) | {card.numbers[r][0] for r in range(5)} | {17, 49, 65}
    assert check_card(card, drawn, WinMode.LINE) == WinPattern(PatternKind.HORIZONTAL, 0)


def test_vertical_line_through_free_space():
    card = canonical_card()
    assert check_card(card, {31, 32, 34, 35}, WinMode.LINE) == WinPattern(PatternKind.VERTICAL, 2)


def test_columns_are_checked_before_diagonals():
    card = canonical_card()
    drawn = {1, 2, 3, 4, 5, 17, 49, 65}
    assert check_card(card, drawn, WinMode.LINE) == WinPattern(PatternKind.VERTICAL, 0)


def test_main_diagonal():
    card = canonical_card()
    assert check_card(card, {1, 17, 49, 65}, WinMode.LINE) == WinPattern(PatternKind.DIAGONAL_MAIN)


def test_anti_diagonal():
    card = canonical_card()
    assert check_card(card, {61, 47, 19, 5}, WinMode.LINE) == WinPattern(PatternKind.DIAGONAL_ANTI)


def test_no_line_no_win():
    card = canonical_card()
    assert check_card(card, {1, 16, 31, 46}, WinMode.LINE) is None
    assert check_card(card, set(), WinMode.LINE) is None


def test_full_mode_ignores_lines():
    card = canonical_card()
    assert check_card(card, {1, 16, 31, 46, 61}, WinMode.FULL) is None


def test_full_mode_needs_every_cell():
    card = canonical_card()
    everything = set(card.values())
    assert check_card(card, everything, WinMode.FULL) == WinPattern(PatternKind.FULL_CARD)
    for value in everything:
        assert check_card(card, everything - {value}, WinMode.FULL) is None


def test_first_winning_card_is_reported():
    a = canonical_card("a")
    b = canonical_card("b")
    c = Card("c", [[v + 5 if v else 0 for v in row] for row in a.numbers])
    drawn = {6, 21, 36, 51, 66}
    win = find_winner([a, c, b], drawn, WinMode.LINE)
    assert win is not None and win.card_id == "c"
    win = find_winner([a, b], {1, 16, 31, 46, 61}, WinMode.LINE)
    assert win.card_id == "a"
    assert find_winner([], {1}, WinMode.LINE) is None


@pytest.mark.parametrize(
    "pattern,text",
    [
        (WinPattern(PatternKind.HORIZONTAL, 3), "Horizontal (row 3)"),
        (WinPattern(PatternKind.VERTICAL, 1), "Vertical (column 1)"),
        (WinPattern(PatternKind.DIAGONAL_MAIN), "Diagonal (main)"),
        (WinPattern(PatternKind.FULL_CARD), "Full card"),
    ],
)
def test_pattern_description(pattern, text):
    assert pattern.describe() == text


def test_notification_payload():
    win = find_winner([canonical_card("42")], {1, 16, 31, 46, 61}, WinMode.LINE)
    note = win.notification()
    assert note["title"] == "BINGO!"
    assert "#42" in note["message"]
    assert "Horizontal" in note["message"]
