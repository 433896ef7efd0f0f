from __future__ import annotations

import os
from pathlib import Path

import pytest

from bingo_tracker.config import game_defaults, resolve_parameters
from bingo_tracker.engine import GameConfig, SortMode, WinMode
from bingo_tracker.errors import OutOfRangeError


def test_defaults_without_sources():
    resolved, cfg_path = resolve_parameters(config_path_str=None, cli_overrides={}, env={})
    assert cfg_path is None
    assert game_defaults(resolved) == GameConfig()
    assert resolved["seed"] == {"engine": "py_random", "value": None}


def test_env_precedence_over_config(tmp_path: Path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("max_number: 60\nwin_mode: full\n", encoding="utf-8")
    monkeypatch.setenv("BINGO_TRACKER_MAX_NUMBER", "90")

    resolved, _ = resolve_parameters(config_path_str=str(cfg), cli_overrides={}, env=os.environ)
    assert resolved["max_number"] == 90
    assert resolved["win_mode"] == "full"


def test_cli_precedence_over_env(tmp_path: Path, monkeypatch):
    cfg = tmp_path / "config.json"
    cfg.write_text('{"seed": {"engine": "py_random", "value": 1}}', encoding="utf-8")
    monkeypatch.setenv("BINGO_TRACKER_SEED_VALUE", "2")

    resolved, _ = resolve_parameters(
        config_path_str=str(cfg), cli_overrides={"seed.value": 3}, env=os.environ
    )
    assert resolved["seed"]["value"] == 3
    assert resolved["seed"]["engine"] == "py_random"


def test_path_normalization_cli_vs_config(tmp_path: Path, monkeypatch):
    cfg_dir = tmp_path / "cfg"
    cfg_dir.mkdir()
    cfg = cfg_dir / "conf.yaml"
    cfg.write_text("state_file: game.json\nlog_file: bingo.log\n", encoding="utf-8")

    monkeypatch.chdir(tmp_path)
    resolved, _ = resolve_parameters(
        config_path_str=str(cfg),
        cli_overrides={"log_file": "run.log"},
        env={},
    )
    assert Path(resolved["state_file"]).parent == cfg_dir.resolve()
    assert Path(resolved["log_file"]).parent == tmp_path.resolve()


def test_missing_and_unsupported_config_files(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        resolve_parameters(config_path_str=str(tmp_path / "nope.yaml"), cli_overrides={}, env={})
    bad = tmp_path / "conf.toml"
    bad.write_text("x = 1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        resolve_parameters(config_path_str=str(bad), cli_overrides={}, env={})


def test_game_defaults_validation():
    assert game_defaults({"max_number": "50", "win_mode": "FULL", "sort_mode": "ascending"}) == GameConfig(
        50, WinMode.FULL, SortMode.ASCENDING
    )
    with pytest.raises(ValueError):
        game_defaults({"win_mode": "blackout"})
    with pytest.raises(OutOfRangeError):
        game_defaults({"max_number": 120})
