from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml

from .engine.draw_pool import SortMode
from .engine.game import GameConfig
from .engine.win import WinMode


ENV_PREFIX = "BINGO_TRACKER_"
DEFAULT_STATE_FILE = "bingo_state.json"
PATH_KEYS = ("state_file", "log_file")


def _read_config_file(config_path: Path | None) -> Dict[str, Any]:
    if not config_path:
        return {}
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    suffix = config_path.suffix.lower()
    text = config_path.read_text(encoding="utf-8")
    if suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
        if not isinstance(data, dict):
            raise ValueError("Top-level YAML config must be a mapping")
        return data
    if suffix == ".json":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Top-level JSON config must be a mapping")
        return data
    raise ValueError(f"Unsupported config extension: {suffix}")


def _collect_env_vars(env: Mapping[str, str]) -> Dict[str, Any]:
    """Map ENV variables with BINGO_TRACKER_ prefix to config keys.

    We use an explicit map to avoid ambiguity. Keys not present are ignored.
    """
    mapping: Dict[str, str] = {
        # Game
        f"{ENV_PREFIX}MAX_NUMBER": "max_number",
        f"{ENV_PREFIX}WIN_MODE": "win_mode",
        f"{ENV_PREFIX}SORT_MODE": "sort_mode",
        # Seed
        f"{ENV_PREFIX}SEED_ENGINE": "seed.engine",
        f"{ENV_PREFIX}SEED_VALUE": "seed.value",
        # Storage & UX
        f"{ENV_PREFIX}STATE_FILE": "state_file",
        f"{ENV_PREFIX}LOG_LEVEL": "log_level",
        f"{ENV_PREFIX}LOG_FILE": "log_file",
    }

    result: Dict[str, Any] = {}
    for env_key, cfg_key in mapping.items():
        if env_key not in env:
            continue
        raw = env[env_key]
        if cfg_key in {"max_number", "seed.value"}:
            try:
                result[cfg_key] = int(raw)
            except ValueError:
                result[cfg_key] = raw
        else:
            result[cfg_key] = raw

    return result


def _set_nested(config: Dict[str, Any], dotted_key: str, value: Any) -> None:
    parts = dotted_key.split(".")
    cursor = config
    for part in parts[:-1]:
        if part not in cursor or not isinstance(cursor[part], dict):
            cursor[part] = {}
        cursor = cursor[part]
    cursor[parts[-1]] = value


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = json.loads(json.dumps(base))  # deep copy via JSON
    for key, value in overrides.items():
        if "." in key:
            _set_nested(merged, key, value)
        else:
            merged[key] = value
    return merged


def resolve_paths(
    resolved: Dict[str, Any],
    config_file: Path | None,
    cli_overrides: Dict[str, Any],
) -> Dict[str, Any]:
    """Normalize paths per policy.

    - Paths from config file: resolve relative to config directory
    - Paths from CLI or ENV: resolve relative to CWD
    """
    cwd = Path.cwd()
    cfg_dir = config_file.parent if config_file else None

    def normalize(path_value: str | None, is_cli: bool) -> str | None:
        if path_value is None or path_value == "":
            return None
        p = Path(path_value)
        if p.is_absolute():
            return str(p)
        base = cwd if is_cli else (cfg_dir or cwd)
        return str((base / p).resolve())

    result = dict(resolved)
    for key in PATH_KEYS:
        value = resolved.get(key)
        if value is None:
            continue
        result[key] = normalize(str(value), key in cli_overrides)

    return result


def resolve_parameters(
    *,
    config_path_str: str | None,
    cli_overrides: Dict[str, Any],
    env: Mapping[str, str] | None = None,
) -> Tuple[Dict[str, Any], Path | None]:
    """Resolve parameters with precedence CLI > ENV > config > defaults.

    Returns (resolved_params, config_path)
    """
    config_path = Path(config_path_str).resolve() if config_path_str else None
    file_cfg = _read_config_file(config_path) if config_path else {}
    env_map = _collect_env_vars(os.environ if env is None else env)

    defaults: Dict[str, Any] = {
        "max_number": 75,
        "win_mode": "line",
        "sort_mode": "history",
        "state_file": DEFAULT_STATE_FILE,
        "log_level": "WARNING",
        "seed": {"engine": "py_random", "value": None},
    }

    # Merge: config > defaults, then ENV, then CLI
    merged = _apply_overrides(defaults, file_cfg)
    merged = _apply_overrides(merged, env_map)
    merged = _apply_overrides(merged, cli_overrides)

    # ENV paths behave like CLI paths
    path_overrides = {k: v for k, v in {**env_map, **cli_overrides}.items() if k in PATH_KEYS}
    merged = resolve_paths(merged, config_path, path_overrides)
    return merged, config_path


def game_defaults(resolved: Mapping[str, Any]) -> GameConfig:
    """Initial settings for a game that has no saved state yet."""
    try:
        max_number = int(resolved.get("max_number", 75))
        win_mode = WinMode(str(resolved.get("win_mode", "line")).lower())
        sort_mode = SortMode(str(resolved.get("sort_mode", "history")).lower())
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid game settings: {exc}") from None
    return GameConfig(max_number=max_number, win_mode=win_mode, sort_mode=sort_mode).validate()
