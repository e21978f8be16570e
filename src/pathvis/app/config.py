# src/pathvis/app/config.py
"""
Viewer settings.

Resolved lowest to highest precedence:
    defaults -> JSON file (--config=PATH or PATHVIS_CONFIG)
             -> PATHVIS_<KEY> environment variables
             -> --<key>=<value> command-line flags

Coordinates are written "row,col" in env/argv and as [row, col] in JSON.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pathvis.core.dijkstra import FRONTIERS

Coord = Tuple[int, int]

ENV_PREFIX = "PATHVIS_"
_COORD_KEYS = ("start", "finish")
_INT_KEYS = ("rows", "cols", "visit_delay_ms", "path_delay_ms", "cell_size")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ViewerConfig:
    rows: int = 20
    cols: int = 50
    start: Coord = (10, 15)
    finish: Coord = (10, 35)
    visit_delay_ms: int = 10
    path_delay_ms: int = 50
    cell_size: int = 24
    frontier: str = "queue"
    log_level: str = "INFO"

    def validate(self) -> "ViewerConfig":
        if self.frontier not in FRONTIERS:
            raise ConfigError(f"frontier must be one of {sorted(FRONTIERS)}, got {self.frontier!r}")
        if self.visit_delay_ms < 0 or self.path_delay_ms < 0:
            raise ConfigError("animation delays must be >= 0")
        if self.cell_size < 4:
            raise ConfigError(f"cell_size too small: {self.cell_size}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"unknown log level {self.log_level!r}")
        return self


_FIELD_NAMES = tuple(f.name for f in fields(ViewerConfig))


def _to_int(raw: Any) -> int:
    # strings come from env/argv; JSON must already hold a whole number
    if isinstance(raw, str):
        return int(raw.strip())
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise TypeError(f"expected an integer, got {type(raw).__name__}")
    return raw


def _parse_value(key: str, raw: Any) -> Any:
    try:
        if key in _COORD_KEYS:
            if isinstance(raw, str):
                raw = raw.split(",")
            r, c = raw
            return (_to_int(r), _to_int(c))
        if key in _INT_KEYS:
            return _to_int(raw)
        return str(raw)
    except (TypeError, ValueError) as ex:
        raise ConfigError(f"bad value for {key}: {raw!r} ({ex})") from ex


def _argv_overrides(argv: List[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for arg in argv:
        if arg.startswith("--") and "=" in arg:
            k, v = arg[2:].split("=", 1)
            out[k.replace("-", "_").lower()] = v
    return out


def _load_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as ex:
        raise ConfigError(f"cannot read config {path}: {ex}") from ex
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must hold a JSON object")
    unknown = sorted(set(data) - set(_FIELD_NAMES))
    if unknown:
        raise ConfigError(f"unknown config keys in {path}: {', '.join(unknown)}")
    return data


def load_config(argv: Optional[List[str]] = None, env: Optional[Mapping[str, str]] = None) -> ViewerConfig:
    argv = sys.argv[1:] if argv is None else argv
    env = os.environ if env is None else env

    cli = _argv_overrides(argv)
    values: Dict[str, Any] = {}

    path = cli.pop("config", None) or env.get(ENV_PREFIX + "CONFIG")
    if path:
        values.update(_load_file(Path(path)))

    for name in _FIELD_NAMES:
        raw = env.get(ENV_PREFIX + name.upper())
        if raw is not None:
            values[name] = raw

    for name, raw in cli.items():
        if name in _FIELD_NAMES:
            values[name] = raw

    parsed = {k: _parse_value(k, v) for k, v in values.items()}
    return replace(ViewerConfig(), **parsed).validate()
