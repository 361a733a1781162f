"""Parse options and TOML config file loading."""

from __future__ import annotations

import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "cssnest.toml"


def depth_ceiling() -> int:
    """Largest usable ``max_depth``; each nesting level costs two parser frames."""
    return max(1, sys.getrecursionlimit() // 4)


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Options threaded through a single parse call.

    ``source`` labels diagnostics and position metadata and never changes
    the resulting tree shape.

    ``max_depth`` is clamped to :func:`depth_ceiling` so deep input fails with
    a ParseError instead of exhausting the interpreter stack.
    """

    source: str = "<input>"
    max_depth: int = 128
    lookahead_limit: int = 4096

    def __post_init__(self) -> None:
        ceiling = depth_ceiling()
        if self.max_depth > ceiling:
            object.__setattr__(self, "max_depth", ceiling)


def load_config(config_path: Path | None, base_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else base_dir / CONFIG_FILENAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def options_from_config(config: dict[str, Any], source: str = "<input>") -> ParseOptions:
    """Build ParseOptions from the ``[parser]`` table of a loaded config.

    Values of the wrong type are ignored and the default is kept.
    """
    defaults = ParseOptions()
    max_depth = defaults.max_depth
    lookahead_limit = defaults.lookahead_limit

    table = config.get("parser")
    if isinstance(table, dict):
        cfg_depth = table.get("max_depth")
        # bool is an int subclass, reject it explicitly
        if isinstance(cfg_depth, int) and not isinstance(cfg_depth, bool) and cfg_depth > 0:
            max_depth = min(cfg_depth, depth_ceiling())
        cfg_limit = table.get("lookahead_limit")
        if isinstance(cfg_limit, int) and not isinstance(cfg_limit, bool) and cfg_limit > 0:
            lookahead_limit = cfg_limit

    return ParseOptions(source=source, max_depth=max_depth, lookahead_limit=lookahead_limit)
