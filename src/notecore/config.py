"""Settings for the note core, read from a TOML file::

    [notecore]
    autosave_delay = 1.5

    [notecore.tag_colors]
    urgent = "red"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from notecore.autosave import DEFAULT_DELAY


@dataclass
class Settings:
    autosave_delay: float = DEFAULT_DELAY
    #: Merged over the built-in tag colour table.
    tag_colors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        section = data.get("notecore", data)
        delay = section.get("autosave_delay", DEFAULT_DELAY)
        if not isinstance(delay, (int, float)) or isinstance(delay, bool) or delay < 0:
            raise ValueError(f"autosave_delay must be a non-negative number, got {delay!r}")
        colors = section.get("tag_colors", {})
        if not isinstance(colors, dict):
            raise ValueError(f"tag_colors must be a table, got {colors!r}")
        return cls(
            autosave_delay=float(delay),
            tag_colors={str(k).strip().lower(): str(v) for k, v in colors.items()},
        )


def load_settings(path: Path) -> Settings:
    """Read :class:`Settings` from a ``.toml`` file."""
    with open(path, "rb") as fh:
        data = tomllib.load(fh)
    return Settings.from_dict(data)
