"""Host-side configuration for melody generation.

The engine functions take everything they need as arguments.  The values a
front end keeps between requests (tempo, volume, instrument, generation
mode, melody length and Markov order) live in :class:`MelodySettings` so
they can be validated in one place and seeded from a JSON file.

Usage Example
-------------
>>> settings = MelodySettings.from_dict({"tempo": 90, "mode": "pattern"})
>>> settings.tempo, settings.mode
(90, 'pattern')
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Tuple

from .generators import GENERATION_MODES

__all__ = [
    "DEFAULT_SETTINGS_FILE",
    "INSTRUMENTS",
    "MelodySettings",
    "load_settings",
]

# Default path for reading user preferences. The ``MELODY_CHAIN_SETTINGS_FILE``
# environment variable overrides the location in the user's home directory.
env_path = os.environ.get("MELODY_CHAIN_SETTINGS_FILE")
if env_path:
    DEFAULT_SETTINGS_FILE = Path(env_path).expanduser()
else:
    DEFAULT_SETTINGS_FILE = Path.home() / ".melody_chain_settings.json"

# Oscillator shapes offered by the browser player. ``midi_io`` maps each one
# to a General MIDI program.
INSTRUMENTS: Tuple[str, ...] = ("sine", "square", "sawtooth", "triangle")


@dataclass
class MelodySettings:
    """Tempo, volume, instrument and generation options for one session."""

    tempo: int = 120
    volume: int = 80
    instrument: str = "sine"
    mode: str = "default"
    length: int = 32
    order: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MelodySettings":
        """Create settings from ``data`` ignoring unknown keys."""

        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        """Raise ``ValueError`` describing the first invalid field.

        Values loaded from JSON may have any type, so field types are checked
        before ranges. ``bool`` is rejected even though it subclasses ``int``.
        """

        for name in ("tempo", "volume", "length", "order"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Setting '{name}' must be an integer, got {value!r}.")
        for name in ("instrument", "mode"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValueError(f"Setting '{name}' must be a string, got {value!r}.")

        if self.tempo <= 0:
            raise ValueError("Tempo must be a positive integer.")
        if not 0 <= self.volume <= 100:
            raise ValueError("Volume must be between 0 and 100.")
        if self.instrument not in INSTRUMENTS:
            raise ValueError(
                f"Instrument must be one of {', '.join(INSTRUMENTS)}."
            )
        if self.mode not in GENERATION_MODES:
            raise ValueError(
                f"Mode must be one of {', '.join(GENERATION_MODES)}."
            )
        if self.length <= 0:
            raise ValueError("Melody length must be a positive integer.")
        if self.order < 1:
            raise ValueError("Order must be at least 1.")


def load_settings(path: Path = DEFAULT_SETTINGS_FILE) -> dict:
    """Load saved user settings from ``path`` if it exists.

    @param path (Path): Location of the settings file.
    @returns dict: Loaded settings or an empty dictionary when unavailable.
    """
    # Prefer the user's saved options but fall back to an empty
    # dictionary when the settings file is missing or unreadable.
    if path.is_file():
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logging.error(f"Could not load settings: {exc}")
            return {}
        if isinstance(data, dict):
            return data
        logging.error("Settings file %s does not contain a JSON object", path)
    return {}
