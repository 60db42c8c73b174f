"""Reading ``.cub`` scene files: wall textures, the map grid and the player.

Texture lines start with ``NO``, ``SO``, ``WE`` or ``EA`` followed by a
space. Every other line whose first non-space character is ``1``, ``0`` or
a compass letter is a map row. The first compass letter found in the map is
the player's start; its cell becomes ``0``.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Optional

PLAYER_CHARS = "NSEW"
_MAP_START_CHARS = "10" + PLAYER_CHARS
_TEXTURE_PREFIXES = ("NO ", "SO ", "WE ", "EA ")


class MapError(ValueError):
    """Raised when a scene file cannot be read."""


@dataclass
class Settings:
    """Everything a scene file describes."""

    no: Optional[str] = None
    so: Optional[str] = None
    we: Optional[str] = None
    ea: Optional[str] = None
    floor_rgb: list[int] = field(default_factory=lambda: [-1, 0, 0])
    ceiling_rgb: list[int] = field(default_factory=lambda: [-1, 0, 0])
    map: list[str] = field(default_factory=list)
    player_x: int = 0
    player_y: int = 0
    player_dir: str = ""

    def store_player(self, x: int, y: int, direction: str) -> None:
        """Place the player at (x, y) facing ``direction``; the cell becomes floor."""
        row = self.map[y]
        if not 0 <= x < len(row):
            raise IndexError(f"column {x} outside map row {y}")
        self.player_x = x
        self.player_y = y
        self.player_dir = direction
        self.map[y] = row[:x] + "0" + row[x + 1 :]

    def set_texture(self, prefix: str, path: str) -> None:
        if prefix == "NO ":
            self.no = path
        elif prefix == "SO ":
            self.so = path
        elif prefix == "WE ":
            self.we = path
        elif prefix == "EA ":
            self.ea = path
        else:
            raise ValueError(f"unknown texture prefix {prefix!r}")


def check_extension(filename: str) -> bool:
    """Tell whether ``filename`` has a name before a ``.cub`` extension."""
    return len(filename) >= 5 and filename.endswith(".cub")


def is_map_line(line: str) -> bool:
    """Tell whether ``line`` is a map row.

    Leading spaces are skipped; a line made only of spaces counts as a row.
    """
    rest = line.lstrip(" ")
    return not rest or rest[0] in _MAP_START_CHARS


def _place_player(settings: Settings) -> None:
    for y, row in enumerate(settings.map):
        for x, char in enumerate(row):
            if char in PLAYER_CHARS:
                if char == "N" and row[x + 1 : x + 2] == "O":
                    break
                settings.store_player(x, y, char)
                return


def parse_lines(lines: Iterable[str]) -> Settings:
    """Build the settings from the lines of a scene file, newlines included."""
    settings = Settings()
    for line in lines:
        prefix = line[:3]
        if prefix in _TEXTURE_PREFIXES:
            settings.set_texture(prefix, line[2:].strip(" \n"))
        elif is_map_line(line):
            settings.map.append(line.strip("\n"))
    _place_player(settings)
    return settings


def _split_lines(text: str) -> Iterator[str]:
    parts = text.split("\n")
    for part in parts[:-1]:
        yield part + "\n"
    if parts[-1]:
        yield parts[-1]


def parse_file(filename: str | os.PathLike[str]) -> Settings:
    """Read a scene file; raises MapError if it cannot be opened."""
    try:
        with open(filename, encoding="latin-1", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise MapError(f"Error opening file: {os.fspath(filename)}") from exc
    return parse_lines(_split_lines(text))