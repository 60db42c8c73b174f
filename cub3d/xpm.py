"""Reading XPM pixmaps into images.

Supports XPM files (C source holding an array of strings) and in-memory
XPM data. Colours may be ``#RRGGBB`` values or names from the colour table;
``None`` marks transparent pixels, which are stored as 0xFF000000.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from os import PathLike

from cub3d.colornames import lookup_color
from cub3d.image import Image

TRANSPARENT_PIXEL = 0xFF000000

_WORD_SEPARATORS = re.compile(r"[ \t]+")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_HEX = re.compile(r"\s*([+-]?)(?:0[xX])?([0-9a-fA-F]+)")
_NAME_LIMIT = 63


class XpmError(ValueError):
    """Raised when XPM data is malformed or incomplete."""


def split_words(text: str) -> list[str]:
    """Split ``text`` on runs of spaces and tabs, dropping empty words."""
    return [word for word in _WORD_SEPARATORS.split(text) if word]


def find_outside_quotes(text: str, needle: str) -> int:
    """Return the first index of ``needle`` not inside double quotes, or -1."""
    if not needle:
        raise ValueError("needle must not be empty")
    inside = False
    for pos in range(len(text) - len(needle) + 1):
        if text[pos] == '"':
            inside = not inside
        if not inside and text.startswith(needle, pos):
            return pos
    return -1


def strip_comments(text: str) -> str:
    """Blank out C comments outside string literals, keeping the text length."""
    while (start := find_outside_quotes(text, "/*")) != -1:
        end = text.find("*/", start + 2)
        stop = len(text) if end == -1 else end + 2
        text = text[:start] + " " * (stop - start) + text[stop:]
    while (start := find_outside_quotes(text, "//")) != -1:
        end = text.find("\n", start + 2)
        stop = len(text) if end == -1 else end + 1
        text = text[:start] + " " * (stop - start) + text[stop:]
    return text


def quoted_lines(text: str) -> Iterator[str]:
    """Yield the contents of each double-quoted string in ``text``, in order."""
    pos = 0
    while True:
        start = text.find('"', pos)
        if start == -1:
            return
        end = text.find('"', start + 1)
        if end == -1:
            return
        yield text[start + 1 : end]
        pos = end + 1


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


def text_to_rgb(name: str, extra: str | None = None) -> int:
    """Return the colour a colour specification names, or 0 if unknown.

    ``#`` introduces a hexadecimal value; otherwise ``name`` (joined with
    ``extra`` by a space when given) is looked up in the colour table.
    """
    if name.startswith("#"):
        match = _LEADING_HEX.match(name, 1)
        if not match:
            return 0
        value = int(match.group(2), 16)
        if match.group(1) == "-":
            value = -value
        return _to_int32(value)
    if extra:
        name = f"{name} {extra}"[:_NAME_LIMIT]
    try:
        return lookup_color(name)
    except KeyError:
        return 0


def _atoi(word: str) -> int:
    match = _LEADING_INT.match(word)
    return int(match.group(1)) if match else 0


def _next_line(lines: Iterator[str], what: str) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise XpmError(f"XPM data ends before the {what}") from None


def _parse_header(line: str) -> tuple[int, int, int, int]:
    words = split_words(line)
    if len(words) < 4:
        raise XpmError(f"XPM header needs four values: {line!r}")
    values = tuple(_atoi(word) for word in words[:4])
    if any(value <= 0 for value in values):
        raise XpmError(f"XPM header values must be positive: {line!r}")
    return values  # type: ignore[return-value]


def _parse_color(line: str, cpp: int) -> tuple[str, int]:
    words = split_words(line[cpp:])
    try:
        index = words.index("c") + 1
    except ValueError:
        raise XpmError(f"colour line has no 'c' entry: {line!r}") from None
    if index >= len(words):
        raise XpmError(f"colour line has no colour after 'c': {line!r}")
    extra = words[index + 1] if index + 1 < len(words) else None
    return line[:cpp], text_to_rgb(words[index], extra)


def parse_xpm(lines: Iterable[str]) -> Image:
    """Build an image from the strings of an XPM array, header first."""
    rows = iter(lines)
    width, height, ncolors, cpp = _parse_header(_next_line(rows, "header"))

    colors: dict[str, int] = {}
    for _ in range(ncolors):
        key, rgb = _parse_color(_next_line(rows, "colour table"), cpp)
        # One or two characters per pixel: a later definition replaces an
        # earlier one. Longer keys keep the first definition.
        if cpp <= 2 or key not in colors:
            colors[key] = rgb

    image = Image(width, height)
    for y in range(height):
        row = _next_line(rows, "pixel rows")
        if len(row) < width * cpp:
            raise XpmError(f"pixel row {y} is shorter than {width} pixels")
        for x in range(width):
            color = colors.get(row[x * cpp : (x + 1) * cpp], 0)
            if color == -1:
                color = TRANSPARENT_PIXEL
            image.put_pixel(x, y, color)
    return image


def load_xpm_file(path: str | PathLike[str]) -> Image:
    """Read an XPM file into an image.

    Raises OSError if the file cannot be read and XpmError if it is malformed.
    """
    with open(path, "rb") as handle:
        text = handle.read().decode("latin-1")
    return parse_xpm(quoted_lines(strip_comments(text)))


def xpm_from_data(data: Sequence[str]) -> Image:
    """Build an image from XPM data held as a sequence of strings."""
    return parse_xpm(data)