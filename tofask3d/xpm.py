"""Reader for XPM images used as wall textures."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from tofask3d.colors import text_to_rgb

__all__ = [
    "XpmError",
    "XpmImage",
    "find_unquoted",
    "split_words",
    "strip_comments",
    "quoted_strings",
    "parse_xpm",
    "load_xpm",
]

# Pixel value written for the colour "None".
_TRANSPARENT = -0x1000000

_ATOI = re.compile(r"\s*([+-]?\d+)")
_WORD_SEP = re.compile(r"[ \t]+")


class XpmError(ValueError):
    """Raised when an XPM image cannot be read or parsed."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded image: row-major signed 32-bit pixel values."""

    width: int
    height: int
    pixels: tuple[int, ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the pixel at column ``x``, row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.pixels[y * self.width + x]


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def find_unquoted(text: str, needle: str) -> int:
    """Return the first index of ``needle`` outside double quotes, or -1."""
    quoted = False
    for pos in range(len(text) - len(needle) + 1):
        if text[pos] == '"':
            quoted = not quoted
        if not quoted and text.startswith(needle, pos):
            return pos
    return -1


def split_words(text: str) -> list[str]:
    """Split on runs of spaces and tabs, dropping empty words."""
    return [word for word in _WORD_SEP.split(text) if word]


def _blank(text: str, start: int, length: int) -> str:
    end = min(len(text), start + max(length, 0))
    return text[:start] + " " * (end - start) + text[end:]


def strip_comments(text: str) -> str:
    """Replace C-style comments outside quotes with spaces, keeping length."""
    while (begin := find_unquoted(text, "/*")) != -1:
        end = text.find("*/", begin + 2)
        end = -1 if end == -1 else end - (begin + 2)
        text = _blank(text, begin, end + 4)
    while (begin := find_unquoted(text, "//")) != -1:
        end = text.find("\n", begin + 2)
        end = -1 if end == -1 else end - (begin + 2)
        text = _blank(text, begin, end + 3)
    return text


def quoted_strings(text: str) -> Iterator[str]:
    """Yield the contents of each double-quoted string in order."""
    pos = 0
    while True:
        start = text.find('"', pos)
        if start == -1:
            return
        end = text.find('"', start + 1)
        if end == -1:
            return
        yield text[start + 1:end]
        pos = end + 1


def parse_xpm(lines: Iterable[str]) -> XpmImage:
    """Decode an image from its XPM strings (header, colours, rows)."""
    source = iter(lines)

    def next_line(what: str) -> str:
        try:
            return next(source)
        except StopIteration:
            raise XpmError(f"missing {what}") from None

    header = split_words(next_line("header"))
    if len(header) < 4:
        raise XpmError("incomplete header")
    width, height, ncolors, cpp = (_atoi(word) for word in header[:4])
    if width <= 0 or height <= 0 or ncolors <= 0 or cpp <= 0:
        raise XpmError("invalid header values")

    # Short keys are stored in a direct table where later entries overwrite;
    # longer keys are searched so that the first definition wins.
    direct = cpp <= 2
    colors: dict[str, int] = {}
    for _ in range(ncolors):
        line = next_line("colour definition")
        words = split_words(line[cpp:])
        try:
            index = words.index("c")
        except ValueError:
            raise XpmError(f"colour definition without 'c': {line!r}") from None
        if index + 1 >= len(words):
            raise XpmError(f"colour definition without value: {line!r}")
        extra = words[index + 2] if index + 2 < len(words) else None
        rgb = _to_int32(text_to_rgb(words[index + 1], extra))
        key = line[:cpp]
        if direct:
            colors[key] = rgb
        else:
            colors.setdefault(key, rgb)

    pixels: list[int] = []
    for _ in range(height):
        line = next_line("pixel row")
        if len(line) < width * cpp:
            raise XpmError(f"pixel row too short: {line!r}")
        for x in range(width):
            col = colors.get(line[x * cpp:(x + 1) * cpp], 0)
            pixels.append(_TRANSPARENT if col == -1 else col)
    return XpmImage(width, height, tuple(pixels))


def load_xpm(path: str | Path) -> XpmImage:
    """Read and decode an XPM file."""
    try:
        text = Path(path).read_text(encoding="latin-1")
    except OSError as exc:
        raise XpmError(f"cannot read {path}") from exc
    return parse_xpm(quoted_strings(strip_comments(text)))