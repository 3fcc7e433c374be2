"""Loading of ``.cub`` scene files: texture header, colours and map grid."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from tofask3d.geometry import Point, create_color
from tofask3d.mapcheck import MapError, parse_map
from tofask3d.xpm import XpmError, load_xpm

__all__ = [
    "CubError",
    "Scene",
    "check_extension",
    "is_number",
    "read_lines",
    "parse_color",
    "parse_header",
    "player_start",
    "load_scene",
]

EXTENSION = ".cub"
TEXTURE_KEYS = ("NO", "SO", "WE", "EA")
COLOR_KEYS = ("F", "C")
HEADER_KEYS = TEXTURE_KEYS + COLOR_KEYS

# Offset that puts the player in the middle of its starting cell.
OFF_SET = 0.5

_START_ANGLES = {
    "N": math.pi / 2,
    "S": math.pi / 2 * 3.0,
    "W": 0.0,
    "E": math.pi,
}

Loader = Callable[[str], Any]


class CubError(ValueError):
    """Raised when a scene file cannot be loaded."""


@dataclass
class Scene:
    """Everything read from a scene file."""

    north: Any
    south: Any
    west: Any
    east: Any
    floor_color: int
    ceiling_color: int
    grid: list[str]
    start: Point
    start_angle: float


def check_extension(path: str | Path) -> bool:
    """Return True if the file name ends with ``.cub``."""
    name = str(path)
    return len(name) >= len(EXTENSION) and name.endswith(EXTENSION)


def is_number(text: str) -> bool:
    """Return True if every character is an ASCII digit (also for "")."""
    return all(ch in "0123456789" for ch in text)


def read_lines(stream: TextIO | Iterable[str]) -> Iterator[str]:
    """Yield the lines of a stream without their line terminators.

    A final newline does not produce an extra empty line.
    """
    for line in stream:
        yield line[:-1] if line.endswith("\n") else line


def _words(text: str, sep: str) -> list[str]:
    return [part for part in text.split(sep) if part]


def parse_color(value: str) -> int:
    """Parse an ``R,G,B`` colour with components in 0..255."""
    parts = _words(value, ",")
    if len(parts) != 3:
        raise CubError(f"Invalid color format [{value}].")
    if not all(is_number(part) for part in parts):
        raise CubError(f"Invalid color values [{value}].")
    r, g, b = (int(part) for part in parts)
    if not all(0 <= channel <= 255 for channel in (r, g, b)):
        raise CubError(f"Invalid color values [{value}].")
    return create_color(0, r, g, b)


def _load_texture(loader: Loader, path: str) -> Any:
    try:
        texture = loader(path)
    except (XpmError, OSError) as exc:
        raise CubError(f"Invalid texture path : [{path}].") from exc
    if texture is None:
        raise CubError(f"Invalid texture path : [{path}].")
    return texture


def parse_header(lines: Iterator[str], loader: Loader | None = None) -> dict[str, Any]:
    """Read texture and colour entries until all six are known.

    Lines are consumed from ``lines`` only as far as needed, so the map rows
    that follow stay in the iterator. Returns a mapping from each identifier
    (NO, SO, WE, EA, F, C) to its loaded texture or packed colour.
    """
    load = loader if loader is not None else load_xpm
    header: dict[str, Any] = {}
    while len(header) < len(HEADER_KEYS):
        line = next(lines, None)
        if line is None:
            raise CubError("Invalid map. Missing textures.")
        if not line:
            continue
        words = _words(line, " ")
        if not words:
            raise CubError(f"Invalid texture information [{line}].")
        key = words[0]
        if key in HEADER_KEYS and len(words) != 2:
            raise CubError(f"Invalid texture format [{key}].")
        if key in TEXTURE_KEYS:
            header[key] = _load_texture(load, words[1])
        elif key in COLOR_KEYS:
            header[key] = parse_color(words[1])
        else:
            raise CubError(f"Invalid texture information [{key}].")
    return header


def player_start(grid: list[str]) -> tuple[Point, float]:
    """Find the first player cell and return its centre and facing angle."""
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell in _START_ANGLES:
                return Point(x + OFF_SET, y + OFF_SET), _START_ANGLES[cell]
    raise CubError("Invalid map: Missing player")


def load_scene(path: str | Path, loader: Loader | None = None) -> Scene:
    """Read, validate and return the scene stored in a ``.cub`` file."""
    if not check_extension(path):
        raise CubError("Invalid file ./cub3d <file.cub>")
    try:
        stream = open(path, encoding="utf-8", errors="surrogateescape", newline="")
    except OSError as exc:
        raise CubError(f"Couldn't open <{path}> file.") from exc
    with stream:
        lines = read_lines(stream)
        header = parse_header(lines, loader)
        try:
            grid = parse_map(lines)
        except MapError as exc:
            raise CubError(str(exc)) from exc
    start, angle = player_start(grid)
    return Scene(
        north=header["NO"],
        south=header["SO"],
        west=header["WE"],
        east=header["EA"],
        floor_color=header["F"],
        ceiling_color=header["C"],
        grid=grid,
        start=start,
        start_angle=angle,
    )