"""Validation of the map grid of a scene file."""

from __future__ import annotations

from collections.abc import Iterable

__all__ = ["MapError", "scan_map", "check_components", "check_map_closed", "parse_map"]

EMPTY_SPACE = "0"
WALL = "1"
PLAYERS = "NSEW"

_ALLOWED = " 01" + PLAYERS
_OPEN = EMPTY_SPACE + PLAYERS


class MapError(ValueError):
    """Raised when a map grid is malformed."""


def scan_map(lines: Iterable[str]) -> list[str]:
    """Collect map rows, skipping leading blank lines.

    A blank line followed by another row once the map has started is an error.
    """
    grid: list[str] = []
    empty_line = False
    for line in lines:
        if line:
            if grid and empty_line:
                raise MapError("Invalid map.")
            grid.append(line)
        elif grid:
            empty_line = True
    return grid


def check_components(grid: list[str]) -> None:
    """Check every cell is a known component and there is exactly one player."""
    players = 0
    for row in grid:
        for cell in row:
            if cell not in _ALLOWED:
                raise MapError("Invalid map: Invalid component")
            if cell in PLAYERS:
                players += 1
    if players > 1:
        raise MapError("Invalid map: Too many players")
    if players < 1:
        raise MapError("Invalid map: Missing player")


def _cell(grid: list[str], i: int, j: int) -> str:
    if 0 <= i < len(grid) and 0 <= j < len(grid[i]):
        return grid[i][j]
    return ""


def _is_open(cell: str) -> bool:
    return bool(cell) and cell in _OPEN


def _has_open_neighbour(grid: list[str], i: int, j: int) -> bool:
    # Neighbours in row 0 or column 0 are not looked at.
    return (
        _is_open(_cell(grid, i, j + 1))
        or (j - 1 > 0 and _is_open(_cell(grid, i, j - 1)))
        or _is_open(_cell(grid, i + 1, j))
        or (i - 1 > 0 and _is_open(_cell(grid, i - 1, j)))
    )


def _touches_void(grid: list[str], i: int, j: int) -> bool:
    row = grid[i]
    if j + 1 >= len(row) or row[j + 1] == " ":
        return True
    if j - 1 < 0 or row[j - 1] == " ":
        return True
    if i + 1 >= len(grid) or j >= len(grid[i + 1]) or grid[i + 1][j] == " ":
        return True
    if i - 1 < 0 or j >= len(grid[i - 1]) or grid[i - 1][j] == " ":
        return True
    return False


def check_map_closed(grid: list[str]) -> None:
    """Check that walkable cells are enclosed by walls."""
    for i, row in enumerate(grid):
        for j, cell in enumerate(row):
            if cell == " ":
                if _has_open_neighbour(grid, i, j):
                    raise MapError("Invalid map: misplaced space ' '")
            elif cell in _OPEN and _touches_void(grid, i, j):
                if cell == EMPTY_SPACE:
                    raise MapError("Invalid map: misplaced space '0'")
                raise MapError("Invalid map: misplaced component")


def parse_map(lines: Iterable[str]) -> list[str]:
    """Read and validate the map rows, returning the grid."""
    grid = scan_map(lines)
    if not grid:
        raise MapError("Invalid map.")
    check_components(grid)
    check_map_closed(grid)
    return grid