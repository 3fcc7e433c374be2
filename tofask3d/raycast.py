"""Ray casting against the map grid, wall rendering and player movement."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from tofask3d.geometry import Point, create_color, deg_to_rad, distance, update_radian

__all__ = [
    "FOV",
    "ROT_SPEED",
    "SPEED",
    "WIDTH",
    "HEIGHT",
    "Player",
    "RenderSlice",
    "wall_hit",
    "wall_dimension",
    "cast_column",
    "texture_pixel",
    "draw_wall",
    "render",
    "move_player",
]

FOV = 90
ROT_SPEED = 0.1
SPEED = 0.10
WIDTH = 1280
HEIGHT = 720

WALL = "1"

_EPSILON = 0.00000000001
_HALF_PI = math.pi / 2
_TRANSPARENT = create_color(255, 0, 0, 0)

Grid = Sequence[str]


@dataclass
class Player:
    """Position, facing and current input state of the player."""

    pos: Point = field(default_factory=Point)
    direction: Point = field(default_factory=Point)
    move: Point = field(default_factory=Point)
    angle: float = 0.0
    rotate: float = 0.0

    @classmethod
    def from_scene(cls, scene: Any) -> "Player":
        """Create a player standing at the scene's starting cell."""
        return cls(pos=Point(scene.start.x, scene.start.y), angle=scene.start_angle)


@dataclass
class RenderSlice:
    """One ray hit and the size of the wall column drawn for it."""

    degree: float
    angle: float
    wall_hit: Point
    direction: str
    distance: float
    width: float
    height: float
    wall_height: float
    y_tex: int = 0


def _div(a: float, b: float) -> float:
    """Divide with IEEE semantics for a zero divisor."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _floor(value: float) -> float:
    return float(math.floor(value)) if math.isfinite(value) else value


def _trunc(value: float) -> int:
    return int(value) if math.isfinite(value) else 0


def _tan(angle: float) -> float:
    return _div(math.sin(angle), math.cos(angle))


def _y_point(pos: Point, angle: float) -> Point:
    x = _floor(pos.x)
    if _HALF_PI < angle < 3 * _HALF_PI:
        x += 1
    else:
        x -= _EPSILON
    return Point(x, pos.y + _tan(angle) * (x - pos.x))


def _x_point(pos: Point, angle: float) -> Point:
    y = _floor(pos.y)
    if angle > math.pi:
        y += 1
    else:
        y -= _EPSILON
    return Point(pos.x + _div(y - pos.y, _tan(angle)), y)


def _intersection(
    grid: Grid, start: Point, angle: float, step: Callable[[Point, float], Point]
) -> Point:
    height = len(grid)
    first = step(start, angle)
    second = step(first, angle)
    dx = second.x - first.x
    dy = second.y - first.y
    x, y = first.x, first.y
    while (
        (x or y)
        and x > 0
        and y > 0
        and y < height
        and x < len(grid[int(y)])
        and grid[int(y)][int(x)] != WALL
    ):
        x += dx
        y += dy
    return Point(x, y)


def _cell_at(grid: Grid, x: float, y: float) -> str:
    if not (math.isfinite(x) and math.isfinite(y)):
        return ""
    i, j = int(y), int(x)
    if 0 <= i < len(grid) and 0 <= j < len(grid[i]):
        return grid[i][j]
    return ""


def wall_hit(grid: Grid, pos: Point, angle: float) -> tuple[Point, str]:
    """Cast a ray from ``pos`` and return the nearer grid hit and its kind.

    The kind is ``"h"`` for a crossing of a horizontal grid line and ``"v"``
    for a vertical one.
    """
    horizontal = _intersection(grid, pos, angle, _x_point)
    vertical = _intersection(grid, pos, angle, _y_point)
    if distance(pos, horizontal) < distance(pos, vertical):
        return horizontal, "h"
    return vertical, "v"


def wall_dimension(
    grid: Grid, player: Player, pos: Point, angle: float, degree: float
) -> RenderSlice:
    """Cast one ray from ``pos`` and size the wall column it produces."""
    hit, kind = wall_hit(grid, pos, angle)
    dist = distance(player.pos, hit) * math.cos(update_radian(player.angle, -angle))
    width = WIDTH / (FOV / ROT_SPEED)
    height = HEIGHT / dist if dist > 0 else float(HEIGHT)
    wall_height = height
    if height > HEIGHT:
        height = float(HEIGHT)
    return RenderSlice(
        degree=degree,
        angle=angle,
        wall_hit=hit,
        direction=kind,
        distance=dist,
        width=width,
        height=height,
        wall_height=wall_height,
    )


def cast_column(grid: Grid, player: Player, degree: float) -> list[RenderSlice]:
    """Cast the ray for one screen column until it reaches a wall.

    The slices are returned with the last hit (the wall) first.
    """
    angle = update_radian(player.angle, deg_to_rad(degree - (FOV / 2.0)))
    slices: list[RenderSlice] = []
    origin = player.pos
    while True:
        current = wall_dimension(grid, player, origin, angle, degree)
        slices.append(current)
        hit = current.wall_hit
        cell = _cell_at(grid, hit.x, hit.y)
        if cell in ("", WALL) or (hit.x == origin.x and hit.y == origin.y):
            break
        origin = hit
    slices.reverse()
    return slices


_ARRAYS: dict[int, tuple[Any, np.ndarray]] = {}


def _pixel_array(image: Any) -> np.ndarray:
    cached = _ARRAYS.get(id(image))
    if cached is not None and cached[0] is image:
        return cached[1]
    array = np.asarray(image.pixels, dtype=np.int64)
    _ARRAYS[id(image)] = (image, array)
    return array


def _texture_rows(image: Any, render: RenderSlice, y_tex: np.ndarray) -> np.ndarray:
    pixels = _pixel_array(image)
    source = render.wall_hit.x if render.direction == "h" else render.wall_hit.y
    frac = source - math.trunc(source) if math.isfinite(source) else 0.0
    tx = abs(_trunc(image.width * frac))
    wall_height = render.wall_height
    if wall_height > 0 and math.isfinite(wall_height):
        step = image.height / wall_height
    else:
        step = 0.0
    offset = (wall_height - HEIGHT) / 2 if wall_height > HEIGHT else 0.0
    ty = np.abs(np.trunc(offset * step + y_tex * step).astype(np.int64))
    index = np.clip(ty * image.width + tx, 0, pixels.size - 1)
    return pixels[index]


def texture_pixel(image: Any, render: RenderSlice) -> int:
    """Return the texture colour for the slice's current texture row."""
    rows = np.array([render.y_tex], dtype=np.float64)
    return int(_texture_rows(image, render, rows)[0])


def _texture_for(scene: Any, render: RenderSlice) -> Any:
    angle = render.angle
    if render.direction == "h" and angle < math.pi:
        return scene.north
    if render.direction == "h" and angle < 2.0 * math.pi:
        return scene.south
    if render.direction == "v" and (angle < _HALF_PI or angle > _HALF_PI * 3.0):
        return scene.west
    return scene.east


def draw_wall(scene: Any, frame: np.ndarray, slices: Sequence[RenderSlice]) -> None:
    """Draw the textured wall columns of ``slices`` into ``frame``.

    ``frame`` is a (HEIGHT, WIDTH) integer array; fully transparent texture
    pixels leave the frame untouched.
    """
    half = HEIGHT // 2
    for current in slices:
        top = _trunc(half - current.height / 2)
        bottom = min(half + current.height / 2, HEIGHT)
        rows = max(0, math.ceil(bottom) - top)
        left_edge = (current.degree / ROT_SPEED) * current.width
        left = _trunc(left_edge)
        right = min(left_edge + current.width, WIDTH)
        cols = max(0, math.ceil(right) - left)
        current.y_tex = rows
        if rows == 0 or cols == 0:
            continue
        texture = _texture_for(scene, current)
        colors = _texture_rows(texture, current, np.arange(rows, dtype=np.float64))
        visible = colors != _TRANSPARENT
        ys = top + np.nonzero(visible)[0]
        frame[ys, left:left + cols] = colors[visible][:, None]


def render(scene: Any, player: Player, frame: np.ndarray) -> np.ndarray:
    """Draw ceiling, floor and walls as seen by ``player`` into ``frame``."""
    half = HEIGHT // 2
    frame[:half, :] = scene.ceiling_color
    frame[half:, :] = scene.floor_color
    degree = 0.0
    while degree <= FOV:
        draw_wall(scene, frame, cast_column(scene.grid, player, degree))
        degree += ROT_SPEED
    return frame


def _walkable(grid: Grid, x: float, y: float) -> bool:
    cell = _cell_at(grid, x, y)
    return cell != "" and cell != WALL


def move_player(player: Player, grid: Grid) -> None:
    """Apply rotation and movement input, sliding along walls."""
    if player.rotate:
        player.angle = update_radian(player.angle, player.rotate * ROT_SPEED)
    angle = player.angle
    if player.move.y == -1:
        angle = update_radian(angle, math.pi)
    elif player.move.x:
        angle = update_radian(angle, -player.move.x * _HALF_PI)
    if player.move.x and player.move.y:
        angle = update_radian(angle, player.move.x * (math.pi / 4))
    player.direction = Point(math.cos(angle), math.sin(angle))
    if not int(player.move.x) and not int(player.move.y):
        return
    new_x = player.pos.x + player.direction.x * SPEED
    if _walkable(grid, new_x, player.pos.y):
        player.pos.x = new_x
    new_y = player.pos.y + player.direction.y * SPEED
    if _walkable(grid, player.pos.x, new_y):
        player.pos.y = new_y