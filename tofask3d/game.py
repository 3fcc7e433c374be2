"""Game loop, keyboard handling, loading banner and command entry point."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator, Sequence
from enum import IntEnum
from pathlib import Path
from typing import Any, TextIO

import numpy as np

from tofask3d.cubfile import CubError, load_scene
from tofask3d.raycast import HEIGHT, WIDTH, Player, move_player, render
from tofask3d.xpm import XpmError, XpmImage, load_xpm

__all__ = ["Key", "Game", "loading_bar", "show_loading", "check_arguments", "main"]

TITLE = "TofAsk 3D"
DEFAULT_ASSETS = Path("textures")
DRIVING_CAR = "carmando.xpm"
LEFT_CAR = "carmandoleft.xpm"
RIGHT_CAR = "carmandoright.xpm"
FRAME_RATE = 60

_TRANSPARENT = -0x1000000

_BAR_HEAD = "\t" * 4 + "\u2588" * 39
_BAR_LABEL = "\u2588" * 17 + "L\u0333O\u0333A\u0333D\u0333I\u0333N\u0333G\u0333... %"
_BAR_TAIL = "\u2588" * 56
_BAR_FRAMES = 100001


class Key(IntEnum):
    """Keyboard codes the game reacts to."""

    A = 0
    S = 1
    D = 2
    W = 13
    ESC = 53
    LEFT = 123
    RIGHT = 124


class Game:
    """Holds the scene, the player and the picture shown in the window."""

    def __init__(self, scene: Any, assets: str | Path = DEFAULT_ASSETS) -> None:
        self.scene = scene
        self.player = Player.from_scene(scene)
        self.assets = Path(assets)
        self.frame = np.zeros((HEIGHT, WIDTH), dtype=np.int64)
        self.image = self.frame.copy()
        self.running = True
        self._cars: dict[str, XpmImage | None] = {}

    def _car(self, name: str) -> XpmImage | None:
        if name not in self._cars:
            try:
                self._cars[name] = load_xpm(self.assets / name)
            except XpmError:
                print("Error: Failed to load XPM file", file=sys.stderr)
                self._cars[name] = None
        return self._cars[name]

    def _show_car(self, name: str) -> bool:
        """Lay a car picture over the current frame; False if it cannot load."""
        car = self._car(name)
        image = self.frame.copy()
        if car is None:
            self.image = image
            return False
        pixels = np.asarray(car.pixels, dtype=np.int64).reshape(car.height, car.width)
        rows = min(car.height, HEIGHT)
        cols = min(car.width, WIDTH)
        pixels = pixels[:rows, :cols]
        region = image[:rows, :cols]
        visible = pixels != _TRANSPARENT
        region[visible] = pixels[visible]
        self.image = image
        return True

    def key_down(self, key: int) -> None:
        """React to a key being pressed."""
        try:
            key = Key(key)
        except ValueError:
            return
        move = self.player.move
        if key is Key.W:
            move.y = -1
        elif key is Key.S:
            move.y = 1
        elif key is Key.A:
            self._show_car(LEFT_CAR)
            move.x = -1
        elif key is Key.D:
            self._show_car(RIGHT_CAR)
            move.x = 1
        elif key is Key.LEFT:
            self.player.rotate = -1
        elif key is Key.RIGHT:
            self.player.rotate = 1
        elif key is Key.ESC:
            self.running = False

    def key_up(self, key: int) -> None:
        """React to a key being released."""
        try:
            key = Key(key)
        except ValueError:
            return
        if key in (Key.W, Key.S):
            self.player.move.y = 0
        elif key in (Key.A, Key.D):
            self.player.move.x = 0
        elif key in (Key.LEFT, Key.RIGHT):
            self.player.rotate = 0

    def update(self) -> np.ndarray:
        """Advance one frame: move, render and overlay the car; return the picture."""
        move_player(self.player, self.scene.grid)
        render(self.scene, self.player, self.frame)
        self._show_car(DRIVING_CAR)
        return self.image

    def run(self) -> None:
        """Open the window and run the game until it is closed or ESC is pressed."""
        os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
        import pygame

        keys = {
            pygame.K_w: Key.W,
            pygame.K_s: Key.S,
            pygame.K_a: Key.A,
            pygame.K_d: Key.D,
            pygame.K_LEFT: Key.LEFT,
            pygame.K_RIGHT: Key.RIGHT,
            pygame.K_ESCAPE: Key.ESC,
        }
        pygame.init()
        try:
            try:
                screen = pygame.display.set_mode((WIDTH, HEIGHT))
            except pygame.error as exc:
                raise RuntimeError("Couldn't open window.") from exc
            pygame.display.set_caption(TITLE)
            clock = pygame.time.Clock()
            self.player.move.x = 0
            self.player.move.y = 0
            self.player.rotate = 0
            self.running = True
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN and event.key in keys:
                        self.key_down(keys[event.key])
                    elif event.type == pygame.KEYUP and event.key in keys:
                        self.key_up(keys[event.key])
                if not self.running:
                    break
                image = self.update()
                rgb = np.stack(
                    ((image >> 16) & 0xFF, (image >> 8) & 0xFF, image & 0xFF), axis=-1
                ).astype(np.uint8)
                pygame.surfarray.blit_array(screen, rgb.transpose(1, 0, 2))
                pygame.display.flip()
                clock.tick(FRAME_RATE)
        finally:
            pygame.quit()


def loading_bar(start: int) -> Iterator[str]:
    """Yield the successive frames of the coloured loading banner."""
    count = start
    for shade in range(_BAR_FRAMES):
        percent = int(count / 1000)
        yield (
            f"\033[48;5;{shade}m\033[38;5;{shade}m"
            f"{_BAR_HEAD}{_BAR_LABEL}{percent}{_BAR_TAIL}\033[0m\r"
        )
        count += 1


def show_loading(start: int, stream: TextIO | None = None) -> None:
    """Write the whole loading banner animation to ``stream``."""
    out = stream if stream is not None else sys.stdout
    for frame in loading_bar(start):
        out.write(frame)
    out.write("\n")
    out.flush()


def check_arguments(args: Sequence[str]) -> str:
    """Return the single map path from the command arguments."""
    if len(args) < 1:
        raise ValueError("Missing map file.\nUSAGE: ./cub3d <file.cub>")
    if len(args) > 1:
        raise ValueError("Invalid arguments.\n./cub3d <file.cub>")
    return args[0]


def main(argv: Sequence[str] | None = None) -> int:
    """Load the map named on the command line and play it."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        path = check_arguments(args)
    except ValueError as exc:
        print(f"Error. {exc}")
        return 1
    try:
        scene = load_scene(path)
    except CubError as exc:
        print(f"Error. {exc}")
        return 1
    game = Game(scene)
    show_loading(1)
    try:
        game.run()
    except RuntimeError as exc:
        print(f"Error. {exc}")
        return 1
    return 0