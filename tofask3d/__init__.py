"""Raycasting maze explorer: .cub scene loading, XPM textures, rendering and game loop."""

__version__ = "0.1.0"