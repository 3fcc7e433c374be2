# tofask3d

A small first-person raycasting maze explorer. You move through a grid
maze described by a `.cub` scene file. Walls are textured with XPM images,
and the floor and ceiling are plain colours.

## Installing

```
pip install .
```

## Playing

```
tofask3d path/to/scene.cub
```

The command takes exactly one argument, which must name a file ending in
`.cub`. If the arguments are wrong or the scene is invalid, the command
prints a message that starts with `Error.` and exits with status 1.

If the scene loads, a coloured loading banner is written to the terminal.
Then a 1280x720 window titled "TofAsk 3D" opens and shows the game.

The game lays a car picture over the top-left corner of the view. It reads
`carmando.xpm`, `carmandoleft.xpm` and `carmandoright.xpm` from a
`textures` directory under the current working directory. If one of these
files cannot be loaded, a message goes to standard error and the game goes
on without that picture.

Controls:

| Key          | Action                     |
|--------------|----------------------------|
| W / S        | move along the view line   |
| A / D        | move sideways              |
| Left / Right | turn                       |
| Esc          | quit                       |

Closing the window also ends the game.

## Scene files

A `.cub` file begins with six header entries. They may come in any order,
and blank lines may appear between them:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0
```

- `NO`, `SO`, `WE` and `EA` each name an XPM texture file.
- `F` gives the floor colour and `C` gives the ceiling colour. Each is an
  `R,G,B` triple of decimal numbers from 0 to 255.
- An entry must have exactly one value after its identifier.

The map follows the header. It may contain only these characters:

- `1` for a wall
- `0` for an empty floor cell
- a space for outside the map
- exactly one of `N`, `S`, `E` or `W`, which gives the player's start and facing

Floor cells and the player must be fully enclosed by walls. Once the map has
started, it must not contain blank lines.

## Library use

The parts can also be used on their own:

- `tofask3d.cubfile.load_scene(path)` reads and validates a scene and
  returns a `Scene`. Use `parse_header` and `parse_color` for the header
  alone.
- `tofask3d.mapcheck.parse_map(lines)` validates map rows and returns the
  grid.
- `tofask3d.xpm.load_xpm(path)` and `parse_xpm(lines)` decode XPM images
  into `XpmImage` objects.
- `tofask3d.raycast.render(scene, player, frame)` draws one view into a
  `(720, 1280)` numpy integer array. `move_player` applies movement input.
- `tofask3d.game.Game` holds a scene and a player. `Game.update()` returns
  the next frame without opening a window.
- `tofask3d.colors.color_by_name` and `text_to_rgb` look up X11 colour
  names.

Errors are raised as `CubError`, `MapError` or `XpmError`. All three are
subclasses of `ValueError`.

## What it does not do

- The game has walls, floor and ceiling only. It has no doors, collectible
  items, sprites, mini map or mouse look.
- XPM is the only texture format it reads.

## Running the tests

```
pip install ".[test]"
pytest
```