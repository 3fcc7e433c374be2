import io
from itertools import islice

import pytest

from tofask3d.cubfile import Scene, player_start
from tofask3d.game import Game, Key, check_arguments, loading_bar, main, show_loading
from tofask3d.geometry import create_color
from tofask3d.raycast import HEIGHT, SPEED, WIDTH
from tofask3d.xpm import parse_xpm

ROOM = [
    "1111111",
    "1000001",
    "1000001",
    "100N001",
    "1000001",
    "1000001",
    "1111111",
]

FLOOR = create_color(0, 10, 20, 30)
CEILING = create_color(0, 40, 50, 60)

CAR_XPM = '/* XPM */\nstatic char *car[] = {\n"2 1 2 1",\n"r c #ff0000",\n". c None",\n"r."\n};\n'


def _scene(grid=ROOM):
    start, angle = player_start(grid)
    texture = parse_xpm(["1 1 1 1", "a c #00ff00", "a"])
    return Scene(
        north=texture,
        south=texture,
        west=texture,
        east=texture,
        floor_color=FLOOR,
        ceiling_color=CEILING,
        grid=list(grid),
        start=start,
        start_angle=angle,
    )


@pytest.fixture
def game(tmp_path):
    return Game(_scene(), assets=tmp_path)


@pytest.mark.parametrize(
    "key, attr, value",
    [
        (Key.W, "y", -1),
        (Key.S, "y", 1),
        (Key.A, "x", -1),
        (Key.D, "x", 1),
    ],
)
def test_key_down_sets_movement(game, key, attr, value):
    game.key_down(key)
    assert getattr(game.player.move, attr) == value


def test_key_down_accepts_raw_codes(game):
    game.key_down(13)
    assert game.player.move.y == -1


@pytest.mark.parametrize("key, value", [(Key.LEFT, -1), (Key.RIGHT, 1)])
def test_key_down_sets_rotation(game, key, value):
    game.key_down(key)
    assert game.player.rotate == value


def test_key_up_clears_input(game):
    for key in (Key.W, Key.A, Key.LEFT):
        game.key_down(key)
    for key in (Key.S, Key.D, Key.RIGHT):
        game.key_up(key)
    assert (game.player.move.x, game.player.move.y, game.player.rotate) == (0, 0, 0)


def test_escape_stops_game(game):
    game.key_down(Key.ESC)
    assert game.running is False


def test_unknown_key_is_ignored(game):
    game.key_down(999)
    game.key_up(999)
    assert (game.player.move.x, game.player.move.y, game.player.rotate) == (0, 0, 0)
    assert game.running is True


def test_left_key_shows_left_car(tmp_path):
    (tmp_path / "carmandoleft.xpm").write_text(CAR_XPM)
    game = Game(_scene(), assets=tmp_path)
    game.key_down(Key.A)
    assert game.image[0, 0] == 0xFF0000
    assert game.image[0, 1] == game.frame[0, 1]


def test_update_draws_scene_and_car(tmp_path):
    (tmp_path / "carmando.xpm").write_text(CAR_XPM)
    game = Game(_scene(), assets=tmp_path)
    image = game.update()
    assert image.shape == (HEIGHT, WIDTH)
    assert image[0, 0] == 0xFF0000
    assert image[0, 1] == CEILING
    assert image[HEIGHT - 1, WIDTH // 2] == FLOOR


def test_update_moves_player_forward(game):
    start_x, start_y = game.player.pos.x, game.player.pos.y
    game.key_down(Key.W)
    game.update()
    assert game.player.pos.y == pytest.approx(start_y - SPEED)
    assert game.player.pos.x == pytest.approx(start_x)


def test_missing_car_reported_once(game, capsys):
    game.update()
    game.update()
    err = capsys.readouterr().err
    assert err.count("Error: Failed to load XPM file") == 1


def test_loading_bar_frames():
    frames = list(islice(loading_bar(1), 3))
    assert frames[0].startswith("\033[48;5;0m\033[38;5;0m")
    assert frames[2].startswith("\033[48;5;2m\033[38;5;2m")
    assert all(frame.endswith("\033[0m\r") for frame in frames)
    assert "... %0\u2588" in frames[0]


def test_loading_bar_percentage_follows_counter():
    frame = next(islice(loading_bar(0), 2000, None))
    assert "... %2\u2588" in frame


def test_show_loading_writes_every_frame():
    stream = io.StringIO()
    show_loading(1, stream)
    out = stream.getvalue()
    assert out.endswith("\r\n")
    assert out.count("\r") == sum(1 for _ in loading_bar(1))


def test_check_arguments_returns_path():
    assert check_arguments(["maps/room.cub"]) == "maps/room.cub"


def test_check_arguments_missing():
    with pytest.raises(ValueError, match="Missing map file"):
        check_arguments([])


def test_check_arguments_too_many():
    with pytest.raises(ValueError, match="Invalid arguments"):
        check_arguments(["a.cub", "b.cub"])


def test_main_without_arguments(capsys):
    assert main([]) == 1
    assert "Error. Missing map file." in capsys.readouterr().out


def test_main_bad_extension(capsys):
    assert main(["map.txt"]) == 1
    assert "Invalid file" in capsys.readouterr().out


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "none.cub")]) == 1
    assert "Couldn't open" in capsys.readouterr().out