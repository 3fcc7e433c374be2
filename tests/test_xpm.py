import pytest

from tofask3d.colors import color_by_name
from tofask3d.xpm import (
    XpmError,
    find_unquoted,
    load_xpm,
    parse_xpm,
    quoted_strings,
    split_words,
    strip_comments,
)


def test_find_unquoted_skips_quoted_text():
    assert find_unquoted('"ab" ab', "ab") == 5


def test_find_unquoted_not_found():
    assert find_unquoted('"/* only quoted */"', "/*") == -1


def test_find_unquoted_plain():
    text = "abc//def"
    assert find_unquoted(text, "//") == text.index("//")


def test_split_words():
    assert split_words("  a\tb  c ") == ["a", "b", "c"]


def test_split_words_keeps_newlines_inside_words():
    assert split_words("x\ny z") == ["x\ny", "z"]


def test_strip_comments_keeps_length_and_quotes():
    text = 'a /* x */ b "/* keep */"'
    result = strip_comments(text)
    assert len(result) == len(text)
    assert "x" not in result
    assert '"/* keep */"' in result
    assert result.startswith("a ")


def test_strip_line_comment():
    text = 'a // note\n"b"'
    result = strip_comments(text)
    assert "note" not in result
    assert list(quoted_strings(result)) == ["b"]


def test_quoted_strings():
    assert list(quoted_strings('x "one", "two" "unterminated')) == ["one", "two"]


def test_parse_simple_image():
    img = parse_xpm(["2 2 2 1", ". c red", "# c #00FF00", ".#", "#."])
    assert (img.width, img.height) == (2, 2)
    assert img.pixel(0, 0) == color_by_name("red")
    assert img.pixel(1, 0) == 0x00FF00
    assert img.pixel(0, 1) == 0x00FF00
    assert img.pixel(1, 1) == color_by_name("red")


def test_parse_transparent_colour():
    img = parse_xpm(["1 1 1 1", "x c None", "x"])
    assert img.pixel(0, 0) & 0xFFFFFFFF == 0xFF000000


def test_parse_two_word_colour_name():
    img = parse_xpm(["1 1 1 1", "g c light grey", "g"])
    assert img.pixel(0, 0) == color_by_name("light grey")


def test_long_keys_first_definition_wins():
    img = parse_xpm(["1 1 2 3", "aaa c red", "aaa c blue", "aaa"])
    assert img.pixel(0, 0) == color_by_name("red")


def test_short_keys_last_definition_wins():
    img = parse_xpm(["1 1 2 1", "a c red", "a c blue", "a"])
    assert img.pixel(0, 0) == color_by_name("blue")


def test_pixel_out_of_range():
    img = parse_xpm(["1 1 1 1", "a c red", "a"])
    with pytest.raises(IndexError):
        img.pixel(1, 0)


@pytest.mark.parametrize(
    "lines",
    [
        ["0 1 1 1", "a c red", "a"],
        ["1 1 1", "a c red", "a"],
        ["1 1 1 1", "a x red", "a"],
        ["1 1 1 1", "a c", "a"],
        ["1 2 1 1", "a c red", "a"],
        ["2 1 1 1", "a c red", "a"],
        [],
    ],
)
def test_parse_errors(lines):
    with pytest.raises(XpmError):
        parse_xpm(lines)


def test_load_xpm_file(tmp_path):
    path = tmp_path / "tex.xpm"
    path.write_text(
        "/* XPM */\n"
        "static char *img[] = {\n"
        "/* columns rows colors chars-per-pixel */\n"
        '"2 1 2 1",\n'
        '"a c #0000FF",\n'
        '"b c black",\n'
        "// row\n"
        '"ab"\n'
        "};\n"
    )
    img = load_xpm(path)
    assert (img.width, img.height) == (2, 1)
    assert img.pixel(0, 0) == 0x0000FF
    assert img.pixel(1, 0) == color_by_name("black")


def test_load_missing_file(tmp_path):
    with pytest.raises(XpmError):
        load_xpm(tmp_path / "absent.xpm")