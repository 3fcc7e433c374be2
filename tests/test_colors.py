import pytest

from tofask3d.colors import color_by_name, text_to_rgb


def test_known_name_from_table():
    assert color_by_name("snow") == 0xFFFAFA


def test_lookup_ignores_case():
    assert color_by_name("LightGoldenrod") == color_by_name("lightgoldenrod")
    assert color_by_name("SNOW") == color_by_name("snow")


def test_first_duplicate_wins():
    assert color_by_name("dark slate") == 0x2F4F4F


def test_none_is_transparent():
    assert color_by_name("none") == -1
    assert text_to_rgb("None") == -1


def test_unknown_name_raises():
    with pytest.raises(KeyError):
        color_by_name("not-a-colour")


def test_unknown_text_gives_zero():
    assert text_to_rgb("not-a-colour") == 0
    assert text_to_rgb("blue", "nonsense") == 0


@pytest.mark.parametrize("spec", ["#123456", "#00ff00", "#abcdef"])
def test_hash_form_matches_hex(spec):
    assert text_to_rgb(spec) == int(spec[1:], 16)


def test_hash_form_stops_at_non_hex():
    assert text_to_rgb("#ff0000zz") == int("ff0000", 16)
    assert text_to_rgb("#") == 0
    assert text_to_rgb("#zz") == 0


def test_two_words_are_joined():
    assert text_to_rgb("ghost", "white") == color_by_name("ghost white")
    assert text_to_rgb("Navy", "Blue") == color_by_name("navyblue")


def test_single_name_matches_table():
    for name in ("red", "gray50", "grey50", "lightgreen", "black"):
        assert text_to_rgb(name) == color_by_name(name)


def test_gray_and_grey_agree():
    for level in range(101):
        assert color_by_name(f"gray{level}") == color_by_name(f"grey{level}")


def test_extra_ignored_when_hash():
    assert text_to_rgb("#0000ff", "white") == text_to_rgb("#0000ff")