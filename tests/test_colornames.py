import pytest

from cub3d.colornames import color_names, lookup_color


@pytest.mark.parametrize(
    "name, value",
    [
        ("snow", 0xFFFAFA),
        ("ghost white", 0xF8F8FF),
        ("black", 0x0),
        ("white", 0xFFFFFF),
        ("red", 0xFF0000),
        ("blue", 0xFF),
        ("gray50", 0x7F7F7F),
        ("lightgreen", 0x90EE90),
    ],
)
def test_known_values(name, value):
    assert lookup_color(name) == value


def test_lookup_ignores_case():
    assert lookup_color("SNOW") == lookup_color("snow")
    assert lookup_color("Ghost White") == lookup_color("ghost white")
    assert lookup_color("DarkRed") == lookup_color("darkred")


def test_none_is_transparent():
    assert lookup_color("none") == -1
    assert lookup_color("None") == -1


def test_first_duplicate_wins():
    assert lookup_color("dark slate") == 0x2F4F4F
    assert lookup_color("light slate") == 0x778899
    assert lookup_color("light goldenrod") == 0xFAFAD2


def test_unknown_name_raises():
    with pytest.raises(KeyError):
        lookup_color("not a colour")
    with pytest.raises(KeyError):
        lookup_color("")


def test_names_are_unique_and_ordered():
    names = color_names()
    assert len(names) == len(set(names))
    assert names[0] == "snow"
    assert names[-1] == "none"


def test_every_listed_name_resolves_in_range():
    for name in color_names():
        value = lookup_color(name)
        if name == "none":
            assert value == -1
        else:
            assert 0 <= value <= 0xFFFFFF


def test_grey_and_gray_spellings_agree():
    names = set(color_names())
    for level in range(101):
        assert f"gray{level}" in names
        assert lookup_color(f"gray{level}") == lookup_color(f"grey{level}")


def test_color_names_returns_fresh_list():
    names = color_names()
    names.clear()
    assert len(color_names()) > 0