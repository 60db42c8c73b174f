import pytest

from cub3d.colornames import lookup_color
from cub3d.xpm import (
    TRANSPARENT_PIXEL,
    XpmError,
    find_outside_quotes,
    load_xpm_file,
    parse_xpm,
    quoted_lines,
    split_words,
    strip_comments,
    text_to_rgb,
    xpm_from_data,
)


def test_split_words_spaces_and_tabs():
    assert split_words("  2 3\t\t4  1 ") == ["2", "3", "4", "1"]
    assert split_words("") == []


def test_find_outside_quotes_skips_quoted():
    text = 'x "/*" y /* z'
    assert find_outside_quotes(text, "/*") == text.rindex("/*")


def test_find_outside_quotes_missing():
    assert find_outside_quotes('"only /* inside"', "/*") == -1


def test_find_outside_quotes_empty_needle():
    with pytest.raises(ValueError):
        find_outside_quotes("abc", "")


def test_strip_comments_block_and_line():
    text = '/* XPM */\n"a /* kept */"\n// gone\n"b"'
    result = strip_comments(text)
    assert len(result) == len(text)
    assert "XPM" not in result
    assert "gone" not in result
    assert '"a /* kept */"' in result
    assert '"b"' in result


def test_quoted_lines():
    assert list(quoted_lines('{ "one", "two",\n "three" }')) == ["one", "two", "three"]
    assert list(quoted_lines('"open')) == []


def test_text_to_rgb_hex_and_names():
    assert text_to_rgb("#FF0000") == 0xFF0000
    assert text_to_rgb("#00ff99", "ignored") == 0x00FF99
    assert text_to_rgb("red", None) == lookup_color("red")
    assert text_to_rgb("light", "green") == lookup_color("light green")
    assert text_to_rgb("None") == -1


def test_text_to_rgb_unknown_name():
    assert text_to_rgb("no-such-colour") == 0


def test_parse_single_char_pixels():
    image = parse_xpm(["2 2 2 1", "a c #FF0000", "b c blue", "ab", "ba"])
    assert (image.width, image.height) == (2, 2)
    assert image.get_pixel(0, 0) == 0xFF0000
    assert image.get_pixel(1, 0) == lookup_color("blue")
    assert image.get_pixel(0, 1) == lookup_color("blue")
    assert image.get_pixel(1, 1) == 0xFF0000


def test_parse_transparent_pixel():
    image = xpm_from_data(["1 1 1 1", ". c None", "."])
    assert image.get_pixel(0, 0) == TRANSPARENT_PIXEL == 0xFF000000


def test_duplicate_keys_short_keys_last_wins():
    image = parse_xpm(["1 1 2 1", "a c #111111", "a c #222222", "a"])
    assert image.get_pixel(0, 0) == 0x222222


def test_duplicate_keys_long_keys_first_wins():
    image = parse_xpm(["2 1 2 3", "abc c #111111", "abc c #222222", "abcabc"])
    assert image.get_pixel(0, 0) == 0x111111
    assert image.get_pixel(1, 0) == 0x111111


@pytest.mark.parametrize(
    "data",
    [
        [],
        ["0 1 1 1", "a c red", "a"],
        ["1 1 1"],
        ["1 1 1 1", "a s red", "a"],
        ["1 1 1 1", "a c", "a"],
        ["2 2 1 1", "a c red", "aa"],
        ["3 1 1 1", "a c red", "aa"],
    ],
)
def test_malformed_data_raises(data):
    with pytest.raises(XpmError):
        parse_xpm(data)


def test_load_xpm_file(tmp_path):
    path = tmp_path / "icon.xpm"
    path.write_text(
        "/* XPM */\n"
        "static char *icon[] = {\n"
        "/* columns rows colors chars */\n"
        '"2 1 2 1",\n'
        '"x c #00FF00",\n'
        '"o c None",\n'
        "// pixels\n"
        '"xo"\n'
        "};\n"
    )
    image = load_xpm_file(path)
    assert (image.width, image.height) == (2, 1)
    assert image.get_pixel(0, 0) == 0x00FF00
    assert image.get_pixel(1, 0) == TRANSPARENT_PIXEL


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_xpm_file(tmp_path / "missing.xpm")