import pytest

from cub3d.mapfile import (
    MapError,
    Settings,
    check_extension,
    is_map_line,
    parse_file,
    parse_lines,
)

SCENE = [
    "NO ./tex/north.xpm\n",
    "SO ./tex/south.xpm\n",
    "WE ./tex/west.xpm\n",
    "EA ./tex/east.xpm\n",
    "\n",
    "F 220,100,0\n",
    "C 225,30,0\n",
    "\n",
    "111111\n",
    "100N01\n",
    "111111\n",
]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("map.cub", True),
        ("a.cub", True),
        (".cub", False),
        ("map.txt", False),
        ("map.cube", False),
    ],
)
def test_check_extension(name, expected):
    assert check_extension(name) is expected


@pytest.mark.parametrize(
    "line, expected",
    [
        ("   1111\n", True),
        ("0\n", True),
        ("N\n", True),
        ("    ", True),
        ("\n", False),
        ("F 220,100,0\n", False),
        ("C 1,2,3\n", False),
    ],
)
def test_is_map_line(line, expected):
    assert is_map_line(line) is expected


def test_parse_lines_textures():
    settings = parse_lines(SCENE)
    assert settings.no == "./tex/north.xpm"
    assert settings.so == "./tex/south.xpm"
    assert settings.we == "./tex/west.xpm"
    assert settings.ea == "./tex/east.xpm"


def test_parse_lines_map_and_player():
    settings = parse_lines(SCENE)
    assert settings.map == ["111111", "100001", "111111"]
    assert (settings.player_x, settings.player_y, settings.player_dir) == (3, 1, "N")


def test_colours_keep_defaults():
    settings = parse_lines(SCENE)
    assert settings.floor_rgb == [-1, 0, 0]
    assert settings.ceiling_rgb == [-1, 0, 0]


def test_n_followed_by_o_is_skipped_for_rest_of_row():
    settings = parse_lines(["1NO1S\n", "1S01\n"])
    assert settings.map[0] == "1NO1S"
    assert (settings.player_x, settings.player_y, settings.player_dir) == (1, 1, "S")
    assert settings.map[1] == "1001"


def test_no_player_leaves_defaults():
    settings = parse_lines(["111\n", "101\n", "111\n"])
    assert settings.player_dir == ""
    assert (settings.player_x, settings.player_y) == (0, 0)


def test_store_player_marks_floor():
    settings = Settings(map=["1W1"])
    settings.store_player(1, 0, "W")
    assert settings.map == ["101"]
    assert settings.player_dir == "W"


def test_store_player_out_of_row():
    settings = Settings(map=["11"])
    with pytest.raises(IndexError):
        settings.store_player(5, 0, "E")


def test_parse_file_round_trip(tmp_path):
    path = tmp_path / "scene.cub"
    path.write_text("".join(SCENE), encoding="latin-1")
    assert parse_file(path) == parse_lines(SCENE)


def test_parse_file_last_line_without_newline(tmp_path):
    path = tmp_path / "scene.cub"
    path.write_text("111\n1E1\n111", encoding="latin-1")
    settings = parse_file(path)
    assert settings.map == ["111", "101", "111"]
    assert settings.player_dir == "E"


def test_parse_file_missing(tmp_path):
    with pytest.raises(MapError):
        parse_file(tmp_path / "missing.cub")