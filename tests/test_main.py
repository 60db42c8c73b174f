from cub3d.main import main


def test_no_arguments(capsys):
    assert main([]) == 1
    assert "Invalid number of arguments" in capsys.readouterr().err


def test_too_many_arguments(capsys):
    assert main(["a.cub", "b.cub"]) == 1
    assert "Invalid number of arguments" in capsys.readouterr().err


def test_bad_extension(capsys):
    assert main(["map.txt"]) == 1
    assert "Invalid file extension" in capsys.readouterr().err


def test_missing_scene_file(tmp_path, capsys):
    missing = tmp_path / "missing.cub"
    assert main([str(missing)]) == 1
    assert "Error opening file" in capsys.readouterr().err