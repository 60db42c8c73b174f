"""Command line entry point: load a scene and open the game window."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Optional

from cub3d.display import Display, DisplayError
from cub3d.game import Game
from cub3d.hooks import EventType
from cub3d.mapfile import MapError, check_extension, parse_file
from cub3d.xpm import XpmError

INTRO_PATH = "assets/intro.xpm"


def _fail(message: str) -> int:
    print("Error", file=sys.stderr)
    print(message, file=sys.stderr)
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the game on the scene file named by the single argument."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        return _fail("Invalid number of arguments")
    path = args[0]
    if not check_extension(path):
        return _fail("Invalid file extension\n Expected [map_name].cub")
    try:
        settings = parse_file(path)
    except MapError as exc:
        return _fail(str(exc))
    try:
        display = Display()
    except DisplayError:
        return _fail("Could not initialize display")
    with display:
        try:
            game = Game(settings, display)
        except DisplayError:
            return _fail("Could not create window")
        try:
            game.intro = display.xpm_file_to_image(INTRO_PATH)
        except (OSError, XpmError):
            return _fail("Could not load intro image")
        display.loop_hook(lambda _param: game.render_frame())
        game.window.key_hook(lambda key, _param: game.key_handler(key))
        game.window.hook(EventType.DESTROY_NOTIFY, 0, lambda _param: game.close_window())
        display.loop()
    return 0


if __name__ == "__main__":
    sys.exit(main())