"""The game state: key handling, frame rendering and the top-down map view."""

from __future__ import annotations

from typing import Optional

from cub3d.display import Display
from cub3d.image import Image
from cub3d.mapfile import Settings

WIN_WIDTH = 1280
WIN_HEIGHT = 720
WINDOW_TITLE = "Cub3D"
TILE_SIZE = 32

COLOR_WALL = 0xFFFFFF
COLOR_FLOOR = 0x333333
COLOR_PLAYER = 0xFF0000
COLOR_TEXT = 0xAAAAAA

KEY_SPACE = 32
KEY_A = 97
KEY_D = 100
KEY_S = 115
KEY_W = 119
KEY_ESC = 0xFF1B

START_FRAMES = 120
START_TEXT = "Game starting..."
START_TEXT_POS = (580, 350)


def draw_pixel(image: Image, x: int, y: int, color: int) -> None:
    """Set one pixel; points outside the image are ignored."""
    if 0 <= x < image.width and 0 <= y < image.height:
        image.put_pixel(x, y, color)


def draw_tile(image: Image, x: int, y: int, color: int) -> None:
    """Fill a TILE_SIZE square whose top left corner is (x, y)."""
    for row in range(y, y + TILE_SIZE):
        for col in range(x, x + TILE_SIZE):
            draw_pixel(image, col, row, color)


def draw_map(image: Image, settings: Settings) -> None:
    """Draw walls, floor and a marker for the player."""
    for y, row in enumerate(settings.map):
        for x, cell in enumerate(row):
            color = COLOR_WALL if cell == "1" else COLOR_FLOOR
            draw_tile(image, x * TILE_SIZE, y * TILE_SIZE, color)
    draw_tile(
        image,
        settings.player_x * TILE_SIZE + TILE_SIZE // 4,
        settings.player_y * TILE_SIZE + TILE_SIZE // 4,
        COLOR_PLAYER,
    )


def _centre(outer: int, inner: int) -> int:
    return int((outer - inner) / 2)


def _walkable(rows: list[str], x: int, y: int) -> bool:
    return 0 <= y < len(rows) and 0 <= x < len(rows[y]) and rows[y][x] != "1"


class Game:
    """A window showing an intro screen, then the map the player walks on."""

    def __init__(self, settings: Settings, display: Display, intro: Optional[Image] = None) -> None:
        self.settings = settings
        self.display = display
        self.window = display.new_window(WIN_WIDTH, WIN_HEIGHT, WINDOW_TITLE)
        self.image = display.new_image(WIN_WIDTH, WIN_HEIGHT)
        self.intro = intro
        self.started = False
        self.start_frame = 0

    def key_handler(self, keycode: int) -> None:
        """Start the game on space, then move with W/A/S/D and quit on Escape."""
        if not self.started:
            if keycode == KEY_SPACE:
                self.started = True
                self.start_frame = 0
            return
        settings = self.settings
        rows = settings.map
        px, py = settings.player_x, settings.player_y
        if keycode == KEY_W:
            if py > 0 and _walkable(rows, px, py - 1):
                settings.player_y -= 1
        elif keycode == KEY_S:
            if _walkable(rows, px, py + 1):
                settings.player_y += 1
        elif keycode == KEY_A:
            if px > 0 and _walkable(rows, px - 1, py):
                settings.player_x -= 1
        elif keycode == KEY_D:
            if _walkable(rows, px + 1, py):
                settings.player_x += 1
        elif keycode == KEY_ESC:
            self.close_window()

    def close_window(self) -> None:
        """Close the window and leave the program with status 0."""
        print("Exiting game")
        self.display.destroy_window(self.window)
        raise SystemExit(0)

    def render_frame(self) -> None:
        """Draw the intro, the start message or the map, whichever is due."""
        display = self.display
        if not self.started:
            display.clear_window(self.window)
            if self.intro is not None:
                display.put_image(
                    self.window,
                    self.intro,
                    _centre(WIN_WIDTH, self.intro.width),
                    _centre(WIN_HEIGHT, self.intro.height),
                )
            return
        self.image.clear()
        if self.start_frame < START_FRAMES:
            display.clear_window(self.window)
            x, y = START_TEXT_POS
            display.string_put(self.window, x, y, COLOR_TEXT, START_TEXT)
            self.start_frame += 1
        else:
            draw_map(self.image, self.settings)
            display.put_image(self.window, self.image, 0, 0)