# cub3d

A small tile-map game. It reads a `.cub` scene file, opens a 1280x720
window through pygame and shows an intro image. Press space to start: a
"Game starting..." message is shown for 120 frames, then a top-down view of
the map in which the player can be moved around.

## Installing

    pip install .

With the test dependencies:

    pip install .[test]
    pytest

## Running

    cub3d path/to/map.cub

The command takes exactly one argument, a file name ending in `.cub` with
at least one character before the extension. The intro image is read from
`assets/intro.xpm` relative to the working directory; the game does not
start without it.

On any problem (wrong number of arguments, wrong extension, a scene file
that cannot be opened, no display, a missing or malformed intro image) the
command prints `Error` and a message to standard error and exits with
status 1.

### Controls

Keys act when they are released.

| Key   | Action                        |
|-------|-------------------------------|
| Space | start the game                |
| W     | move up                       |
| S     | move down                     |
| A     | move left                     |
| D     | move right                    |
| Esc   | print "Exiting game" and quit |

Moves into a wall (`1`) or off the map are refused. Closing the window also
quits.

## Scene files

    NO ./textures/north.xpm
    SO ./textures/south.xpm
    WE ./textures/west.xpm
    EA ./textures/east.xpm

    111111
    100001
    10N001
    111111

Lines starting with `NO `, `SO `, `WE ` or `EA ` give texture paths. Any
other line whose first non-space character is `1`, `0`, `N`, `S`, `E` or
`W` is a map row. The first compass letter in the map is the player's start
and facing; that cell is turned into floor.

## What it does not do

- The view is a flat top-down map: walls are white tiles, floor is dark
  grey and the player is a red square. There is no first-person view.
- Texture paths are read into the settings but nothing is drawn with them.
- Floor (`F`) and ceiling (`C`) colour lines are not read; the settings
  keep their defaults.
- The map is not checked for being closed by walls or for holding exactly
  one player.

## Using the library

```python
from cub3d.mapfile import parse_file, check_extension
from cub3d.colornames import lookup_color
from cub3d.display import Display

settings = parse_file("maps/simple.cub")
print(settings.player_x, settings.player_y, settings.player_dir)

print(hex(lookup_color("steelblue")))   # 0x4682b4

with Display(headless=True) as display:
    window = display.new_window(64, 64, "test")
    display.pixel_put(window, 3, 4, 0xFF0000)
    print(hex(window.canvas.get_pixel(3, 4)))   # 0xff0000
```

- `cub3d.colornames` — the X11 colour-name table: `lookup_color` (case
  insensitive, `none` is -1) and `color_names`.
- `cub3d.image` — `Image`, a 32-bit pixel buffer with `put_pixel`,
  `get_pixel`, `fill` and `clear`; `channel_shifts` and `good_color` for
  converting 0xRRGGBB to a visual's pixel format.
- `cub3d.xpm` — an XPM reader: `parse_xpm`, `load_xpm_file`,
  `xpm_from_data`, raising `XpmError` on malformed data; helpers
  `split_words`, `find_outside_quotes`, `strip_comments`, `quoted_lines`
  and `text_to_rgb`.
- `cub3d.hooks` — `EventType`, `EventMask`, `Event`, per-window
  `HookTable`s, `dispatch` and the `EventLoop`.
- `cub3d.display` — `Display` and `Window`: windows whose contents live in
  a canvas image, drawing (`pixel_put`, `string_put`, `put_image`,
  `clear_window`), hooks, the event loop, pointer and screen-mode calls. A
  headless display needs no screen and takes events only from its event
  queue. Failures raise `DisplayError`.
- `cub3d.mapfile` — the scene parser: `parse_file`, `parse_lines`,
  `check_extension`, `is_map_line`, `Settings`, `MapError`.
- `cub3d.game` — `Game` (key handling and frame rendering) and the drawing
  helpers `draw_map`, `draw_tile`, `draw_pixel`.
- `cub3d.main` — `main(argv=None)`, the `cub3d` command.