"""A display connection holding windows, drawing into them and running events.

Every window keeps its contents in a canvas image, so drawing works the same
with or without a screen. With a screen, the newest window is shown through
pygame and its input events feed the event loop. A headless display takes
its events only from its event queue, which other threads may fill.
"""

from __future__ import annotations

import itertools
import os
import queue
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from cub3d.hooks import Event, EventLoop, EventMask, EventType, HookFunc, HookTable  # noqa: E402
from cub3d.image import Image, channel_shifts, good_color  # noqa: E402
from cub3d.xpm import load_xpm_file  # noqa: E402

_FONT_SIZE = 16
_DEFAULT_MASKS = (0xFF0000, 0x00FF00, 0x0000FF)
_DEFAULT_MODES = ((1920, 1080),)
_REPEAT_DELAY_MS = 500
_REPEAT_INTERVAL_MS = 33

_SPECIAL_KEYS = {
    pygame.K_ESCAPE: 0xFF1B,
    pygame.K_RETURN: 0xFF0D,
    pygame.K_BACKSPACE: 0xFF08,
    pygame.K_TAB: 0xFF09,
    pygame.K_DELETE: 0xFFFF,
    pygame.K_HOME: 0xFF50,
    pygame.K_LEFT: 0xFF51,
    pygame.K_UP: 0xFF52,
    pygame.K_RIGHT: 0xFF53,
    pygame.K_DOWN: 0xFF54,
    pygame.K_PAGEUP: 0xFF55,
    pygame.K_PAGEDOWN: 0xFF56,
    pygame.K_END: 0xFF57,
    pygame.K_INSERT: 0xFF63,
    pygame.K_LSHIFT: 0xFFE1,
    pygame.K_RSHIFT: 0xFFE2,
    pygame.K_LCTRL: 0xFFE3,
    pygame.K_RCTRL: 0xFFE4,
    pygame.K_LALT: 0xFFE9,
    pygame.K_RALT: 0xFFEA,
    **{getattr(pygame, f"K_F{n}"): 0xFFBD + n for n in range(1, 13)},
}

_window_ids = itertools.count(1)


class DisplayError(RuntimeError):
    """Raised when the display or one of its windows cannot be used."""


@dataclass(eq=False)
class Window:
    """A fixed-size window whose contents live in ``canvas``."""

    width: int
    height: int
    title: str
    hooks: HookTable = field(default_factory=HookTable, repr=False)
    font_name: Optional[str] = None
    cursor_visible: bool = True
    fullscreen: bool = False
    id: int = field(default_factory=lambda: next(_window_ids))
    canvas: Image = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.canvas = Image(self.width, self.height)

    def hook(self, event: int, mask: int, func: Optional[HookFunc], param: Any = None) -> None:
        """Install ``func`` for any event type, selecting events with ``mask``."""
        self.hooks.set(event, mask, func, param)

    def key_hook(self, func: Optional[HookFunc], param: Any = None) -> None:
        """Call ``func(key, param)`` when a key is released."""
        self.hooks.key_hook(func, param)

    def mouse_hook(self, func: Optional[HookFunc], param: Any = None) -> None:
        """Call ``func(button, x, y, param)`` when a mouse button is pressed."""
        self.hooks.mouse_hook(func, param)

    def expose_hook(self, func: Optional[HookFunc], param: Any = None) -> None:
        """Call ``func(param)`` when the window needs redrawing."""
        self.hooks.expose_hook(func, param)


def _keysym(key: int) -> int:
    return _SPECIAL_KEYS.get(key, key)


def _translate(ev: Any, target: Window) -> Optional[Event]:
    kind = ev.type
    if kind == pygame.QUIT:
        return Event(EventType.CLIENT_MESSAGE, target, close_request=True)
    if kind in (pygame.KEYDOWN, pygame.KEYUP):
        etype = EventType.KEY_PRESS if kind == pygame.KEYDOWN else EventType.KEY_RELEASE
        return Event(etype, target, key=_keysym(ev.key))
    if kind in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
        etype = EventType.BUTTON_PRESS if kind == pygame.MOUSEBUTTONDOWN else EventType.BUTTON_RELEASE
        x, y = ev.pos
        return Event(etype, target, button=ev.button, x=x, y=y)
    if kind == pygame.MOUSEMOTION:
        x, y = ev.pos
        return Event(EventType.MOTION_NOTIFY, target, x=x, y=y)
    if kind == pygame.VIDEOEXPOSE:
        return Event(EventType.EXPOSE, target)
    return None


class _Screen:
    """Shows one window at a time through pygame."""

    def __init__(self) -> None:
        try:
            pygame.display.init()
        except pygame.error as exc:
            raise DisplayError(f"could not open display: {exc}") from exc
        self.window: Optional[Window] = None
        self._surface: Any = None

    def modes(self) -> list[tuple[int, int]]:
        modes = pygame.display.list_modes()
        if modes == -1 or not modes:
            info = pygame.display.Info()
            return [(info.current_w, info.current_h)]
        return [tuple(mode) for mode in modes]

    def show(self, window: Window) -> None:
        flags = pygame.FULLSCREEN if window.fullscreen else 0
        self._surface = pygame.display.set_mode((window.width, window.height), flags)
        pygame.display.set_caption(window.title)
        pygame.mouse.set_visible(window.cursor_visible)
        self.window = window

    def hide(self) -> None:
        self.window = None
        self._surface = None
        pygame.display.quit()
        pygame.display.init()

    def present(self) -> None:
        window = self.window
        if window is None or self._surface is None:
            return
        data = window.canvas.data
        rgb = bytearray(window.width * window.height * 3)
        rgb[0::3] = data[2::4]
        rgb[1::3] = data[1::4]
        rgb[2::3] = data[0::4]
        frame = pygame.image.frombuffer(bytes(rgb), (window.width, window.height), "RGB")
        self._surface.blit(frame, (0, 0))
        pygame.display.flip()

    def events(self, block: bool) -> list[Event]:
        if self.window is None:
            pygame.event.pump()
            return []
        raw = [pygame.event.wait()] if block else pygame.event.get()
        translated = (_translate(ev, self.window) for ev in raw)
        return [event for event in translated if event is not None]

    def close(self) -> None:
        self.window = None
        pygame.display.quit()


class Display:
    """A connection to a screen holding windows, images and the event loop.

    ``headless`` displays need no screen. ``depth`` and ``masks`` describe
    the pixel format; ``screen_modes`` lists the screen resolutions, the
    first one being current. Events are read from ``event_queue``.
    """

    def __init__(
        self,
        headless: bool = False,
        *,
        depth: int = 24,
        masks: Sequence[int] = _DEFAULT_MASKS,
        screen_modes: Optional[Sequence[tuple[int, int]]] = None,
        event_queue: Optional[queue.Queue] = None,
    ) -> None:
        if depth <= 0:
            raise DisplayError(f"depth must be positive, got {depth}")
        try:
            self._shifts = channel_shifts(*masks)
        except (ValueError, TypeError) as exc:
            raise DisplayError("no TrueColor visual available") from exc
        self.depth = depth
        self._screen = None if headless else _Screen()
        if screen_modes is None:
            screen_modes = self._screen.modes() if self._screen else _DEFAULT_MODES
        self._modes = [(int(w), int(h)) for w, h in screen_modes]
        if not self._modes:
            raise DisplayError("at least one screen mode is needed")
        self._mode = self._modes[0]
        self._saved_mode: Optional[tuple[int, int]] = None
        self._events: queue.Queue = queue.Queue() if event_queue is None else event_queue
        self._loop = EventLoop()
        self._windows: list[Window] = []
        self._fonts: dict[Optional[str], Any] = {}
        self._pointer = (0, 0)
        self._open = True
        self.do_flush = True
        self.autorepeat = True

    def __enter__(self) -> Display:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        if self._open:
            self.destroy()

    @property
    def windows(self) -> list[Window]:
        """The open windows, newest first."""
        return list(self._windows)

    def _check_open(self) -> None:
        if not self._open:
            raise DisplayError("display is closed")

    def _check_window(self, window: Window) -> None:
        self._check_open()
        if window not in self._windows:
            raise DisplayError(f"unknown window {window!r}")

    def _shown(self, window: Window) -> bool:
        return self._screen is not None and self._screen.window is window

    def _flush(self, window: Window) -> None:
        if self.do_flush and self._shown(window):
            self._screen.present()

    def new_window(self, width: int, height: int, title: str) -> Window:
        """Open a black window of fixed size and queue its first expose event."""
        self._check_open()
        if width <= 0 or height <= 0:
            raise DisplayError(f"window size must be positive, got {width}x{height}")
        window = Window(width, height, title)
        self._windows.insert(0, window)
        self._loop.add_target(window, window.hooks)
        if self._screen is not None:
            self._screen.show(window)
        self._events.put(Event(EventType.EXPOSE, window))
        return window

    def destroy_window(self, window: Window) -> None:
        """Close ``window``; events still queued for it are ignored."""
        self._check_window(window)
        self._windows.remove(window)
        self._loop.remove_target(window)
        if self._shown(window):
            if self._windows:
                self._screen.show(self._windows[0])
                self._flush(self._windows[0])
            else:
                self._screen.hide()

    def destroy(self) -> None:
        """Close the display and every window on it."""
        self._check_open()
        for window in self.windows:
            self._loop.remove_target(window)
        self._windows.clear()
        if self._screen is not None:
            self._screen.close()
        self._open = False

    def clear_window(self, window: Window) -> None:
        """Fill the window with its black background."""
        self._check_window(window)
        window.canvas.clear()
        self._flush(window)

    def pixel_put(self, window: Window, x: int, y: int, color: int) -> None:
        """Draw one pixel of colour 0xRRGGBB; points outside are ignored."""
        self._check_window(window)
        if 0 <= x < window.width and 0 <= y < window.height:
            window.canvas.put_pixel(x, y, self.get_color_value(color))
        self._flush(window)

    def _font(self, name: Optional[str]) -> Any:
        font = self._fonts.get(name)
        if font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            path = name if name and Path(name).is_file() else None
            font = pygame.font.Font(path, _FONT_SIZE)
            self._fonts[name] = font
        return font

    def string_put(self, window: Window, x: int, y: int, color: int, text: str) -> None:
        """Draw ``text`` with its baseline starting at (x, y)."""
        self._check_window(window)
        if text:
            font = self._font(window.font_name)
            glyphs = pygame.mask.from_surface(font.render(text, False, (255, 255, 255)))
            value = self.get_color_value(color)
            top = y - font.get_ascent()
            width, height = glyphs.get_size()
            for row in range(height):
                py = top + row
                if not 0 <= py < window.height:
                    continue
                for col in range(width):
                    px = x + col
                    if 0 <= px < window.width and glyphs.get_at((col, row)):
                        window.canvas.put_pixel(px, py, value)
        self._flush(window)

    def put_image(self, window: Window, image: Image, x: int, y: int) -> None:
        """Copy ``image`` into the window with its top left corner at (x, y)."""
        self._check_window(window)
        canvas = window.canvas
        x0, y0 = max(x, 0), max(y, 0)
        x1 = min(x + image.width, canvas.width)
        y1 = min(y + image.height, canvas.height)
        if x0 < x1 and y0 < y1:
            if image.endian == canvas.endian and image.bytes_per_pixel == canvas.bytes_per_pixel:
                bpp = canvas.bytes_per_pixel
                count = (x1 - x0) * bpp
                for row in range(y0, y1):
                    src = (row - y) * image.size_line + (x0 - x) * bpp
                    dst = row * canvas.size_line + x0 * bpp
                    canvas.data[dst : dst + count] = image.data[src : src + count]
            else:
                for row in range(y0, y1):
                    for col in range(x0, x1):
                        canvas.put_pixel(col, row, image.get_pixel(col - x, row - y))
        self._flush(window)

    def new_image(self, width: int, height: int) -> Image:
        """Return a new black image; raises ValueError for a bad size."""
        self._check_open()
        return Image(width, height)

    def xpm_file_to_image(self, path: str | os.PathLike[str]) -> Image:
        """Load an XPM file; the image carries its width and height."""
        self._check_open()
        return load_xpm_file(path)

    def get_color_value(self, color: int) -> int:
        """Convert 0xRRGGBB to the pixel value of this display's format."""
        return good_color(color, self.depth, self._shifts)

    def loop_hook(self, func: Optional[HookFunc], param: Any = None) -> None:
        """Call ``func(param)`` each time the event queue runs dry."""
        if func is None:
            self._loop.set_loop_hook(None)
            return

        def tick(value: Any) -> Any:
            self.sync()
            return func(value)

        self._loop.set_loop_hook(tick, param)

    def _queue_all(self, events: list[Event]) -> None:
        for event in events:
            self._events.put(event)

    def _pending(self) -> bool:
        if self._screen is not None:
            self._queue_all(self._screen.events(block=False))
        return not self._events.empty()

    def _next_event(self) -> Event:
        while self._screen is not None and self._events.empty():
            self.sync()
            self._queue_all(self._screen.events(block=True))
        return self._events.get()

    def loop(self) -> None:
        """Dispatch events until every window is closed or :meth:`loop_end`."""
        self._check_open()
        self.do_flush = False
        self._loop.run(self._next_event, self._pending)

    def loop_end(self) -> None:
        """Make :meth:`loop` return as soon as possible."""
        self._loop.end()

    def flush_events(self) -> None:
        """Discard every event waiting in the queue."""
        self._check_open()
        if self._screen is not None:
            pygame.event.clear()
        while True:
            try:
                self._events.get_nowait()
            except queue.Empty:
                return

    def sync(self) -> None:
        """Bring the screen up to date with the shown window's canvas."""
        self._check_open()
        if self._screen is not None:
            self._screen.present()

    def autorepeat_off(self) -> None:
        """Stop held keys from repeating."""
        self._check_open()
        self.autorepeat = False
        if self._screen is not None:
            pygame.key.set_repeat()

    def autorepeat_on(self) -> None:
        """Let held keys repeat."""
        self._check_open()
        self.autorepeat = True
        if self._screen is not None:
            pygame.key.set_repeat(_REPEAT_DELAY_MS, _REPEAT_INTERVAL_MS)

    def screen_size(self) -> tuple[int, int]:
        """Return the (width, height) of the current screen mode."""
        self._check_open()
        return self._mode

    def mouse_move(self, window: Window, x: int, y: int) -> None:
        """Move the pointer to (x, y) in the window."""
        self._check_window(window)
        self._pointer = (x, y)
        if self._shown(window):
            pygame.mouse.set_pos((x, y))

    def mouse_hide(self, window: Window) -> None:
        """Hide the pointer while it is over the window."""
        self._check_window(window)
        window.cursor_visible = False
        if self._shown(window):
            pygame.mouse.set_visible(False)

    def mouse_show(self, window: Window) -> None:
        """Show the pointer over the window again."""
        self._check_window(window)
        window.cursor_visible = True
        if self._shown(window):
            pygame.mouse.set_visible(True)

    def mouse_position(self, window: Window) -> tuple[int, int]:
        """Return the pointer position relative to the window."""
        self._check_window(window)
        if self._shown(window):
            x, y = pygame.mouse.get_pos()
            return (x, y)
        return self._pointer

    def set_font(self, window: Window, name: str) -> None:
        """Use the font file ``name`` for text; unknown names use the default."""
        self._check_window(window)
        window.font_name = name

    def set_fullscreen(self, window: Window, fullscreen: bool) -> Optional[tuple[int, int]]:
        """Switch the screen mode for the window, returning the new mode.

        Entering full screen picks the smallest mode the window fits in;
        leaving restores the mode in use before. Returns None and changes
        nothing when no mode can hold the window.
        """
        self._check_window(window)
        candidate: Optional[tuple[int, int]] = None
        for mode in reversed(self._modes):
            if mode[0] >= window.width and mode[1] >= window.height and (
                candidate is None or candidate[0] > mode[0] or candidate[1] > mode[1]
            ):
                candidate = mode
        if candidate is None:
            return None
        target = candidate if fullscreen else (self._saved_mode or self._modes[0])
        self._saved_mode = self._mode
        self._mode = target
        window.fullscreen = bool(fullscreen)
        if self._shown(window):
            self._screen.show(window)
            self._flush(window)
        return target


__all__ = ["Display", "DisplayError", "Window", "EventMask"]