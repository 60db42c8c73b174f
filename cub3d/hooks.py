"""Event hooks and the event loop that dispatches them.

Each window owns a table with one hook slot per event type. A slot holds
the event mask the window asks for, a callback and a parameter handed back
to it. The loop reads events, routes them to the table of the window they
belong to, and calls the loop hook whenever the queue runs dry.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Any, Optional


class EventType(IntEnum):
    """Event type codes, numbered as the X protocol numbers them."""

    KEY_PRESS = 2
    KEY_RELEASE = 3
    BUTTON_PRESS = 4
    BUTTON_RELEASE = 5
    MOTION_NOTIFY = 6
    ENTER_NOTIFY = 7
    LEAVE_NOTIFY = 8
    FOCUS_IN = 9
    FOCUS_OUT = 10
    KEYMAP_NOTIFY = 11
    EXPOSE = 12
    GRAPHICS_EXPOSE = 13
    NO_EXPOSE = 14
    VISIBILITY_NOTIFY = 15
    CREATE_NOTIFY = 16
    DESTROY_NOTIFY = 17
    UNMAP_NOTIFY = 18
    MAP_NOTIFY = 19
    MAP_REQUEST = 20
    REPARENT_NOTIFY = 21
    CONFIGURE_NOTIFY = 22
    CONFIGURE_REQUEST = 23
    GRAVITY_NOTIFY = 24
    RESIZE_REQUEST = 25
    CIRCULATE_NOTIFY = 26
    CIRCULATE_REQUEST = 27
    PROPERTY_NOTIFY = 28
    SELECTION_CLEAR = 29
    SELECTION_REQUEST = 30
    SELECTION_NOTIFY = 31
    COLORMAP_NOTIFY = 32
    CLIENT_MESSAGE = 33
    MAPPING_NOTIFY = 34
    GENERIC_EVENT = 35


MAX_EVENT = 36
"""Number of hook slots in a table; event types at or above it are ignored."""


class EventMask(IntFlag):
    """Event selection bits a hook asks for."""

    NONE = 0
    KEY_PRESS = 1 << 0
    KEY_RELEASE = 1 << 1
    BUTTON_PRESS = 1 << 2
    BUTTON_RELEASE = 1 << 3
    ENTER_WINDOW = 1 << 4
    LEAVE_WINDOW = 1 << 5
    POINTER_MOTION = 1 << 6
    POINTER_MOTION_HINT = 1 << 7
    BUTTON1_MOTION = 1 << 8
    BUTTON2_MOTION = 1 << 9
    BUTTON3_MOTION = 1 << 10
    BUTTON4_MOTION = 1 << 11
    BUTTON5_MOTION = 1 << 12
    BUTTON_MOTION = 1 << 13
    KEYMAP_STATE = 1 << 14
    EXPOSURE = 1 << 15
    VISIBILITY_CHANGE = 1 << 16
    STRUCTURE_NOTIFY = 1 << 17
    RESIZE_REDIRECT = 1 << 18
    SUBSTRUCTURE_NOTIFY = 1 << 19
    SUBSTRUCTURE_REDIRECT = 1 << 20
    FOCUS_CHANGE = 1 << 21
    PROPERTY_CHANGE = 1 << 22
    COLORMAP_CHANGE = 1 << 23
    OWNER_GRAB_BUTTON = 1 << 24


@dataclass(frozen=True)
class Event:
    """One input or window event.

    ``key`` is the key symbol of key events, ``button``, ``x`` and ``y``
    describe pointer events, ``count`` is the number of expose events still
    to follow, and ``close_request`` marks a window manager's request to
    close the window.
    """

    type: int
    target: Hashable = None
    key: int = 0
    button: int = 0
    x: int = 0
    y: int = 0
    count: int = 0
    close_request: bool = False


HookFunc = Callable[..., Any]


@dataclass(frozen=True)
class Hook:
    """A callback, the parameter passed back to it and the mask it selects."""

    mask: int = 0
    func: Optional[HookFunc] = None
    param: Any = None


def _check_event(event: int) -> int:
    if not 0 <= event < MAX_EVENT:
        raise ValueError(f"event type must be in 0..{MAX_EVENT - 1}, got {event}")
    return int(event)


@dataclass
class HookTable:
    """The hook slots of one window, one per event type."""

    _hooks: list[Hook] = field(default_factory=lambda: [Hook() for _ in range(MAX_EVENT)])

    def __getitem__(self, event: int) -> Hook:
        return self._hooks[_check_event(event)]

    def set(self, event: int, mask: int, func: Optional[HookFunc], param: Any = None) -> None:
        """Install ``func`` for ``event``, selecting events with ``mask``."""
        self._hooks[_check_event(event)] = Hook(int(mask), func, param)

    def key_hook(self, func: Optional[HookFunc], param: Any = None) -> None:
        """Call ``func(key, param)`` when a key is released."""
        self.set(EventType.KEY_RELEASE, EventMask.KEY_RELEASE, func, param)

    def mouse_hook(self, func: Optional[HookFunc], param: Any = None) -> None:
        """Call ``func(button, x, y, param)`` when a mouse button is pressed."""
        self.set(EventType.BUTTON_PRESS, EventMask.BUTTON_PRESS, func, param)

    def expose_hook(self, func: Optional[HookFunc], param: Any = None) -> None:
        """Call ``func(param)`` when the window needs redrawing."""
        self.set(EventType.EXPOSE, EventMask.EXPOSURE, func, param)

    def combined_mask(self) -> EventMask:
        """Return the union of the masks of every slot."""
        mask = 0
        for hook in self._hooks:
            mask |= hook.mask
        return EventMask(mask)


def _call_for_type(event: Event, hook: Hook) -> bool:
    func = hook.func
    assert func is not None
    kind = event.type
    if kind in (EventType.KEY_PRESS, EventType.KEY_RELEASE):
        func(event.key, hook.param)
    elif kind in (EventType.BUTTON_PRESS, EventType.BUTTON_RELEASE):
        func(event.button, event.x, event.y, hook.param)
    elif kind == EventType.MOTION_NOTIFY:
        func(event.x, event.y, hook.param)
    elif kind == EventType.EXPOSE:
        if event.count:
            return False
        func(hook.param)
    elif kind < EventType.KEY_PRESS:
        return False
    else:
        func(hook.param)
    return True


def dispatch(event: Event, hooks: HookTable) -> bool:
    """Run the hooks of ``hooks`` that ``event`` triggers.

    A close request runs the DestroyNotify hook. The hook of the event's own
    type then runs with arguments that depend on the type. Returns True if
    any hook ran.
    """
    ran = False
    if event.close_request:
        destroy = hooks[EventType.DESTROY_NOTIFY]
        if destroy.func is not None:
            destroy.func(destroy.param)
            ran = True
    if 0 <= event.type < MAX_EVENT:
        hook = hooks[event.type]
        if hook.func is not None:
            ran = _call_for_type(event, hook) or ran
    return ran


class EventLoop:
    """Routes events to the hook tables of registered targets."""

    def __init__(self) -> None:
        self._targets: dict[Hashable, HookTable] = {}
        self._loop_hook: Optional[Hook] = None
        self._ended = False
        self.selected_masks: dict[Hashable, EventMask] = {}

    @property
    def targets(self) -> list[Hashable]:
        """Identifiers of the registered targets, newest first."""
        return list(reversed(self._targets))

    @property
    def ended(self) -> bool:
        return self._ended

    def add_target(self, target_id: Hashable, hooks: HookTable) -> None:
        """Register the hook table of a target such as a window."""
        self._targets[target_id] = hooks

    def remove_target(self, target_id: Hashable) -> None:
        """Forget a target; unknown identifiers are ignored."""
        self._targets.pop(target_id, None)
        self.selected_masks.pop(target_id, None)

    def set_loop_hook(self, func: Optional[HookFunc], param: Any = None) -> None:
        """Call ``func(param)`` each time the event queue is empty."""
        self._loop_hook = None if func is None else Hook(0, func, param)

    def end(self) -> None:
        """Make :meth:`run` return as soon as possible."""
        self._ended = True

    def run(self, next_event: Callable[[], Event], pending: Callable[[], Any]) -> None:
        """Process events until no target is left or :meth:`end` is called.

        ``next_event`` returns the next event, waiting if needed; ``pending``
        tells whether an event can be read without waiting. Without a loop
        hook the loop only reads events.
        """
        self.selected_masks = {
            target: hooks.combined_mask() for target, hooks in self._targets.items()
        }
        while self._targets and not self._ended:
            while not self._ended and (self._loop_hook is None or pending()):
                event = next_event()
                hooks = self._targets.get(event.target)
                if hooks is not None:
                    dispatch(event, hooks)
            loop_hook = self._loop_hook
            if loop_hook is not None and loop_hook.func is not None:
                loop_hook.func(loop_hook.param)