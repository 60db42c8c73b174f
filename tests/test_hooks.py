from collections import deque

import pytest

from cub3d.hooks import (
    MAX_EVENT,
    Event,
    EventLoop,
    EventMask,
    EventType,
    Hook,
    HookTable,
    dispatch,
)

ESC = 0xFF1B


def _recorder():
    calls = []

    def record(*args):
        calls.append(args)
        return 0

    return calls, record


def test_event_type_codes_match_protocol():
    table = HookTable()
    calls, record = _recorder()
    table.set(2, EventMask.KEY_PRESS, record, "press")
    table.set(17, 0, record, "destroy")
    assert dispatch(Event(EventType.KEY_PRESS, key=5), table) is True
    assert dispatch(Event(EventType.DESTROY_NOTIFY), table) is True
    assert calls == [(5, "press"), ("destroy",)]
    assert table[EventType.KEY_RELEASE].func is None
    assert table[EventType.EXPOSE].func is None


def test_key_hook_uses_key_release_slot():
    table = HookTable()
    _, record = _recorder()
    table.key_hook(record, "p")
    hook = table[EventType.KEY_RELEASE]
    assert hook == Hook(EventMask.KEY_RELEASE, record, "p")
    assert table[EventType.KEY_PRESS].func is None


def test_mouse_and_expose_hook_slots():
    table = HookTable()
    _, record = _recorder()
    table.mouse_hook(record, 1)
    table.expose_hook(record, 2)
    assert table[EventType.BUTTON_PRESS].mask == EventMask.BUTTON_PRESS
    assert table[EventType.EXPOSE].mask == EventMask.EXPOSURE
    assert table[EventType.EXPOSE].param == 2


def test_combined_mask_is_union():
    table = HookTable()
    _, record = _recorder()
    assert table.combined_mask() == EventMask.NONE
    table.key_hook(record)
    table.mouse_hook(record)
    table.set(EventType.MOTION_NOTIFY, EventMask.POINTER_MOTION, record)
    assert table.combined_mask() == (
        EventMask.KEY_RELEASE | EventMask.BUTTON_PRESS | EventMask.POINTER_MOTION
    )


@pytest.mark.parametrize("event", [-1, MAX_EVENT, MAX_EVENT + 5])
def test_set_rejects_out_of_range(event):
    table = HookTable()
    with pytest.raises(ValueError):
        table.set(event, 0, print)


def test_dispatch_key_event_passes_key_and_param():
    table = HookTable()
    calls, record = _recorder()
    table.key_hook(record, "game")
    assert dispatch(Event(EventType.KEY_RELEASE, key=ESC), table) is True
    assert calls == [(ESC, "game")]


def test_dispatch_button_event():
    table = HookTable()
    calls, record = _recorder()
    table.mouse_hook(record, None)
    ran = dispatch(Event(EventType.BUTTON_PRESS, button=3, x=10, y=20), table)
    assert ran is True
    assert calls == [(3, 10, 20, None)]


def test_dispatch_motion_event():
    table = HookTable()
    calls, record = _recorder()
    table.set(EventType.MOTION_NOTIFY, EventMask.POINTER_MOTION, record, "w3")
    ran = dispatch(Event(EventType.MOTION_NOTIFY, x=5, y=7), table)
    assert ran is True
    assert calls == [(5, 7, "w3")]


def test_dispatch_expose_only_on_last():
    table = HookTable()
    calls, record = _recorder()
    table.expose_hook(record, "p")
    assert dispatch(Event(EventType.EXPOSE, count=2), table) is False
    assert calls == []
    assert dispatch(Event(EventType.EXPOSE, count=0), table) is True
    assert calls == [("p",)]


def test_dispatch_generic_event_passes_param():
    table = HookTable()
    calls, record = _recorder()
    table.set(EventType.DESTROY_NOTIFY, 0, record, "game")
    ran = dispatch(Event(EventType.DESTROY_NOTIFY), table)
    assert ran is True
    assert calls == [("game",)]


def test_close_request_runs_destroy_hook():
    table = HookTable()
    calls, record = _recorder()
    table.set(EventType.DESTROY_NOTIFY, 0, record, "bye")
    ran = dispatch(Event(EventType.CLIENT_MESSAGE, close_request=True), table)
    assert ran is True
    assert calls == [("bye",)]


def test_dispatch_without_hook_does_nothing():
    table = HookTable()
    calls, record = _recorder()
    table.key_hook(record)
    assert dispatch(Event(EventType.KEY_PRESS, key=1), table) is False
    assert dispatch(Event(MAX_EVENT + 3), table) is False
    assert calls == []


def test_dispatch_undefined_low_types_ignored():
    table = HookTable()
    calls, record = _recorder()
    table.set(0, 0, record)
    table.set(1, 0, record)
    assert dispatch(Event(0), table) is False
    assert dispatch(Event(1), table) is False
    assert calls == []


def test_run_without_targets_returns_at_once():
    loop = EventLoop()
    calls, record = _recorder()
    loop.set_loop_hook(record, None)
    loop.run(lambda: pytest.fail("no event should be read"), lambda: False)
    assert calls == []
    assert loop.targets == []
    assert loop.ended is False


def test_run_until_end_from_key_hook():
    loop = EventLoop()
    table = HookTable()
    keys = []

    def on_key(key, param):
        keys.append(key)
        if key == ESC:
            param.end()

    table.key_hook(on_key, loop)
    loop.add_target("win1", table)
    queue = deque(
        [
            Event(EventType.KEY_RELEASE, target="win1", key=97),
            Event(EventType.KEY_RELEASE, target="other", key=98),
            Event(EventType.KEY_RELEASE, target="win1", key=ESC),
            Event(EventType.KEY_RELEASE, target="win1", key=99),
        ]
    )
    loop.run(queue.popleft, lambda: bool(queue))
    assert keys == [97, ESC]
    assert len(queue) == 1
    assert loop.ended is True


def test_loop_hook_runs_when_queue_empty():
    loop = EventLoop()
    table = HookTable()
    seen, record = _recorder()
    table.key_hook(record)
    loop.add_target("w", table)
    queue = deque([Event(EventType.KEY_RELEASE, target="w", key=1)])
    frames = []

    def frame(param):
        frames.append(len(queue))
        if len(frames) == 3:
            loop.end()

    loop.set_loop_hook(frame, None)
    loop.run(queue.popleft, lambda: bool(queue))
    assert loop.ended is True
    assert frames == [0, 0, 0]
    assert seen == [(1, None)]


def test_removing_last_target_stops_loop():
    loop = EventLoop()
    loop.add_target("w", HookTable())
    frames = []

    def frame(param):
        frames.append(param)
        loop.remove_target("w")

    loop.set_loop_hook(frame, "x")
    loop.run(lambda: pytest.fail("no event expected"), lambda: False)
    assert frames == ["x"]
    assert loop.targets == []


def test_run_records_selected_masks():
    loop = EventLoop()
    table = HookTable()
    table.expose_hook(lambda p: 0)
    loop.add_target("w", table)
    loop.set_loop_hook(lambda p: loop.end())
    loop.run(lambda: pytest.fail("no event expected"), lambda: False)
    assert loop.selected_masks == {"w": EventMask.EXPOSURE}


def test_end_is_sticky():
    loop = EventLoop()
    loop.add_target("w", HookTable())
    loop.end()
    calls, record = _recorder()
    loop.set_loop_hook(record)
    loop.run(lambda: pytest.fail("no event expected"), lambda: True)
    assert loop.ended is True
    assert loop.targets == ["w"]
    assert calls == []


def test_targets_listed_newest_first():
    loop = EventLoop()
    loop.add_target("a", HookTable())
    loop.add_target("b", HookTable())
    loop.remove_target("missing")
    assert loop.targets == ["b", "a"]