from unittest.mock import Mock

from raa_core.listeners import InputListeners


def test_clicks_keys_and_scrolls_count_as_activity():
    on_activity = Mock()
    listeners = InputListeners(on_activity)

    listeners._on_click(10, 10, "left", True)
    listeners._on_click(10, 10, "left", False)
    listeners._on_press("a")
    listeners._on_scroll(0, 0, 0, -1)

    assert on_activity.call_count == 3


def test_mouse_moves_are_throttled():
    on_activity = Mock()
    now = [100.0]
    listeners = InputListeners(on_activity, clock=lambda: now[0])

    listeners._on_move(1, 1)
    now[0] += 0.1
    listeners._on_move(2, 2)
    now[0] += 0.5
    listeners._on_move(3, 3)

    assert on_activity.call_count == 2


def test_stop_without_start_is_safe():
    InputListeners(Mock()).stop()
