"""
Mouse/keyboard input listeners feeding the idle monitor's activity clock.
PRIVACY: only the fact that input happened is recorded. No keys, no positions.
"""

import time
import threading

from .config import log
from .constants import MOVE_THROTTLE_SEC, LISTENER_WATCHDOG_SEC


class InputListeners:
    """
    pynput listeners that call on_activity() on any input.
    Mouse moves are throttled to one per MOVE_THROTTLE_SEC.
    A watchdog thread restarts listeners that die silently.
    """

    def __init__(self, on_activity, clock=time.monotonic):
        self._on_activity = on_activity
        self._clock = clock
        self._last_move = 0.0
        self._mouse_listener = None
        self._keyboard_listener = None
        self._stop = threading.Event()
        self._mouse = None
        self._keyboard = None

    # ── pynput callbacks (listener threads) ───────────────────

    def _on_move(self, x, y):
        now = self._clock()
        if (now - self._last_move) < MOVE_THROTTLE_SEC:
            return
        self._last_move = now
        self._on_activity()

    def _on_click(self, x, y, button, pressed):
        if pressed:
            self._on_activity()

    def _on_scroll(self, x, y, dx, dy):
        self._on_activity()

    def _on_press(self, key):
        self._on_activity()

    # ── Lifecycle ─────────────────────────────────────────────

    def _new_mouse_listener(self):
        listener = self._mouse.Listener(
            on_move=self._on_move, on_click=self._on_click, on_scroll=self._on_scroll,
        )
        listener.daemon = True
        listener.start()
        return listener

    def _new_keyboard_listener(self):
        listener = self._keyboard.Listener(on_press=self._on_press)
        listener.daemon = True
        listener.start()
        return listener

    def start(self):
        """Start listeners. Returns False when no input backend is available."""
        try:
            from pynput import mouse, keyboard
        except ImportError as e:
            log.warning("Input listeners unavailable (%s) — idle detection sees no input", e)
            return False

        self._mouse = mouse
        self._keyboard = keyboard
        try:
            self._mouse_listener = self._new_mouse_listener()
            self._keyboard_listener = self._new_keyboard_listener()
        except Exception as e:
            log.warning("Input listeners failed to start: %s", e)
            self.stop()
            return False

        threading.Thread(target=self._watchdog, name="raa-listener-wd", daemon=True).start()
        log.info("Input listeners started (activity only — no keylogging)")
        return True

    def _watchdog(self):
        while not self._stop.wait(LISTENER_WATCHDOG_SEC):
            try:
                if self._mouse_listener and not self._mouse_listener.is_alive():
                    log.warning("Mouse listener died — restarting")
                    self._mouse_listener = self._new_mouse_listener()
                if self._keyboard_listener and not self._keyboard_listener.is_alive():
                    log.warning("Keyboard listener died — restarting")
                    self._keyboard_listener = self._new_keyboard_listener()
            except Exception as e:
                log.error("Listener watchdog error: %s", e)

    def stop(self):
        self._stop.set()
        for listener in (self._mouse_listener, self._keyboard_listener):
            if listener is not None:
                try:
                    listener.stop()
                except Exception:
                    pass
        self._mouse_listener = None
        self._keyboard_listener = None
