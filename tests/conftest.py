import logging
from types import SimpleNamespace

import pytest

from raa_core.dispatcher import EventCategory


class RecordingDispatcher:
    """Stands in for Dispatcher: records every send, optionally failing."""

    def __init__(self, device_name="test-mac", fail=False):
        self.device_name = device_name
        self.fail = fail
        self.sends = []
        self.closed = False

    def safe_send(self, category, title, message, extra_fields=()):
        self.sends.append(SimpleNamespace(
            category=EventCategory(category),
            title=title,
            message=message,
            fields=list(extra_fields),
        ))
        return not self.fail

    def send(self, category, title, message, extra_fields=()):
        self.safe_send(category, title, message, extra_fields)

    def close(self):
        self.closed = True


class ManualClock:
    """Monotonic clock that only moves when a test says so."""

    def __init__(self, start=0.0):
        self.t = float(start)

    def __call__(self):
        return self.t

    def advance(self, seconds):
        self.t += seconds


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def failing_dispatcher():
    return RecordingDispatcher(fail=True)


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def webhooks():
    return {
        "system": "https://hooks.example.test/system",
        "usb": "https://hooks.example.test/usb",
        "idle": "https://hooks.example.test/idle",
    }


@pytest.fixture
def sample_config(webhooks):
    return {
        "device_name": "test-mac",
        "webhooks": dict(webhooks),
        "ping_interval": 15,
        "idle_minutes": 5,
    }


@pytest.fixture(autouse=True)
def restore_raa_logger():
    """setup_logging() rewires the 'raa' logger; undo it between tests."""
    logger = logging.getLogger("raa")
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
