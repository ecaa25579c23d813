"""
Notification dispatcher — category → webhook URL, payload build, POST.

Every trigger funnels into one Dispatcher. It holds no mutable state:
the destination registry is read-only after construction and each send
builds its own payload, so triggers call it concurrently without locks.
One POST per call, no retry; any HTTP response counts as delivered.
"""

import enum
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Tuple

import requests

from .config import log
from .constants import (
    AGENT_NAME, AGENT_VERSION, AVATAR_URL, CATEGORY_COLORS, WEBHOOK_TIMEOUT,
)
from .errors import DispatchError, SerializationError, TransportError, UnconfiguredCategory
from . import http_client


class EventCategory(enum.Enum):
    SYSTEM = "system"
    USB = "usb"
    IDLE = "idle"

    def __str__(self):
        return self.value

    @property
    def color(self) -> int:
        return CATEGORY_COLORS[self.value]


@dataclass(frozen=True)
class NotificationPayload:
    title: str
    message: str
    category: EventCategory
    fields: Tuple[Tuple[str, str], ...] = ()
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def timestamp_rfc3339(self) -> str:
        ts = self.timestamp.astimezone(timezone.utc).replace(microsecond=0)
        return ts.isoformat()

    def to_webhook(self, device_name):
        """Discord-style webhook body: one embed, Message field first."""
        embed_fields = [{"name": "Message", "value": self.message, "inline": False}]
        for name, value in self.fields:
            embed_fields.append({"name": str(name), "value": str(value), "inline": True})

        return {
            "username": f"{AGENT_NAME} - {device_name}",
            "content": "",
            "avatar_url": AVATAR_URL,
            "embeds": [{
                "title": self.title,
                "color": self.category.color,
                "timestamp": self.timestamp_rfc3339,
                "fields": embed_fields,
                "footer": {"text": f"{AGENT_NAME} v{AGENT_VERSION} | Device: {device_name}"},
            }],
        }


class Dispatcher:
    """Sends one notification per call to the category's webhook."""

    def __init__(self, device_name, destinations, session=None, clock=None):
        self.device_name = device_name
        self._destinations = MappingProxyType({
            EventCategory(key): url for key, url in dict(destinations).items()
        })
        self._session = session if session is not None else http_client.create_session()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_config(cls, config, session=None):
        known = {c.value for c in EventCategory}
        webhooks = {
            key: url for key, url in (config.get("webhooks") or {}).items() if key in known
        }
        return cls(config["device_name"], webhooks, session=session)

    @property
    def destinations(self):
        return self._destinations

    def build_payload(self, category, title, message, extra_fields=()):
        return NotificationPayload(
            title=title,
            message=message,
            category=category,
            fields=tuple((name, value) for name, value in extra_fields),
            timestamp=self._clock(),
        )

    def send(self, category, title, message, extra_fields=()):
        """Deliver one notification.

        Raises UnconfiguredCategory (no network call made), SerializationError
        or TransportError. HTTP error statuses are logged, not raised.
        """
        try:
            category = EventCategory(category)
        except ValueError:
            log.error("No webhook URL configured for category: %s", category)
            raise UnconfiguredCategory(category) from None

        url = self._destinations.get(category)
        if not url:
            log.error("No webhook URL configured for category: %s", category)
            raise UnconfiguredCategory(category)

        payload = self.build_payload(category, title, message, extra_fields)
        try:
            body = json.dumps(payload.to_webhook(self.device_name), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Cannot encode {category} payload '{title}': {e}") from e

        try:
            resp = self._session.post(
                url,
                data=body.encode("utf-8"),
                headers={"Content-Type": "application/json"},
                timeout=WEBHOOK_TIMEOUT,
            )
        except requests.RequestException as e:
            raise TransportError(e) from e

        if 200 <= resp.status_code < 300:
            log.info("Sent %s webhook: %s", category, title)
        else:
            log.warning("Sent %s webhook: %s — HTTP %d %s",
                        category, title, resp.status_code, (resp.text or "")[:200])
        return payload

    def safe_send(self, category, title, message, extra_fields=()):
        """send() for triggers: failures are logged and swallowed. Returns True on success."""
        try:
            self.send(category, title, message, extra_fields)
            return True
        except DispatchError as e:
            log.error("Failed to send %s notification '%s': %s", category, title, e)
            return False

    def close(self):
        try:
            self._session.close()
        except Exception:
            pass
