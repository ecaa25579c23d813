"""
Exception taxonomy.

Dispatch errors are caught at the trigger that asked for the send and
logged; they never stop a schedule. WatcherSetupError disables only the
hotplug trigger. ConfigError and ServiceError surface on the CLI.
"""


class RAAError(Exception):
    """Base class for every agent error."""


class ConfigError(RAAError):
    """Config file is missing a required value or holds an invalid one."""


class ServiceError(RAAError):
    """A platform service command (launchctl, systemctl, schtasks) failed."""


class WatcherSetupError(RAAError):
    """The removable media event source could not be subscribed to."""


# ─── Dispatch ────────────────────────────────────────────────────

class DispatchError(RAAError):
    """A single notification could not be delivered."""


class UnconfiguredCategory(DispatchError):
    def __init__(self, category):
        self.category = category
        super().__init__(f"No webhook URL configured for category: {category}")


class TransportError(DispatchError):
    """Network, DNS or TLS failure. The HTTP exchange never completed."""

    def __init__(self, cause):
        self.cause = cause
        super().__init__(f"Webhook transport error: {cause}")


class SerializationError(DispatchError):
    """Payload could not be encoded as JSON."""
