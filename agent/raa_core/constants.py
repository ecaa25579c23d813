"""
Constants: agent identity, thresholds, webhook styling, volume paths.
"""

AGENT_NAME = "RAA"
AGENT_VERSION = "0.2.0"
SERVICE_NAME = "raa-agent"
SERVICE_DISPLAY_NAME = "Remote Activity Agent"
SERVICE_DESCRIPTION = "Reports boot, heartbeat, USB and idle events to webhooks"

# ─── Thresholds ──────────────────────────────────────────────────
IDLE_MINUTES_DEFAULT = 5       # No activity for 5 min → IDLE
IDLE_POLL_SEC = 60             # Idle clock sampled once a minute
PING_INTERVAL_DEFAULT = 15     # Heartbeat every 15 minutes
MOVE_THROTTLE_SEC = 0.5        # Only record mouse move every 500ms (saves CPU)
LISTENER_WATCHDOG_SEC = 30     # How often dead pynput listeners are restarted
DRIVE_POLL_SEC = 3             # Windows/Linux mount table scan interval
SHUTDOWN_JOIN_SEC = 5          # Max wait for each trigger thread on shutdown

# ─── Network ─────────────────────────────────────────────────────
WEBHOOK_TIMEOUT = 15           # Seconds per POST, connect + read

# ─── Webhook styling (one scheme for every payload) ─────────────
AVATAR_URL = "https://i.imgur.com/Xvt4F5W.png"
CATEGORY_COLORS = {
    "system": 0x3498DB,   # blue
    "usb":    0xE74C3C,   # red
    "idle":   0xF1C40F,   # yellow
}

# ─── Placeholder destinations written into a fresh config ────────
DEFAULT_WEBHOOKS = {
    "system": "https://discord.com/api/webhooks/system",
    "usb":    "https://discord.com/api/webhooks/usb",
    "idle":   "https://discord.com/api/webhooks/idle",
}

# ─── Removable media mount roots ─────────────────────────────────
MACOS_VOLUMES_DIR = "/Volumes"
LINUX_MEDIA_PREFIXES = ("/run/media/", "/media/", "/mnt/")
