"""
Paths, logging, config load/save/validate, safe_print.
"""

import os
import sys
import json
import socket
import logging
from pathlib import Path

from .constants import (
    AGENT_NAME, DEFAULT_WEBHOOKS, PING_INTERVAL_DEFAULT, IDLE_MINUTES_DEFAULT,
)
from .errors import ConfigError

CATEGORY_KEYS = ("system", "usb", "idle")

log = logging.getLogger("raa")


# ─── Paths ───────────────────────────────────────────────────────
# One config per user per machine. RAA_CONFIG_DIR overrides the folder.

def get_config_dir():
    override = os.environ.get("RAA_CONFIG_DIR")
    if override:
        return Path(override)
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / AGENT_NAME
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA") or str(Path.home() / "AppData" / "Roaming")
        return Path(appdata) / AGENT_NAME
    xdg = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(xdg) / AGENT_NAME.lower()


def get_config_path():
    return get_config_dir() / "config.json"


def get_log_path():
    return get_config_dir() / "raa.log"


# ─── Safe print (no crash when running without a console) ────────

def safe_print(*args, **kwargs):
    try:
        print(*args, **kwargs)
    except Exception:
        pass


# ─── Logging ─────────────────────────────────────────────────────

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_file=None, verbose=False):
    """File log (truncated past 1 MB at startup) mirrored to stdout."""
    log_file = Path(log_file) if log_file else get_log_path()
    level = logging.DEBUG if verbose else logging.INFO

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        if log_file.exists() and log_file.stat().st_size > 1_000_000:
            log_file.write_text("")
    except OSError:
        pass

    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATEFMT)
    try:
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)
    except OSError as e:
        safe_print(f"Cannot open log file {log_file}: {e}")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    log.addHandler(console_handler)

    log.setLevel(level)
    log.propagate = False
    return log


# ─── Config Management ──────────────────────────────────────────

def load_config(path=None):
    """Load config from disk. Returns dict or None."""
    path = Path(path) if path else get_config_path()
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            log.error("Failed to load config %s: %s", path, e)
            return None
    return None


def save_config(config, path=None):
    """Save config dict to disk."""
    path = Path(path) if path else get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
    log.info("Config saved to %s", path)


def create_default_config(path=None):
    """Write a placeholder config named after this host and return it."""
    try:
        hostname = socket.gethostname() or "Unknown Device"
    except OSError:
        hostname = "Unknown Device"

    config = {
        "device_name": hostname,
        "webhooks": dict(DEFAULT_WEBHOOKS),
        "ping_interval": PING_INTERVAL_DEFAULT,
        "idle_minutes": IDLE_MINUTES_DEFAULT,
    }
    save_config(config, path)
    return config


def ensure_config_exists(path=None):
    """Load the config, creating a default one when missing or unreadable."""
    path = Path(path) if path else get_config_path()
    if not path.exists():
        log.info("Config file not found, creating default at %s", path)
        return create_default_config(path)

    config = load_config(path)
    if config is None:
        log.info("Creating default config")
        return create_default_config(path)
    return config


def validate_config(config):
    """Raise ConfigError unless every required value is present and sane."""
    if not isinstance(config, dict):
        raise ConfigError("Config must be a JSON object")

    if not str(config.get("device_name") or "").strip():
        raise ConfigError("device_name is required")

    webhooks = config.get("webhooks")
    if not isinstance(webhooks, dict):
        raise ConfigError("webhooks must map system/usb/idle to URLs")
    for key in CATEGORY_KEYS:
        if not str(webhooks.get(key) or "").strip():
            raise ConfigError(f"No webhook URL configured for category: {key}")

    for key, default in (("ping_interval", PING_INTERVAL_DEFAULT),
                         ("idle_minutes", IDLE_MINUTES_DEFAULT)):
        value = config.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"{key} must be a positive integer (got {value!r})")

    return config
