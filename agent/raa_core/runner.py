"""
Entry point: CLI sub-commands, agent startup and auto-restart wrapper.
"""

import sys
import time
import signal
import argparse

from .constants import (
    AGENT_NAME, AGENT_VERSION, SERVICE_NAME, SERVICE_DISPLAY_NAME, SERVICE_DESCRIPTION,
)
from .config import (
    log, safe_print, setup_logging, ensure_config_exists, create_default_config,
    validate_config, get_config_path,
)
from .errors import ConfigError, ServiceError
from .service import get_service
from .app import AgentApp


def build_parser():
    parser = argparse.ArgumentParser(
        prog="raa",
        description=f"{AGENT_NAME} — boot, heartbeat, USB and idle notifications to webhooks",
    )
    parser.add_argument("--version", action="version", version=f"{AGENT_NAME} v{AGENT_VERSION}")
    parser.add_argument("--config", help="Path to config.json")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "command",
        nargs="?",
        default="run",
        choices=["run", "install", "uninstall", "start", "stop", "status", "init-config"],
    )
    return parser


def _install_signal_handlers(app):
    def handler(signum, frame):
        log.info("Received signal %d — shutting down", signum)
        app.stop()

    for name in ("SIGINT", "SIGTERM"):
        sig = getattr(signal, name, None)
        if sig is not None:
            try:
                signal.signal(sig, handler)
            except ValueError:
                # Not on the main thread
                pass


def run_agent(config_path=None):
    """Load config, start every trigger, block until a stop signal."""
    safe_print(f"{AGENT_NAME} v{AGENT_VERSION}")
    safe_print()

    config = validate_config(ensure_config_exists(config_path))
    log.info("Loaded config for device %s", config["device_name"])

    app = AgentApp(config)
    _install_signal_handlers(app)
    app.run()


def run_with_auto_restart(config_path=None):
    """
    Wrapper that auto-restarts on crash. Never gives up.
    Crash counter resets if the agent ran for 2+ minutes (not a boot-loop).
    Config errors are not retried.
    """
    crash_count = 0
    crash_window = 120
    max_rapid_crashes = 10

    while True:
        start_time = time.time()
        try:
            run_agent(config_path)
            return 0
        except KeyboardInterrupt:
            safe_print("\nAgent stopped by user.")
            return 0
        except ConfigError as e:
            log.error("Invalid config (%s): %s", config_path or get_config_path(), e)
            return 2
        except Exception as e:
            elapsed = time.time() - start_time
            log.error("Agent crashed after %.0fs: %s", elapsed, e, exc_info=True)

            if elapsed > crash_window:
                crash_count = 0
            crash_count += 1

            if crash_count >= max_rapid_crashes:
                wait = 120
                log.warning("Many rapid crashes (%d). Waiting %ds...", crash_count, wait)
            else:
                wait = min(10 * crash_count, 60)

            log.info("Restarting in %ds (crash %d)...", wait, crash_count)
            time.sleep(wait)


def _service_command(command):
    service = get_service(SERVICE_NAME, SERVICE_DISPLAY_NAME, SERVICE_DESCRIPTION)
    if command == "install":
        service.install()
        safe_print(f"{SERVICE_DISPLAY_NAME} installed.")
    elif command == "uninstall":
        service.uninstall()
        safe_print(f"{SERVICE_DISPLAY_NAME} uninstalled.")
    elif command == "start":
        service.start()
        safe_print(f"{SERVICE_DISPLAY_NAME} started.")
    elif command == "stop":
        service.stop()
        safe_print(f"{SERVICE_DISPLAY_NAME} stopped.")
    elif command == "status":
        installed = service.is_installed()
        running = installed and service.is_running()
        safe_print(f"Installed: {'yes' if installed else 'no'}")
        safe_print(f"Running:   {'yes' if running else 'no'}")
    return 0


def main(argv=None):
    """Primary agent entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    if args.command == "run":
        return run_with_auto_restart(args.config)

    if args.command == "init-config":
        create_default_config(args.config)
        safe_print(f"Default config written to {args.config or get_config_path()}")
        return 0

    try:
        return _service_command(args.command)
    except ServiceError as e:
        log.error("Service %s failed: %s", args.command, e)
        safe_print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
