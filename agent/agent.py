"""
Remote Activity Agent — Desktop Agent
=====================================
Reports machine events to Discord-style webhooks, one webhook per category:
  system → "System Started" at launch and a periodic "Heartbeat"
  usb    → removable media connected / disconnected
  idle   → user went idle / came back

PRIVACY: input listeners only record THAT input happened. No keys, no
positions, no screen content.

Usage:
    python agent.py [run|install|uninstall|start|stop|status|init-config]
"""

import sys

from raa_core.runner import main

if __name__ == "__main__":
    sys.exit(main())
