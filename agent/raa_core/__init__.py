"""
raa_core — Remote Activity Agent
================================
Architecture: independent daemon threads, one shared webhook dispatcher.

  constants.py    → Version, thresholds, webhook colors, mount roots
  errors.py       → Exception taxonomy (dispatch, watcher, config, service)
  config.py       → Paths, logging, config load/save/validate
  http_client.py  → HTTP session with pooling + certifi CA bundle, no retries
  state.py        → ActivityClock, IdleState, RunFlag
  dispatcher.py   → Dispatcher (category → webhook, payload build, POST)
  sysinfo.py      → System snapshot fields (psutil + platform)
  boot.py         → One-shot "System Started" notification
  heartbeat.py    → HeartbeatScheduler (every N minutes on the clock)
  hotplug.py      → HotplugWatcher + per-OS volume sources (watchdog / psutil)
  idle.py         → IdleMonitor (edge-triggered Active/Idle state machine)
  listeners.py    → InputListeners (pynput → IdleMonitor.update_activity)
  service/        → launchd / systemd / Task Scheduler shims
  app.py          → AgentApp (starts and stops every trigger)
  runner.py       → main() CLI + auto-restart wrapper
"""
