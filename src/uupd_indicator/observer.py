"""Standalone host for the update watcher that logs to journald via stdout."""

from __future__ import annotations

import logging
import signal
import sys

from .config import WatcherConfig
from .indicator import LoggingIndicator
from .watcher import UpdateWatcher

try:
    import dbus
    import dbus.mainloop.glib
    from gi.repository import GLib
except ImportError:
    dbus = None
    GLib = None


_logger = logging.getLogger("uupd_indicator")
_main_loop = None
_watcher: UpdateWatcher | None = None


def _setup_logging(level: int = logging.INFO, stream=None) -> None:
    """Log to stdout by default so systemd can forward messages to journald."""
    if _logger.handlers:
        return
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    _logger.setLevel(level)
    _logger.addHandler(handler)
    _logger.propagate = False


def _handle_signal(signum, _frame) -> None:
    _logger.info("uupd-indicator received signal %s; shutting down", signal.Signals(signum).name)
    if _main_loop is not None and _main_loop.is_running():
        _main_loop.quit()


def _connect_dbus():
    if dbus is None or GLib is None:
        _logger.error("D-Bus support unavailable; install dbus-python and pygobject")
        return None
    dbus.mainloop.glib.DBusGMainLoop(set_as_default=True)
    try:
        return dbus.SystemBus()
    except Exception as exc:
        _logger.error("Failed to connect to system D-Bus: %s", exc)
        return None


def enable(bus, indicator=None, config: WatcherConfig | None = None, **watcher_options) -> UpdateWatcher:
    global _watcher
    _logger.info("extension enabled")
    _watcher = UpdateWatcher(bus, indicator or LoggingIndicator(), config, **watcher_options)
    _watcher.start()
    return _watcher


def disable() -> None:
    global _watcher
    _logger.info("extension disabled")
    if _watcher is not None:
        _watcher.teardown()
        _watcher = None


def main() -> int:
    global _main_loop
    _setup_logging()
    signal.signal(signal.SIGTERM, _handle_signal)
    signal.signal(signal.SIGINT, _handle_signal)

    _logger.info("uupd-indicator starting up")
    bus = _connect_dbus()
    if bus is None:
        return 1
    _main_loop = GLib.MainLoop()
    enable(bus)
    try:
        _main_loop.run()
    finally:
        disable()
    _logger.info("uupd-indicator shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
