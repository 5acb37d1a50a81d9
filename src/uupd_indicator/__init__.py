"""Status indicator for uupd update runs, driven by systemd unit state over D-Bus."""

__version__ = "0.1.0"
