from __future__ import annotations

from dataclasses import dataclass

SYSTEMD_BUS_NAME = "org.freedesktop.systemd1"
SYSTEMD_PATH = "/org/freedesktop/systemd1"
SYSTEMD_UNIT_PREFIX = "/org/freedesktop/systemd1/unit/"
UNIT_INTERFACE = "org.freedesktop.systemd1.Unit"
MANAGER_INTERFACE = "org.freedesktop.systemd1.Manager"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"

UNIT_FILE_STATE = "UnitFileState"
ACTIVE_STATE = "ActiveState"
ACTIVE_LIKE_STATES = frozenset({"active", "activating"})

ICON_NAME = "folder-download-symbolic"
MENU_LABEL = "System update in progress..."


def escape_path_component(name: str) -> str:
    """Escape a unit name the way systemd does for bus object paths."""
    if not name:
        return "_"
    parts = []
    for index, byte in enumerate(name.encode("utf-8")):
        char = chr(byte)
        if char.isascii() and (char.isalpha() or (char.isdigit() and index > 0)):
            parts.append(char)
        else:
            parts.append(f"_{byte:02x}")
    return "".join(parts)


def unit_object_path(unit_name: str) -> str:
    return SYSTEMD_UNIT_PREFIX + escape_path_component(unit_name)


@dataclass(frozen=True)
class WatcherConfig:
    timer_unit: str = "uupd.timer"
    service_unit: str = "uupd.service"
    tick_interval_ms: int = 80
    opacity_step: int = 8
    opacity_min: int = 100
    opacity_max: int = 255

    def __post_init__(self) -> None:
        if self.tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {self.tick_interval_ms}")
        if self.opacity_step <= 0:
            raise ValueError(f"opacity_step must be positive, got {self.opacity_step}")
        if not 0 <= self.opacity_min < self.opacity_max <= 255:
            raise ValueError(
                f"opacity range must satisfy 0 <= min < max <= 255, "
                f"got {self.opacity_min}..{self.opacity_max}"
            )
        if not self.timer_unit or not self.service_unit:
            raise ValueError("unit names must not be empty")

    @property
    def timer_path(self) -> str:
        return unit_object_path(self.timer_unit)

    @property
    def service_path(self) -> str:
        return unit_object_path(self.service_unit)
