"""Read decoded values out of a unit connection's property cache.

Values arriving from dbus-python are wrapper types (``dbus.String``,
``dbus.Boolean`` and friends). They never leave this module undecoded.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

Scalar = Union[str, bool]


def decode_value(raw: Any, kind: type = str) -> Optional[Scalar]:
    if raw is None:
        return None
    if kind is bool:
        return bool(raw)
    return str(raw)


def decode_changed(changed: Mapping[Any, Any]) -> dict[str, Any]:
    """Normalise a PropertiesChanged payload so keys are plain strings."""
    return {str(key): value for key, value in dict(changed).items()}


def read_property(connection, name: str, kind: type = str) -> Optional[Scalar]:
    """Return the cached value of ``name`` or None when nothing is cached.

    Never performs bus I/O; only what the handshake and change
    notifications already delivered is visible here.
    """
    return decode_value(connection.cached_property(name), kind)
