from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional

from ..config import (
    ACTIVE_LIKE_STATES,
    ACTIVE_STATE,
    PROPERTIES_INTERFACE,
    SYSTEMD_BUS_NAME,
    UNIT_FILE_STATE,
    UNIT_INTERFACE,
)
from .properties import decode_changed, read_property

_logger = logging.getLogger("uupd_indicator.units")


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


class UnitConnection:
    """One systemd unit watched over the bus through a single property.

    ``predicate`` interprets the decoded property value; the connection is
    satisfied only while it is ready and the predicate holds.
    """

    def __init__(
        self,
        bus,
        label: str,
        object_path: str,
        property_name: str,
        predicate: Callable[[Optional[str]], bool],
        bus_name: str = SYSTEMD_BUS_NAME,
        interface_name: str = UNIT_INTERFACE,
    ) -> None:
        self.label = label
        self.bus_name = bus_name
        self.object_path = object_path
        self.interface_name = interface_name
        self.property_name = property_name
        self._bus = bus
        self._predicate = predicate
        self._cache: dict[str, Any] = {}
        self._match = None
        self._on_change: Callable[[UnitConnection], None] | None = None
        self.state = ConnectionState.CONNECTING

    @property
    def ready(self) -> bool:
        return self.state is ConnectionState.READY

    @property
    def last_known_value(self) -> Optional[str]:
        return read_property(self, self.property_name)

    @property
    def satisfied(self) -> bool:
        return self.ready and self._predicate(self.last_known_value)

    def cached_property(self, name: str) -> Any:
        return self._cache.get(name)

    def connect(
        self,
        on_ready: Callable[[UnitConnection], None],
        on_failed: Callable[[UnitConnection, Exception], None],
    ) -> None:
        """Register for change signals, then fetch the unit's properties.

        The match goes in before ``GetAll`` so a change systemd sends right
        behind its answer is still delivered. Signals dispatched while
        connecting are older than the answer and are dropped. Exactly one
        of ``on_ready``/``on_failed`` runs later on the main loop, unless
        the connection was closed first.
        """
        _logger.info("connecting to %s unit at %s", self.label, self.object_path)
        self._match = self._bus.add_signal_receiver(
            self._on_properties_changed,
            signal_name="PropertiesChanged",
            dbus_interface=PROPERTIES_INTERFACE,
            bus_name=self.bus_name,
            path=self.object_path,
            arg0=self.interface_name,
        )

        def _reply(properties) -> None:
            if self.state is not ConnectionState.CONNECTING:
                return
            self._cache = decode_changed(properties)
            self.state = ConnectionState.READY
            _logger.info("%s proxy initialized successfully", self.label)
            on_ready(self)

        def _error(exc) -> None:
            if self.state is not ConnectionState.CONNECTING:
                return
            self.state = ConnectionState.FAILED
            self._release_match()
            _logger.error("failed to initialize %s proxy: %s", self.label, exc)
            on_failed(self, exc)

        self._bus.call_async(
            self.bus_name,
            self.object_path,
            PROPERTIES_INTERFACE,
            "GetAll",
            "s",
            (self.interface_name,),
            _reply,
            _error,
        )

    def refresh(self) -> Optional[str]:
        value = self.last_known_value
        if value is None:
            _logger.info("%s property not available on %s unit", self.property_name, self.label)
        return value

    def subscribe(self, on_change: Callable[[UnitConnection], None]) -> None:
        if not self.ready or self._on_change is not None:
            return
        self._on_change = on_change

    @property
    def subscribed(self) -> bool:
        return self._on_change is not None

    def close(self) -> None:
        self._release_match()
        self._on_change = None
        self._cache.clear()
        self.state = ConnectionState.CLOSED

    def _release_match(self) -> None:
        if self._match is not None:
            self._match.remove()
            self._match = None

    def _on_properties_changed(self, interface, changed, invalidated, **_kwargs) -> None:
        if not self.ready or str(interface) != self.interface_name:
            return
        changed = decode_changed(changed)
        invalidated = {str(name) for name in invalidated or ()}
        self._cache.update(changed)
        for name in invalidated:
            self._cache.pop(name, None)
        if self.property_name not in changed and self.property_name not in invalidated:
            _logger.debug("ignoring %s change without %s", self.label, self.property_name)
            return
        _logger.info("%s changed: %s", self.property_name, self.last_known_value)
        if self._on_change is not None:
            self._on_change(self)


def timer_connection(bus, object_path: str) -> UnitConnection:
    return UnitConnection(
        bus,
        "timer",
        object_path,
        UNIT_FILE_STATE,
        lambda value: value == "enabled",
    )


def service_connection(bus, object_path: str) -> UnitConnection:
    return UnitConnection(
        bus,
        "service",
        object_path,
        ACTIVE_STATE,
        lambda value: value in ACTIVE_LIKE_STATES,
    )
