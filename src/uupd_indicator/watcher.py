"""Ties the timer and service connections to the indicator and its pulse."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .config import MANAGER_INTERFACE, SYSTEMD_BUS_NAME, SYSTEMD_PATH, WatcherConfig
from .decision import HIDDEN, VisibilityDecision, decide
from .indicator import Indicator
from .pulse import PulseAnimator
from .units import UnitConnection, service_connection, timer_connection

_logger = logging.getLogger("uupd_indicator.watcher")


class UpdateWatcher:
    def __init__(
        self,
        bus,
        indicator: Indicator,
        config: WatcherConfig | None = None,
        timeout_add: Optional[Callable] = None,
        source_remove: Optional[Callable] = None,
    ) -> None:
        self.config = config or WatcherConfig()
        self.indicator = indicator
        self._bus = bus
        self.timer = timer_connection(bus, self.config.timer_path)
        self.service = service_connection(bus, self.config.service_path)
        self.animator = PulseAnimator(
            indicator.set_opacity,
            self.config,
            timeout_add=timeout_add,
            source_remove=source_remove,
        )
        self.visible = False
        self._started = False
        self._torn_down = False
        self._manager_subscribed = False

    @property
    def timer_enabled(self) -> bool:
        return self.timer.satisfied

    @property
    def decision(self) -> VisibilityDecision:
        active_state = self.service.last_known_value if self.service.ready else None
        return decide(self.timer_enabled, active_state)

    def start(self) -> None:
        if self._torn_down:
            raise RuntimeError("watcher has been torn down")
        if self._started:
            return
        self._started = True
        _logger.info("initializing D-Bus proxies")
        self.indicator.hide()
        self._subscribe_manager()
        self.timer.connect(self._on_timer_ready, self._on_connection_failed)
        self.service.connect(self._on_service_ready, self._on_connection_failed)

    def teardown(self) -> None:
        if self._torn_down:
            return
        self._torn_down = True
        _logger.info("cleaning up")
        self.animator.stop()
        self.timer.close()
        self.service.close()
        if self._manager_subscribed:
            self._call_manager("Unsubscribe")
            self._manager_subscribed = False

    def evaluate(self) -> VisibilityDecision:
        """Re-derive visibility from both connections and apply it."""
        if self._torn_down:
            return HIDDEN
        decision = self.decision
        if not self.timer_enabled:
            _logger.info("timer is disabled, hiding indicator")
        elif decision.visible:
            _logger.info("service is %s, showing indicator", self.service.last_known_value)
        else:
            _logger.info("service is not active, hiding indicator")
        self._apply(decision)
        return decision

    def _apply(self, decision: VisibilityDecision) -> None:
        if decision.visible and not self.visible:
            self.visible = True
            self.indicator.show()
        elif not decision.visible and self.visible:
            self.visible = False
            self.indicator.hide()
        if decision.animating:
            self.animator.start()
        else:
            self.animator.stop()

    def _on_timer_ready(self, connection: UnitConnection) -> None:
        state = connection.refresh()
        _logger.info("timer state: %s, enabled: %s", state, self.timer_enabled)
        connection.subscribe(self._on_timer_changed)
        self.evaluate()

    def _on_timer_changed(self, connection: UnitConnection) -> None:
        connection.refresh()
        if not self.timer_enabled:
            _logger.info("timer was disabled, hiding indicator immediately")
            self._apply(HIDDEN)
            return
        self.evaluate()

    def _on_service_ready(self, connection: UnitConnection) -> None:
        connection.refresh()
        connection.subscribe(self._on_service_changed)
        _logger.info("monitoring %s state changes", self.config.service_unit)
        self.evaluate()

    def _on_service_changed(self, connection: UnitConnection) -> None:
        self.evaluate()

    def _on_connection_failed(self, connection: UnitConnection, _exc) -> None:
        if self._torn_down:
            return
        _logger.info("%s unavailable, keeping indicator hidden", connection.label)
        self._apply(HIDDEN)

    def _subscribe_manager(self) -> None:
        def _reply(*_args) -> None:
            if self._torn_down:
                return
            self._manager_subscribed = True

        self._call_manager("Subscribe", _reply)

    def _call_manager(self, method: str, reply_handler=None) -> None:
        def _ignore(*_args) -> None:
            pass

        def _error(exc) -> None:
            _logger.debug("systemd manager %s failed: %s", method, exc)

        self._bus.call_async(
            SYSTEMD_BUS_NAME,
            SYSTEMD_PATH,
            MANAGER_INTERFACE,
            method,
            "",
            (),
            reply_handler or _ignore,
            _error,
        )
