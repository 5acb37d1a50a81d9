"""Triangle-wave opacity pulse for the indicator icon."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .config import WatcherConfig

try:
    from gi.repository import GLib
except ImportError:
    GLib = None

_logger = logging.getLogger("uupd_indicator.pulse")


@dataclass
class PulseState:
    opacity: int
    direction: int = 1

    def step(self, amount: int, lower: int, upper: int) -> int:
        self.opacity += self.direction * amount
        if self.opacity <= lower:
            self.direction = 1
            self.opacity = lower
        elif self.opacity >= upper:
            self.direction = -1
            self.opacity = upper
        return self.opacity


class PulseAnimator:
    """Emits one opacity value per tick until stopped.

    ``timeout_add``/``source_remove`` default to GLib's; the source is
    removed synchronously in ``stop`` so no tick can follow it.
    """

    def __init__(
        self,
        emit: Callable[[int, int], None],
        config: WatcherConfig | None = None,
        timeout_add: Optional[Callable] = None,
        source_remove: Optional[Callable] = None,
    ) -> None:
        self._config = config or WatcherConfig()
        self._emit = emit
        if timeout_add is None or source_remove is None:
            if GLib is None:
                raise RuntimeError("PyGObject is required for the default pulse scheduler")
            timeout_add = timeout_add or GLib.timeout_add
            source_remove = source_remove or GLib.source_remove
        self._timeout_add = timeout_add
        self._source_remove = source_remove
        self._source_id = None
        self.state = PulseState(opacity=self._config.opacity_max)

    @property
    def running(self) -> bool:
        return self._source_id is not None

    @property
    def opacity(self) -> int:
        return self.state.opacity

    def start(self) -> None:
        if self._source_id is not None:
            return
        _logger.info("starting icon pulsing animation")
        self.state = PulseState(opacity=self._config.opacity_max, direction=1)
        self._source_id = self._timeout_add(self._config.tick_interval_ms, self._tick)

    def stop(self) -> None:
        if self._source_id is None:
            return
        self._source_remove(self._source_id)
        self._source_id = None
        self.state = PulseState(opacity=self._config.opacity_max)
        _logger.info("stopped icon pulsing animation")
        self._emit(self._config.opacity_max, 0)

    def _tick(self) -> bool:
        if self._source_id is None:
            return False
        cfg = self._config
        opacity = self.state.step(cfg.opacity_step, cfg.opacity_min, cfg.opacity_max)
        _logger.debug("pulse opacity %d", opacity)
        self._emit(opacity, cfg.tick_interval_ms)
        return True
