from __future__ import annotations

import logging
from typing import Protocol

from .config import ICON_NAME, MENU_LABEL


class Indicator(Protocol):
    def show(self) -> None: ...

    def hide(self) -> None: ...

    def set_opacity(self, value: int, duration_ms: int) -> None: ...


class LoggingIndicator:
    """Indicator that records its state and reports it through logging.

    Used when the watcher runs outside a desktop shell; the journal then
    carries the show/hide transitions.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("uupd_indicator.indicator")
        self.icon_name = ICON_NAME
        self.label = MENU_LABEL
        self.visible = False
        self.opacity = 255

    def show(self) -> None:
        self.visible = True
        self._logger.info("indicator shown: %s", self.label)

    def hide(self) -> None:
        self.visible = False
        self._logger.info("indicator hidden")

    def set_opacity(self, value: int, duration_ms: int) -> None:
        if not 0 <= value <= 255:
            raise ValueError(f"opacity out of range: {value}")
        self.opacity = value
        self._logger.debug("indicator opacity %d over %dms", value, duration_ms)
