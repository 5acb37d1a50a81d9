from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import ACTIVE_LIKE_STATES


@dataclass(frozen=True)
class VisibilityDecision:
    visible: bool
    animating: bool

    def __post_init__(self) -> None:
        if self.animating and not self.visible:
            raise ValueError("a hidden indicator cannot animate")


HIDDEN = VisibilityDecision(visible=False, animating=False)
PULSING = VisibilityDecision(visible=True, animating=True)


def decide(timer_enabled: bool, active_state: Optional[str]) -> VisibilityDecision:
    """Combine the timer and service state into what the indicator shows."""
    if not timer_enabled:
        return HIDDEN
    if active_state in ACTIVE_LIKE_STATES:
        return PULSING
    return HIDDEN
