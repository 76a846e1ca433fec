"""Single-slot hand-off of insight units from trend analysis to ad copy generation.

The router holds at most one pending :class:`InsightUnit`. ``forward`` always
overwrites the slot (last write wins, there is no queue) and notifies the
registered activation listeners; ``consume_pending`` hands the unit out once
and clears the slot.

The slot is not guarded against overlapping hand-offs from concurrent flows;
the UI drives one hand-off at a time.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional

import structlog

from marketing_toolkit.models.blocks import InsightUnit

logger = structlog.get_logger(__name__)

ActivationListener = Callable[[InsightUnit], None]


class RouterState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class ContentRouter:
    """Hands one insight unit at a time to the generation flow."""

    def __init__(self) -> None:
        self._pending: Optional[InsightUnit] = None
        self._listeners: List[ActivationListener] = []

    @property
    def state(self) -> RouterState:
        return RouterState.PENDING if self._pending is not None else RouterState.IDLE

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def register_listener(self, listener: ActivationListener) -> None:
        """Register a callback that activates the generation flow on ``forward``."""
        self._listeners.append(listener)

    def forward(self, unit: InsightUnit) -> None:
        """Store ``unit`` as the pending hand-off, replacing any unconsumed one."""
        if self._pending is not None:
            logger.info(
                "Replacing unconsumed hand-off",
                replaced_index=self._pending.index,
                index=unit.index,
            )
        self._pending = unit
        logger.info("Insight forwarded to generation flow", index=unit.index, kind=unit.kind.value)
        for listener in list(self._listeners):
            try:
                listener(unit)
            except Exception as e:
                logger.error(
                    "Generation flow activation failed",
                    listener=getattr(listener, "__name__", repr(listener)),
                    error=str(e),
                )
                raise

    def consume_pending(self) -> Optional[InsightUnit]:
        """Return the pending unit exactly once; ``None`` when idle."""
        unit, self._pending = self._pending, None
        if unit is not None:
            logger.debug("Hand-off consumed", index=unit.index)
        return unit

    def reset(self) -> None:
        """Drop any pending unit without consuming it."""
        self._pending = None


__all__ = ["RouterState", "ContentRouter", "ActivationListener"]
