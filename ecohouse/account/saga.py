"""Compensating actions for multi-step operations across independent stores.

Each successful step registers how to undo itself. If a later step fails,
``compensate()`` runs the registered actions newest-first. Compensation is
best-effort: a failing action is logged and the rest still run.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Compensation = Callable[[], Awaitable[object] | object]


class Saga:
    def __init__(self, name: str):
        self.name = name
        self._steps: list[tuple[str, Compensation]] = []

    def __len__(self) -> int:
        return len(self._steps)

    def add_compensation(self, description: str, action: Compensation) -> None:
        self._steps.append((description, action))

    async def compensate(self) -> list[str]:
        """Undo completed steps in reverse order.

        An action that returns ``False`` counts as failed, same as one that
        raises.

        Returns:
            Descriptions of the compensations that failed
        """
        failed: list[str] = []
        while self._steps:
            description, action = self._steps.pop()
            try:
                outcome = action()
                if inspect.isawaitable(outcome):
                    outcome = await outcome
            except Exception:
                logger.exception(
                    "%s: compensation '%s' raised", self.name, description
                )
                failed.append(description)
                continue

            if outcome is False:
                logger.error(
                    "%s: compensation '%s' did not complete", self.name, description
                )
                failed.append(description)
            else:
                logger.warning("%s: compensated '%s'", self.name, description)
        return failed
