"""Backoff and exact-action replay after HTTP 429."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from private_server_finder.domain.models import PageAction, PageScanOutcome

logger = logging.getLogger(__name__)

DEFAULT_RATE_LIMIT_DELAY_SECONDS = 5.0

ReplayCallable = Callable[["PageAction"], Awaitable["PageScanOutcome"]]


class RateLimitCoordinator:
    """Schedules the replay of a rate-limited page scan.

    The replay re-runs the identical action that failed, never a derived
    one, so a failed "next" is retried as "next". At most one retry is
    outstanding at any time.
    """

    def __init__(
        self,
        delay_seconds: float = DEFAULT_RATE_LIMIT_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the coordinator.

        Args:
            delay_seconds: Fixed delay before the replay.
            sleep: Awaitable sleep used for the delay.
        """
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._task: asyncio.Task[PageScanOutcome] | None = None
        self._pending_action: PageAction | None = None

    @property
    def has_pending_retry(self) -> bool:
        """Whether a replay is waiting for its delay to elapse."""
        return self._pending_action is not None

    @property
    def pending_action(self) -> PageAction | None:
        """The action that will be replayed, if any."""
        return self._pending_action

    def schedule_retry(
        self, action: PageAction, replay: ReplayCallable
    ) -> asyncio.Task[PageScanOutcome]:
        """Replay an action after the fixed delay.

        Args:
            action: The action captured before the rate-limited request.
            replay: Coroutine function that performs the scan.

        Returns:
            The task running the delayed replay.
        """
        if self._task is not None and self.has_pending_retry:
            logger.warning(
                f"Retry for {self._pending_action} already scheduled, ignoring {action}"
            )
            return self._task

        logger.info(f"Rate limited, replaying {action.value} in {self.delay_seconds:g}s")
        self._pending_action = action
        self._task = asyncio.create_task(self._replay_after_delay(action, replay))
        return self._task

    async def _replay_after_delay(
        self, action: PageAction, replay: ReplayCallable
    ) -> PageScanOutcome:
        try:
            await self._sleep(self.delay_seconds)
        finally:
            self._pending_action = None
        logger.debug(f"Replaying {action.value} after rate limit")
        return await replay(action)

    async def wait_for_retry(self) -> PageScanOutcome | None:
        """Wait for the most recently scheduled replay to finish.

        Returns:
            The replayed scan's outcome, or None if nothing was scheduled.
        """
        task = self._task
        if task is None:
            return None
        return await task

    async def cancel(self) -> None:
        """Cancel an outstanding replay."""
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Pending rate-limit retry cancelled")
        self._pending_action = None
