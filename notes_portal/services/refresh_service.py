"""
==============================================================================
Refresh Service Module
==============================================================================

Background task that periodically reloads the catalog.

Background Task:
---------------
The RefreshTaskManager runs an asyncio task that, every interval, awaits
the refresh callback (normally ``CatalogManager.load_files(False)``).

The task only runs while the view is visible and online. Both signals
come from the view layer through ``set_visible`` / ``set_online``; the
task is cancelled when either turns false and restarted, with a fresh
interval, once both are true again.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional


# Module logger
logger = logging.getLogger(__name__)


class RefreshTaskManager:
    """
    Manager for the background refresh task.

    Example:
        >>> refresher = RefreshTaskManager(manager.load_files, interval_seconds=300)
        >>> refresher.start()
        >>> refresher.set_visible(False)  # paused
        >>> refresher.set_visible(True)   # resumed
        >>> refresher.stop()
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        interval_seconds: float,
    ) -> None:
        self._callback = callback
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._enabled = False
        self._visible = True
        self._online = True

    async def _refresh_loop(self) -> None:
        """Background refresh loop."""
        logger.info("🔄 Refresh background task started")

        while True:
            try:
                await asyncio.sleep(self._interval)

                if not self.should_run:
                    continue

                logger.debug("Running scheduled catalog refresh...")
                await self._callback()

            except asyncio.CancelledError:
                logger.info("🛑 Refresh task cancelled")
                raise
            except Exception as e:
                logger.error(f"Refresh task error: {e}")

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> Optional[asyncio.Task]:
        """
        Enable periodic refresh and start the task if the view allows it.

        Returns:
            The running asyncio Task, or None while paused
        """
        self._enabled = True
        self._resume()
        return self._task

    def stop(self) -> None:
        """Disable periodic refresh and cancel the task."""
        self._enabled = False
        self._pause()

    async def shutdown(self) -> None:
        """Stop and wait until the cancelled task has finished."""
        task = self._task
        self.stop()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _resume(self) -> None:
        if not self.should_run:
            return
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._refresh_loop())
            logger.info("✅ Refresh task started")

    def _pause(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            logger.info("⏸️ Refresh task paused")
        self._task = None

    # =========================================================================
    # VIEW SIGNALS
    # =========================================================================

    def set_visible(self, visible: bool) -> None:
        """View became visible or hidden."""
        self._visible = visible
        self._apply()

    def set_online(self, online: bool) -> None:
        """Device went online or offline."""
        self._online = online
        self._apply()

    def _apply(self) -> None:
        if self.should_run:
            self._resume()
        else:
            self._pause()

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def should_run(self) -> bool:
        return self._enabled and self._visible and self._online

    @property
    def is_running(self) -> bool:
        """Check if the task is currently scheduled."""
        return self._task is not None and not self._task.done()

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def online(self) -> bool:
        return self._online

    @property
    def interval_seconds(self) -> float:
        return self._interval
