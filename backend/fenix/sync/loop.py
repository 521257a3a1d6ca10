from __future__ import annotations

import asyncio
import contextlib
import logging

from fenix.core.config import settings
from fenix.sync.backend import LedgerBackend
from fenix.sync.engine import LedgerSync
from fenix.sync.local_store import LocalStore

logger = logging.getLogger(__name__)


class SyncLoop:
    """
    Periodic refresh of a LedgerSync session.

    The first cycle runs at start with the loading flag shown; the following ones are
    silent and spaced by `interval` seconds. Stopping cancels the timer and closes the
    session, so a cycle still in flight cannot publish into it afterwards.
    """

    def __init__(self, engine: LedgerSync, *, interval: float | None = None) -> None:
        self.engine = engine
        self.interval = interval if interval is not None else settings.sync_interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="fenix-sync-loop")

    async def _run(self) -> None:
        silent = False
        while True:
            try:
                await self.engine.sync_once(silent=silent)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Sync cycle crashed; retrying on the next tick")
            silent = True
            await asyncio.sleep(self.interval)

    async def refresh(self, *, silent: bool = False) -> bool:
        """Out-of-band cycle. An explicit refresh shows the loading state; pass silent=True on focus regain."""
        return await self.engine.sync_once(silent=silent)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self.engine.aclose()

    async def __aenter__(self) -> "SyncLoop":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()


def create_sync_loop(base_url: str | None = None, *, store_path: str | None = None) -> SyncLoop:
    backend = LedgerBackend(base_url or settings.api_base_url)
    store = LocalStore(store_path or settings.local_store_path)
    return SyncLoop(LedgerSync(backend, store))
