"""
Overdue sweep - periodically move active visitors past their visit window to overdue
"""

import asyncio
import logging
import threading
from datetime import datetime
from typing import List, Optional

from vrms.config import settings
from vrms.models.enums import VisitorStatus
from vrms.models.intents import VisitorPatch
from vrms.store.store import DomainStore
from vrms.utils.timeutils import is_visit_overdue

logger = logging.getLogger(__name__)


class OverdueSweeper:
    """Background ticker owned by the store's lifecycle."""

    def __init__(
        self,
        store: DomainStore,
        interval_seconds: float = settings.SWEEP_INTERVAL_SECONDS,
        max_visit_hours: float = settings.MAX_VISIT_DURATION_HOURS,
    ):
        self.store = store
        self.interval_seconds = interval_seconds
        self.max_visit_hours = max_visit_hours
        self._task: Optional[asyncio.Task] = None
        # Timer tick and manual sweeps may run on different threads
        self._sweep_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep(self, now: Optional[datetime] = None) -> List[str]:
        """
        One pass over the current snapshot. Only active visitors are examined,
        so completed visits are never touched. Returns the IDs marked overdue.
        """
        if self.store.closed:
            return []

        marked = []
        with self._sweep_lock:
            for visitor in self.store.snapshot.visitors:
                if visitor.status != VisitorStatus.ACTIVE:
                    continue
                if not is_visit_overdue(
                    visitor.visit_date,
                    visitor.visit_time,
                    max_hours=self.max_visit_hours,
                    now=now,
                ):
                    continue

                self.store.update_visitor(visitor.id, VisitorPatch(status=VisitorStatus.OVERDUE))
                marked.append(visitor.id)

        if marked:
            logger.info(f"OVERDUE_SWEEP | marked={len(marked)} ids={marked}")
        return marked

    def start(self) -> None:
        """Arm the ticker. Must be called from a running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(
            f"OVERDUE_SWEEP_STARTED | interval_sec={self.interval_seconds} "
            f"max_visit_hours={self.max_visit_hours}"
        )

    async def stop(self) -> None:
        """Cancel the ticker and wait for it to finish. Safe to call twice."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("OVERDUE_SWEEP_STOPPED")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.sweep()
            except Exception as e:
                # A bad pass must not kill the ticker; the next one retries
                logger.error(f"OVERDUE_SWEEP_FAILED | err={e}", exc_info=True)
