"""
Retention sweep: the cleanupOldNotifications scheduled function.

Each run deletes notifications whose ``createdAt`` is older than the
retention window, oldest first, at most ``cleanup_batch_limit`` per run,
in a single batch. Anything over the limit is left for the next run.
A run that finds nothing writes nothing.

The sweep never raises: errors are logged and returned as
``SweepResult(success=False, error=...)`` so the schedule keeps going.
"""

import logging
from datetime import timedelta
from typing import Optional

from functions.models import SweepResult
from runtime.scheduler import ScheduleContext
from shared.clock import Clock, iso_timestamp, utc_now
from shared.collections import NOTIFICATIONS
from shared.config import Settings, get_settings
from shared.document_store import DocumentStore

logger = logging.getLogger("functions.retention")


class RetentionSweep:
    """Deletes expired notifications."""

    def __init__(
        self,
        store: DocumentStore,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.clock = clock or utc_now
        self.settings = settings or get_settings()

    def cleanup_old_notifications(self, context: Optional[ScheduleContext] = None) -> SweepResult:
        logger.info("cleanupOldNotifications scheduled function started")

        try:
            now = self.clock()
            cutoff = now - timedelta(days=self.settings.notification_retention_days)

            expired = (
                self.store.collection(NOTIFICATIONS)
                .where("createdAt", "<", cutoff)
                .limit(self.settings.cleanup_batch_limit)
                .get()
            )

            batch = self.store.batch()
            for snapshot in expired:
                batch.delete(snapshot.ref)

            deleted_count = len(batch)
            if deleted_count > 0:
                batch.commit()
        except Exception as e:
            logger.error(f"Error in cleanupOldNotifications: {e}")
            return SweepResult(success=False, error=str(e))

        logger.info(f"Cleanup completed: deletedCount={deleted_count} timestamp={iso_timestamp(now)}")
        return SweepResult(success=True, deleted_count=deleted_count)
