"""
Tests for cleanupOldNotifications.
"""

from datetime import timedelta


def seed(store, count: int, created_at, prefix: str) -> None:
    for i in range(count):
        store.set(
            f"notifications/{prefix}-{i:05d}",
            {"userId": "u1", "type": "welcome", "message": "hi", "read": False, "createdAt": created_at},
        )


class TestCleanupOldNotifications:
    """Tests for the retention sweep."""

    def test_deletes_only_expired(self, functions, store, fixed_now):
        seed(store, 3, fixed_now - timedelta(days=31), "old")
        seed(store, 2, fixed_now - timedelta(days=29), "new")

        result = functions.retention.cleanup_old_notifications()

        assert result.success is True
        assert result.deleted_count == 3
        assert [s.id for s in store.list_documents("notifications")] == ["new-00000", "new-00001"]

    def test_limit_per_run(self, functions, store, fixed_now):
        seed(store, 1500, fixed_now - timedelta(days=40), "old")
        seed(store, 10, fixed_now - timedelta(days=1), "new")

        first = functions.retention.cleanup_old_notifications()
        second = functions.retention.cleanup_old_notifications()
        third = functions.retention.cleanup_old_notifications()

        assert first.deleted_count == 1000
        assert second.deleted_count == 500
        assert third.deleted_count == 0
        assert store.count("notifications") == 10

    def test_oldest_first(self, functions, store, settings, fixed_now):
        settings.cleanup_batch_limit = 1
        seed(store, 1, fixed_now - timedelta(days=35), "b")
        seed(store, 1, fixed_now - timedelta(days=60), "a")

        functions.retention.cleanup_old_notifications()

        assert [s.id for s in store.list_documents("notifications")] == ["b-00000"]

    def test_nothing_to_delete_writes_nothing(self, functions, store):
        store.fail_next("commit")

        result = functions.retention.cleanup_old_notifications()

        assert result.success is True
        assert result.deleted_count == 0

    def test_commit_failure_is_reported(self, functions, store, fixed_now):
        seed(store, 2, fixed_now - timedelta(days=31), "old")
        store.fail_next("commit")

        result = functions.retention.cleanup_old_notifications()

        assert result.success is False
        assert result.deleted_count is None
        assert store.count("notifications") == 2

    def test_runs_on_schedule(self, functions, store, clock, fixed_now):
        seed(store, 1, fixed_now - timedelta(days=45), "old")

        clock.advance(days=1)
        results = functions.scheduler.run_pending()

        assert results["cleanupOldNotifications"].deleted_count == 1

    def test_to_result(self, functions):
        assert functions.retention.cleanup_old_notifications().to_result() == {
            "success": True,
            "deletedCount": 0,
        }
