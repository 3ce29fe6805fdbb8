from app.tasks import cleanup, presence


def test_cleanup_read_notifications(monkeypatch):
    calls = []

    async def fake_delete(days):
        calls.append(days)
        return 4

    monkeypatch.setattr(cleanup.repository, "delete_read_older_than", fake_delete)
    assert cleanup.cleanup_read_notifications_task(7) == 4
    assert cleanup.cleanup_read_notifications_task() == 4
    assert calls == [7, cleanup.settings.NOTIFICATION_RETENTION_DAYS]


def test_reset_stale_presence(monkeypatch):
    calls = []

    async def fake_reset(minutes):
        calls.append(minutes)
        return 0

    monkeypatch.setattr(presence.repository, "reset_stale_presence", fake_reset)
    assert presence.reset_stale_presence_task(5) == 0
    assert presence.reset_stale_presence_task() == 0
    assert calls == [5, presence.settings.PRESENCE_STALE_MINUTES]
