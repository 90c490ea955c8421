from datetime import datetime, timedelta, timezone as dt_timezone

from notices.services.options import OptionStore


class FakeClock:
    def __init__(self, start=None):
        self.current = start or datetime(2026, 3, 1, 12, 0, tzinfo=dt_timezone.utc)

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


class RecordingStore(OptionStore):
    """OptionStore that remembers every write."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.writes = []

    def set(self, key, value, ttl=None):
        self.writes.append(("set", key, value, ttl))
        return super().set(key, value, ttl=ttl)

    def add(self, key, value):
        self.writes.append(("add", key, value, None))
        return super().add(key, value)

    def set_user_scoped(self, user_id, key, value):
        self.writes.append(("set_user_scoped", key, value, user_id))
        return super().set_user_scoped(user_id, key, value)
