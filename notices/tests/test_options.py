from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase

from notices.errors import StorageError
from notices.models import Option
from notices.services.options import OptionStore
from notices.tests.helpers import FakeClock


class OptionStoreTests(TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.store = OptionStore(clock=self.clock)

    def test_set_and_get_plain_option(self):
        self.store.set("site_name", {"label": "Acme"})
        self.assertEqual(self.store.get("site_name"), {"label": "Acme"})
        self.assertIsNone(self.store.get("missing"))
        self.assertEqual(self.store.get("missing", "fallback"), "fallback")

    def test_transient_expires_after_ttl(self):
        self.store.set("flag", True, ttl=60)
        self.clock.advance(seconds=59)
        self.assertTrue(self.store.get("flag"))

        self.clock.advance(seconds=1)
        self.assertIsNone(self.store.get("flag"))
        self.assertFalse(self.store.has("flag"))

    def test_reads_do_not_delete_expired_rows(self):
        self.store.set("flag", True, ttl=60)
        self.clock.advance(seconds=61)
        self.assertIsNone(self.store.get("flag"))
        self.assertTrue(Option.objects.filter(key="flag").exists())

    def test_purge_expired_removes_only_lapsed_transients(self):
        self.store.set("lapsed", True, ttl=60)
        self.store.set("live", True, ttl=600)
        self.store.set("plain", "yes")
        self.clock.advance(seconds=61)

        self.assertEqual(self.store.purge_expired(), 1)
        self.assertEqual(
            sorted(Option.objects.values_list("key", flat=True)),
            ["live", "plain"],
        )

    def test_zero_ttl_never_expires(self):
        self.store.set("forever", "yes", ttl=0)
        self.clock.advance(days=3650)
        self.assertEqual(self.store.get("forever"), "yes")

    def test_set_overwrites_last_write_wins(self):
        self.store.set("k", 1)
        self.store.set("k", 2)
        self.assertEqual(self.store.get("k"), 2)
        self.assertEqual(Option.objects.filter(key="k").count(), 1)

    def test_add_only_writes_when_absent(self):
        self.assertTrue(self.store.add("install", "first"))
        self.assertFalse(self.store.add("install", "second"))
        self.assertEqual(self.store.get("install"), "first")

    def test_add_replaces_expired_transient(self):
        self.store.set("snooze", "old", ttl=10)
        self.clock.advance(seconds=11)
        self.assertTrue(self.store.add("snooze", "new"))
        self.assertEqual(self.store.get("snooze"), "new")
        self.clock.advance(days=365)
        self.assertEqual(self.store.get("snooze"), "new")

    def test_user_scoped_values_are_isolated(self):
        User = get_user_model()
        a = User.objects.create_user(username="opt_a", password="pw")
        b = User.objects.create_user(username="opt_b", password="pw")

        self.store.set_user_scoped(a.id, "notice-x", True)

        self.assertTrue(self.store.get_user_scoped(a.id, "notice-x"))
        self.assertIsNone(self.store.get_user_scoped(b.id, "notice-x"))
        self.assertIsNone(self.store.get("notice-x"))

    def test_write_failure_raises_storage_error(self):
        with patch("notices.services.options.Option.objects.update_or_create", side_effect=DatabaseError("locked")):
            with self.assertRaises(StorageError):
                self.store.set("k", 1)

    def test_user_scoped_write_without_user_raises(self):
        with self.assertRaises(StorageError):
            self.store.set_user_scoped(None, "k", True)
