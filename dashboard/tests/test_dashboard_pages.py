from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from notices.services.options import OptionStore
from notices.services.tokens import DISMISS_ACTION, RATING_ACTION, ActionTokens


class DashboardPagesTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.alice = User.objects.create_user(username="dash_alice", password="pw", is_staff=True)
        self.bob = User.objects.create_user(username="dash_bob", password="pw", is_staff=True)
        self.client.force_login(self.alice)

    def test_dashboard_shows_welcome_notice(self):
        resp = self.client.get(reverse("dashboard:home"))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Welcome to Noticeboard")
        self.assertContains(resp, "notices/notices.js")

    def test_user_dismissal_is_per_user(self):
        token = ActionTokens().issue(DISMISS_ACTION, self.alice.id)
        resp = self.client.post(
            reverse("notices:dismiss_notice"),
            {"token": token, "notice_id": "noticeboard-welcome", "dismissible": "user"},
        )
        self.assertEqual(resp.json(), {"success": True})

        resp = self.client.get(reverse("dashboard:home"))
        self.assertNotContains(resp, "Welcome to Noticeboard")

        self.client.force_login(self.bob)
        resp = self.client.get(reverse("dashboard:home"))
        self.assertContains(resp, "Welcome to Noticeboard")

    def test_stories_widget_uses_cached_feed(self):
        store = OptionStore()
        store.set(
            "noticeboard__stories_data",
            [{"id": "s1", "title": "Spring release", "priority": 1, "plugins": ["noticeboard"]}],
        )
        store.set("noticeboard__stories_last_check", int(timezone.now().timestamp()))

        resp = self.client.get(reverse("dashboard:home"))
        self.assertContains(resp, "Noticeboard Stories")
        self.assertContains(resp, "Spring release")

        resp = self.client.get(reverse("dashboard:plugins"))
        self.assertNotContains(resp, "Noticeboard Stories")

    def test_rating_prompt_after_first_appear_delay(self):
        store = OptionStore()
        store.set("noticeboard_rating_settings", "yes", ttl=3600)
        store.set("noticeboard_install_date", (timezone.now() - timedelta(days=8)).isoformat())

        resp = self.client.get(reverse("dashboard:plugins"))
        self.assertContains(resp, "Ok, you deserved it")

        token = ActionTokens().issue(RATING_ACTION, self.alice.id)
        self.client.post(reverse("notices:rating_never_show"), {"token": token, "plugin_name": "noticeboard"})

        resp = self.client.get(reverse("dashboard:plugins"))
        self.assertNotContains(resp, "Ok, you deserved it")

    def test_plugins_page_lists_active_plugins(self):
        OptionStore().set("active_plugins", ["forms/forms.py"])
        resp = self.client.get(reverse("dashboard:plugins"))
        self.assertContains(resp, "<li>forms</li>", html=True)

    def test_plugins_page_survives_malformed_active_plugins(self):
        OptionStore().set("active_plugins", True)
        resp = self.client.get(reverse("dashboard:plugins"))
        self.assertEqual(resp.status_code, 200)

    def test_non_staff_is_sent_to_login(self):
        User = get_user_model()
        plain = User.objects.create_user(username="dash_plain", password="pw")
        self.client.force_login(plain)
        resp = self.client.get(reverse("dashboard:home"))
        self.assertEqual(resp.status_code, 302)
