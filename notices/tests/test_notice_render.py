from dataclasses import FrozenInstanceError

from django.contrib.auth import get_user_model
from django.test import TestCase

from notices.services.notice import Button, NoticeBuilder, render_notice
from notices.services.options import OptionStore
from notices.services.visibility import DismissScope, RenderContext, VisibilityGate, dismissal_key
from notices.tests.helpers import FakeClock


class NoticeBuilderTests(TestCase):
    def test_builder_defaults(self):
        notice = NoticeBuilder("acme", "welcome").build()
        self.assertEqual(notice.notice_id, "acme-welcome")
        self.assertEqual(notice.dismiss_scope, DismissScope.NONE)
        self.assertEqual(notice.expiry_seconds, 1)
        self.assertFalse(notice.is_dismissible)

    def test_setters_chain_and_append(self):
        notice = (
            NoticeBuilder("acme", "promo")
            .set_title("Big ")
            .set_title("sale")
            .set_message("one")
            .set_message(" two")
            .set_type("warning")
            .set_gutter(False)
            .set_button(label="First")
            .set_button(label="Second", url="https://example.com", css_class="button-primary")
            .set_dismiss()
            .build()
        )
        self.assertEqual(notice.title, "Big sale")
        self.assertEqual(notice.message, "one two")
        self.assertEqual(notice.css_class, "notice-warning no-gutter")
        self.assertEqual([b.label for b in notice.buttons], ["First", "Second"])
        self.assertEqual(notice.buttons[0], Button(label="First"))
        self.assertEqual(notice.dismiss_scope, DismissScope.GLOBAL)
        self.assertEqual(notice.expiry_seconds, 604800)

    def test_built_descriptor_is_immutable(self):
        builder = NoticeBuilder("acme", "frozen").set_title("A")
        notice = builder.build()
        builder.set_title("B")
        self.assertEqual(notice.title, "A")
        with self.assertRaises(FrozenInstanceError):
            notice.title = "C"

    def test_domain_is_required(self):
        with self.assertRaises(ValueError):
            NoticeBuilder("")

    def test_generated_ids_are_unique(self):
        self.assertNotEqual(NoticeBuilder("acme").notice_id, NoticeBuilder("acme").notice_id)


class RenderNoticeTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.user = User.objects.create_user(username="render_user", password="pw")
        self.store = OptionStore(clock=FakeClock())
        self.gate = VisibilityGate(self.store)

    def _ctx(self):
        return RenderContext(user_id=self.user.id, screen_id="dashboard")

    def test_renders_title_message_and_buttons_in_order(self):
        notice = (
            NoticeBuilder("acme", "welcome")
            .set_title("Welcome")
            .set_message("Read <b>this</b>")
            .set_button(label="Alpha", url="https://example.com/a", id="btn-a")
            .set_button(label="Beta", url="https://example.com/b", icon="dashicons-smiley")
            .build()
        )
        html = render_notice(notice, self.gate, self._ctx())

        self.assertIn('id="acme-welcome"', html)
        self.assertIn("Welcome", html)
        self.assertIn("Read <b>this</b>", html)
        self.assertLess(html.index("Alpha"), html.index("Beta"))
        self.assertIn('id="btn-a"', html)
        self.assertIn("notice-icon dashicons-smiley", html)
        self.assertNotIn("notice-dismiss", html)

    def test_raw_html_wins_over_title_and_message(self):
        notice = (
            NoticeBuilder("acme", "raw")
            .set_title("Hidden title")
            .set_message("Hidden message")
            .set_html("<p>Custom</p>")
            .build()
        )
        html = render_notice(notice, self.gate, self._ctx())
        self.assertIn("<p>Custom</p>", html)
        self.assertNotIn("Hidden title", html)
        self.assertNotIn("Hidden message", html)

    def test_dynamic_text_is_escaped_per_context(self):
        notice = (
            NoticeBuilder("acme", "xss")
            .set_title('<img src=x onerror="alert(1)">')
            .set_message("<script>alert(2)</script>ok")
            .set_button(label="<b>Go</b>", url="javascript:alert(3)", css_class='x" onclick="y')
            .set_logo("javascript:alert(4)")
            .build()
        )
        html = render_notice(notice, self.gate, self._ctx())

        self.assertIn("&lt;img src=x onerror=&quot;alert(1)&quot;&gt;", html)
        self.assertNotIn("<script>", html)
        self.assertIn("&lt;b&gt;Go&lt;/b&gt;", html)
        self.assertNotIn("javascript:", html)
        self.assertNotIn('onclick="y', html)
        self.assertNotIn("notice-logo", html)

    def test_dismiss_control_carries_scope_and_ttl(self):
        notice = NoticeBuilder("acme", "dismissible").set_message("m").set_dismiss("user", 120).build()
        html = render_notice(notice, self.gate, self._ctx())
        self.assertIn("is-dismissible", html)
        self.assertIn('data-dismiss-scope="user"', html)
        self.assertIn('data-expired-time="120"', html)
        self.assertIn('class="notice-dismiss"', html)

    def test_same_notice_renders_once_per_request(self):
        notice = NoticeBuilder("acme", "once").set_message("m").build()
        ctx = self._ctx()
        self.assertTrue(render_notice(notice, self.gate, ctx))
        self.assertEqual(render_notice(notice, self.gate, ctx), "")
        self.assertTrue(render_notice(notice, self.gate, self._ctx()))

    def test_hidden_notice_renders_nothing(self):
        notice = NoticeBuilder("acme", "gone").set_message("m").set_dismiss("global", 60).build()
        self.store.set(dismissal_key("acme-gone"), True, ttl=60)
        self.assertEqual(render_notice(notice, self.gate, self._ctx()), "")
