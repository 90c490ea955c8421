from django.test import SimpleTestCase

from notices.services.markup import clean_html, clean_url


class CleanUrlTests(SimpleTestCase):
    def test_allowed_schemes_and_relative_urls_pass(self):
        self.assertEqual(clean_url("https://example.com/a?b=1"), "https://example.com/a?b=1")
        self.assertEqual(clean_url("mailto:team@example.com"), "mailto:team@example.com")
        self.assertEqual(clean_url("/admin/plugins/"), "/admin/plugins/")
        self.assertEqual(clean_url("#"), "#")

    def test_script_schemes_collapse_to_empty(self):
        self.assertEqual(clean_url("javascript:alert(1)"), "")
        self.assertEqual(clean_url("  JaVaScRiPt:alert(1)"), "")
        self.assertEqual(clean_url("java\tscript:alert(1)"), "")
        self.assertEqual(clean_url("data:text/html;base64,PHNjcmlwdD4="), "")

    def test_spaces_are_encoded(self):
        self.assertEqual(clean_url("https://example.com/a b"), "https://example.com/a%20b")

    def test_empty_values(self):
        self.assertEqual(clean_url(None), "")
        self.assertEqual(clean_url("   "), "")


class CleanHtmlTests(SimpleTestCase):
    def test_basic_formatting_is_kept(self):
        self.assertEqual(str(clean_html("Hello <b>there</b><br>")), "Hello <b>there</b><br/>")

    def test_script_and_contents_are_removed(self):
        out = str(clean_html("<p>ok</p><script>alert(1)</script>"))
        self.assertEqual(out, "<p>ok</p>")

    def test_event_handlers_and_bad_hrefs_are_stripped(self):
        out = str(clean_html('<a href="javascript:alert(1)" onclick="x()">link</a>'))
        self.assertEqual(out, "<a>link</a>")

    def test_unknown_tags_are_unwrapped(self):
        out = str(clean_html("<blink>hi</blink> <em>there</em>"))
        self.assertEqual(out, "hi <em>there</em>")

    def test_good_links_survive(self):
        out = str(clean_html('<a href="https://example.com" target="_blank">docs</a>'))
        self.assertIn('href="https://example.com"', out)
        self.assertIn('target="_blank"', out)
