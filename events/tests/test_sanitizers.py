from django.test import SimpleTestCase

from events.sanitizers import sanitize_description, sanitize_string_list, sanitize_title


class SanitizerTestCase(SimpleTestCase):
    def test_title_strips_markup_and_newlines(self):
        self.assertEqual(sanitize_title("  <b>Rocket</b>\n  Team "), "Rocket Team")
        self.assertEqual(sanitize_title("x" * 300), "x" * 255)
        self.assertEqual(sanitize_title(None), "")

    def test_description_keeps_safe_tags(self):
        cleaned = sanitize_description('<p>Hi <a href="https://x.io" onclick="evil()">there</a></p><img src=x>')
        self.assertIn("<p>", cleaned)
        self.assertIn('href="https://x.io"', cleaned)
        self.assertNotIn("onclick", cleaned)
        self.assertNotIn("<img", cleaned)

    def test_string_list_dedupes_case_insensitively(self):
        self.assertEqual(sanitize_string_list(["Python", "python ", "", "  React"]), ["Python", "React"])
        self.assertEqual(len(sanitize_string_list([f"s{i}" for i in range(80)])), 50)
