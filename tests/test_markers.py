"""Tests for the sentinel scanner."""

import unittest

from custom_contextmenu.markers import (
    END_SENTINEL,
    NOT_FOUND,
    START_SENTINEL,
    Found,
    extract_session_id,
    find_block,
    find_session,
    has_patch,
    render_block,
    session_sentinel,
    strip_patch,
)

CLEAN = "<html><body>x</body></html>"


def _patched(session_id: str = "abc-123", payload: str = "<script>s</script>") -> str:
    return "<html><body>x</body>" + render_block(session_id, payload) + "</html>"


class TestRenderBlock(unittest.TestCase):
    def test_layout(self):
        block = render_block("abc-123", "<script>s</script>")
        self.assertEqual(
            block,
            "<!-- !! VSCODE-CUSTOM-CSS-SESSION-ID abc-123 !! -->\n"
            f"{START_SENTINEL}\n"
            "<script>s</script>\n"
            f"{END_SENTINEL}\n",
        )

    def test_payload_newline_not_doubled(self):
        block = render_block("ab", "p\n")
        self.assertIn("\np\n" + END_SENTINEL, block)
        self.assertNotIn("p\n\n", block)

    def test_rejects_invalid_session(self):
        for bad in ("", "xyz", "ab cd", "../etc"):
            with self.assertRaises(ValueError):
                render_block(bad, "p")


class TestScanner(unittest.TestCase):
    def test_not_found_is_falsy(self):
        self.assertFalse(find_block(CLEAN))
        self.assertIs(find_session(CLEAN), NOT_FOUND)
        self.assertEqual(repr(NOT_FOUND), "NOT_FOUND")

    def test_find_session_span(self):
        line = session_sentinel("abc-123")
        content = "pre" + line + "post"
        found = find_session(content)
        self.assertEqual(found, Found(3, 3 + len(line), "abc-123"))

    def test_find_block_needs_end(self):
        content = "a" + START_SENTINEL + "b"
        self.assertFalse(find_block(content))

    def test_find_block_span(self):
        content = "a" + START_SENTINEL + "b" + END_SENTINEL + "c"
        found = find_block(content)
        self.assertEqual(content[found.start:found.end], START_SENTINEL + "b" + END_SENTINEL)


class TestExtractSessionId(unittest.TestCase):
    def test_extracts_id(self):
        self.assertEqual(extract_session_id(_patched("abc-123")), "abc-123")

    def test_absent(self):
        self.assertIsNone(extract_session_id(CLEAN))

    def test_skips_malformed_sentinel(self):
        content = (
            "<!-- !! VSCODE-CUSTOM-CSS-SESSION-ID xyz !! -->\n"
            "<!-- !! VSCODE-CUSTOM-CSS-SESSION-ID 0f-1 !! -->\n"
        )
        self.assertEqual(extract_session_id(content), "0f-1")

    def test_unterminated_prefix(self):
        self.assertIsNone(extract_session_id("<!-- !! VSCODE-CUSTOM-CSS-SESSION-ID abc"))

    def test_first_one_wins(self):
        content = session_sentinel("aa") + "\n" + session_sentinel("bb") + "\n"
        self.assertEqual(extract_session_id(content), "aa")


class TestStripPatch(unittest.TestCase):
    def test_restores_clean_document(self):
        self.assertEqual(strip_patch(_patched()), CLEAN)

    def test_clean_document_unchanged(self):
        self.assertEqual(strip_patch(CLEAN), CLEAN)

    def test_removes_every_session_line(self):
        content = "a\n" + session_sentinel("aa") + "\n\n" + "b\n" + session_sentinel("x_y") + "\nc"
        self.assertEqual(strip_patch(content), "a\nb\nc")

    def test_stacked_blocks(self):
        content = "<html>\n" + render_block("aa", "p1") + render_block("bb", "p2") + "</html>"
        self.assertEqual(strip_patch(content), "<html>\n</html>")

    def test_start_without_end_left_alone(self):
        content = "a\n" + START_SENTINEL + "\nstuff"
        self.assertEqual(strip_patch(content), content)

    def test_idempotent(self):
        docs = [
            CLEAN,
            _patched(),
            "<html>\n" + render_block("aa", "p1") + render_block("bb", "p2") + "</html>",
            "a" + START_SENTINEL + "b",
            END_SENTINEL + START_SENTINEL + "x" + END_SENTINEL + END_SENTINEL,
            "<!-- !! VSCODE-CUSTOM-CSS-<!-- !! VSCODE-CUSTOM-CSS-SESSION-ID ab !! -->START !! -->",
            session_sentinel("ab") + session_sentinel("cd") + "\n\n\n",
        ]
        for d in docs:
            once = strip_patch(d)
            self.assertEqual(strip_patch(once), once, d)

    def test_has_patch(self):
        self.assertTrue(has_patch(_patched()))
        self.assertTrue(has_patch(session_sentinel("ab")))
        self.assertFalse(has_patch(CLEAN))


if __name__ == "__main__":
    unittest.main()
