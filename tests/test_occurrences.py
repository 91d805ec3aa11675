import unittest

from symhl.core import occurrences
from symhl.core.symbols import SymbolMatcher

TEXT = "foo foo bar foo"


def _symbol(text):
    return SymbolMatcher().symbol_for(text)


class CountTests(unittest.TestCase):
    def test_counts_boundary_matches(self):
        self.assertEqual(occurrences.count(_symbol("foo"), TEXT), 3)
        self.assertEqual(occurrences.count(_symbol("bar"), TEXT), 1)
        self.assertEqual(occurrences.count(_symbol("fo"), TEXT), 0)

    def test_count_respects_bounds(self):
        self.assertEqual(occurrences.count(_symbol("foo"), TEXT, (4, 11)), 1)

    def test_accepts_raw_pattern_strings(self):
        self.assertEqual(occurrences.count(_symbol("foo").pattern, TEXT), 3)


class RankTests(unittest.TestCase):
    def test_rank_counts_matches_ending_before_cursor(self):
        foo = _symbol("foo")
        self.assertEqual(occurrences.rank_before_cursor(foo, TEXT, 0), 0)
        self.assertEqual(occurrences.rank_before_cursor(foo, TEXT, 3), 0)
        self.assertEqual(occurrences.rank_before_cursor(foo, TEXT, 8), 2)
        self.assertEqual(occurrences.rank_before_cursor(foo, TEXT, 15), 2)

    def test_report_messages(self):
        foo = _symbol("foo")
        self.assertEqual(occurrences.report(foo, TEXT, 0), "Occurrence 1/3 in buffer")
        self.assertEqual(occurrences.report(foo, TEXT, 5), "Occurrence 2/3 in buffer")
        self.assertEqual(occurrences.report(foo, TEXT, 12), "Occurrence 3/3 in buffer")
        self.assertEqual(occurrences.report(_symbol("bar"), TEXT, 9), "Only occurrence in buffer")
        self.assertEqual(occurrences.report(_symbol("baz"), TEXT, 0), "No occurrences in buffer")

    def test_report_in_function(self):
        self.assertEqual(
            occurrences.report(_symbol("foo"), TEXT, 4, (4, 15), where="function"),
            "Occurrence 1/2 in function",
        )

    def test_message_clamps_rank(self):
        self.assertEqual(occurrences.occurrence_message(2, 5), "Occurrence 2/2 in buffer")


class SearchTests(unittest.TestCase):
    def test_search_forward(self):
        foo = _symbol("foo")
        self.assertEqual(occurrences.search_forward(foo, TEXT, 3), (4, 7))
        self.assertEqual(occurrences.search_forward(foo, TEXT, 0), (0, 3))
        self.assertIsNone(occurrences.search_forward(foo, TEXT, 13))

    def test_search_backward_finds_last_match_ending_before_offset(self):
        foo = _symbol("foo")
        self.assertEqual(occurrences.search_backward(foo, TEXT, 12), (4, 7))
        self.assertEqual(occurrences.search_backward(foo, TEXT, 15), (12, 15))
        self.assertIsNone(occurrences.search_backward(foo, TEXT, 2))

    def test_searches_stay_inside_bounds(self):
        foo = _symbol("foo")
        self.assertIsNone(occurrences.search_forward(foo, TEXT, 8, (0, 11)))
        self.assertIsNone(occurrences.search_backward(foo, TEXT, 4, (4, 15)))


class ListTests(unittest.TestCase):
    def test_lists_line_and_column(self):
        found = occurrences.list_occurrences(_symbol("foo"), "foo\nx foo\nbar\n")
        self.assertEqual(
            [(item.line, item.column, item.line_text) for item in found],
            [(1, 1, "foo"), (2, 3, "x foo")],
        )

    def test_no_matches(self):
        self.assertEqual(occurrences.list_occurrences(_symbol("zzz"), TEXT), [])


if __name__ == "__main__":
    unittest.main()
