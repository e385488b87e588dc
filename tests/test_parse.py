"""
Unit tests for command-line splitting and key/value argument parsing.

Parsing contract:
- markers count only at the start or after whitespace
- values run until the next recognised marker
- unknown markers stay inside the value
"""

import unittest

from classbook.errors import InvalidArgumentError
from classbook.parse import parse_arguments, parse_number, split_command


class TestSplitCommand(unittest.TestCase):
    def test_keyword_is_lowercased_and_tail_stripped(self) -> None:
        self.assertEqual(split_command("  Average   c/CS2113T a/Midterms  "), ("average", "c/CS2113T a/Midterms"))

    def test_keyword_only(self) -> None:
        self.assertEqual(split_command("list_modules"), ("list_modules", ""))

    def test_blank_line(self) -> None:
        self.assertEqual(split_command("   "), ("", ""))


class TestParseArguments(unittest.TestCase):
    def test_values_may_contain_spaces(self) -> None:
        args = parse_arguments("c/CS2113T n/Software Engineering", ["c", "n"])
        self.assertEqual(dict(args), {"c": "CS2113T", "n": "Software Engineering"})

    def test_order_does_not_matter(self) -> None:
        args = parse_arguments("a/Midterms c/CS2113T", ["c", "a"])
        self.assertEqual(args["c"], "CS2113T")
        self.assertEqual(args["a"], "Midterms")

    def test_unknown_marker_stays_in_value(self) -> None:
        args = parse_arguments("c/CS2113T n/Alice x/y", ["c", "n"])
        self.assertEqual(args["n"], "Alice x/y")

    def test_marker_inside_word_is_not_split(self) -> None:
        args = parse_arguments("n/xc/y c/Z", ["n", "c"])
        self.assertEqual(args["n"], "xc/y")
        self.assertEqual(args["c"], "Z")

    def test_repeated_key_keeps_last_value(self) -> None:
        args = parse_arguments("c/A c/B", ["c"])
        self.assertEqual(args["c"], "B")

    def test_empty_value_is_kept_as_empty_string(self) -> None:
        args = parse_arguments("c/ a/Midterms", ["c", "a"])
        self.assertEqual(args["c"], "")

    def test_text_before_first_marker_is_ignored(self) -> None:
        args = parse_arguments("hello c/CS2113T", ["c"])
        self.assertEqual(dict(args), {"c": "CS2113T"})

    def test_empty_tail_gives_empty_mapping(self) -> None:
        self.assertEqual(dict(parse_arguments("", ["c"])), {})

    def test_result_is_read_only(self) -> None:
        args = parse_arguments("c/CS2113T", ["c"])
        with self.assertRaises(TypeError):
            args["c"] = "other"  # type: ignore[index]


class TestParseNumber(unittest.TestCase):
    def test_decimal(self) -> None:
        self.assertEqual(parse_number(" 12.5 ", "marks"), 12.5)

    def test_not_a_number(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            parse_number("abc", "marks")

    def test_nan_and_inf_rejected(self) -> None:
        for text in ("nan", "inf", "-inf"):
            with self.assertRaises(InvalidArgumentError):
                parse_number(text, "weightage")


if __name__ == "__main__":
    unittest.main()
