"""Tests for built-in sanitize rules and rule construction helpers."""

from __future__ import annotations

import pytest

from clipsan.domain.errors import RuleConfigError
from clipsan.domain.rules import (
    BUILTIN_RULE_NAMES,
    LIVE_PREFIX_GLYPH,
    FnRule,
    Rule,
    builtin_rules,
    collapse_blank_lines,
    default_rules,
    fn_rule,
    make_strip_prefix_glyph,
    normalize_line_endings,
    normalize_nfc,
    resolve_rules,
    rule,
    strip_zero_width,
    trim_trailing_whitespace,
)

G = LIVE_PREFIX_GLYPH

SAMPLE_INPUTS = [
    "",
    "plain text",
    f"{G}hello\nworld\n{G} two",
    f"{G} {G} nested\n{G}{G}double",
    f"{G}  two spaces",
    f"mid {G} line\n{G}",
    "trailing  \t\nspaces \n",
    "a\r\nb\rc\n",
    "x\n\n\n\n\ny",
    "zero\u200bwidth\ufeff",
    "cafe\u0301",
    "\n\n",
]


class TestStripPrefixGlyph:
    def setup_method(self) -> None:
        self.rule = make_strip_prefix_glyph()

    def test_concrete_case(self) -> None:
        assert self.rule.apply(f"{G}hello\nworld\n{G} two") == "hello\nworld\ntwo"

    def test_line_count_preserved(self) -> None:
        text = f"{G}hello\nworld\n{G} two"
        assert len(self.rule.apply(text).split("\n")) == 3

    def test_non_marker_lines_untouched(self) -> None:
        text = "hello\nworld"
        out = self.rule.apply(text)
        assert out == text
        assert out is text

    def test_marker_elsewhere_in_line_untouched(self) -> None:
        text = f"say {G} here\nand{G}"
        assert self.rule.apply(text) is text

    def test_strips_only_one_space(self) -> None:
        assert self.rule.apply(f"{G}  indented") == " indented"

    def test_preserves_trailing_newline(self) -> None:
        assert self.rule.apply(f"{G} a\n{G} b\n") == "a\nb\n"

    def test_blank_lines_kept(self) -> None:
        assert self.rule.apply(f"{G} a\n\n{G} b") == "a\n\nb"

    def test_run_of_markers_removed_whole(self) -> None:
        assert self.rule.apply(f"{G} {G} x") == "x"

    def test_custom_marker(self) -> None:
        r = make_strip_prefix_glyph(">")
        assert r.apply("> quoted\nplain") == "quoted\nplain"

    def test_empty_marker_rejected(self) -> None:
        with pytest.raises(ValueError):
            make_strip_prefix_glyph("")

    def test_name(self) -> None:
        assert self.rule.name == "strip_prefix_glyph"


class TestOptionalRules:
    def test_strip_zero_width(self) -> None:
        assert strip_zero_width.apply("a\u200bb\u200cc\u200dd\ufeff") == "abcd"

    def test_strip_zero_width_borrows_clean_input(self) -> None:
        text = "clean"
        assert strip_zero_width.apply(text) is text

    def test_normalize_line_endings(self) -> None:
        assert normalize_line_endings.apply("a\r\nb\rc\n") == "a\nb\nc\n"

    def test_trim_trailing_whitespace(self) -> None:
        assert trim_trailing_whitespace.apply("a  \nb\t\nc") == "a\nb\nc"

    def test_trim_trailing_whitespace_keeps_leading(self) -> None:
        text = "  indented"
        assert trim_trailing_whitespace.apply(text) is text

    def test_collapse_blank_lines(self) -> None:
        assert collapse_blank_lines.apply("a\n\n\n\nb") == "a\n\nb"

    def test_collapse_blank_lines_keeps_single_blank(self) -> None:
        text = "a\n\nb"
        assert collapse_blank_lines.apply(text) is text

    def test_normalize_nfc(self) -> None:
        assert normalize_nfc.apply("cafe\u0301") == "caf\u00e9"


class TestIdempotence:
    @pytest.mark.parametrize("name", sorted(BUILTIN_RULE_NAMES))
    @pytest.mark.parametrize("text", SAMPLE_INPUTS)
    def test_builtin_rule_is_idempotent(self, name: str, text: str) -> None:
        r = builtin_rules()[name]
        once = r.apply(text)
        assert r.apply(once) == once


class TestRuleHelpers:
    def test_fn_rule(self) -> None:
        r = fn_rule("upper", str.upper)
        assert r.name == "upper"
        assert r.apply("abc") == "ABC"

    def test_rule_decorator(self) -> None:
        @rule("shout")
        def shout(text: str) -> str:
            return text.upper()

        assert isinstance(shout, FnRule)
        assert shout.name == "shout"
        assert shout.apply("hi") == "HI"

    def test_fn_rule_is_immutable(self) -> None:
        r = fn_rule("upper", str.upper)
        with pytest.raises(AttributeError):
            r.name = "other"  # type: ignore[misc]

    def test_custom_class_satisfies_protocol(self) -> None:
        class Suffix:
            name = "suffix"

            def apply(self, text: str) -> str:
                return text if text.endswith("!") else text + "!"

        assert isinstance(Suffix(), Rule)

    def test_plain_object_is_not_a_rule(self) -> None:
        assert not isinstance(object(), Rule)


class TestRegistry:
    def test_default_rules(self) -> None:
        assert [r.name for r in default_rules()] == ["strip_prefix_glyph"]

    def test_resolve_preserves_order(self) -> None:
        names = ["normalize_nfc", "strip_prefix_glyph", "strip_zero_width"]
        assert [r.name for r in resolve_rules(names)] == names

    def test_resolve_unknown_raises(self) -> None:
        with pytest.raises(RuleConfigError, match="no_such_rule"):
            resolve_rules(["strip_prefix_glyph", "no_such_rule"])

    def test_rule_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            resolve_rules(["nope"])

    def test_builtin_names(self) -> None:
        assert BUILTIN_RULE_NAMES == {
            "strip_prefix_glyph",
            "strip_zero_width",
            "normalize_line_endings",
            "trim_trailing_whitespace",
            "collapse_blank_lines",
            "normalize_nfc",
        }
