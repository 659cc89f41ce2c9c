"""Sanitization rules — named, pure text transforms.

A rule is any object with a ``name`` and an ``apply(text) -> str`` method.
Rules run in a :class:`~clipsan.services.pipeline.RulePipeline`, each one
receiving the previous rule's output.

Guidelines for rules:

- Pure and deterministic; never mutate shared state; never raise.
- Idempotent: ``r.apply(r.apply(s)) == r.apply(s)``.
- Return the input object itself when nothing changes. The pipeline uses
  identity to skip work and to report which rules touched the text.

Extension::

    from clipsan.domain.rules import rule

    @rule("strip_tabs")
    def strip_tabs(text: str) -> str:
        return text.replace("\\t", "    ") if "\\t" in text else text

    context.register_rule(strip_tabs)
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from clipsan.domain.errors import RuleConfigError

#: Decorative glyph drawn in front of user lines in the terminal transcript.
LIVE_PREFIX_GLYPH = "\u258c"

DEFAULT_RULE_NAMES: tuple[str, ...] = ("strip_prefix_glyph",)


@runtime_checkable
class Rule(Protocol):
    """Capability interface every sanitization rule satisfies."""

    name: str

    def apply(self, text: str) -> str: ...


@dataclass(frozen=True)
class FnRule:
    """A rule backed by a plain function."""

    name: str
    func: Callable[[str], str]

    def apply(self, text: str) -> str:
        return self.func(text)

    def __repr__(self) -> str:
        return f"FnRule({self.name!r})"


def fn_rule(name: str, func: Callable[[str], str]) -> FnRule:
    """Wrap *func* as a named rule."""
    return FnRule(name=name, func=func)


def rule(name: str) -> Callable[[Callable[[str], str]], FnRule]:
    """Decorator form of :func:`fn_rule`."""

    def decorator(func: Callable[[str], str]) -> FnRule:
        return FnRule(name=name, func=func)

    return decorator


# ---------------------------------------------------------------------------
# Built-in rules
# ---------------------------------------------------------------------------


def _strip_marker_run(line: str, marker: str) -> str:
    # A run of prefixes is removed whole so a second pass finds nothing.
    rest = line
    while rest.startswith(marker):
        rest = rest[len(marker) :]
        if rest.startswith(" "):
            rest = rest[1:]
    return rest


def make_strip_prefix_glyph(marker: str = LIVE_PREFIX_GLYPH) -> FnRule:
    """Build the rule that strips a leading marker glyph from every line.

    Each line (split on ``\\n``) that starts with *marker*, optionally followed
    by one space, loses that prefix. Markers elsewhere in a line are kept and
    the number of lines never changes.

    Examples:
        >>> make_strip_prefix_glyph().apply("▌hello\\nworld\\n▌ two")
        'hello\\nworld\\ntwo'
    """
    if not marker:
        msg = "Marker glyph must be a non-empty string"
        raise ValueError(msg)

    def strip_prefix_glyph(text: str) -> str:
        if marker not in text:
            return text
        lines = text.split("\n")
        stripped = [_strip_marker_run(line, marker) for line in lines]
        if stripped == lines:
            return text
        return "\n".join(stripped)

    return FnRule(name="strip_prefix_glyph", func=strip_prefix_glyph)


_ZERO_WIDTH = "\u200b\u200c\u200d\ufeff"
_ZERO_WIDTH_TABLE = str.maketrans("", "", _ZERO_WIDTH)


@rule("strip_zero_width")
def strip_zero_width(text: str) -> str:
    """Remove zero-width spaces, joiners and byte-order marks."""
    if not any(ch in text for ch in _ZERO_WIDTH):
        return text
    return text.translate(_ZERO_WIDTH_TABLE)


@rule("normalize_line_endings")
def normalize_line_endings(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    if "\r" not in text:
        return text
    return text.replace("\r\n", "\n").replace("\r", "\n")


@rule("trim_trailing_whitespace")
def trim_trailing_whitespace(text: str) -> str:
    """Strip trailing spaces and tabs from every line."""
    lines = text.split("\n")
    trimmed = [line.rstrip(" \t") for line in lines]
    if trimmed == lines:
        return text
    return "\n".join(trimmed)


_BLANK_RUN = re.compile(r"\n{3,}")


@rule("collapse_blank_lines")
def collapse_blank_lines(text: str) -> str:
    """Collapse runs of two or more blank lines into a single blank line."""
    if _BLANK_RUN.search(text) is None:
        return text
    return _BLANK_RUN.sub("\n\n", text)


@rule("normalize_nfc")
def normalize_nfc(text: str) -> str:
    """Apply Unicode NFC normalization."""
    if unicodedata.is_normalized("NFC", text):
        return text
    return unicodedata.normalize("NFC", text)


def builtin_rules(*, marker: str = LIVE_PREFIX_GLYPH) -> dict[str, Rule]:
    """Return every built-in rule keyed by name."""
    rules: list[Rule] = [
        make_strip_prefix_glyph(marker),
        strip_zero_width,
        normalize_line_endings,
        trim_trailing_whitespace,
        collapse_blank_lines,
        normalize_nfc,
    ]
    return {r.name: r for r in rules}


BUILTIN_RULE_NAMES: frozenset[str] = frozenset(builtin_rules())


def default_rules(*, marker: str = LIVE_PREFIX_GLYPH) -> list[Rule]:
    """Rules a fresh pipeline is seeded with."""
    return resolve_rules(DEFAULT_RULE_NAMES, marker=marker)


def resolve_rules(
    names: list[str] | tuple[str, ...],
    *,
    marker: str = LIVE_PREFIX_GLYPH,
) -> list[Rule]:
    """Look up built-in rules by name, preserving order.

    Raises:
        RuleConfigError: If any name is not a built-in rule.
    """
    available = builtin_rules(marker=marker)
    unknown = [name for name in names if name not in available]
    if unknown:
        msg = f"Unknown sanitize rule(s): {', '.join(unknown)}"
        raise RuleConfigError(msg)
    return [available[name] for name in names]
