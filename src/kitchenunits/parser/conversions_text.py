"""Utilities for splitting human-entered conversion rule blocks."""

from __future__ import annotations

from typing import Iterator, Tuple

from kitchenunits.units.errors import QuantityParseError


def iter_rule_lines(conversions_text: str | None) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_no, line)`` for every non-blank line of ``conversions_text``.

    Lines are trimmed; blank lines are skipped but still counted so that the
    reported line numbers match what the user typed.
    """

    if not conversions_text:
        return

    for line_no, raw_line in enumerate(conversions_text.split("\n"), start=1):
        stripped = raw_line.strip()
        if stripped:
            yield line_no, stripped


def split_rule(line: str) -> Tuple[str, str]:
    """Split ``"<quantityA>/<quantityB>"`` into its two sides.

    Raises
    ------
    QuantityParseError
        When the line does not contain exactly one ``/`` separator.
    """

    parts = line.split("/")
    if len(parts) != 2:
        raise QuantityParseError(f"Invalid conversion rule: {line}", line)
    left, right = parts
    return left, right


__all__ = ["iter_rule_lines", "split_rule"]
