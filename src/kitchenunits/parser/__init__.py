"""Text helpers for user-entered conversion blocks."""

from .conversions_text import iter_rule_lines, split_rule

__all__ = ["iter_rule_lines", "split_rule"]
