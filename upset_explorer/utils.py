"""Formatting, identity and comparison helpers."""

from __future__ import annotations

from collections import Counter
from typing import Optional, Sequence, Union

from .models import MarginalCode, Pattern

Item = Union[Pattern, MarginalCode]


def make_id_string(item: Item, code_or_pattern: str) -> str:
    """Return the stable element id for a pattern row or code column.

    >>> make_id_string(MarginalCode("250.1", 10), "code")
    'code_2501'
    """
    return f"{code_or_pattern}_{getattr(item, code_or_pattern).replace('.', '')}"


def item_codes(item: Item) -> list[str]:
    """Codes an item stands for: a pattern's members or the single code."""
    if isinstance(item, Pattern):
        return item.codes
    return [item.code]


def unique(values: Sequence[str]) -> list[str]:
    """Distinct values in first-seen order."""
    return list(dict.fromkeys(values))


def codes_equal(first: Sequence[str], second: Sequence[str]) -> bool:
    """True when both sequences hold the same codes with the same multiplicity."""
    if len(first) != len(second):
        return False
    return Counter(first) == Counter(second)


# ------------------------------------------------------------------ #
#  Number formatting
# ------------------------------------------------------------------ #

def format_val(value: float, places: int = 3) -> str:
    """Format to ``places`` significant digits."""
    return f"{value:.{places}g}"


def count_format(value: Optional[float]) -> str:
    if value is None:
        return "NA"
    return f"{round(value):,d}"


def ci_format(value: Optional[float]) -> str:
    if value is None or value != value:
        return "NA"
    return f"{value:.2f}"


# ------------------------------------------------------------------ #
#  Ordering
# ------------------------------------------------------------------ #

def pattern_sort_key(pattern: Pattern) -> int:
    """Sort key putting the most frequent patterns first."""
    return -pattern.count
