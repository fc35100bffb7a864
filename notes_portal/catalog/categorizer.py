"""
==============================================================================
Categorizer Module
==============================================================================

Assigns every note filename to exactly one category key.

A code matches only as a whole token: each side of the occurrence must be
a non-alphanumeric character or the string boundary. ``_DC_``, ``-DC-``,
`` DC `` and a leading ``DC_`` all match ``DC``; ``ADCX`` does not.

Rules are tried longest code first, so a code always wins over any shorter
code it contains (``DPP`` before ``DP``). Codes of equal length keep the
category table's declaration order. No match yields the default category.

==============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .categories import CategoryTable


def _is_boundary(text: str, index: int) -> bool:
    """True when ``index`` is outside ``text`` or points at a separator."""
    return index < 0 or index >= len(text) or not text[index].isalnum()


@dataclass(frozen=True)
class CategoryRule:
    """
    Token match for one category code.

    Attributes:
        code: Uppercase category code
        priority: Position in evaluation order, 0 first
    """

    code: str
    priority: int

    def matches(self, upper_name: str) -> bool:
        """Check for a delimiter-bounded occurrence of the code."""
        start = upper_name.find(self.code)
        while start != -1:
            end = start + len(self.code)
            if _is_boundary(upper_name, start - 1) and _is_boundary(upper_name, end):
                return True
            start = upper_name.find(self.code, start + 1)
        return False


def build_rules(table: CategoryTable) -> Tuple[CategoryRule, ...]:
    """Order the table's codes longest first, declaration order on ties."""
    ordered = sorted(
        enumerate(table.codes),
        key=lambda item: (-len(item[1]), item[0])
    )
    return tuple(
        CategoryRule(code=code, priority=priority)
        for priority, (_, code) in enumerate(ordered)
    )


class Categorizer:
    """
    Total, deterministic filename -> category key function.

    Example:
        >>> categorizer = Categorizer(CategoryTable())
        >>> categorizer.categorize("2025_07_08_DPP_001 - x.html")
        'DPP'
        >>> categorizer.categorize("exemplo-nota-interativa.html")
        'GERAL'
    """

    def __init__(self, table: CategoryTable) -> None:
        self._table = table
        self._rules = build_rules(table)

    @property
    def rules(self) -> Tuple[CategoryRule, ...]:
        return self._rules

    @property
    def default_key(self) -> str:
        return self._table.default.key

    def match(self, filename: str) -> Optional[CategoryRule]:
        """First rule matching ``filename``, or None."""
        upper_name = filename.upper()
        for rule in self._rules:
            if rule.matches(upper_name):
                return rule
        return None

    def categorize(self, filename: str) -> str:
        """Category key of ``filename``; the default key when nothing matches."""
        rule = self.match(filename)
        return rule.code if rule else self.default_key
