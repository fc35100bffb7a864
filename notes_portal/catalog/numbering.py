"""
==============================================================================
Number Extraction Module
==============================================================================

Derives the numeric sort key of a note from its filename.

Rules are tried most specific first and the first rule that matches wins:

    rule               example                         key
    ----------------   -----------------------------   ----
    code_underscore    2025_06_25_DC_005- Teoria       5
    code_hyphen        file-042                        42
    code_space         RLM 012 Estruturas              12
    trailing_number    2024-resumo                     2024
    long_run           nota12345b                      12345

Names matching no rule fall back to their first run of digits; names with
no digits at all get ``NO_NUMBER`` (9999) so they sort last.

==============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from .models import NO_NUMBER


@dataclass(frozen=True)
class NumberRule:
    """
    One filename numbering pattern.

    Attributes:
        name: Identifier used in logs and tests
        pattern: Compiled pattern searched in the extension-less name
        group: Index of the group holding the number
    """

    name: str
    pattern: Pattern[str]
    group: int

    def extract(self, base_name: str) -> Optional[int]:
        """Return the number this rule finds in ``base_name``, if any."""
        match = self.pattern.search(base_name)
        if match is None:
            return None
        return int(match.group(self.group))


NUMBER_RULES: Tuple[NumberRule, ...] = (
    NumberRule("code_underscore", re.compile(r"_([A-Z]+)_(\d{3,4})", re.IGNORECASE), 2),
    NumberRule("code_hyphen", re.compile(r"([A-Z]+)-(\d{3,4})", re.IGNORECASE), 2),
    NumberRule("code_space", re.compile(r"([A-Z]+)\s+(\d{3,4})", re.IGNORECASE), 2),
    NumberRule("trailing_number", re.compile(r"(\d{3,4})(?:\s|[-_]|$)"), 1),
    NumberRule("long_run", re.compile(r"(\d{3,})"), 1),
)

ANY_DIGITS = NumberRule("any_digits", re.compile(r"(\d+)"), 1)


class NumberExtractor:
    """
    Total, deterministic filename -> numeric order function.

    Example:
        >>> extractor = NumberExtractor()
        >>> extractor.extract("2025_06_25_DC_005- Teoria.html")
        5
        >>> extractor.extract("Acao popular.html")
        9999
    """

    def __init__(
        self,
        rules: Tuple[NumberRule, ...] = NUMBER_RULES,
        extension: str = ".html",
    ) -> None:
        self._rules = rules
        self._extension = re.compile(re.escape(extension) + "$", re.IGNORECASE)

    @property
    def rules(self) -> Tuple[NumberRule, ...]:
        return self._rules

    def strip_extension(self, filename: str) -> str:
        return self._extension.sub("", filename)

    def match(self, filename: str) -> Tuple[Optional[str], int]:
        """
        Extract the number and report which rule produced it.

        Returns:
            Tuple of (rule_name, number); rule_name is None for the sentinel
        """
        base_name = self.strip_extension(filename)

        for rule in self._rules:
            number = rule.extract(base_name)
            if number is not None:
                return rule.name, number

        number = ANY_DIGITS.extract(base_name)
        if number is not None:
            return ANY_DIGITS.name, number

        return None, NO_NUMBER

    def extract(self, filename: str) -> int:
        """Numeric sort key of ``filename``."""
        return self.match(filename)[1]
