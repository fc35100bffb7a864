"""
==============================================================================
Number Extraction Tests
==============================================================================

Tests for the filename -> numeric order rules.

==============================================================================
"""

import pytest

from notes_portal.catalog import NO_NUMBER, NumberExtractor


class TestNumberExtraction:
    """Tests for NumberExtractor.extract."""

    @pytest.mark.parametrize("filename, expected", [
        ("2025_06_25_DC_005- Teoria dos Direitos Fundamentais.html", 5),
        ("Acao popular.html", NO_NUMBER),
        ("file-042.html", 42),
        ("RLM 012 Estruturas.html", 12),
        ("2024-resumo.html", 2024),
        ("nota12345b.html", 12345),
        ("aula7.html", 7),
    ])
    def test_examples(self, extractor: NumberExtractor, filename, expected):
        """Test documented filename examples."""
        assert extractor.extract(filename) == expected

    def test_code_number_beats_leading_date(self, extractor: NumberExtractor):
        """Test the code-bound number wins over the date prefix."""
        assert extractor.extract("2025_07_16_DP_004 - Dolo.html") == 4

    def test_extension_is_stripped(self, extractor: NumberExtractor):
        """Test digits right before the extension end the name."""
        rule, number = extractor.match("0123.html")
        assert rule == "trailing_number"
        assert number == 123

    def test_extension_is_case_insensitive(self, extractor: NumberExtractor):
        """Test an uppercase extension is stripped too."""
        assert extractor.strip_extension("Nota.HTML") == "Nota"

    def test_no_digits_reports_no_rule(self, extractor: NumberExtractor):
        """Test sentinel result carries no rule name."""
        assert extractor.match("sem numero.html") == (None, NO_NUMBER)

    def test_fallback_to_any_digits(self, extractor: NumberExtractor):
        """Test short digit runs use the fallback rule."""
        assert extractor.match("parte 2 de x.html") == ("any_digits", 2)


class TestRulePrecedence:
    """Tests for rule ordering."""

    def test_rule_order(self, extractor: NumberExtractor):
        """Test rules are declared most specific first."""
        assert [rule.name for rule in extractor.rules] == [
            "code_underscore",
            "code_hyphen",
            "code_space",
            "trailing_number",
            "long_run",
        ]

    def test_first_matching_rule_wins(self, extractor: NumberExtractor):
        """Test underscore code rule is preferred over the hyphen rule."""
        rule, number = extractor.match("X_DC_010-ABC-020.html")
        assert rule == "code_underscore"
        assert number == 10

    def test_custom_extension(self):
        """Test a configured extension is honoured."""
        extractor = NumberExtractor(extension=".htm")
        assert extractor.extract("aula-101.htm") == 101
