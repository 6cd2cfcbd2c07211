"""
Unit tests for text utilities.

Run: pytest tests/unit/test_text_utils.py -v
"""

import pytest

from utils.text_utils import invoice_slug, name_prefix, normalize_code


class TestNormalizeCode:
    """Tests for normalize_code()"""

    def test_trims_and_uppercases(self):
        assert normalize_code("  ab-12 ") == "AB-12"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_values(self, value):
        assert normalize_code(value) == ""


class TestInvoiceSlug:
    """Tests for invoice_slug()"""

    def test_spaces_become_dashes(self):
        assert invoice_slug(" Plata Sur ") == "PLATA-SUR"


class TestNamePrefix:
    """Tests for name_prefix()"""

    def test_first_two_letters(self):
        assert name_prefix("plata sur", "AT") == "PL"

    def test_default_when_empty(self):
        assert name_prefix("", "AT") == "AT"
        assert name_prefix(None, "AT") == "AT"

