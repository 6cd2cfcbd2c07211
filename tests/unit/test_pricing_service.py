"""
Unit tests for pricing rules.

Run: pytest tests/unit/test_pricing_service.py -v
"""

import pytest

from exceptions import InvalidMarginError
from services import pricing_service
from tests.factories import ProductToImportFactory as RowFactory


class TestRounding:
    """Tests for round_to_cents() and price_from_cost()"""

    def test_half_cent_rounds_up(self):
        """Should round 12.345 → 12.35, not the banker's 12.34."""
        assert pricing_service.round_to_cents(12.345) == 12.35

    def test_price_from_cost_rounded_to_cents(self):
        """Should price 12.345 × 2 at 24.69."""
        assert pricing_service.price_from_cost(12.345, 2) == 24.69

    def test_price_from_cost_with_fractional_multiplier(self):
        assert pricing_service.price_from_cost(3.33, 2.5) == 8.33

    def test_price_from_cost_uses_decimal_text(self):
        """Should price 1.005 × 1 at 1.01, not the float product's 1.00."""
        assert pricing_service.price_from_cost(1.005, 1) == 1.01


class TestValidateMultiplier:
    """Tests for validate_multiplier()"""

    @pytest.mark.parametrize("multiplier", [2.0, 2.5])
    def test_presets_accepted(self, multiplier):
        assert pricing_service.validate_multiplier(multiplier) == multiplier

    @pytest.mark.parametrize("multiplier", [1, 3.7, 10])
    def test_custom_within_bounds_accepted(self, multiplier):
        assert pricing_service.validate_multiplier(multiplier) == multiplier

    @pytest.mark.parametrize("multiplier", [0.5, 10.01, 0, -2])
    def test_out_of_bounds_rejected(self, multiplier):
        with pytest.raises(InvalidMarginError) as exc_info:
            pricing_service.validate_multiplier(multiplier)

        assert exc_info.value.status_code == 422
        assert exc_info.value.details["provided"] == multiplier


class TestApplyMargin:
    """Tests for apply_margin()"""

    def test_prices_selected_new_rows(self):
        """Should set retail and wholesale to cost × multiplier."""
        rows = [RowFactory.create(cost_price=12.345)]

        result = pricing_service.apply_margin(rows, 2)

        assert result[0].price_retail == 24.69
        assert result[0].price_wholesale == 24.69

    def test_existing_rows_not_repriced(self):
        """Should leave stock-addition rows with their prices."""
        rows = [RowFactory.create(cost_price=10, exists=True, price_retail=30.0)]

        result = pricing_service.apply_margin(rows, 2)

        assert result[0].price_retail == 30.0

    def test_deselected_rows_not_repriced(self):
        rows = [RowFactory.create(cost_price=10, selected=False)]

        result = pricing_service.apply_margin(rows, 2.5)

        assert result[0].price_retail is None

    def test_invalid_multiplier_raises_before_pricing(self):
        rows = [RowFactory.create(cost_price=10)]

        with pytest.raises(InvalidMarginError):
            pricing_service.apply_margin(rows, 11)

