"""Tests for percentage and discount primitives."""

import pytest

from medbill.domain.services.percentages import (
    add_percentage,
    apply_cascading_discounts,
    apply_flat_discount,
    apply_markup,
    apply_single_discount,
    calculate_profit,
    cost_price_from_margin,
    percentage_decrease,
    percentage_delta,
    percentage_increase,
    percentage_of,
    selling_price_from_margin,
    share_of,
    subtract_percentage,
)


class TestPercentages:

    def test_percentage_of(self):
        assert percentage_of(1000, 18) == 180
        assert percentage_of(333.33, 12) == 40.0

    def test_add_and_subtract(self):
        assert add_percentage(1000, 18) == 1180
        assert subtract_percentage(1000, 10) == 900

    def test_delta_is_signed(self):
        assert percentage_delta(100, 120) == 20
        assert percentage_delta(100, 80) == -20

    def test_delta_from_zero_is_zero(self):
        assert percentage_delta(0, 50) == 0
        assert percentage_decrease(0, 50) == 0

    def test_one_sided_forms(self):
        assert percentage_increase(200, 250) == 25
        assert percentage_decrease(100, 80) == 20

    def test_share_of(self):
        assert share_of(25, 200) == 12.5
        assert share_of(1, 0) == 0


class TestSingleDiscount:

    def test_apply_single_discount(self):
        result = apply_single_discount(1000, 10)
        assert result.discount_amount == 100
        assert result.final_amount == 900
        assert result.original_amount == 1000
        assert result.discount_percent == 10


class TestCascadingDiscounts:

    def test_cascade_is_multiplicative(self):
        """10% then 10% on 1000 is 100 + 90 = 190 off, not 200."""
        result = apply_cascading_discounts(1000, [10, 10])
        assert [s.discount_amount for s in result.steps] == [100, 90]
        assert [s.amount_after_discount for s in result.steps] == [900, 810]
        assert result.total_discount == 190
        assert result.final_amount == 810
        assert result.effective_percent == 19

    def test_step_numbers(self):
        result = apply_cascading_discounts(500, [5, 10, 20])
        assert [s.step for s in result.steps] == [1, 2, 3]
        assert [s.discount_percent for s in result.steps] == [5, 10, 20]

    def test_three_steps(self):
        result = apply_cascading_discounts(500, [5, 10, 20])
        # 500 → 475 → 427.5 → 342
        assert result.final_amount == 342
        assert result.total_discount == 158

    def test_no_discounts(self):
        result = apply_cascading_discounts(1000, [])
        assert result.final_amount == 1000
        assert result.total_discount == 0
        assert result.steps == []

    def test_zero_amount(self):
        result = apply_cascading_discounts(0, [10])
        assert result.final_amount == 0
        assert result.effective_percent == 0

    def test_to_dict_nests_steps(self):
        d = apply_cascading_discounts(1000, [10]).to_dict()
        assert d["steps"][0]["discount_amount"] == 100


class TestFlatDiscount:

    def test_flat_discount_exceeding_amount_is_clamped(self):
        result = apply_flat_discount(500, 700)
        assert result.discount_amount == 500
        assert result.final_amount == 0
        assert result.discount_percent == 100

    def test_flat_discount(self):
        result = apply_flat_discount(1000, 250)
        assert result.discount_amount == 250
        assert result.final_amount == 750
        assert result.discount_percent == 25

    def test_flat_discount_on_zero_amount(self):
        result = apply_flat_discount(0, 50)
        assert result.discount_amount == 0
        assert result.final_amount == 0
        assert result.discount_percent == 0

    def test_negative_flat_discount_is_ignored(self):
        result = apply_flat_discount(100, -20)
        assert result.final_amount == pytest.approx(100)


class TestProfitAndPricing:

    def test_profit_breakdown(self):
        p = calculate_profit(125, 100)
        assert p.profit == 25
        assert p.profit_percent == 25
        assert p.profit_margin == 20

    def test_loss(self):
        p = calculate_profit(90, 100)
        assert p.profit == -10
        assert p.profit_percent == -10
        assert p.profit_margin == pytest.approx(-11.11)

    def test_zero_cost(self):
        """Free goods: no percentage on a zero cost, margin is the whole price."""
        p = calculate_profit(100, 0)
        assert p.profit_percent == 0
        assert p.profit_margin == 100

    def test_zero_price(self):
        p = calculate_profit(0, 50)
        assert p.profit == -50
        assert p.profit_margin == 0

    def test_selling_price_from_margin(self):
        assert selling_price_from_margin(80, 20) == 100

    @pytest.mark.parametrize("margin", [100, 150])
    def test_impossible_margin(self, margin):
        assert selling_price_from_margin(80, margin) == 0

    def test_cost_price_from_margin(self):
        assert cost_price_from_margin(100, 20) == 80

    def test_margin_round_trip(self):
        price = selling_price_from_margin(64.5, 18)
        assert cost_price_from_margin(price, 18) == pytest.approx(64.5, abs=0.01)

    def test_apply_markup(self):
        m = apply_markup(200, 12.5)
        assert m.markup_amount == 25
        assert m.selling_price == 225
        assert m.to_dict()["markup_percent"] == 12.5
