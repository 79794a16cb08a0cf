"""价格重新分配测试"""

from decimal import Decimal

import pytest

from fairsplit.core.exceptions import InvalidPrice, ItemNotFound, NoRedistributionTarget
from fairsplit.services.redistribution import redistribute


def prices(*values):
    return {i + 1: Decimal(v) for i, v in enumerate(values)}


class TestBudgetConservation:

    @pytest.mark.parametrize("current, changed, new_price", [
        (("40", "60"), 1, "50"),
        (("40", "60"), 1, "65"),
        (("33.34", "33.33", "33.33"), 2, "0"),
        (("10", "10", "10", "10"), 1, "0"),
        (("12.50", "7.25", "80.25"), 3, "81.17"),
        (("1", "2", "3", "4", "5", "6", "7"), 4, "9.99"),
    ])
    def test_sum_is_preserved(self, current, changed, new_price):
        before = prices(*current)
        after = redistribute(before, changed, new_price)
        assert sum(after.values()) == sum(before.values())
        assert after[changed] == Decimal(new_price)
        assert set(after) == set(before)

    def test_even_split_not_proportional(self):
        after = redistribute(prices("10", "30", "60"), 1, "30")
        assert after == {1: Decimal("30.00"), 2: Decimal("20.00"), 3: Decimal("50.00")}

    def test_rounding_residual_reconciled_in_id_order(self):
        after = redistribute(prices("10", "10", "10", "10"), 1, "0")
        assert after == {
            1: Decimal("0.00"),
            2: Decimal("13.34"),
            3: Decimal("13.33"),
            4: Decimal("13.33"),
        }

    def test_unchanged_price_is_identity(self):
        before = prices("40", "60")
        assert redistribute(before, 2, "60") == before

    def test_input_mapping_is_not_mutated(self):
        before = prices("40", "60")
        redistribute(before, 1, "10")
        assert before == prices("40", "60")


class TestRejections:

    def test_single_item_has_no_target(self):
        with pytest.raises(NoRedistributionTarget):
            redistribute(prices("100"), 1, "100")

    def test_negative_price(self):
        with pytest.raises(InvalidPrice):
            redistribute(prices("40", "60"), 1, "-1")

    def test_nan_price(self):
        with pytest.raises(InvalidPrice):
            redistribute(prices("40", "60"), 1, float("nan"))

    def test_price_that_would_push_others_below_zero(self):
        with pytest.raises(InvalidPrice):
            redistribute(prices("40", "60"), 1, "100.01")

    def test_price_equal_to_total_is_allowed(self):
        after = redistribute(prices("40", "60"), 1, "100")
        assert after[2] == Decimal("0.00")

    def test_unknown_item(self):
        with pytest.raises(ItemNotFound):
            redistribute(prices("40", "60"), 99, "10")
