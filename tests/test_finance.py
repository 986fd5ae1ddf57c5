from decimal import Decimal

import pytest

from app.utils.finance import (
    compute_commission,
    format_lira,
    is_reversal,
    reversal_reason,
    shop_revenue,
    summarize_barber,
    summarize_shop,
    total_payouts,
)


def entry(revenue, commission, status="completed"):
    return {
        "total_revenue": revenue,
        "barber_commission": commission,
        "shop_revenue": revenue - commission,
        "status": status,
    }


@pytest.mark.finance
class TestCommission:

    def test_half_commission_on_95(self):
        commission = compute_commission(95, 50)

        assert commission == Decimal("47.50")
        assert shop_revenue(95, commission) == Decimal("47.50")

    def test_commission_rounds_to_cents(self):
        assert compute_commission("33.33", 60) == Decimal("20.00")

    def test_exact_product_when_it_fits_in_cents(self):
        assert compute_commission(150, 60) == Decimal("150") * Decimal("60") / 100

    def test_half_cent_rounds_up(self):
        assert compute_commission("10.05", 50) == Decimal("5.03")

    def test_zero_rate(self):
        assert compute_commission(120, 0) == Decimal("0.00")


@pytest.mark.finance
class TestPayoutTotals:

    def test_reversal_cancels_payout(self):
        payouts = [
            {"id": 1, "amount": 100, "reason": "Weekly commission"},
            {"id": 2, "amount": 100, "reason": reversal_reason(1)},
        ]
        assert total_payouts(payouts) == Decimal("0.00")

    def test_total_is_order_independent(self):
        payouts = [
            {"amount": 40, "reason": "Tips"},
            {"amount": 25.5, "reason": "REVERSAL of 9"},
            {"amount": 10, "reason": "Supplies"},
        ]
        assert total_payouts(payouts) == total_payouts(list(reversed(payouts)))
        assert total_payouts(payouts) == Decimal("24.50")

    def test_reversal_marker_anywhere_in_reason(self):
        assert is_reversal("Manual REVERSAL of 7 requested by manager")
        assert not is_reversal("reversal of 7")
        assert not is_reversal(None)


@pytest.mark.finance
class TestRollups:

    def test_shop_net_ignores_payouts(self):
        entries = [entry(95, 47.5), entry(150, 90)]
        summary = summarize_shop(entries, [{"amount": 50, "reason": "Rent"}])

        assert summary["total_revenue"] == 245.0
        assert summary["total_commission"] == 137.5
        assert summary["total_shop_revenue"] == 107.5
        assert summary["net_shop_revenue"] == 107.5
        assert summary["total_payouts"] == 50.0

    def test_barber_net_can_go_negative(self):
        summary = summarize_barber(
            [entry(95, 47.5)], [{"amount": 100, "reason": "Advance"}]
        )

        assert summary["total_commission"] == 47.5
        assert summary["total_payouts"] == 100.0
        assert summary["net_earnings"] == -52.5
        assert summary["completed_appointments"] == 1

    def test_format_lira(self):
        assert format_lira(47.5) == "₺47.50"
