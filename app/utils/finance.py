"""
Money rules shared by the appointment, report and payout code.

Amounts are handled as Decimal and quantized to cents; JSON responses
convert them to float at the edge.
"""
from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")
REVERSAL_MARKER = "REVERSAL of "
CURRENCY_SYMBOL = "₺"


def to_decimal(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_commission(price, commission_rate) -> Decimal:
    """
    Barber's share of a price: price * rate / 100, rounded half-up to cents
    to match the Numeric(10, 2) commission_amount column.
    """
    return money(to_decimal(price) * to_decimal(commission_rate) / Decimal("100"))


def shop_revenue(price, commission) -> Decimal:
    return money(to_decimal(price) - to_decimal(commission))


def is_reversal(reason) -> bool:
    return bool(reason) and REVERSAL_MARKER in reason


def reversal_reason(payout_id) -> str:
    return f"{REVERSAL_MARKER}{payout_id}"


def total_payouts(payouts) -> Decimal:
    """
    Net of a payout list: normal rows add, reversal rows subtract.
    The result is the same whatever the order of the list.
    """
    total = Decimal("0")
    for payout in payouts:
        amount = to_decimal(payout.get("amount"))
        if is_reversal(payout.get("reason")):
            total -= amount
        else:
            total += amount
    return money(total)


def summarize_shop(entries, payouts=None) -> dict:
    """
    Shop-wide rollup of financial entries.

    net_shop_revenue is the shop's share of revenue; payouts are reported
    next to it but not subtracted.
    """
    revenue = sum((to_decimal(e["total_revenue"]) for e in entries), Decimal("0"))
    commission = sum(
        (to_decimal(e["barber_commission"]) for e in entries), Decimal("0")
    )
    shop_total = revenue - commission
    paid_out = total_payouts(payouts or [])

    return {
        "total_revenue": float(money(revenue)),
        "total_commission": float(money(commission)),
        "total_shop_revenue": float(money(shop_total)),
        "total_payouts": float(paid_out),
        "net_shop_revenue": float(money(shop_total)),
        "entry_count": len(entries),
        "revenue_split": [
            {"name": "Shop Revenue", "value": float(money(shop_total))},
            {"name": "Barber Commission", "value": float(money(commission))},
        ],
    }


def summarize_barber(entries, payouts) -> dict:
    """
    Barber-scoped rollup. net_earnings is commission minus net payouts and
    is allowed to go negative.
    """
    commission = sum(
        (to_decimal(e["barber_commission"]) for e in entries), Decimal("0")
    )
    revenue = sum((to_decimal(e["total_revenue"]) for e in entries), Decimal("0"))
    paid_out = total_payouts(payouts)

    return {
        "total_commission": float(money(commission)),
        "total_revenue_generated": float(money(revenue)),
        "completed_appointments": len(entries),
        "total_payouts": float(paid_out),
        "net_earnings": float(money(commission - paid_out)),
    }


def format_lira(value) -> str:
    return f"{CURRENCY_SYMBOL}{money(value):.2f}"
