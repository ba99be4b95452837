# sales/services/sale_math.py

from decimal import ROUND_HALF_UP, Decimal

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def compute_net_sales(*, cash, bank, credit, discount, returns) -> Decimal:
    """
    net = max(0, cash + bank + credit - discount - returns)
    """
    gross = _money(cash) + _money(bank) + _money(credit)
    return max(ZERO, gross - _money(discount) - _money(returns))
