"""Basis-point fee arithmetic. Integer only; floors toward zero."""

from __future__ import annotations

from predledger.ledger.errors import AmountOverflow, InvalidAmount
from predledger.models.market import BPS_SCALE

DEPOSIT_FEE_BPS = 100  # 1%
MAX_UINT256 = 2**256 - 1


def check_amount(amount: int, *, allow_zero: bool = False) -> int:
    """Validate an amount is an unsigned 256-bit int. Raises InvalidAmount."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"Amount must be an integer, got {type(amount).__name__}", amount=amount)
    if amount < 0 or (amount == 0 and not allow_zero):
        raise InvalidAmount(f"Amount must be positive, got {amount}", amount=amount)
    if amount > MAX_UINT256:
        raise AmountOverflow("Amount exceeds uint256", amount=amount)
    return amount


def checked_add(a: int, b: int) -> int:
    """a + b, aborting instead of exceeding the uint256 range."""
    total = a + b
    if total > MAX_UINT256:
        raise AmountOverflow(f"{a} + {b} exceeds uint256")
    return total


def fee(amount: int, bps: int = DEPOSIT_FEE_BPS) -> int:
    """floor(amount * bps / 10000)."""
    return amount * bps // BPS_SCALE


def net_amount(amount: int, bps: int = DEPOSIT_FEE_BPS) -> int:
    """amount - fee(amount, bps)."""
    return amount - fee(amount, bps)


def split(amount: int, bps: int = DEPOSIT_FEE_BPS) -> tuple[int, int]:
    """Return (fee, net) for amount."""
    f = fee(amount, bps)
    return f, amount - f


def percentage_bps(part: int, whole: int) -> int:
    """floor(part * 10000 / whole), 0 when whole is 0."""
    if whole == 0:
        return 0
    return part * BPS_SCALE // whole
