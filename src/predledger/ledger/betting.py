"""Bet recording, per-outcome totals and basis-point percentages."""

from __future__ import annotations

from predledger.ledger.errors import InsufficientBalance, InvalidOutcome, MarketNotActive
from predledger.ledger.fees import check_amount, checked_add, percentage_bps
from predledger.ledger.registry import get_market, get_market_for_update
from predledger.ledger.state import Transaction
from predledger.models.events import BetPlaced
from predledger.models.market import BPS_SCALE, Market, Outcome


def parse_outcome(value: object) -> Outcome:
    """Outcome.parse, with unknown values rejected as InvalidOutcome."""
    try:
        return Outcome.parse(value)
    except ValueError:
        raise InvalidOutcome(f"Unknown outcome: {value!r}", outcome=value) from None


def compute_percentages(total_a: int, total_liquidity: int) -> tuple[int, int]:
    """(pct_a, pct_b) in basis points. B takes the rounding remainder so the pair sums to 10000."""
    if total_liquidity == 0:
        return 0, 0
    pct_a = percentage_bps(total_a, total_liquidity)
    return pct_a, BPS_SCALE - pct_a


def place_bet(
    tx: Transaction,
    caller: str,
    market_id: int,
    outcome: Outcome,
    amount: int,
    now: int,
) -> Market:
    """Stake `amount` from caller's balance on `outcome`. Returns the updated market."""
    check_amount(amount)
    balance = tx.balance(caller)
    if balance < amount:
        raise InsufficientBalance(
            f"Balance {balance} < {amount}", user=caller, balance=balance, amount=amount
        )
    market = get_market_for_update(tx, market_id)
    if not market.is_active(now):
        raise MarketNotActive(f"Market {market_id} is not accepting bets", market_id=market_id)

    tx.set_balance(caller, balance - amount)
    tx.set_bet(caller, market_id, outcome, checked_add(tx.bet(caller, market_id, outcome), amount))
    tx.set_outcome_total(market_id, outcome, checked_add(tx.outcome_total(market_id, outcome), amount))
    market.total_liquidity = checked_add(market.total_liquidity, amount)
    market.total_percentage_a, market.total_percentage_b = compute_percentages(
        tx.outcome_total(market_id, Outcome.A), market.total_liquidity
    )

    tx.emit(
        BetPlaced(
            user=caller,
            market_id=market_id,
            outcome=outcome,
            amount=amount,
            percentage_a=market.total_percentage_a,
            percentage_b=market.total_percentage_b,
            total_liquidity=market.total_liquidity,
        )
    )
    return market


def get_market_percentages(tx: Transaction, market_id: int) -> tuple[int, int]:
    market = get_market(tx, market_id)
    return market.total_percentage_a, market.total_percentage_b
