"""Owner-gated resolution and proportional, once-only payout of winnings.

A market moves Unresolved -> OutcomeA or Unresolved -> OutcomeB, both terminal.
A winner receives floor(bet * total_liquidity / total_winning); the rounding
remainder of a market stays unclaimed.
"""

from __future__ import annotations

from predledger.ledger.access import require_owner
from predledger.ledger.errors import AlreadyClaimed, CannotResolve, MarketNotResolved, NoWinningBet
from predledger.ledger.fees import checked_add
from predledger.ledger.registry import get_market, get_market_for_update
from predledger.ledger.state import Transaction
from predledger.models.events import MarketResolved, WinningsClaimed
from predledger.models.market import Market, Outcome, ResolvedOutcome


def resolve_market(tx: Transaction, caller: str, market_id: int, winner_is_a: bool, now: int) -> Market:
    require_owner(tx, caller)
    market = get_market_for_update(tx, market_id)
    if not market.can_resolve(now):
        reason = "already resolved" if market.is_resolved else "before resolution time"
        raise CannotResolve(f"Market {market_id} cannot be resolved: {reason}", market_id=market_id)
    market.resolved_outcome = ResolvedOutcome.OUTCOME_A if winner_is_a else ResolvedOutcome.OUTCOME_B
    tx.emit(
        MarketResolved(
            market_id=market_id,
            resolver=caller,
            outcome=market.resolved_outcome,
            resolution_timestamp=now,
        )
    )
    return market


def compute_winnings(user_bet: int, total_liquidity: int, total_winning: int) -> int:
    return user_bet * total_liquidity // total_winning


def claim_winnings(tx: Transaction, caller: str, market_id: int) -> int:
    market = get_market(tx, market_id)
    winner: Outcome | None = ResolvedOutcome(market.resolved_outcome).winner
    if winner is None:
        raise MarketNotResolved(f"Market {market_id} is not resolved", market_id=market_id)
    if tx.claimed(caller, market_id):
        raise AlreadyClaimed(f"{caller!r} already claimed market {market_id}", market_id=market_id)
    user_bet = tx.bet(caller, market_id, winner)
    if user_bet == 0:
        raise NoWinningBet(f"{caller!r} has no bet on the winning outcome", market_id=market_id)
    total_winning = tx.outcome_total(market_id, winner)
    winnings = compute_winnings(user_bet, market.total_liquidity, total_winning)

    tx.mark_claimed(caller, market_id)
    tx.set_balance(caller, checked_add(tx.balance(caller), winnings))
    tx.emit(WinningsClaimed(user=caller, market_id=market_id, winnings=winnings, bet_amount=user_bet))
    return winnings
