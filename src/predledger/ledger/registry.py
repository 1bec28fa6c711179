"""Market creation, lookup and enumeration. Ids are sequential from 1."""

from __future__ import annotations

from predledger.ledger.errors import InvalidResolutionTime, MarketNotFound
from predledger.ledger.fees import check_amount
from predledger.ledger.state import Transaction
from predledger.models.events import MarketCreated
from predledger.models.market import Market


def create_market(
    tx: Transaction,
    caller: str,
    resolution_time: int,
    initial_liquidity: int,
    now: int,
) -> Market:
    """Register a new market. initial_liquidity is informational: echoed in the event only."""
    if isinstance(resolution_time, bool) or not isinstance(resolution_time, int):
        raise InvalidResolutionTime(f"Resolution time must be an integer timestamp, got {resolution_time!r}")
    if resolution_time <= now:
        raise InvalidResolutionTime(
            f"Resolution time {resolution_time} is not after now ({now})",
            resolution_time=resolution_time,
            now=now,
        )
    check_amount(initial_liquidity, allow_zero=True)
    market = Market(
        id=tx.next_market_id(),
        resolution_time=resolution_time,
        creator=caller,
        created_at=now,
    )
    tx.put_market(market)
    tx.emit(
        MarketCreated(
            market_id=market.id,
            creator=caller,
            resolution_time=resolution_time,
            initial_liquidity=initial_liquidity,
        )
    )
    return market


def _known_id(tx: Transaction, market_id: int) -> bool:
    return (
        isinstance(market_id, int)
        and not isinstance(market_id, bool)
        and 1 <= market_id <= tx.market_count
    )


def get_market(tx: Transaction, market_id: int) -> Market:
    market = tx.market(market_id) if _known_id(tx, market_id) else None
    if market is None:
        raise MarketNotFound(f"Market not found: {market_id}", market_id=market_id)
    return market


def get_market_for_update(tx: Transaction, market_id: int) -> Market:
    market = tx.market_for_update(market_id) if _known_id(tx, market_id) else None
    if market is None:
        raise MarketNotFound(f"Market not found: {market_id}", market_id=market_id)
    return market


def get_all_market_ids(tx: Transaction) -> list[int]:
    return list(range(1, tx.market_count + 1))
