"""Resolution and settlement tests."""

import pytest

from predledger.ledger.errors import (
    AlreadyClaimed,
    CannotResolve,
    MarketNotFound,
    MarketNotResolved,
    NoWinningBet,
    NotOwner,
)
from predledger.models.events import MarketResolved, WinningsClaimed
from predledger.models.market import Outcome, ResolvedOutcome


def test_resolution_and_claim_scenario(engine, fund, clock):
    market_id = engine.create_market("alice", 1500)
    assert fund("alice", 1000) == 990
    engine.place_bet("alice", market_id, Outcome.A, 300)
    engine.place_bet("alice", market_id, Outcome.B, 600)
    clock.now = 1600
    engine.resolve_market("owner", market_id, True)
    assert engine.get_market_details(market_id).resolved_outcome == ResolvedOutcome.OUTCOME_A
    winnings = engine.claim_winnings("alice", market_id)
    assert winnings == 900
    assert engine.get_balance("alice") == 990
    assert engine.has_claimed("alice", market_id)


def test_proportional_payouts_leave_dust(engine, fund, clock):
    market_id = engine.create_market("alice", 1500)
    for user in ("a1", "a2", "a3", "loser"):
        fund(user, 1000)
    for user in ("a1", "a2", "a3"):
        engine.place_bet(user, market_id, Outcome.A, 1)
    engine.place_bet("loser", market_id, Outcome.B, 99)
    engine.resolve_market("owner", market_id, True, now=1500)
    paid = [engine.claim_winnings(u, market_id) for u in ("a1", "a2", "a3")]
    assert paid == [34, 34, 34]
    assert sum(paid) <= engine.get_market_details(market_id).total_liquidity
    with pytest.raises(NoWinningBet):
        engine.claim_winnings("loser", market_id)


def test_second_claim_fails(engine, fund):
    market_id = engine.create_market("alice", 1500)
    fund("alice", 1000)
    engine.place_bet("alice", market_id, Outcome.B, 100)
    engine.resolve_market("owner", market_id, False, now=1500)
    assert engine.claim_winnings("alice", market_id) == 100
    balance = engine.get_balance("alice")
    with pytest.raises(AlreadyClaimed):
        engine.claim_winnings("alice", market_id)
    assert engine.get_balance("alice") == balance
    claims = [e for e in engine.get_events() if isinstance(e, WinningsClaimed)]
    assert len(claims) == 1
    assert claims[0].bet_amount == 100


def test_resolve_before_deadline(engine):
    market_id = engine.create_market("alice", 1500)
    with pytest.raises(CannotResolve):
        engine.resolve_market("owner", market_id, True, now=1499)
    assert not engine.can_resolve(market_id, now=1499)
    assert engine.can_resolve(market_id, now=1500)


def test_resolve_exactly_at_deadline(engine):
    market_id = engine.create_market("alice", 1500)
    engine.resolve_market("owner", market_id, False, now=1500)
    record = engine.get_events()[-1]
    assert isinstance(record, MarketResolved)
    assert record.outcome == ResolvedOutcome.OUTCOME_B
    assert record.resolution_timestamp == 1500
    assert record.resolver == "owner"


def test_resolve_twice(engine):
    market_id = engine.create_market("alice", 1500)
    engine.resolve_market("owner", market_id, True, now=1500)
    with pytest.raises(CannotResolve):
        engine.resolve_market("owner", market_id, False, now=1600)
    assert engine.get_market_details(market_id).resolved_outcome == ResolvedOutcome.OUTCOME_A


def test_resolve_by_non_owner(engine):
    market_id = engine.create_market("alice", 1500)
    with pytest.raises(NotOwner):
        engine.resolve_market("alice", market_id, True, now=1600)


def test_resolve_unknown_market(engine):
    with pytest.raises(MarketNotFound):
        engine.resolve_market("owner", 999, True, now=1600)


def test_claim_guards(engine, fund):
    with pytest.raises(MarketNotFound):
        engine.claim_winnings("alice", 999)
    market_id = engine.create_market("alice", 1500)
    fund("alice", 1000)
    engine.place_bet("alice", market_id, Outcome.A, 100)
    with pytest.raises(MarketNotResolved):
        engine.claim_winnings("alice", market_id, now=1600)
    engine.resolve_market("owner", market_id, False, now=1600)
    with pytest.raises(NoWinningBet):
        engine.claim_winnings("alice", market_id)
    assert not engine.has_claimed("alice", market_id)
