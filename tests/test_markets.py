"""Market registry tests."""

import pytest

from predledger.ledger.errors import InvalidAmount, InvalidResolutionTime, MarketNotFound
from predledger.models.events import MarketCreated
from predledger.models.market import ResolvedOutcome


def test_sequential_ids(engine):
    assert engine.get_all_market_ids() == []
    assert engine.get_market_count() == 0
    assert engine.create_market("alice", 2000) == 1
    assert engine.create_market("bob", 3000) == 2
    assert engine.get_all_market_ids() == [1, 2]
    assert engine.get_market_count() == 2


def test_new_market_fields(engine):
    market_id = engine.create_market("alice", 2000, initial_liquidity=500)
    m = engine.get_market_details(market_id)
    assert m.creator == "alice"
    assert m.resolution_time == 2000
    assert m.created_at == 1000
    assert m.resolved_outcome == ResolvedOutcome.UNRESOLVED
    assert m.total_liquidity == 0
    assert (m.total_percentage_a, m.total_percentage_b) == (0, 0)


def test_initial_liquidity_is_only_echoed(engine):
    market_id = engine.create_market("alice", 2000, initial_liquidity=500)
    record = engine.get_events()[-1]
    assert isinstance(record, MarketCreated)
    assert record.initial_liquidity == 500
    assert record.market_id == market_id
    assert engine.get_market_details(market_id).total_liquidity == 0
    assert engine.get_balance("alice") == 0


def test_resolution_time_must_be_in_future(engine):
    with pytest.raises(InvalidResolutionTime):
        engine.create_market("alice", 1000)
    with pytest.raises(InvalidResolutionTime):
        engine.create_market("alice", 999)
    assert engine.get_market_count() == 0


def test_negative_liquidity_hint_rejected(engine):
    with pytest.raises(InvalidAmount):
        engine.create_market("alice", 2000, initial_liquidity=-1)
    assert engine.get_market_count() == 0


def test_market_not_found(engine):
    engine.create_market("alice", 2000)
    for bad in (0, 2, 999):
        with pytest.raises(MarketNotFound):
            engine.get_market_details(bad)
        with pytest.raises(MarketNotFound):
            engine.get_market_percentages(bad)


def test_details_are_copies(engine):
    market_id = engine.create_market("alice", 2000)
    m = engine.get_market_details(market_id)
    m.total_liquidity = 123
    assert engine.get_market_details(market_id).total_liquidity == 0
