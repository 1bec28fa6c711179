"""DuckDB persistence of ledger state, sandbox token and audit log."""

import pytest

from predledger.config.settings import Settings
from predledger.ledger.engine import PredictionMarket
from predledger.models.events import BetPlaced, Deposit
from predledger.models.market import Outcome, ResolvedOutcome
from predledger.storage.db import get_connection, init_schema
from predledger.storage.event_log import list_events, log_stats
from predledger.storage.export import export_events_to_parquet
from predledger.storage.ledger import ledger_session, load_state, load_token, save_state, save_token


@pytest.fixture
def conn(tmp_path):
    c = get_connection(tmp_path / "ledger.duckdb")
    init_schema(c)
    yield c
    c.close()


def _played_market(engine, fund):
    market_id = engine.create_market("alice", 1500)
    fund("alice", 1000)
    fund("bob", 1000)
    engine.place_bet("alice", market_id, Outcome.A, 300)
    engine.place_bet("bob", market_id, Outcome.B, 700)
    engine.resolve_market("owner", market_id, True, now=1500)
    engine.claim_winnings("alice", market_id, now=1500)
    return market_id


def test_save_and_load_state(conn, engine, token, fund):
    market_id = _played_market(engine, fund)
    save_state(conn, engine.state)
    save_token(conn, token)

    state = load_state(conn)
    assert state is not None
    assert state.owner == "owner"
    assert state.maintenance_contract == engine.get_maintenance_contract()
    assert state.market_count == 1
    assert state.event_seq == engine.state.event_seq
    assert state.balances == engine.state.balances
    assert state.bets == engine.state.bets
    assert state.outcome_totals == engine.state.outcome_totals
    assert state.claims == {("alice", market_id): True}
    assert state.markets[market_id] == engine.get_market_details(market_id)
    assert state.markets[market_id].resolved_outcome == ResolvedOutcome.OUTCOME_A

    restored = PredictionMarket.from_state(state, load_token(conn, "token"))
    assert restored.get_balance("alice") == engine.get_balance("alice")
    assert restored.get_market_percentages(market_id) == (3000, 7000)
    assert restored.has_claimed("alice", market_id)


def test_load_state_empty(conn):
    assert load_state(conn) is None


def test_events_appended_once(conn, engine, fund):
    _played_market(engine, fund)
    save_state(conn, engine.state)
    save_state(conn, engine.state)
    records = list_events(conn)
    assert [r.seq for r in records] == list(range(1, engine.state.event_seq + 1))
    bets = list_events(conn, kind="BetPlaced")
    assert len(bets) == 2
    assert all(isinstance(r, BetPlaced) for r in bets)
    assert isinstance(list_events(conn, since_seq=2, limit=1)[0], Deposit)
    stats = log_stats(conn)
    assert stats["total_events"] == engine.state.event_seq
    assert {"kind": "BetPlaced", "count": 2} in stats["by_kind"]


def test_uint256_amounts_survive(conn, token, clock):
    big = 2**200
    eng = PredictionMarket("owner", "token", token, address="pm", clock=clock)
    token.mint("whale", big)
    token.approve("whale", "pm", big)
    eng.deposit("whale", big)
    save_state(conn, eng.state)
    save_token(conn, token)
    assert load_state(conn).balances["whale"] == big - big // 100
    assert load_token(conn, "token").balance_of("pm") == big


def test_export_parquet(conn, engine, fund, tmp_path):
    _played_market(engine, fund)
    save_state(conn, engine.state)
    out = tmp_path / "out" / "events.parquet"
    assert export_events_to_parquet(conn, out, kind="Deposit") == 2
    assert out.exists()

    # alice deposits at seq 3, so only bob's deposit is past it
    later = tmp_path / "out" / "later.parquet"
    assert export_events_to_parquet(conn, later, kind="Deposit", since_seq=3) == 1
    rows = conn.execute(f"SELECT seq, kind FROM read_parquet('{later}')").fetchall()
    assert len(rows) == 1
    assert rows[0][0] > 3 and rows[0][1] == "Deposit"


def test_ledger_session_persists_only_on_success(tmp_path):
    db = tmp_path / "s.duckdb"
    settings = Settings()
    with ledger_session(db, settings, clock=lambda: 1000) as (engine, token):
        token.mint("alice", 1000)
        token.approve("alice", engine.address, 1000)
        engine.deposit("alice", 1000)
    with pytest.raises(RuntimeError):
        with ledger_session(db, settings, clock=lambda: 1000) as (engine, token):
            engine.withdraw("alice", 100)
            raise RuntimeError("boom")
    with ledger_session(db, settings) as (engine, token):
        assert engine.get_balance("alice") == 990
        assert token.balance_of(engine.address) == 990
        assert engine.get_owner() == settings.owner
