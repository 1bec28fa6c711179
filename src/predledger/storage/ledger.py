"""Ledger state and sandbox token persistence."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

import structlog

from predledger.ledger.engine import Clock, PredictionMarket
from predledger.ledger.state import LedgerState
from predledger.models.market import Market, Outcome, ResolvedOutcome
from predledger.storage.db import get_connection, init_schema
from predledger.storage.event_log import append_events
from predledger.token.memory import InMemoryToken

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

    from predledger.config.settings import Settings

log = structlog.get_logger(__name__)


def _replace_rows(conn: DuckDBPyConnection, table: str, columns: list[str], rows: list[tuple]) -> None:
    conn.execute(f"DELETE FROM {table}")
    if rows:
        placeholders = ", ".join("?" for _ in columns)
        conn.executemany(
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
            rows,
        )


def save_state(conn: DuckDBPyConnection, state: LedgerState) -> None:
    """Rewrite all state tables and append new audit records in one DuckDB transaction."""
    conn.execute("BEGIN TRANSACTION")
    try:
        _replace_rows(
            conn,
            "ledger_config",
            ["id", "owner", "token_address", "address", "maintenance_contract", "market_count", "event_seq"],
            [(1, state.owner, state.token_address, state.address, state.maintenance_contract,
              state.market_count, state.event_seq)],
        )
        _replace_rows(
            conn,
            "balances",
            ["identity", "amount"],
            [(k, str(v)) for k, v in state.balances.items()],
        )
        _replace_rows(
            conn,
            "markets",
            ["market_id", "resolution_time", "resolved_outcome", "creator", "total_liquidity",
             "total_percentage_a", "total_percentage_b", "created_at"],
            [
                (m.id, m.resolution_time, int(m.resolved_outcome), m.creator, str(m.total_liquidity),
                 m.total_percentage_a, m.total_percentage_b, m.created_at)
                for m in state.markets.values()
            ],
        )
        _replace_rows(
            conn,
            "bets",
            ["identity", "market_id", "outcome", "amount"],
            [(who, mid, int(outcome), str(v)) for (who, mid, outcome), v in state.bets.items()],
        )
        _replace_rows(
            conn,
            "outcome_totals",
            ["market_id", "outcome", "amount"],
            [(mid, int(outcome), str(v)) for (mid, outcome), v in state.outcome_totals.items()],
        )
        _replace_rows(
            conn,
            "claims",
            ["identity", "market_id", "claimed"],
            [(who, mid, v) for (who, mid), v in state.claims.items()],
        )
        written = append_events(conn, state.events)
        conn.execute("COMMIT")
    except Exception:
        conn.execute("ROLLBACK")
        raise
    log.debug("ledger_state_saved", markets=len(state.markets), events_written=written)


def load_state(conn: DuckDBPyConnection) -> LedgerState | None:
    """Rebuild LedgerState from storage. None if nothing has been saved yet."""
    row = conn.execute(
        "SELECT owner, token_address, address, maintenance_contract, market_count, event_seq "
        "FROM ledger_config WHERE id = 1"
    ).fetchone()
    if row is None:
        return None
    state = LedgerState(
        owner=row[0],
        token_address=row[1],
        address=row[2],
        maintenance_contract=row[3],
        market_count=row[4],
        event_seq=row[5],
    )
    for identity, amount in conn.execute("SELECT identity, amount FROM balances").fetchall():
        state.balances[identity] = int(amount)
    for r in conn.execute(
        "SELECT market_id, resolution_time, resolved_outcome, creator, total_liquidity, "
        "total_percentage_a, total_percentage_b, created_at FROM markets ORDER BY market_id"
    ).fetchall():
        state.markets[r[0]] = Market(
            id=r[0],
            resolution_time=r[1],
            resolved_outcome=ResolvedOutcome(r[2]),
            creator=r[3],
            total_liquidity=int(r[4]),
            total_percentage_a=r[5],
            total_percentage_b=r[6],
            created_at=r[7],
        )
    for identity, mid, outcome, amount in conn.execute(
        "SELECT identity, market_id, outcome, amount FROM bets"
    ).fetchall():
        state.bets[(identity, mid, Outcome(outcome))] = int(amount)
    for mid, outcome, amount in conn.execute(
        "SELECT market_id, outcome, amount FROM outcome_totals"
    ).fetchall():
        state.outcome_totals[(mid, Outcome(outcome))] = int(amount)
    for identity, mid, claimed in conn.execute("SELECT identity, market_id, claimed FROM claims").fetchall():
        state.claims[(identity, mid)] = bool(claimed)
    return state


def save_token(conn: DuckDBPyConnection, token: InMemoryToken) -> None:
    conn.execute("BEGIN TRANSACTION")
    try:
        _replace_rows(
            conn,
            "token_balances",
            ["identity", "amount"],
            [(k, str(v)) for k, v in token.balances.items()],
        )
        _replace_rows(
            conn,
            "token_allowances",
            ["holder", "spender", "amount"],
            [(h, s, str(v)) for (h, s), v in token.allowances.items()],
        )
        conn.execute("COMMIT")
    except Exception:
        conn.execute("ROLLBACK")
        raise


def load_token(conn: DuckDBPyConnection, address: str) -> InMemoryToken:
    balances = {k: int(v) for k, v in conn.execute("SELECT identity, amount FROM token_balances").fetchall()}
    allowances = {
        (h, s): int(v)
        for h, s, v in conn.execute("SELECT holder, spender, amount FROM token_allowances").fetchall()
    }
    return InMemoryToken(address, balances=balances, allowances=allowances)


@contextmanager
def ledger_session(
    db_path: str | Path,
    settings: Settings,
    clock: Clock | None = None,
) -> Iterator[tuple[PredictionMarket, InMemoryToken]]:
    """Load (or bootstrap from settings) the ledger and sandbox token; persist both if the block succeeds."""
    conn = get_connection(db_path)
    init_schema(conn)
    try:
        state = load_state(conn)
        token_address = state.token_address if state else settings.token_address
        token = load_token(conn, token_address)
        if state is None:
            engine = PredictionMarket(
                settings.owner,
                settings.token_address,
                token,
                address=settings.ledger_address,
                maintenance_contract=settings.maintenance_contract,
                clock=clock,
            )
            log.info("ledger_bootstrapped", owner=settings.owner, token=settings.token_address)
        else:
            engine = PredictionMarket.from_state(state, token, clock=clock)
        yield engine, token
        save_state(conn, engine.state)
        save_token(conn, token)
    finally:
        conn.close()
