"""DuckDB connection and schema init."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import duckdb

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

# Amounts are uint256; HUGEINT tops out at 2**127, so they are stored as decimal strings.
SCHEMA_SQL = """
-- Configuration singletons and counters (one row, id = 1)
CREATE TABLE IF NOT EXISTS ledger_config (
    id                  INTEGER PRIMARY KEY,
    owner               VARCHAR NOT NULL,
    token_address       VARCHAR NOT NULL,
    address             VARCHAR NOT NULL,
    maintenance_contract VARCHAR NOT NULL,
    market_count        BIGINT NOT NULL,
    event_seq           BIGINT NOT NULL
);

-- Internal account balances
CREATE TABLE IF NOT EXISTS balances (
    identity            VARCHAR PRIMARY KEY,
    amount              VARCHAR NOT NULL
);

-- Market registry
CREATE TABLE IF NOT EXISTS markets (
    market_id           BIGINT PRIMARY KEY,
    resolution_time     BIGINT NOT NULL,
    resolved_outcome    INTEGER NOT NULL,
    creator             VARCHAR NOT NULL,
    total_liquidity     VARCHAR NOT NULL,
    total_percentage_a  INTEGER NOT NULL,
    total_percentage_b  INTEGER NOT NULL,
    created_at          BIGINT NOT NULL
);

-- Cumulative stake per (identity, market, outcome)
CREATE TABLE IF NOT EXISTS bets (
    identity            VARCHAR NOT NULL,
    market_id           BIGINT NOT NULL,
    outcome             INTEGER NOT NULL,
    amount              VARCHAR NOT NULL,
    PRIMARY KEY (identity, market_id, outcome)
);

-- Stake totals per (market, outcome)
CREATE TABLE IF NOT EXISTS outcome_totals (
    market_id           BIGINT NOT NULL,
    outcome             INTEGER NOT NULL,
    amount              VARCHAR NOT NULL,
    PRIMARY KEY (market_id, outcome)
);

-- Claim flags per (identity, market)
CREATE TABLE IF NOT EXISTS claims (
    identity            VARCHAR NOT NULL,
    market_id           BIGINT NOT NULL,
    claimed             BOOLEAN NOT NULL,
    PRIMARY KEY (identity, market_id)
);

-- Audit log (append-only, ordered by seq)
CREATE TABLE IF NOT EXISTS ledger_events (
    seq                 BIGINT PRIMARY KEY,
    kind                VARCHAR NOT NULL,
    timestamp           BIGINT NOT NULL,
    payload             JSON NOT NULL
);

-- Sandbox token balances and allowances
CREATE TABLE IF NOT EXISTS token_balances (
    identity            VARCHAR PRIMARY KEY,
    amount              VARCHAR NOT NULL
);

CREATE TABLE IF NOT EXISTS token_allowances (
    holder              VARCHAR NOT NULL,
    spender             VARCHAR NOT NULL,
    amount              VARCHAR NOT NULL,
    PRIMARY KEY (holder, spender)
);
"""


def get_connection(db_path: str | Path, read_only: bool = False) -> DuckDBPyConnection:
    """Return a DuckDB connection. Caller must close or use as context manager."""
    path = Path(db_path)
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def init_schema(conn: DuckDBPyConnection) -> None:
    """Create tables if they do not exist."""
    for stmt in SCHEMA_SQL.split(";"):
        stmt = stmt.strip()
        if stmt:
            try:
                conn.execute(stmt)
            except duckdb.Error as e:
                if "already exists" not in str(e).lower():
                    raise
