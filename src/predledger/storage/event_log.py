"""Audit record append and query."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from predledger.models.events import LedgerEvent, parse_event

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


def last_event_seq(conn: DuckDBPyConnection) -> int:
    return conn.execute("SELECT COALESCE(MAX(seq), 0) FROM ledger_events").fetchone()[0]


def append_events(conn: DuckDBPyConnection, events: Iterable[LedgerEvent]) -> int:
    """Append records not yet persisted (seq above the stored maximum). Returns count written."""
    floor = last_event_seq(conn)
    rows = [
        (e.seq, e.kind, e.timestamp, e.model_dump_json())
        for e in events
        if e.seq > floor
    ]
    if not rows:
        return 0
    conn.executemany(
        "INSERT INTO ledger_events (seq, kind, timestamp, payload) VALUES (?, ?, ?, ?)",
        rows,
    )
    return len(rows)


def list_events(
    conn: DuckDBPyConnection,
    since_seq: int = 0,
    kind: str | None = None,
    limit: int | None = None,
) -> list[LedgerEvent]:
    """Records with seq > since_seq in seq order, optionally filtered by kind."""
    sql = "SELECT payload FROM ledger_events WHERE seq > ?"
    params: list[Any] = [since_seq]
    if kind:
        sql += " AND kind = ?"
        params.append(kind)
    sql += " ORDER BY seq ASC"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)
    rows = conn.execute(sql, params).fetchall()
    return [parse_event(r[0]) for r in rows]


def log_stats(conn: DuckDBPyConnection) -> dict[str, Any]:
    """Return audit log statistics: total count, min/max timestamp, count by kind."""
    total = conn.execute("SELECT COUNT(*) FROM ledger_events").fetchone()[0]
    min_ts, max_ts = conn.execute(
        "SELECT MIN(timestamp), MAX(timestamp) FROM ledger_events"
    ).fetchone()
    by_kind = conn.execute(
        "SELECT kind, COUNT(*) AS cnt FROM ledger_events GROUP BY kind ORDER BY cnt DESC, kind"
    ).fetchall()
    return {
        "total_events": total,
        "min_timestamp": min_ts,
        "max_timestamp": max_ts,
        "by_kind": [{"kind": r[0], "count": r[1]} for r in by_kind],
    }
