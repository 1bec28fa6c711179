"""Export the audit log to Parquet."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


def export_events_to_parquet(
    conn: DuckDBPyConnection,
    output_path: str | Path,
    kind: str | None = None,
    since_seq: int = 0,
) -> int:
    """Write records with seq > since_seq (optionally one kind) to Parquet, in seq order. Returns row count."""
    path = Path(output_path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path_str = str(path).replace("'", "''")

    where = "WHERE seq > ?"
    params: list[Any] = [since_seq]
    if kind:
        where += " AND kind = ?"
        params.append(kind)

    conn.execute(
        f"COPY (SELECT seq, kind, timestamp, payload FROM ledger_events {where} ORDER BY seq) "
        f"TO '{path_str}' (FORMAT PARQUET)",
        params,
    )
    return conn.execute(f"SELECT COUNT(*) FROM ledger_events {where}", params).fetchone()[0]
