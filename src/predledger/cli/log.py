"""Log subcommand: stats, list, export."""

from __future__ import annotations

import typer

from predledger.storage.db import get_connection, init_schema
from predledger.storage.event_log import list_events, log_stats
from predledger.storage.export import export_events_to_parquet

app = typer.Typer(help="Audit log statistics and export")


@app.command("stats")
def stats(ctx: typer.Context) -> None:
    """Show audit log statistics (counts, time range, by kind)."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        s = log_stats(conn)
        typer.echo(f"Total events: {s['total_events']}")
        typer.echo(f"Min timestamp: {s.get('min_timestamp')}")
        typer.echo(f"Max timestamp: {s.get('max_timestamp')}")
        for row in s["by_kind"]:
            typer.echo(f"  {row['kind']}  {row['count']}")
    finally:
        conn.close()


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    since: int = typer.Option(0, "--since", help="Only records with seq above this"),
    kind: str | None = typer.Option(None, "--kind", "-k", help="Filter by record kind (e.g. BetPlaced)"),
    limit: int = typer.Option(50, "--limit", "-n", help="Max records"),
) -> None:
    """Print audit records as JSON lines."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        for event in list_events(conn, since_seq=since, kind=kind, limit=limit):
            typer.echo(event.model_dump_json())
    finally:
        conn.close()


@app.command("export")
def export(
    ctx: typer.Context,
    since: int = typer.Option(0, "--since", help="Only records with seq above this"),
    kind: str | None = typer.Option(None, "--kind", "-k", help="Filter by record kind"),
    output: str = typer.Option("events.parquet", "--output", "-o", help="Output path"),
) -> None:
    """Export audit records to Parquet."""
    settings = ctx.obj["settings"]
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        count = export_events_to_parquet(conn, output, kind=kind, since_seq=since)
        typer.echo(f"Exported {count} events to {output}")
    finally:
        conn.close()
