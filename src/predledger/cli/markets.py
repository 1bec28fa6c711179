"""Markets subcommand: create, list, show, resolve."""

from __future__ import annotations

import typer

from predledger.cli.common import NOW_OPTION_HELP, open_ledger, parse_outcome
from predledger.models.market import Outcome

app = typer.Typer(help="Market registry and resolution")


@app.command("create")
def create(
    ctx: typer.Context,
    resolution_time: int = typer.Option(..., "--resolution-time", "-r", help="Unix time when betting closes"),
    initial_liquidity: int = typer.Option(0, "--initial-liquidity", help="Informational liquidity hint"),
    caller: str = typer.Option(..., "--as", help="Acting identity"),
    now: int | None = typer.Option(None, "--now", help=NOW_OPTION_HELP),
) -> None:
    """Create a market."""
    with open_ledger(ctx, now) as (engine, _token):
        market_id = engine.create_market(caller, resolution_time, initial_liquidity)
    typer.echo(f"Created market {market_id}")


@app.command("list")
def list_markets(ctx: typer.Context) -> None:
    """List markets with liquidity and percentages."""
    with open_ledger(ctx) as (engine, _token):
        markets = [engine.get_market_details(mid) for mid in engine.get_all_market_ids()]
    for m in markets:
        typer.echo(
            f"  #{m.id}  resolves {m.resolution_time}  {m.resolved_outcome.name:<10}  "
            f"liquidity {m.total_liquidity}  A {m.total_percentage_a / 100:.2f}%  B {m.total_percentage_b / 100:.2f}%"
        )
    typer.echo(f"Total: {len(markets)} markets")


@app.command("show")
def show(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
) -> None:
    """Show one market."""
    with open_ledger(ctx) as (engine, _token):
        m = engine.get_market_details(market_id)
    for key, value in m.model_dump().items():
        if hasattr(value, "name"):
            value = value.name
        typer.echo(f"{key}: {value}")


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    winner: str = typer.Option(..., "--winner", "-w", help="Winning outcome: A or B"),
    caller: str = typer.Option(..., "--as", help="Acting identity (must be owner)"),
    now: int | None = typer.Option(None, "--now", help=NOW_OPTION_HELP),
) -> None:
    """Resolve a market (owner only, at or after its resolution time)."""
    outcome = parse_outcome(winner)
    with open_ledger(ctx, now) as (engine, _token):
        engine.resolve_market(caller, market_id, outcome is Outcome.A)
    typer.echo(f"Market {market_id} resolved: {outcome.name}")
