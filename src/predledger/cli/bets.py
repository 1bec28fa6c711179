"""Bets subcommand: place, claim, position."""

from __future__ import annotations

import typer

from predledger.cli.common import NOW_OPTION_HELP, open_ledger, parse_outcome

app = typer.Typer(help="Betting and settlement")


@app.command("place")
def place(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    outcome: str = typer.Argument(..., help="Outcome: A or B"),
    amount: int = typer.Argument(..., help="Stake"),
    caller: str = typer.Option(..., "--as", help="Acting identity"),
    now: int | None = typer.Option(None, "--now", help=NOW_OPTION_HELP),
) -> None:
    """Place a bet from internal balance."""
    side = parse_outcome(outcome)
    with open_ledger(ctx, now) as (engine, _token):
        engine.place_bet(caller, market_id, side, amount)
        pct_a, pct_b = engine.get_market_percentages(market_id)
    typer.echo(f"Bet {amount} on {side.name} in market {market_id}. A {pct_a} bps / B {pct_b} bps")


@app.command("claim")
def claim(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    caller: str = typer.Option(..., "--as", help="Acting identity"),
    now: int | None = typer.Option(None, "--now", help=NOW_OPTION_HELP),
) -> None:
    """Claim winnings from a resolved market."""
    with open_ledger(ctx, now) as (engine, _token):
        winnings = engine.claim_winnings(caller, market_id)
        balance = engine.get_balance(caller)
    typer.echo(f"Claimed {winnings}. Balance: {balance}")


@app.command("position")
def position(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market ID"),
    identity: str = typer.Argument(..., help="Identity to look up"),
) -> None:
    """Show a user's stakes and claim status in a market."""
    with open_ledger(ctx) as (engine, _token):
        pos = engine.get_user_position(identity, market_id)
    typer.echo(f"A: {pos['bet_a']}  B: {pos['bet_b']}  claimed: {pos['claimed']}")
