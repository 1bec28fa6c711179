"""Admin subcommand: info, set-maintenance, transfer-owner."""

from __future__ import annotations

import typer

from predledger.cli.common import NOW_OPTION_HELP, open_ledger

app = typer.Typer(help="Owner and configuration")


@app.command("info")
def info(ctx: typer.Context) -> None:
    """Show owner, token, maintenance contract and market count."""
    with open_ledger(ctx) as (engine, token):
        typer.echo(f"Ledger address: {engine.address}")
        typer.echo(f"Owner: {engine.get_owner()}")
        typer.echo(f"Token: {engine.get_token_address()}")
        typer.echo(f"Maintenance contract: {engine.get_maintenance_contract()}")
        typer.echo(f"Markets: {engine.get_market_count()}")
        typer.echo(f"Token custody: {token.balance_of(engine.address)}")


@app.command("set-maintenance")
def set_maintenance(
    ctx: typer.Context,
    new_contract: str = typer.Argument(..., help="New fee sink identity"),
    caller: str = typer.Option(..., "--as", help="Acting identity (must be owner)"),
    now: int | None = typer.Option(None, "--now", help=NOW_OPTION_HELP),
) -> None:
    """Change the deposit fee sink."""
    with open_ledger(ctx, now) as (engine, _token):
        engine.set_maintenance_contract(caller, new_contract)
    typer.echo(f"Maintenance contract: {new_contract}")


@app.command("transfer-owner")
def transfer_owner(
    ctx: typer.Context,
    new_owner: str = typer.Argument(..., help="New owner identity"),
    caller: str = typer.Option(..., "--as", help="Acting identity (must be owner)"),
    now: int | None = typer.Option(None, "--now", help=NOW_OPTION_HELP),
) -> None:
    """Hand ownership to another identity."""
    with open_ledger(ctx, now) as (engine, _token):
        engine.transfer_ownership(caller, new_owner)
    typer.echo(f"Owner: {new_owner}")
