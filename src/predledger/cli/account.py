"""Account subcommand: deposit, withdraw, balance."""

from __future__ import annotations

import typer

from predledger.cli.common import NOW_OPTION_HELP, open_ledger

app = typer.Typer(help="Internal balance deposits and withdrawals")


@app.command("deposit")
def deposit(
    ctx: typer.Context,
    amount: int = typer.Argument(..., help="Gross token amount to pull (1% fee is skimmed)"),
    caller: str = typer.Option(..., "--as", help="Acting identity"),
    now: int | None = typer.Option(None, "--now", help=NOW_OPTION_HELP),
) -> None:
    """Deposit tokens (approve the ledger first with 'token approve')."""
    with open_ledger(ctx, now) as (engine, _token):
        net = engine.deposit(caller, amount)
        balance = engine.get_balance(caller)
    typer.echo(f"Deposited {amount} (net {net}). Balance: {balance}")


@app.command("withdraw")
def withdraw(
    ctx: typer.Context,
    amount: int = typer.Argument(..., help="Amount to withdraw"),
    caller: str = typer.Option(..., "--as", help="Acting identity"),
    now: int | None = typer.Option(None, "--now", help=NOW_OPTION_HELP),
) -> None:
    """Withdraw internal balance back to the token."""
    with open_ledger(ctx, now) as (engine, _token):
        balance = engine.withdraw(caller, amount)
    typer.echo(f"Withdrew {amount}. Balance: {balance}")


@app.command("balance")
def balance(
    ctx: typer.Context,
    identity: str = typer.Argument(..., help="Identity to look up"),
) -> None:
    """Show an internal balance."""
    with open_ledger(ctx) as (engine, _token):
        amount = engine.get_balance(identity)
    typer.echo(f"{identity}: {amount}")
