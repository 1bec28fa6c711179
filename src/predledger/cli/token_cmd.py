"""Token subcommand: mint, approve, balance (sandbox token)."""

from __future__ import annotations

import typer

from predledger.cli.common import open_ledger

app = typer.Typer(help="Sandbox token operations")


@app.command("mint")
def mint(
    ctx: typer.Context,
    recipient: str = typer.Argument(..., help="Recipient identity"),
    amount: int = typer.Argument(..., help="Amount to mint"),
) -> None:
    """Mint sandbox tokens."""
    if amount <= 0:
        typer.echo("Amount must be positive", err=True)
        raise typer.Exit(1)
    with open_ledger(ctx) as (_engine, token):
        token.mint(recipient, amount)
        balance = token.balance_of(recipient)
    typer.echo(f"Minted {amount} to {recipient}. Token balance: {balance}")


@app.command("approve")
def approve(
    ctx: typer.Context,
    amount: int = typer.Argument(..., help="Allowance for the ledger"),
    caller: str = typer.Option(..., "--as", help="Token holder"),
    spender: str | None = typer.Option(None, "--spender", help="Spender (default: the ledger)"),
) -> None:
    """Approve the ledger (or another spender) to pull tokens."""
    with open_ledger(ctx) as (engine, token):
        target = spender or engine.address
        if not token.approve(caller, target, amount):
            typer.echo("Approve failed", err=True)
            raise typer.Exit(1)
    typer.echo(f"{caller} approved {target} for {amount}")


@app.command("balance")
def balance(
    ctx: typer.Context,
    identity: str = typer.Argument(..., help="Identity to look up"),
) -> None:
    """Show a sandbox token balance."""
    with open_ledger(ctx) as (_engine, token):
        amount = token.balance_of(identity)
    typer.echo(f"{identity}: {amount}")
