"""Shared CLI helpers: ledger session from context, error reporting."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from predledger.ledger.engine import PredictionMarket
from predledger.ledger.errors import LedgerError
from predledger.models.market import Outcome
from predledger.storage.ledger import ledger_session
from predledger.token.memory import InMemoryToken

NOW_OPTION_HELP = "Override the current time (unix seconds)"


@contextmanager
def open_ledger(ctx: typer.Context, now: int | None = None) -> Iterator[tuple[PredictionMarket, InMemoryToken]]:
    """Yield (engine, token) for the configured DB; ledger failures exit with code 1."""
    settings = ctx.obj["settings"]
    clock = (lambda: now) if now is not None else None
    try:
        with ledger_session(settings.db_path, settings, clock=clock) as session:
            yield session
    except LedgerError as e:
        typer.echo(f"Error [{e.code}]: {e}", err=True)
        raise typer.Exit(1)


def parse_outcome(value: str) -> Outcome:
    try:
        return Outcome.parse(value)
    except ValueError:
        raise typer.BadParameter(f"Outcome must be A or B, got {value!r}")
