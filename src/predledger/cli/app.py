"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from predledger.config import get_settings
from predledger.config.settings import configure_logging

app = typer.Typer(
    name="predledger",
    help="PredLedger - binary-outcome prediction market ledger.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
    db_path: Path | None = typer.Option(None, "--db-path", help="DuckDB file (overrides config)"),
) -> None:
    """Configure logging and store options in context."""
    overrides = {"storage": {"db_path": str(db_path)}} if db_path else None
    settings = get_settings(profile, config_dir=config_dir, overrides=overrides)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile}


# Subcommands registered from other modules
from predledger.cli import account, admin, api_cmd, bets, log, markets, token_cmd  # noqa: E402

app.add_typer(account.app, name="account")
app.add_typer(markets.app, name="markets")
app.add_typer(bets.app, name="bets")
app.add_typer(admin.app, name="admin")
app.add_typer(token_cmd.app, name="token")
app.add_typer(log.app, name="log")
app.add_typer(api_cmd.app, name="api")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
