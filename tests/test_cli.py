"""CLI end-to-end tests (Typer CliRunner)."""

import pytest
from typer.testing import CliRunner

from predledger.cli.app import app

runner = CliRunner()


@pytest.fixture
def invoke(tmp_path):
    base = ["--config-dir", str(tmp_path / "config"), "--db-path", str(tmp_path / "cli.duckdb")]

    def _invoke(*args: str):
        return runner.invoke(app, base + list(args))

    return _invoke


def test_full_market_lifecycle(invoke):
    assert invoke("token", "mint", "alice", "1000").exit_code == 0
    assert invoke("token", "approve", "1000", "--as", "alice").exit_code == 0

    result = invoke("account", "deposit", "1000", "--as", "alice")
    assert result.exit_code == 0, result.output
    assert "net 990" in result.output

    result = invoke("markets", "create", "--resolution-time", "1500", "--as", "alice", "--now", "1000")
    assert result.exit_code == 0, result.output
    assert "Created market 1" in result.output

    assert invoke("bets", "place", "1", "A", "300", "--as", "alice", "--now", "1100").exit_code == 0
    result = invoke("bets", "place", "1", "B", "600", "--as", "alice", "--now", "1100")
    assert result.exit_code == 0, result.output
    assert "A 3333 bps / B 6667 bps" in result.output

    result = invoke("markets", "resolve", "1", "--winner", "A", "--as", "owner", "--now", "1600")
    assert result.exit_code == 0, result.output

    result = invoke("bets", "claim", "1", "--as", "alice", "--now", "1700")
    assert result.exit_code == 0, result.output
    assert "Claimed 900. Balance: 990" in result.output

    result = invoke("bets", "position", "1", "alice")
    assert "claimed: True" in result.output

    result = invoke("account", "balance", "alice")
    assert "alice: 990" in result.output


def test_errors_exit_with_code(invoke):
    assert invoke("markets", "create", "--resolution-time", "1500", "--as", "alice", "--now", "1000").exit_code == 0

    result = invoke("markets", "resolve", "1", "--winner", "A", "--as", "alice", "--now", "1600")
    assert result.exit_code == 1
    assert "not_owner" in result.output

    result = invoke("markets", "resolve", "1", "--winner", "A", "--as", "owner", "--now", "1400")
    assert result.exit_code == 1
    assert "cannot_resolve" in result.output

    result = invoke("markets", "show", "999")
    assert result.exit_code == 1
    assert "market_not_found" in result.output

    result = invoke("account", "withdraw", "5", "--as", "alice")
    assert result.exit_code == 1
    assert "insufficient_balance" in result.output


def test_admin_and_log(invoke, tmp_path):
    result = invoke("admin", "set-maintenance", "sink", "--as", "owner")
    assert result.exit_code == 0, result.output

    result = invoke("admin", "info")
    assert "Maintenance contract: sink" in result.output
    assert "Owner: owner" in result.output

    result = invoke("log", "stats")
    assert "MaintenanceContractUpdated  1" in result.output

    out = tmp_path / "events.parquet"
    result = invoke("log", "export", "--output", str(out))
    assert "Exported 1 events" in result.output
    assert out.exists()


def test_markets_list(invoke):
    for t in ("2000", "3000"):
        invoke("markets", "create", "--resolution-time", t, "--as", "alice", "--now", "1000")
    result = invoke("markets", "list")
    assert result.exit_code == 0
    assert "#1" in result.output and "#2" in result.output
    assert "Total: 2 markets" in result.output
