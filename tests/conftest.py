"""Shared fixtures: sandbox token and a ledger with a controllable clock."""

import pytest

from predledger.ledger.engine import PredictionMarket
from predledger.token.memory import InMemoryToken

OWNER = "owner"
LEDGER = "prediction-market"
SINK = "maintenance"


class FakeClock:
    def __init__(self, now: int = 1000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(1000)


@pytest.fixture
def token():
    return InMemoryToken("token")


@pytest.fixture
def engine(token, clock):
    eng = PredictionMarket(OWNER, "token", token, address=LEDGER, clock=clock)
    eng.set_maintenance_contract(OWNER, SINK)
    return eng


@pytest.fixture
def fund(engine, token):
    """Mint, approve and deposit `gross` for user; returns the net credited."""

    def _fund(user: str, gross: int) -> int:
        token.mint(user, gross)
        token.approve(user, LEDGER, gross)
        return engine.deposit(user, gross)

    return _fund
