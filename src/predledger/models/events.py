"""Audit records emitted by ledger operations (append-only, ordered by seq)."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from predledger.models.market import Outcome, ResolvedOutcome


class LedgerEvent(BaseModel):
    """Common envelope. seq and timestamp are assigned when the operation commits."""

    model_config = {"frozen": True}

    seq: int = 0
    timestamp: int = 0


class Deposit(LedgerEvent):
    kind: Literal["Deposit"] = "Deposit"
    user: str
    amount: int  # net credited
    new_balance: int


class FeeCollected(LedgerEvent):
    kind: Literal["FeeCollected"] = "FeeCollected"
    user: str
    gross_amount: int
    fee_amount: int
    net_amount: int
    maintenance_contract: str


class Withdraw(LedgerEvent):
    kind: Literal["Withdraw"] = "Withdraw"
    user: str
    amount: int
    new_balance: int


class MarketCreated(LedgerEvent):
    kind: Literal["MarketCreated"] = "MarketCreated"
    market_id: int
    creator: str
    resolution_time: int
    initial_liquidity: int


class BetPlaced(LedgerEvent):
    kind: Literal["BetPlaced"] = "BetPlaced"
    user: str
    market_id: int
    outcome: Outcome
    amount: int
    percentage_a: int
    percentage_b: int
    total_liquidity: int


class MarketResolved(LedgerEvent):
    kind: Literal["MarketResolved"] = "MarketResolved"
    market_id: int
    resolver: str
    outcome: ResolvedOutcome
    resolution_timestamp: int


class WinningsClaimed(LedgerEvent):
    kind: Literal["WinningsClaimed"] = "WinningsClaimed"
    user: str
    market_id: int
    winnings: int
    bet_amount: int


class MaintenanceContractUpdated(LedgerEvent):
    kind: Literal["MaintenanceContractUpdated"] = "MaintenanceContractUpdated"
    old_contract: str
    new_contract: str


class OwnershipTransferred(LedgerEvent):
    kind: Literal["OwnershipTransferred"] = "OwnershipTransferred"
    previous_owner: str
    new_owner: str


AnyLedgerEvent = Annotated[
    Union[
        Deposit,
        FeeCollected,
        Withdraw,
        MarketCreated,
        BetPlaced,
        MarketResolved,
        WinningsClaimed,
        MaintenanceContractUpdated,
        OwnershipTransferred,
    ],
    Field(discriminator="kind"),
]

_event_adapter: TypeAdapter[AnyLedgerEvent] = TypeAdapter(AnyLedgerEvent)


def parse_event(data: dict | str) -> LedgerEvent:
    """Rebuild a typed record from its JSON (or dict) form."""
    if isinstance(data, str):
        return _event_adapter.validate_json(data)
    return _event_adapter.validate_python(data)
