"""Canonical schema (Pydantic) - Market, Outcome, audit records."""

from predledger.models.events import (
    BetPlaced,
    Deposit,
    FeeCollected,
    LedgerEvent,
    MaintenanceContractUpdated,
    MarketCreated,
    MarketResolved,
    OwnershipTransferred,
    WinningsClaimed,
    Withdraw,
    parse_event,
)
from predledger.models.market import BPS_SCALE, Market, Outcome, ResolvedOutcome

__all__ = [
    "BPS_SCALE",
    "Market",
    "Outcome",
    "ResolvedOutcome",
    "LedgerEvent",
    "Deposit",
    "FeeCollected",
    "Withdraw",
    "MarketCreated",
    "BetPlaced",
    "MarketResolved",
    "WinningsClaimed",
    "MaintenanceContractUpdated",
    "OwnershipTransferred",
    "parse_event",
]
