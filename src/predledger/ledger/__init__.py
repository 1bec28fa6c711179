"""Accounting and settlement core."""

from predledger.ledger.engine import PredictionMarket, wall_clock
from predledger.ledger.errors import (
    AlreadyClaimed,
    AmountOverflow,
    AuthorizationError,
    CannotResolve,
    CollaboratorError,
    InsufficientBalance,
    InvalidAmount,
    InvalidIdentity,
    InvalidOutcome,
    InvalidResolutionTime,
    LedgerError,
    MarketNotActive,
    MarketNotFound,
    MarketNotResolved,
    NoWinningBet,
    NotOwner,
    StateError,
    TokenTransferFailed,
    ValidationError,
)
from predledger.ledger.state import LedgerState, Transaction

__all__ = [
    "PredictionMarket",
    "wall_clock",
    "LedgerState",
    "Transaction",
    "LedgerError",
    "ValidationError",
    "StateError",
    "AuthorizationError",
    "CollaboratorError",
    "InvalidAmount",
    "InvalidResolutionTime",
    "InvalidIdentity",
    "InvalidOutcome",
    "InsufficientBalance",
    "MarketNotFound",
    "MarketNotActive",
    "MarketNotResolved",
    "CannotResolve",
    "AlreadyClaimed",
    "NoWinningBet",
    "AmountOverflow",
    "NotOwner",
    "TokenTransferFailed",
]
