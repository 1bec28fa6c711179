"""Named failure kinds. Every rejected operation raises exactly one of these."""

from __future__ import annotations


class LedgerError(Exception):
    """Base for ledger failures. `code` is stable and machine-readable."""

    code = "ledger_error"

    def __init__(self, message: str | None = None, **context: object) -> None:
        self.context = context
        super().__init__(message or self.code)


# --- Input validation ---
class ValidationError(LedgerError):
    code = "validation_error"


class InvalidAmount(ValidationError):
    code = "invalid_amount"


class InvalidResolutionTime(ValidationError):
    code = "invalid_resolution_time"


class InvalidIdentity(ValidationError):
    code = "invalid_identity"


class InvalidOutcome(ValidationError):
    code = "invalid_outcome"


# --- State preconditions ---
class StateError(LedgerError):
    code = "state_error"


class InsufficientBalance(StateError):
    code = "insufficient_balance"


class MarketNotFound(StateError):
    code = "market_not_found"


class MarketNotActive(StateError):
    code = "market_not_active"


class MarketNotResolved(StateError):
    code = "market_not_resolved"


class CannotResolve(StateError):
    code = "cannot_resolve"


class AlreadyClaimed(StateError):
    code = "already_claimed"


class NoWinningBet(StateError):
    code = "no_winning_bet"


class AmountOverflow(StateError):
    code = "amount_overflow"


# --- Authorization ---
class AuthorizationError(LedgerError):
    code = "authorization_error"


class NotOwner(AuthorizationError):
    code = "not_owner"


# --- External collaborator ---
class CollaboratorError(LedgerError):
    code = "collaborator_error"


class TokenTransferFailed(CollaboratorError):
    code = "token_transfer_failed"
