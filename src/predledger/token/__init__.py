"""External token collaborator: protocol and sandbox implementation."""

from predledger.token.base import TokenLedger
from predledger.token.memory import InMemoryToken

__all__ = ["TokenLedger", "InMemoryToken"]
