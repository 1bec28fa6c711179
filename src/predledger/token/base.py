"""External fungible-token ledger protocol. The acting identity is always explicit."""

from __future__ import annotations

from typing import Protocol


class TokenLedger(Protocol):
    """ERC-20 style token consumed by the prediction market for deposits and withdrawals."""

    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...
    def transfer_from(self, spender: str, holder: str, recipient: str, amount: int) -> bool: ...
    def balance_of(self, identity: str) -> int: ...
    def approve(self, holder: str, spender: str, amount: int) -> bool: ...
