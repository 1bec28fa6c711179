"""In-memory sandbox token with balances and allowances."""

from __future__ import annotations

import structlog

log = structlog.get_logger(__name__)


class InMemoryToken:
    """Fungible token kept in dicts. Failed transfers return False and change nothing."""

    def __init__(
        self,
        address: str = "token",
        balances: dict[str, int] | None = None,
        allowances: dict[tuple[str, str], int] | None = None,
    ) -> None:
        self.address = address
        self.balances: dict[str, int] = dict(balances or {})
        # (holder, spender) -> remaining allowance
        self.allowances: dict[tuple[str, str], int] = dict(allowances or {})

    def mint(self, recipient: str, amount: int) -> None:
        if amount <= 0:
            raise ValueError("Mint amount must be positive")
        self.balances[recipient] = self.balances.get(recipient, 0) + amount
        log.debug("token_minted", token=self.address, recipient=recipient, amount=amount)

    def balance_of(self, identity: str) -> int:
        return self.balances.get(identity, 0)

    def allowance(self, holder: str, spender: str) -> int:
        return self.allowances.get((holder, spender), 0)

    def approve(self, holder: str, spender: str, amount: int) -> bool:
        if amount < 0:
            return False
        self.allowances[(holder, spender)] = amount
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        if amount < 0 or self.balance_of(sender) < amount:
            log.debug("token_transfer_refused", token=self.address, sender=sender, amount=amount)
            return False
        self._move(sender, recipient, amount)
        return True

    def transfer_from(self, spender: str, holder: str, recipient: str, amount: int) -> bool:
        allowed = self.allowance(holder, spender)
        if amount < 0 or allowed < amount or self.balance_of(holder) < amount:
            log.debug(
                "token_transfer_from_refused",
                token=self.address,
                spender=spender,
                holder=holder,
                amount=amount,
                allowance=allowed,
            )
            return False
        self.allowances[(holder, spender)] = allowed - amount
        self._move(holder, recipient, amount)
        return True

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        self.balances[sender] = self.balances.get(sender, 0) - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount
