"""Internal balances: deposit with 1% fee skim, withdrawal against the external token."""

from __future__ import annotations

from typing import Any, Callable

import structlog

from predledger.ledger.errors import InsufficientBalance, TokenTransferFailed
from predledger.ledger.fees import DEPOSIT_FEE_BPS, check_amount, checked_add, split
from predledger.ledger.state import Transaction
from predledger.models.events import Deposit, FeeCollected, Withdraw
from predledger.token.base import TokenLedger

log = structlog.get_logger(__name__)


def call_token(op: str, fn: Callable[..., bool], *args: Any) -> None:
    """Invoke a token method; a False return or an exception becomes TokenTransferFailed."""
    try:
        ok = fn(*args)
    except Exception as e:
        raise TokenTransferFailed(f"Token {op} raised: {e}", op=op) from e
    if not ok:
        raise TokenTransferFailed(f"Token {op} returned failure", op=op)


def deposit(tx: Transaction, token: TokenLedger, caller: str, amount: int) -> int:
    """Pull `amount` from caller, forward the fee, credit the net. Returns the net credited."""
    check_amount(amount)
    fee_amount, net = split(amount, DEPOSIT_FEE_BPS)
    new_balance = checked_add(tx.balance(caller), net)

    call_token("transfer_from", token.transfer_from, tx.address, caller, tx.address, amount)
    sink = tx.maintenance_contract
    if fee_amount > 0 and sink != tx.address:
        try:
            call_token("transfer", token.transfer, tx.address, sink, fee_amount)
        except TokenTransferFailed:
            # The pull already happened outside the staged transaction
            _refund(token, tx.address, caller, amount)
            raise

    tx.set_balance(caller, new_balance)
    tx.emit(Deposit(user=caller, amount=net, new_balance=new_balance))
    if fee_amount > 0:
        tx.emit(
            FeeCollected(
                user=caller,
                gross_amount=amount,
                fee_amount=fee_amount,
                net_amount=net,
                maintenance_contract=sink,
            )
        )
    return net


def _refund(token: TokenLedger, custody: str, user: str, amount: int) -> None:
    try:
        ok = token.transfer(custody, user, amount)
    except Exception:
        log.exception("deposit_refund_failed", user=user, amount=amount)
        return
    if not ok:
        log.error("deposit_refund_failed", user=user, amount=amount)


def withdraw(tx: Transaction, token: TokenLedger, caller: str, amount: int) -> int:
    """Debit then push tokens out. Returns the new balance."""
    check_amount(amount)
    balance = tx.balance(caller)
    if balance < amount:
        raise InsufficientBalance(
            f"Balance {balance} < {amount}", user=caller, balance=balance, amount=amount
        )
    new_balance = balance - amount
    tx.set_balance(caller, new_balance)
    call_token("transfer", token.transfer, tx.address, caller, amount)
    tx.emit(Withdraw(user=caller, amount=amount, new_balance=new_balance))
    return new_balance
