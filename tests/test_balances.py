"""Deposit / withdraw tests against the sandbox token."""

import pytest

from conftest import LEDGER, OWNER, SINK
from predledger.ledger.engine import PredictionMarket
from predledger.ledger.errors import InsufficientBalance, InvalidAmount, TokenTransferFailed
from predledger.models.events import Deposit, FeeCollected, Withdraw
from predledger.token.memory import InMemoryToken


def test_deposit_skims_fee_to_sink(engine, token):
    token.mint("alice", 1000)
    token.approve("alice", LEDGER, 1000)
    net = engine.deposit("alice", 1000)
    assert net == 990
    assert engine.get_balance("alice") == 990
    assert token.balance_of(SINK) == 10
    assert token.balance_of(LEDGER) == 990
    assert token.balance_of("alice") == 0


def test_deposit_emits_deposit_then_fee_record(engine, fund):
    fund("alice", 1000)
    deposit, fee_record = engine.get_events()[-2:]
    assert isinstance(deposit, Deposit)
    assert (deposit.user, deposit.amount, deposit.new_balance) == ("alice", 990, 990)
    assert isinstance(fee_record, FeeCollected)
    assert (fee_record.gross_amount, fee_record.fee_amount, fee_record.net_amount) == (1000, 10, 990)
    assert fee_record.maintenance_contract == SINK
    assert deposit.seq + 1 == fee_record.seq


def test_small_deposit_has_no_fee_record(engine, fund):
    before = len(engine.get_events())
    assert fund("alice", 50) == 50
    new = engine.get_events()[before:]
    assert [type(e) for e in new] == [Deposit]


def test_fee_stays_in_custody_when_sink_is_ledger(token, clock):
    eng = PredictionMarket(OWNER, "token", token, address=LEDGER, clock=clock)
    assert eng.get_maintenance_contract() == LEDGER
    token.mint("bob", 1000)
    token.approve("bob", LEDGER, 1000)
    eng.deposit("bob", 1000)
    assert eng.get_balance("bob") == 990
    assert token.balance_of(LEDGER) == 1000


def test_deposit_rejects_zero(engine):
    with pytest.raises(InvalidAmount):
        engine.deposit("alice", 0)


def test_deposit_without_approval_fails_and_changes_nothing(engine, token):
    token.mint("alice", 1000)
    with pytest.raises(TokenTransferFailed):
        engine.deposit("alice", 1000)
    assert engine.get_balance("alice") == 0
    assert token.balance_of("alice") == 1000


class _FeeRefusingToken(InMemoryToken):
    def transfer(self, sender, recipient, amount):
        if recipient == SINK:
            return False
        return super().transfer(sender, recipient, amount)


def test_failed_fee_forward_refunds_and_rolls_back(clock):
    token = _FeeRefusingToken("token")
    eng = PredictionMarket(OWNER, "token", token, address=LEDGER, maintenance_contract=SINK, clock=clock)
    token.mint("alice", 1000)
    token.approve("alice", LEDGER, 1000)
    with pytest.raises(TokenTransferFailed):
        eng.deposit("alice", 1000)
    assert eng.get_balance("alice") == 0
    assert token.balance_of("alice") == 1000
    assert token.balance_of(LEDGER) == 0
    assert eng.get_events() == []


def test_withdraw(engine, token, fund):
    fund("alice", 1000)
    assert engine.withdraw("alice", 400) == 590
    assert engine.get_balance("alice") == 590
    assert token.balance_of("alice") == 400
    record = engine.get_events()[-1]
    assert isinstance(record, Withdraw)
    assert (record.amount, record.new_balance) == (400, 590)


def test_withdraw_more_than_balance(engine, fund):
    fund("alice", 1000)
    with pytest.raises(InsufficientBalance):
        engine.withdraw("alice", 991)
    assert engine.get_balance("alice") == 990


def test_withdraw_rolls_back_when_token_push_fails(engine, token, fund):
    fund("alice", 1000)
    # Drain custody behind the ledger's back so the push cannot succeed
    token.transfer(LEDGER, "elsewhere", 990)
    with pytest.raises(TokenTransferFailed):
        engine.withdraw("alice", 500)
    assert engine.get_balance("alice") == 990


def test_get_balance_unknown_identity(engine):
    assert engine.get_balance("nobody") == 0
