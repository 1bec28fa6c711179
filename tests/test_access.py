"""Owner gate and administrative updates."""

import pytest

from conftest import LEDGER, OWNER, SINK
from predledger.ledger.errors import InvalidIdentity, NotOwner
from predledger.models.events import MaintenanceContractUpdated, OwnershipTransferred


def test_reads(engine):
    assert engine.get_owner() == OWNER
    assert engine.get_token_address() == "token"
    assert engine.get_maintenance_contract() == SINK
    assert engine.address == LEDGER


def test_set_maintenance_contract(engine):
    engine.set_maintenance_contract(OWNER, "new-sink")
    assert engine.get_maintenance_contract() == "new-sink"
    record = engine.get_events()[-1]
    assert isinstance(record, MaintenanceContractUpdated)
    assert (record.old_contract, record.new_contract) == (SINK, "new-sink")


def test_set_maintenance_contract_requires_owner(engine):
    with pytest.raises(NotOwner):
        engine.set_maintenance_contract("mallory", "mallory")
    assert engine.get_maintenance_contract() == SINK


def test_set_maintenance_contract_rejects_empty(engine):
    with pytest.raises(InvalidIdentity):
        engine.set_maintenance_contract(OWNER, "  ")


def test_transfer_ownership(engine):
    engine.transfer_ownership(OWNER, "carol")
    assert engine.get_owner() == "carol"
    assert isinstance(engine.get_events()[-1], OwnershipTransferred)
    with pytest.raises(NotOwner):
        engine.set_maintenance_contract(OWNER, "x")
    engine.set_maintenance_contract("carol", "x")
    assert engine.get_maintenance_contract() == "x"


def test_market_creation_is_open(engine):
    assert engine.create_market("anyone", 5000) == 1
