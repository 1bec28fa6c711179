"""Single-owner gate and the owner-only administrative updates."""

from __future__ import annotations

from predledger.ledger.errors import InvalidIdentity, NotOwner
from predledger.ledger.state import Transaction
from predledger.models.events import MaintenanceContractUpdated, OwnershipTransferred


def check_identity(identity: str) -> str:
    if not isinstance(identity, str) or not identity.strip():
        raise InvalidIdentity(f"Invalid identity: {identity!r}", identity=identity)
    return identity


def require_owner(tx: Transaction, caller: str) -> None:
    if caller != tx.owner:
        raise NotOwner(f"{caller!r} is not the owner", caller=caller)


def set_maintenance_contract(tx: Transaction, caller: str, new_contract: str) -> None:
    require_owner(tx, caller)
    check_identity(new_contract)
    old = tx.maintenance_contract
    tx.maintenance_contract = new_contract
    tx.emit(MaintenanceContractUpdated(old_contract=old, new_contract=new_contract))


def transfer_ownership(tx: Transaction, caller: str, new_owner: str) -> None:
    require_owner(tx, caller)
    check_identity(new_owner)
    previous = tx.owner
    tx.owner = new_owner
    tx.emit(OwnershipTransferred(previous_owner=previous, new_owner=new_owner))
