"""Authoritative ledger store and the staged transaction every mutation runs in.

Writes go to overlay maps on a Transaction; reads fall through to committed
state. `commit()` applies the overlay in one step, so an operation that raises
part-way leaves the store exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from predledger.models.events import LedgerEvent
from predledger.models.market import Market, Outcome

K = TypeVar("K")
V = TypeVar("V")

BetKey = tuple[str, int, Outcome]  # (identity, market_id, outcome)
TotalKey = tuple[int, Outcome]  # (market_id, outcome)
ClaimKey = tuple[str, int]  # (identity, market_id)


@dataclass
class LedgerState:
    """Every entity of the ledger plus its configuration singletons."""

    owner: str
    token_address: str
    address: str
    maintenance_contract: str
    market_count: int = 0
    event_seq: int = 0
    balances: dict[str, int] = field(default_factory=dict)
    markets: dict[int, Market] = field(default_factory=dict)
    bets: dict[BetKey, int] = field(default_factory=dict)
    outcome_totals: dict[TotalKey, int] = field(default_factory=dict)
    claims: dict[ClaimKey, bool] = field(default_factory=dict)
    # Records committed by this process (since load); persisted ones live in storage
    events: list[LedgerEvent] = field(default_factory=list)


class _Overlay(Generic[K, V]):
    """Write-buffer over a committed dict."""

    __slots__ = ("_base", "_writes")

    def __init__(self, base: dict[K, V]) -> None:
        self._base = base
        self._writes: dict[K, V] = {}

    def get(self, key: K, default: V) -> V:
        if key in self._writes:
            return self._writes[key]
        return self._base.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._writes or key in self._base

    def __setitem__(self, key: K, value: V) -> None:
        self._writes[key] = value

    def staged(self, key: K) -> bool:
        return key in self._writes

    def commit(self) -> None:
        self._base.update(self._writes)
        self._writes.clear()


class Transaction:
    """Staged view of LedgerState for one operation. Discard by dropping it."""

    def __init__(self, state: LedgerState) -> None:
        self._state = state
        self._balances: _Overlay[str, int] = _Overlay(state.balances)
        self._markets: _Overlay[int, Market] = _Overlay(state.markets)
        self._bets: _Overlay[BetKey, int] = _Overlay(state.bets)
        self._totals: _Overlay[TotalKey, int] = _Overlay(state.outcome_totals)
        self._claims: _Overlay[ClaimKey, bool] = _Overlay(state.claims)
        self._config: dict[str, str] = {}
        self._market_count = state.market_count
        self._events: list[LedgerEvent] = []
        self._committed = False

    # --- configuration singletons ---
    @property
    def owner(self) -> str:
        return self._config.get("owner", self._state.owner)

    @owner.setter
    def owner(self, value: str) -> None:
        self._config["owner"] = value

    @property
    def maintenance_contract(self) -> str:
        return self._config.get("maintenance_contract", self._state.maintenance_contract)

    @maintenance_contract.setter
    def maintenance_contract(self, value: str) -> None:
        self._config["maintenance_contract"] = value

    @property
    def token_address(self) -> str:
        return self._state.token_address

    @property
    def address(self) -> str:
        return self._state.address

    # --- balances ---
    def balance(self, identity: str) -> int:
        return self._balances.get(identity, 0)

    def set_balance(self, identity: str, amount: int) -> None:
        self._balances[identity] = amount

    # --- markets ---
    @property
    def market_count(self) -> int:
        return self._market_count

    def next_market_id(self) -> int:
        self._market_count += 1
        return self._market_count

    def market(self, market_id: int) -> Market | None:
        return self._markets.get(market_id, None)

    def market_for_update(self, market_id: int) -> Market | None:
        """Return a private copy of the market that is committed with the transaction."""
        if self._markets.staged(market_id):
            return self._markets.get(market_id, None)
        market = self._state.markets.get(market_id)
        if market is None:
            return None
        market = market.model_copy()
        self._markets[market_id] = market
        return market

    def put_market(self, market: Market) -> None:
        self._markets[market.id] = market

    # --- bets and totals ---
    def bet(self, identity: str, market_id: int, outcome: Outcome) -> int:
        return self._bets.get((identity, market_id, outcome), 0)

    def set_bet(self, identity: str, market_id: int, outcome: Outcome, amount: int) -> None:
        self._bets[(identity, market_id, outcome)] = amount

    def outcome_total(self, market_id: int, outcome: Outcome) -> int:
        return self._totals.get((market_id, outcome), 0)

    def set_outcome_total(self, market_id: int, outcome: Outcome, amount: int) -> None:
        self._totals[(market_id, outcome)] = amount

    # --- claims ---
    def claimed(self, identity: str, market_id: int) -> bool:
        return self._claims.get((identity, market_id), False)

    def mark_claimed(self, identity: str, market_id: int) -> None:
        self._claims[(identity, market_id)] = True

    # --- audit records ---
    def emit(self, event: LedgerEvent) -> None:
        self._events.append(event)

    def commit(self, now: int) -> list[LedgerEvent]:
        """Apply every staged write and append staged records. Returns the committed records."""
        if self._committed:
            raise RuntimeError("Transaction already committed")
        state = self._state
        self._balances.commit()
        self._markets.commit()
        self._bets.commit()
        self._totals.commit()
        self._claims.commit()
        for name, value in self._config.items():
            setattr(state, name, value)
        state.market_count = self._market_count
        committed = []
        for event in self._events:
            state.event_seq += 1
            stamped = event.model_copy(update={"seq": state.event_seq, "timestamp": now})
            state.events.append(stamped)
            committed.append(stamped)
        self._committed = True
        return committed
