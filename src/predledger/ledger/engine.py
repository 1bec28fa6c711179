"""PredictionMarket - the public operation surface over one authoritative store.

Each mutating call runs under the engine lock inside a staged Transaction and
is committed only if every guard and token call succeeds. Caller identity and
the current time are explicit arguments; `now` falls back to the injected
clock, read once per call.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator

import structlog

from predledger.ledger import access, balances, betting, registry, settlement
from predledger.ledger.errors import LedgerError
from predledger.ledger.state import LedgerState, Transaction
from predledger.models.events import LedgerEvent
from predledger.models.market import Market, Outcome
from predledger.token.base import TokenLedger

log = structlog.get_logger(__name__)

Clock = Callable[[], int]


def wall_clock() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


class PredictionMarket:
    """Binary-outcome prediction market ledger."""

    def __init__(
        self,
        owner: str,
        token_address: str,
        token: TokenLedger,
        *,
        address: str = "prediction-market",
        maintenance_contract: str | None = None,
        clock: Clock | None = None,
        state: LedgerState | None = None,
    ) -> None:
        if state is None:
            access.check_identity(owner)
            access.check_identity(token_address)
            access.check_identity(address)
            state = LedgerState(
                owner=owner,
                token_address=token_address,
                address=address,
                maintenance_contract=maintenance_contract or address,
            )
        self._state = state
        self._token = token
        self._clock = clock or wall_clock
        self._lock = threading.RLock()

    @classmethod
    def from_state(cls, state: LedgerState, token: TokenLedger, clock: Clock | None = None) -> PredictionMarket:
        """Wrap an existing (e.g. loaded from storage) state."""
        return cls(state.owner, state.token_address, token, address=state.address, clock=clock, state=state)

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def address(self) -> str:
        return self._state.address

    def _now(self, now: int | None) -> int:
        return self._clock() if now is None else now

    @contextmanager
    def _transaction(self, op: str, caller: str, now: int) -> Iterator[Transaction]:
        with self._lock:
            tx = Transaction(self._state)
            try:
                yield tx
            except LedgerError as e:
                log.warning("ledger_operation_rejected", op=op, caller=caller, code=e.code, error=str(e))
                raise
            tx.commit(now)

    @contextmanager
    def _view(self) -> Iterator[Transaction]:
        """Read-only view of committed state; never committed."""
        with self._lock:
            yield Transaction(self._state)

    # --- Balance Ledger ---
    def deposit(self, caller: str, amount: int, now: int | None = None) -> int:
        """Deposit `amount` external tokens (caller must have approved this ledger). Returns net credited."""
        now = self._now(now)
        with self._transaction("deposit", caller, now) as tx:
            access.check_identity(caller)
            net = balances.deposit(tx, self._token, caller, amount)
            log.info("deposit_applied", user=caller, gross=amount, net=net)
        return net

    def withdraw(self, caller: str, amount: int, now: int | None = None) -> int:
        """Withdraw `amount` to the caller's external account. Returns the new balance."""
        now = self._now(now)
        with self._transaction("withdraw", caller, now) as tx:
            access.check_identity(caller)
            new_balance = balances.withdraw(tx, self._token, caller, amount)
            log.info("withdraw_applied", user=caller, amount=amount, new_balance=new_balance)
        return new_balance

    def get_balance(self, identity: str) -> int:
        with self._view() as tx:
            return tx.balance(identity)

    # --- Market Registry ---
    def create_market(
        self,
        caller: str,
        resolution_time: int,
        initial_liquidity: int = 0,
        now: int | None = None,
    ) -> int:
        """Create a market resolving at `resolution_time`. Open to any caller. Returns the new id."""
        now = self._now(now)
        with self._transaction("create_market", caller, now) as tx:
            access.check_identity(caller)
            market = registry.create_market(tx, caller, resolution_time, initial_liquidity, now)
            log.info("market_created", market_id=market.id, creator=caller, resolution_time=resolution_time)
        return market.id

    def get_market_details(self, market_id: int) -> Market:
        with self._view() as tx:
            return registry.get_market(tx, market_id).model_copy()

    def get_all_market_ids(self) -> list[int]:
        with self._view() as tx:
            return registry.get_all_market_ids(tx)

    def get_market_count(self) -> int:
        with self._view() as tx:
            return tx.market_count

    def is_active(self, market_id: int, now: int | None = None) -> bool:
        now = self._now(now)
        return self.get_market_details(market_id).is_active(now)

    # --- Betting Engine ---
    def place_bet(
        self,
        caller: str,
        market_id: int,
        outcome: Outcome | bool | int | str,
        amount: int,
        now: int | None = None,
    ) -> None:
        """Stake `amount` on `outcome` (Outcome or flag, True = A)."""
        now = self._now(now)
        with self._transaction("place_bet", caller, now) as tx:
            access.check_identity(caller)
            side = betting.parse_outcome(outcome)
            market = betting.place_bet(tx, caller, market_id, side, amount, now)
            log.info(
                "bet_placed",
                user=caller,
                market_id=market_id,
                outcome=side.name,
                amount=amount,
                percentage_a=market.total_percentage_a,
                percentage_b=market.total_percentage_b,
                total_liquidity=market.total_liquidity,
            )

    def get_market_percentages(self, market_id: int) -> tuple[int, int]:
        with self._view() as tx:
            return betting.get_market_percentages(tx, market_id)

    def get_user_bet(self, identity: str, market_id: int, outcome: Outcome | bool) -> int:
        with self._view() as tx:
            return tx.bet(identity, market_id, betting.parse_outcome(outcome))

    def get_total_bets_for_outcome(self, market_id: int, outcome: Outcome | bool) -> int:
        with self._view() as tx:
            return tx.outcome_total(market_id, betting.parse_outcome(outcome))

    def get_user_position(self, identity: str, market_id: int) -> dict[str, int | bool]:
        """Stakes on A and B plus the claim flag for one user in one market."""
        with self._view() as tx:
            return {
                "bet_a": tx.bet(identity, market_id, Outcome.A),
                "bet_b": tx.bet(identity, market_id, Outcome.B),
                "claimed": tx.claimed(identity, market_id),
            }

    # --- Resolution & Settlement ---
    def resolve_market(self, caller: str, market_id: int, winner_is_a: bool, now: int | None = None) -> None:
        now = self._now(now)
        with self._transaction("resolve_market", caller, now) as tx:
            market = settlement.resolve_market(tx, caller, market_id, winner_is_a, now)
            log.info("market_resolved", market_id=market_id, resolver=caller, outcome=market.resolved_outcome.name)

    def can_resolve(self, market_id: int, now: int | None = None) -> bool:
        now = self._now(now)
        return self.get_market_details(market_id).can_resolve(now)

    def claim_winnings(self, caller: str, market_id: int, now: int | None = None) -> int:
        """Credit the caller's share of a resolved market. Returns the amount credited."""
        now = self._now(now)
        with self._transaction("claim_winnings", caller, now) as tx:
            winnings = settlement.claim_winnings(tx, caller, market_id)
            log.info("winnings_claimed", user=caller, market_id=market_id, winnings=winnings)
        return winnings

    def has_claimed(self, identity: str, market_id: int) -> bool:
        with self._view() as tx:
            return tx.claimed(identity, market_id)

    # --- Access Control ---
    def set_maintenance_contract(self, caller: str, new_contract: str, now: int | None = None) -> None:
        now = self._now(now)
        with self._transaction("set_maintenance_contract", caller, now) as tx:
            access.set_maintenance_contract(tx, caller, new_contract)
            log.info("maintenance_contract_updated", new_contract=new_contract)

    def transfer_ownership(self, caller: str, new_owner: str, now: int | None = None) -> None:
        now = self._now(now)
        with self._transaction("transfer_ownership", caller, now) as tx:
            access.transfer_ownership(tx, caller, new_owner)
            log.info("ownership_transferred", previous_owner=caller, new_owner=new_owner)

    def get_owner(self) -> str:
        return self._state.owner

    def get_maintenance_contract(self) -> str:
        return self._state.maintenance_contract

    def get_token_address(self) -> str:
        return self._state.token_address

    # --- Audit log ---
    def get_events(self, since_seq: int = 0) -> list[LedgerEvent]:
        """Records committed by this engine with seq > since_seq, in order."""
        with self._lock:
            return [e for e in self._state.events if e.seq > since_seq]
