"""Market, Outcome, ResolvedOutcome - canonical ledger entities."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, Field

BPS_SCALE = 10_000


class Outcome(IntEnum):
    """One of the two outcomes a bet can back."""

    A = 1
    B = 2

    @classmethod
    def from_flag(cls, is_a: bool) -> Outcome:
        return cls.A if is_a else cls.B

    @classmethod
    def parse(cls, value: str | int | bool | Outcome) -> Outcome:
        """Accept Outcome, bool flag (True = A), 1/2 or 'a'/'b'."""
        if isinstance(value, Outcome):
            return value
        if isinstance(value, bool):
            return cls.from_flag(value)
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip().upper()
        if name in ("A", "1", "TRUE", "YES"):
            return cls.A
        if name in ("B", "2", "FALSE", "NO"):
            return cls.B
        raise ValueError(f"Unknown outcome: {value!r}")


class ResolvedOutcome(IntEnum):
    """Market resolution state. UNRESOLVED is the only non-terminal value."""

    UNRESOLVED = 0
    OUTCOME_A = 1
    OUTCOME_B = 2

    @property
    def winner(self) -> Outcome | None:
        if self == ResolvedOutcome.UNRESOLVED:
            return None
        return Outcome(int(self))


class Market(BaseModel):
    """Binary market record. Liquidity and percentages change with every bet."""

    id: int = Field(..., ge=1)
    resolution_time: int
    resolved_outcome: ResolvedOutcome = ResolvedOutcome.UNRESOLVED
    creator: str
    total_liquidity: int = Field(0, ge=0)
    total_percentage_a: int = Field(0, ge=0, le=BPS_SCALE)  # basis points
    total_percentage_b: int = Field(0, ge=0, le=BPS_SCALE)  # basis points
    created_at: int

    @property
    def is_resolved(self) -> bool:
        return self.resolved_outcome != ResolvedOutcome.UNRESOLVED

    def is_active(self, now: int) -> bool:
        """Open for betting: unresolved and before the resolution deadline."""
        return not self.is_resolved and now < self.resolution_time

    def can_resolve(self, now: int) -> bool:
        """Unresolved and at or past the resolution deadline."""
        return not self.is_resolved and now >= self.resolution_time
