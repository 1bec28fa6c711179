"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. market_not_found")


# --- Config ---
class ConfigResponse(BaseModel):
    address: str
    owner: str
    token_address: str
    maintenance_contract: str
    market_count: int


# --- Balances ---
class AmountRequest(BaseModel):
    caller: str
    amount: int
    now: int | None = Field(None, description="Override current time (unix seconds)")


class BalanceResponse(BaseModel):
    identity: str
    balance: int


class DepositResponse(BalanceResponse):
    net_credited: int


# --- Markets ---
class CreateMarketRequest(BaseModel):
    caller: str
    resolution_time: int
    initial_liquidity: int = 0
    now: int | None = None


class MarketResponse(BaseModel):
    id: int
    resolution_time: int
    resolved_outcome: str
    creator: str
    total_liquidity: int
    total_percentage_a: int
    total_percentage_b: int
    created_at: int


class MarketsListResponse(BaseModel):
    markets: list[MarketResponse]
    total: int


class PercentagesResponse(BaseModel):
    market_id: int
    percentage_a: int
    percentage_b: int


# --- Bets / settlement ---
class BetRequest(BaseModel):
    caller: str
    outcome: Literal["A", "B"]
    amount: int
    now: int | None = None


class ResolveRequest(BaseModel):
    caller: str
    winner: Literal["A", "B"]
    now: int | None = None


class ClaimRequest(BaseModel):
    caller: str
    now: int | None = None


class ClaimResponse(BaseModel):
    market_id: int
    winnings: int
    balance: int


class PositionResponse(BaseModel):
    identity: str
    market_id: int
    bet_a: int
    bet_b: int
    claimed: bool


# --- Admin ---
class MaintenanceRequest(BaseModel):
    caller: str
    new_contract: str
    now: int | None = None


# --- Events ---
class EventsResponse(BaseModel):
    events: list[dict[str, Any]]
    total: int
