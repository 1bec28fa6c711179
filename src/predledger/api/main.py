"""FastAPI backend over the ledger. Each request runs one operation against DuckDB-backed state."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from predledger.api.schemas import (
    AmountRequest,
    BalanceResponse,
    BetRequest,
    ClaimRequest,
    ClaimResponse,
    ConfigResponse,
    CreateMarketRequest,
    DepositResponse,
    EventsResponse,
    HealthResponse,
    MaintenanceRequest,
    MarketResponse,
    MarketsListResponse,
    PercentagesResponse,
    PositionResponse,
    ResolveRequest,
)
from predledger.config import get_settings
from predledger.config.settings import Settings, configure_logging
from predledger.ledger.engine import PredictionMarket
from predledger.ledger.errors import (
    AuthorizationError,
    CollaboratorError,
    LedgerError,
    MarketNotFound,
    ValidationError,
)
from predledger.models.market import Market
from predledger.storage.db import get_connection, init_schema
from predledger.storage.event_log import list_events
from predledger.storage.ledger import ledger_session
from predledger.token.memory import InMemoryToken

# Set by run_api() (or tests) before serving.
_config_profile: str | None = None
_config_dir: Path | None = None
_db_path: str | None = None

# One ledger operation at a time across request threads
_ledger_lock = threading.Lock()

app = FastAPI(title="PredLedger API", version="0.1.0")


def _get_settings() -> Settings:
    overrides = {"storage": {"db_path": _db_path}} if _db_path else None
    return get_settings(_config_profile, config_dir=_config_dir, overrides=overrides)


@contextmanager
def _ledger(now: int | None = None) -> Iterator[tuple[PredictionMarket, InMemoryToken]]:
    settings = _get_settings()
    clock = (lambda: now) if now is not None else None
    with _ledger_lock:
        with ledger_session(settings.db_path, settings, clock=clock) as session:
            yield session


def _error_json(code: str, message: str, status_code: int = 404) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


def _status_for(error: LedgerError) -> int:
    if isinstance(error, ValidationError):
        return 422
    if isinstance(error, MarketNotFound):
        return 404
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, CollaboratorError):
        return 502
    return 409


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    return _error_json(exc.code, str(exc), _status_for(exc))


def _config_response(engine: PredictionMarket) -> ConfigResponse:
    return ConfigResponse(
        address=engine.address,
        owner=engine.get_owner(),
        token_address=engine.get_token_address(),
        maintenance_contract=engine.get_maintenance_contract(),
        market_count=engine.get_market_count(),
    )


def _market_response(m: Market) -> MarketResponse:
    return MarketResponse(
        id=m.id,
        resolution_time=m.resolution_time,
        resolved_outcome=m.resolved_outcome.name,
        creator=m.creator,
        total_liquidity=m.total_liquidity,
        total_percentage_a=m.total_percentage_a,
        total_percentage_b=m.total_percentage_b,
        created_at=m.created_at,
    )


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/config", response_model=ConfigResponse)
def config() -> ConfigResponse:
    with _ledger() as (engine, _token):
        return _config_response(engine)


@app.put("/config/maintenance-contract", response_model=ConfigResponse)
def set_maintenance_contract(req: MaintenanceRequest) -> ConfigResponse:
    with _ledger(req.now) as (engine, _token):
        engine.set_maintenance_contract(req.caller, req.new_contract)
        return _config_response(engine)


@app.get("/balances/{identity}", response_model=BalanceResponse)
def balance(identity: str) -> BalanceResponse:
    with _ledger() as (engine, _token):
        return BalanceResponse(identity=identity, balance=engine.get_balance(identity))


@app.post("/deposit", response_model=DepositResponse)
def deposit(req: AmountRequest) -> DepositResponse:
    with _ledger(req.now) as (engine, _token):
        net = engine.deposit(req.caller, req.amount)
        return DepositResponse(identity=req.caller, balance=engine.get_balance(req.caller), net_credited=net)


@app.post("/withdraw", response_model=BalanceResponse)
def withdraw(req: AmountRequest) -> BalanceResponse:
    with _ledger(req.now) as (engine, _token):
        new_balance = engine.withdraw(req.caller, req.amount)
        return BalanceResponse(identity=req.caller, balance=new_balance)


@app.get("/markets", response_model=MarketsListResponse)
def markets_list(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> MarketsListResponse:
    """List markets in id order with limit/offset."""
    with _ledger() as (engine, _token):
        ids = engine.get_all_market_ids()
        page = [_market_response(engine.get_market_details(mid)) for mid in ids[offset : offset + limit]]
        return MarketsListResponse(markets=page, total=len(ids))


@app.post("/markets", response_model=MarketResponse, status_code=201)
def create_market(req: CreateMarketRequest) -> MarketResponse:
    with _ledger(req.now) as (engine, _token):
        market_id = engine.create_market(req.caller, req.resolution_time, req.initial_liquidity)
        return _market_response(engine.get_market_details(market_id))


@app.get("/markets/{market_id}", response_model=MarketResponse)
def market_details(market_id: int) -> MarketResponse:
    with _ledger() as (engine, _token):
        return _market_response(engine.get_market_details(market_id))


@app.get("/markets/{market_id}/percentages", response_model=PercentagesResponse)
def market_percentages(market_id: int) -> PercentagesResponse:
    with _ledger() as (engine, _token):
        pct_a, pct_b = engine.get_market_percentages(market_id)
        return PercentagesResponse(market_id=market_id, percentage_a=pct_a, percentage_b=pct_b)


@app.post("/markets/{market_id}/bets", response_model=MarketResponse)
def place_bet(market_id: int, req: BetRequest) -> MarketResponse:
    with _ledger(req.now) as (engine, _token):
        engine.place_bet(req.caller, market_id, req.outcome, req.amount)
        return _market_response(engine.get_market_details(market_id))


@app.post("/markets/{market_id}/resolve", response_model=MarketResponse)
def resolve_market(market_id: int, req: ResolveRequest) -> MarketResponse:
    with _ledger(req.now) as (engine, _token):
        engine.resolve_market(req.caller, market_id, req.winner == "A")
        return _market_response(engine.get_market_details(market_id))


@app.post("/markets/{market_id}/claim", response_model=ClaimResponse)
def claim_winnings(market_id: int, req: ClaimRequest) -> ClaimResponse:
    with _ledger(req.now) as (engine, _token):
        winnings = engine.claim_winnings(req.caller, market_id)
        return ClaimResponse(market_id=market_id, winnings=winnings, balance=engine.get_balance(req.caller))


@app.get("/markets/{market_id}/positions/{identity}", response_model=PositionResponse)
def position(market_id: int, identity: str) -> PositionResponse:
    with _ledger() as (engine, _token):
        engine.get_market_details(market_id)
        pos = engine.get_user_position(identity, market_id)
        return PositionResponse(identity=identity, market_id=market_id, **pos)


@app.get("/events", response_model=EventsResponse)
def events(
    since_seq: int = Query(0, ge=0),
    kind: str | None = Query(None),
    limit: int = Query(100, ge=1, le=1000),
) -> EventsResponse:
    """Audit records in seq order."""
    settings = _get_settings()
    with _ledger_lock:
        conn = get_connection(settings.db_path)
        try:
            init_schema(conn)
            records = list_events(conn, since_seq=since_seq, kind=kind, limit=limit)
        finally:
            conn.close()
    return EventsResponse(events=[r.model_dump(mode="json") for r in records], total=len(records))


def run_api(
    host: str = "127.0.0.1",
    port: int = 8000,
    profile: str | None = None,
    db_path: str | None = None,
    config_dir: Path | None = None,
) -> None:
    global _config_profile, _config_dir, _db_path
    _config_profile = profile
    _config_dir = config_dir
    _db_path = db_path
    configure_logging(_get_settings())
    import uvicorn

    uvicorn.run(app, host=host, port=port, reload=False)
