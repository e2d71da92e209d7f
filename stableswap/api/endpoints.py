"""Quote endpoints."""

import asyncio
import time
from collections.abc import Callable
from typing import Any

import structlog
from fastapi import APIRouter, Depends

from stableswap.errors import InvalidInput
from stableswap.models.quote import (
    DepositRequest,
    DepositResponse,
    InitializeRequest,
    InitializeResponse,
    QuoteRequest,
    SwapRequest,
    SwapResponse,
    WithdrawOneRequest,
    WithdrawOneResponse,
    WithdrawRequest,
    WithdrawResponse,
)
from stableswap.quotes import (
    quote_deposit,
    quote_initialize,
    quote_swap,
    quote_withdraw,
    quote_withdraw_one,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/quote")

Clock = Callable[[], int]


def get_clock() -> Clock:
    """Dependency provider for the pricing clock.

    Override this in tests to pin the time a quote is priced at:
        app.dependency_overrides[get_clock] = lambda: lambda: 1_700_000_000

    Returns:
        A callable returning the current unix timestamp.
    """
    return lambda: int(time.time())


def _now(request: QuoteRequest, clock: Clock) -> int:
    return request.now if request.now is not None else clock()


async def _offload(func: Callable[..., Any], *args: Any) -> Any:
    """Run a quote in the default executor, off the event loop."""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, func, *args)


def _noop(operation: str) -> InvalidInput:
    logger.debug("noop_quote", operation=operation)
    return InvalidInput(f"{operation} with a zero amount is a no-op")


@router.post("/initialize", response_model=InitializeResponse)
async def initialize(request: InitializeRequest) -> InitializeResponse:
    """Amplification state and bootstrap LP mint for a new pool."""
    quote = await _offload(
        quote_initialize, request.amp_factor, int(request.reserve_a), int(request.reserve_b)
    )
    return InitializeResponse.from_quote(quote)


@router.post("/swap", response_model=SwapResponse)
async def swap(request: SwapRequest, clock: Clock = Depends(get_clock)) -> SwapResponse:
    """Price a swap."""
    quote = await _offload(
        quote_swap,
        request.pool.to_config(),
        request.pool.reserves.to_snapshot(),
        _now(request, clock),
        int(request.amount_in),
        int(request.minimum_amount_out),
        request.direction,
    )
    if quote is None:
        raise _noop("swap")
    return SwapResponse.from_quote(quote)


@router.post("/deposit", response_model=DepositResponse)
async def deposit(request: DepositRequest, clock: Clock = Depends(get_clock)) -> DepositResponse:
    """Price a two-asset deposit."""
    quote = await _offload(
        quote_deposit,
        request.pool.to_config(),
        request.pool.reserves.to_snapshot(),
        _now(request, clock),
        int(request.amount_a),
        int(request.amount_b),
        int(request.min_mint_amount),
    )
    if quote is None:
        raise _noop("deposit")
    return DepositResponse.from_quote(quote)


@router.post("/withdraw", response_model=WithdrawResponse)
async def withdraw(request: WithdrawRequest) -> WithdrawResponse:
    """Price a proportional withdrawal."""
    quote = await _offload(
        quote_withdraw,
        request.pool.to_config(),
        request.pool.reserves.to_snapshot(),
        int(request.pool_token_amount),
        int(request.minimum_token_a_amount),
        int(request.minimum_token_b_amount),
    )
    if quote is None:
        raise _noop("withdraw")
    return WithdrawResponse.from_quote(quote)


@router.post("/withdraw-one", response_model=WithdrawOneResponse)
async def withdraw_one(
    request: WithdrawOneRequest, clock: Clock = Depends(get_clock)
) -> WithdrawOneResponse:
    """Price a single-asset withdrawal."""
    quote = await _offload(
        quote_withdraw_one,
        request.pool.to_config(),
        request.pool.reserves.to_snapshot(),
        _now(request, clock),
        int(request.pool_token_amount),
        int(request.minimum_token_amount),
        request.base,
    )
    if quote is None:
        raise _noop("withdraw_one")
    return WithdrawOneResponse.from_quote(quote)
