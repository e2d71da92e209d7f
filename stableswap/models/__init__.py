"""Pydantic models for the quote API."""

from stableswap.models.quote import (
    AmpModel,
    DepositRequest,
    DepositResponse,
    ErrorResponse,
    FeeFields,
    InitializeRequest,
    InitializeResponse,
    PackedFees,
    PoolModel,
    ReservesModel,
    SwapRequest,
    SwapResponse,
    WithdrawOneRequest,
    WithdrawOneResponse,
    WithdrawRequest,
    WithdrawResponse,
)
from stableswap.models.types import Bytes, Uint64

__all__ = [
    # Types
    "Bytes",
    "Uint64",
    # Pool state
    "AmpModel",
    "FeeFields",
    "PackedFees",
    "PoolModel",
    "ReservesModel",
    # Requests
    "InitializeRequest",
    "SwapRequest",
    "DepositRequest",
    "WithdrawRequest",
    "WithdrawOneRequest",
    # Responses
    "InitializeResponse",
    "SwapResponse",
    "DepositResponse",
    "WithdrawResponse",
    "WithdrawOneResponse",
    "ErrorResponse",
]
