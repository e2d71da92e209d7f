"""FastAPI application serving stable swap quotes.

Every endpoint is a pure function of the request body (and the clock when
no timestamp is given), so the service keeps no state between requests.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stableswap import __version__
from stableswap.api.endpoints import router
from stableswap.errors import ExceededSlippage, SwapError
from stableswap.models.quote import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("STABLESWAP_HOST", "0.0.0.0")
PORT = int(os.environ.get("STABLESWAP_PORT", "8000"))
DEBUG = os.environ.get("STABLESWAP_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (64 KB); quote requests are small
MAX_REQUEST_SIZE = 64 * 1024

app = FastAPI(
    title="StableSwap quotes",
    description="Swap, deposit and withdrawal quotes for two-asset StableSwap pools",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(SwapError)
async def swap_error_handler(request: Request, exc: SwapError) -> JSONResponse:
    """Report a rejected quote as 400 with its error kind."""
    body = ErrorResponse(error=exc.kind, detail=str(exc))
    if isinstance(exc, ExceededSlippage):
        body.expected = str(exc.expected)
        body.actual = str(exc.actual)
    logger.info("quote_rejected", path=request.url.path, error=exc.kind)
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the quote API server.

    Configuration via environment variables:
    - STABLESWAP_HOST: Host to bind to (default: 0.0.0.0)
    - STABLESWAP_PORT: Port to bind to (default: 8000)
    - STABLESWAP_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "stableswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
