"""FastAPI application for the exchange.

Rate limiting and authentication are not handled here. Callers identify
themselves by address in the request body, which is only appropriate for
simulation and testing deployments.
"""

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cpamm import __version__
from cpamm.api.endpoints import router
from cpamm.config import ServiceConfig
from cpamm.errors import AmountOverflow, ErrorKind, ExchangeError
from cpamm.log import configure_logging
from cpamm.safe_int import Uint256Overflow

logger = structlog.get_logger()

# HTTP status per error kind
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.REENTRANT_CALL: 409,
    ErrorKind.INSUFFICIENT_FUNDS: 422,
    ErrorKind.SLIPPAGE_EXCEEDED: 422,
    ErrorKind.EMPTY_POOL: 422,
}

app = FastAPI(
    title="cpamm",
    description="Constant product AMM: one pool per asset against a base currency",
    version=__version__,
)


@app.exception_handler(ExchangeError)
async def exchange_error_handler(request: Request, exc: ExchangeError) -> JSONResponse:
    """Turn exchange failures into typed JSON errors."""
    status_code = STATUS_BY_KIND.get(exc.kind, 400)
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        kind=exc.kind.value,
        status=status_code,
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.exception_handler(Uint256Overflow)
async def overflow_handler(request: Request, exc: Uint256Overflow) -> JSONResponse:
    """Ledger arithmetic overflow outside a pool operation (e.g. faucet deposits)."""
    return await exchange_error_handler(request, AmountOverflow(str(exc)))


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables (see ServiceConfig):
    - CPAMM_HOST, CPAMM_PORT: bind address (default 0.0.0.0:8000)
    - CPAMM_DEBUG: enable reload mode (default false)
    - CPAMM_LOG_LEVEL, CPAMM_LOG_JSON: logging setup
    """
    config = ServiceConfig.from_env()
    configure_logging(config.log_level, json=config.log_json)
    uvicorn.run(
        "cpamm.api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    run()
