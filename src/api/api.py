import logging
from contextlib import asynccontextmanager
from time import perf_counter
from typing import Annotated, Any, AsyncGenerator, Awaitable, Callable

from fastapi import Body, Depends, FastAPI, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from api.dependencies import get_price_lookup
from domain.calculator import CalculationResult, calculate_parsed
from domain.calculator_input import InputValidationError, validate_and_parse
from domain.tickers import DEFAULT_CATALOG, Ticker
from services.price_lookup import PriceLookup, build_price_lookup
from services.price_types import PriceFetchError
from utils.formatting import currency_symbol, render_result

logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PriceResponse(_CamelModel):
    symbol: str
    available: bool
    provider_id: str | None = None
    price: float | None = None
    currency: str | None = None


class CalculationResponse(_CamelModel):
    result: CalculationResult
    display: list[str]
    warnings: list[str]


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    fastapi_app.state.price_lookup = build_price_lookup()
    yield


app = FastAPI(lifespan=lifespan)


@app.middleware("http")
async def log_process_time(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    start_time = perf_counter()
    response = await call_next(request)
    process_time = perf_counter() - start_time
    logger.info("Request time: %s %s: %.4fs", request.method, request.url, process_time)
    return response


@app.exception_handler(InputValidationError)
async def input_validation_error_handler(request: Request, exc: InputValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": exc.errors})


@app.get("/tickers")
def get_tickers() -> list[Ticker]:
    return list(DEFAULT_CATALOG)


@app.get("/prices/{symbol}")
async def get_price(symbol: str, lookup: Annotated[PriceLookup, Depends(get_price_lookup)]) -> PriceResponse:
    try:
        quote = await run_in_threadpool(lookup.lookup, symbol)
    except PriceFetchError as exc:
        logger.warning("Price lookup for %s failed: %s", symbol, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    if quote is None:
        return PriceResponse(symbol=symbol.upper(), available=False)
    return PriceResponse(
        symbol=quote.symbol,
        available=True,
        provider_id=quote.provider_id,
        price=quote.price,
        currency=quote.currency,
    )


@app.post("/calculate")
def post_calculate(form: Annotated[dict[str, Any], Body()]) -> CalculationResponse:
    parsed = validate_and_parse(form)
    result = calculate_parsed(parsed)
    symbol = currency_symbol(str(form.get("currency", "USD")).strip() or "USD")
    return CalculationResponse(result=result, display=render_result(result, symbol), warnings=list(parsed.warnings))
