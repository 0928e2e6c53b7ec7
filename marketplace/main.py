import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.api.v1.router import router as v1_router
from marketplace.core.config import settings
from marketplace.core.errors import GENERIC_ERROR, MarketplaceError, validation_error_from
from marketplace.core.telemetry import setup_logging, setup_telemetry
from marketplace.services.uploads import get_upload_store

log = logging.getLogger(__name__)

setup_logging()

app = FastAPI(title="Marketplace API", version="0.1.0")

setup_telemetry(app)
app.include_router(v1_router)
app.mount(settings.upload_url_prefix, StaticFiles(directory=get_upload_store().base), name="uploads")


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    err = validation_error_from(list(exc.errors()))
    return JSONResponse(status_code=err.status_code, content=err.to_body())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": GENERIC_ERROR})
