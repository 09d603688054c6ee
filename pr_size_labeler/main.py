import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pr_size_labeler.config import SettingsError, describe_settings, get_settings
from pr_size_labeler.dependencies import close_github_clients
from pr_size_labeler.logger import get_logger
from pr_size_labeler.sizes import DEFAULT_SIZES
from pr_size_labeler.webhook import router as webhook_router

logger = get_logger()

UNLOGGED_PATHS = frozenset({"/healthz"})


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        settings = get_settings()
    except SettingsError as exc:
        logger.error(f"Configuration incomplete, webhooks will be rejected: {exc}")
    else:
        logger.info(f"PR size labeler configured: {describe_settings(settings)}")
    logger.info(f"Size labels: {', '.join(DEFAULT_SIZES.labels)}")

    yield

    await close_github_clients()


app = FastAPI(title="PR Size Labeler", lifespan=lifespan)

app.include_router(webhook_router, tags=["webhook"])


@app.exception_handler(StarletteHTTPException)
async def _message_error_response(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.middleware("http")
async def _log_requests(request: Request, call_next):
    if request.url.path in UNLOGGED_PATHS:
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration:.3f}s)")
    return response


@app.get("/healthz", response_class=PlainTextResponse)
def healthz() -> str:
    return "OK"
