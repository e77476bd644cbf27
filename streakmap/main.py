import logging
import os
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

# Load env from the working directory's .env before settings are read
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv()

from streakmap import __version__
from streakmap.api import health, heatmap, streaks
from streakmap.core.config import settings, validate_config
from streakmap.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    request_validation_error_handler,
    unhandled_exception_handler,
)
from streakmap.core.logging import configure_logging
from streakmap.core.middleware.request_id import RequestIdMiddleware
from streakmap.core.validation import validate_env

configure_logging(settings.ENV, settings.LOG_LEVEL)
validate_env()
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("streakmap")
    logger.info("Starting streakmap service...")
    app.state.startup_time = time.time()
    try:
        yield
    finally:
        logging.getLogger("streakmap").info("Stopping streakmap service...")


app = FastAPI(title="streakmap", version=__version__, lifespan=lifespan)

# Middlewares
app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(HTTPException, http_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(streaks.router)
app.include_router(heatmap.router)
app.include_router(health.router)
