import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .chat.router import router as chat_router
from .config import settings
from .errors import register_exception_handlers
from .logging_utils import configure_logging, get_logger
from .market.router import router as market_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(
        environment=settings.environment,
        log_level=settings.log_level,
        log_format=settings.log_format,
    )
    logger.info(
        "finhub_api_started",
        port=settings.port,
        upstream_configured=bool(settings.finnhub_api_key),
        bot_configured=bool(settings.bot_url),
    )
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
register_exception_handlers(app)
app.include_router(market_router)
app.include_router(chat_router)


@app.get("/api/health")
def health() -> dict[str, Any]:
    return {"ok": True, "time": int(time.time() * 1000)}
