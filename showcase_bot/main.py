import os

from fastapi import Depends, FastAPI, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from showcase_bot import __version__
from showcase_bot.config import settings
from showcase_bot.dependencies import get_store
from showcase_bot.logging_config import get_logger, setup_logging
from showcase_bot.routers import assets, showcase, telegram_webhook
from showcase_bot.schemas.showcase import HealthResponse
from showcase_bot.services.store import DocumentStore

setup_logging(settings.log_level)
logger = get_logger("main")

app = FastAPI(
    title="Showcase Bot",
    description="Telegram bot and public API for the student work showcase",
    version=__version__,
)

cors_env = os.environ.get("CORS_ALLOW_ORIGINS", "*")
cors_origins = [origin.strip() for origin in cors_env.split(",") if origin.strip()]
if not cors_origins:
    cors_origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(telegram_webhook.router)
app.include_router(showcase.router)
app.include_router(assets.router)


@app.get("/health", response_model=HealthResponse)
async def health(store: DocumentStore = Depends(get_store)):
    try:
        await run_in_threadpool(store.ping)
    except Exception as e:
        logger.error(f"Health check failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "error": str(e)},
        )
    return HealthResponse(status="ok", store=store.name)
