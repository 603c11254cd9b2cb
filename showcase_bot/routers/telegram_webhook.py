import json
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from showcase_bot.dependencies import get_bot_context
from showcase_bot.logging_config import get_logger
from showcase_bot.schemas.telegram import TelegramUpdate, TelegramWebhookResponse
from showcase_bot.services.bot_context import BotContext
from showcase_bot.services.message_router import route_update
from showcase_bot.services.metrics_service import ERRORS, increment_metric

logger = get_logger("telegram_webhook")

router = APIRouter()


async def parse_telegram_update(request: Request) -> Optional[dict]:
    """
    Parse Telegram update with tolerant decoding to avoid utf-8 crashes.
    Returns dict or None.
    """
    try:
        return await request.json()
    except Exception as e:
        logger.warning(f"Standard request.json() failed: {e}, fallback decoding")

    raw = await request.body()
    for enc in ("utf-8", "latin-1"):
        try:
            return json.loads(raw.decode(enc, errors="replace"))
        except ValueError:
            continue

    logger.error("Failed to decode Telegram webhook payload after fallbacks")
    return None


@router.post("/webhook", response_model=TelegramWebhookResponse)
async def handle_telegram_webhook(request: Request, ctx: BotContext = Depends(get_bot_context)):
    """
    Handle one Telegram update. Answers 200 once routing ran, even when the
    message handler itself failed, so the platform does not redeliver.
    """
    try:
        body = await parse_telegram_update(request)
        if not isinstance(body, dict):
            raise ValueError("Invalid telegram payload")

        update = TelegramUpdate(**body)
        await run_in_threadpool(route_update, ctx, update)

    except Exception as e:
        logger.error(f"Error in webhook handler: {e}", exc_info=True)
        await run_in_threadpool(increment_metric, ctx.store, ERRORS)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=TelegramWebhookResponse(success=False, message="Error").model_dump(),
        )

    return TelegramWebhookResponse(success=True, message="OK")
