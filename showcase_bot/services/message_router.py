"""Classify each inbound message and dispatch it to exactly one handler."""

from enum import Enum

from showcase_bot.logging_config import get_logger, log_context
from showcase_bot.models.role import Role
from showcase_bot.schemas.telegram import TelegramMessage, TelegramUpdate
from showcase_bot.services import conversation_service, formatting
from showcase_bot.services.auth_service import ADDUSER_COMMANDS, parse_adduser_command
from showcase_bot.services.bot_context import BotContext
from showcase_bot.services.metrics_service import (
    ERRORS,
    PDF_UPLOADS,
    RATE_LIMIT_HITS,
    THUMBNAIL_UPLOADS,
    increment_metric,
)
from showcase_bot.services.rate_limiter import RateLimitOutcome
from showcase_bot.services.showcase_service import LIST_LIMIT, list_published

logger = get_logger("message_router")


class MessageKind(str, Enum):
    COMMAND = "command"
    TEXT = "text"
    DOCUMENT = "document"
    PHOTO = "photo"
    VOICE = "voice"
    UNKNOWN = "unknown"


COMMANDS = {"/start", "/help", "/list", "/status", "/userid", "/adduser", "/cancel", "/done"}


def is_command(text: str) -> bool:
    if text in COMMANDS:
        return True
    return text.split(" ", 1)[0] in ADDUSER_COMMANDS and " " in text


def classify_message(message: TelegramMessage) -> MessageKind:
    if message.text is not None:
        return MessageKind.COMMAND if is_command(message.text) else MessageKind.TEXT
    if message.document is not None:
        return MessageKind.DOCUMENT
    if message.photo is not None:
        return MessageKind.PHOTO
    if message.voice is not None:
        return MessageKind.VOICE
    return MessageKind.UNKNOWN


def route_update(ctx: BotContext, update: TelegramUpdate) -> None:
    """Handle one update. Handler failures are answered and counted, never raised."""
    message = update.message
    if message is None or message.from_user is None:
        logger.debug(f"No actionable message in update {update.update_id}")
        return

    kind = classify_message(message)
    chat_id = message.chat.id
    user_id = message.from_user.id
    with log_context(update_id=update.update_id, user_id=user_id, kind=kind.value):
        logger.info("Inbound message")
        try:
            if not ctx.roles.is_authorized(user_id):
                logger.warning("Unauthorized sender")
                ctx.telegram.safe_send_message(chat_id, formatting.unauthorized_message())
                return

            with ctx.conversations.lock(user_id):
                HANDLERS[kind](ctx, message)
        except Exception as e:
            logger.error(f"Error in message handler: {e}", exc_info=True)
            ctx.telegram.safe_send_message(chat_id, formatting.internal_error_message())
            increment_metric(ctx.store, ERRORS)


def handle_command(ctx: BotContext, message: TelegramMessage) -> None:
    chat_id = message.chat.id
    user_id = message.from_user.id
    text = message.text
    role = ctx.roles.get_user_role(user_id)
    role_name = role.value if role else None
    send = ctx.telegram.safe_send_message

    if text == "/start":
        send(chat_id, formatting.welcome_message(role_name))
    elif text == "/help":
        send(chat_id, formatting.help_message())
    elif text == "/list":
        try:
            items = list_published(ctx.store, limit=LIST_LIMIT)
        except Exception as e:
            logger.error(f"Error listing items: {e}", exc_info=True)
            send(chat_id, formatting.error_message("Error retrieving showcase items."))
            return
        send(chat_id, formatting.list_message(items))
    elif text == "/status":
        send(
            chat_id,
            formatting.status_message(
                pdf_bucket=ctx.storage.pdf_bucket,
                thumbnail_bucket=ctx.storage.thumbnail_bucket,
                role=role_name,
                total_users=len(ctx.roles),
                user_id=user_id,
                store_name=ctx.store.name,
            ),
        )
    elif text == "/userid":
        send(chat_id, formatting.userid_message(user_id))
    elif text == "/cancel":
        conversation_service.cancel(ctx.telegram, ctx.conversations, user_id, chat_id)
    elif text == "/done":
        conversation_service.finish(ctx.telegram, ctx.conversations, user_id, chat_id)
    elif text == "/adduser":
        if not ctx.roles.has_permission(user_id, Role.ADMIN):
            send(chat_id, formatting.error_message("Only admins can add users."))
            return
        send(chat_id, formatting.adduser_usage_message())
    else:
        handle_adduser(ctx, message)


def handle_adduser(ctx: BotContext, message: TelegramMessage) -> None:
    chat_id = message.chat.id
    user_id = message.from_user.id

    if not ctx.roles.has_permission(user_id, Role.ADMIN):
        ctx.telegram.safe_send_message(chat_id, formatting.error_message("Only admins can add users."))
        return

    parsed = parse_adduser_command(message.text)
    if not parsed.ok:
        ctx.telegram.safe_send_message(chat_id, formatting.error_message(parsed.error))
        return

    new_user_id, role = parsed.value
    result = ctx.roles.add_user(ctx.store, user_id, new_user_id, role)
    if result.ok:
        ctx.telegram.safe_send_message(chat_id, formatting.adduser_success_message(new_user_id, role.value))
    else:
        ctx.telegram.safe_send_message(
            chat_id, formatting.error_message(f"Failed to save user permanently. Error: {result.error}")
        )


def handle_text(ctx: BotContext, message: TelegramMessage) -> None:
    handled = conversation_service.handle_text(
        ctx.store,
        ctx.telegram,
        ctx.conversations,
        message.from_user.id,
        message.chat.id,
        message.text,
    )
    if not handled:
        ctx.telegram.safe_send_message(message.chat.id, formatting.text_hint_message())


def handle_document(ctx: BotContext, message: TelegramMessage) -> None:
    chat_id = message.chat.id
    user_id = message.from_user.id

    decision = ctx.pdf_limiter.check(ctx.store, user_id)
    if not decision.permits(fail_open=True):
        ctx.telegram.safe_send_message(chat_id, formatting.pdf_rate_limited_message(decision.retry_after_seconds))
        increment_metric(ctx.store, RATE_LIMIT_HITS)
        return
    if decision.outcome == RateLimitOutcome.UNKNOWN:
        logger.warning(f"PDF rate limit unknown, allowing upload: {decision.cause}")

    document = message.document
    logger.info(
        f"Processing PDF for user {user_id}",
        extra={"context": {"file_name": document.file_name, "mime_type": document.mime_type, "file_size": document.file_size}},
    )
    result = ctx.storage.store_document(ctx.telegram, document)
    if not result.ok:
        ctx.telegram.safe_send_message(chat_id, formatting.pdf_error_message(result.error))
        increment_metric(ctx.store, ERRORS)
        return

    conversation_service.start_conversation(ctx.conversations, user_id, result.value)
    ctx.telegram.safe_send_message(chat_id, formatting.pdf_uploaded_message(result.value))
    increment_metric(ctx.store, PDF_UPLOADS)


def handle_photo(ctx: BotContext, message: TelegramMessage) -> None:
    chat_id = message.chat.id
    user_id = message.from_user.id

    decision = ctx.photo_limiter.check(ctx.store, user_id)
    if not decision.permits(fail_open=True):
        ctx.telegram.safe_send_message(chat_id, formatting.thumbnail_rate_limited_message())
        increment_metric(ctx.store, RATE_LIMIT_HITS)
        return
    if decision.outcome == RateLimitOutcome.UNKNOWN:
        logger.warning(f"Thumbnail rate limit unknown, allowing upload: {decision.cause}")

    if not message.photo:
        ctx.telegram.safe_send_message(chat_id, formatting.no_photo_message())
        return

    result = ctx.storage.store_thumbnail(ctx.telegram, message.photo)
    if not result.ok:
        ctx.telegram.safe_send_message(chat_id, formatting.photo_error_message(result.error))
        increment_metric(ctx.store, ERRORS)
        return

    if conversation_service.attach_thumbnail(ctx.store, ctx.conversations, user_id, result.value):
        ctx.telegram.safe_send_message(chat_id, formatting.thumbnail_linked_message())
    else:
        ctx.telegram.safe_send_message(chat_id, formatting.thumbnail_unlinked_message())
    increment_metric(ctx.store, THUMBNAIL_UPLOADS)


def handle_voice(ctx: BotContext, message: TelegramMessage) -> None:
    # Voice-to-text is not implemented.
    ctx.telegram.safe_send_message(message.chat.id, formatting.voice_placeholder_message())


def handle_unknown(ctx: BotContext, message: TelegramMessage) -> None:
    ctx.telegram.safe_send_message(message.chat.id, formatting.unknown_type_message())


HANDLERS = {
    MessageKind.COMMAND: handle_command,
    MessageKind.TEXT: handle_text,
    MessageKind.DOCUMENT: handle_document,
    MessageKind.PHOTO: handle_photo,
    MessageKind.VOICE: handle_voice,
    MessageKind.UNKNOWN: handle_unknown,
}
