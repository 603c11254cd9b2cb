"""Outbound text formatting for Telegram MarkdownV2.

Every builder returns text that is safe to send with parse_mode=MarkdownV2:
user-supplied values and static copy are escaped here, so callers never deal
with the transport's escaping rules.
"""

import re
from datetime import datetime
from typing import Iterable, Optional

MARKDOWN_V2 = "MarkdownV2"

_SPECIAL_CHARS = "\\_*[]()~`>#+-=|{}.!"
_ESCAPE_RE = re.compile("([" + re.escape(_SPECIAL_CHARS) + "])")
_BOLD_MARKER_RE = re.compile(r"(?<!\\)\*")
_UNESCAPE_RE = re.compile(r"\\(.)")


def escape_markdown(text) -> str:
    """Escape Telegram MarkdownV2 special characters, backslash included."""
    if text is None or text == "":
        return ""
    return _ESCAPE_RE.sub(r"\\\1", str(text))


def strip_markdown(text: str) -> str:
    """Plain-text rendition of an escaped message, used when a formatted send fails."""
    return _UNESCAPE_RE.sub(r"\1", _BOLD_MARKER_RE.sub("", text))


def bold(text) -> str:
    return f"*{escape_markdown(text)}*"


def _md(*lines: str) -> str:
    return escape_markdown("\n".join(lines))


COMMANDS_HELP = (
    "📋 /list - View published showcase items",
    "🔍 /status - Check bot status and your role",
    "👤 /userid - Get your Telegram user ID",
    "❌ /cancel - Cancel the current PDF upload process",
    "❓ /help - Show this help message",
)


def welcome_message(role: Optional[str]) -> str:
    return "\n".join(
        [
            bold("🎨 Showcase Bot"),
            "",
            _md("Welcome! This bot helps you manage student showcase content."),
            "",
            _md(f"Your Role: {role or 'Not authorized'}"),
            "",
            bold("Commands:"),
            _md("📝 Send a PDF file to add a new student work", *COMMANDS_HELP),
            "",
            bold("Admin Commands:"),
            _md("👥 /adduser - Add new users (admin only)"),
            "",
            bold("How to add content:"),
            _md(
                "1. Send a PDF file (max 20MB)",
                "2. I'll ask for title, author, and description",
                "3. Optionally send a thumbnail image",
                "4. Content goes live automatically!",
            ),
        ]
    )


def help_message() -> str:
    return "\n".join(
        [
            bold("📚 Help - Showcase Bot"),
            "",
            bold("Adding Student Work:"),
            _md(
                "1. Send a PDF file of the student's work",
                "2. Follow the prompts to add details",
                "3. Optionally add a thumbnail image, or send /done",
            ),
            "",
            bold("Commands:"),
            _md(*COMMANDS_HELP),
            "",
            bold("Admin Commands:"),
            _md("👥 /adduser - Add new users (admin only)"),
            "",
            _md("PDFs are private and shared through signed URLs. Thumbnails are public."),
        ]
    )


def _format_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value else "unknown date"


def list_message(items: Iterable) -> str:
    items = list(items)
    if not items:
        return _md("📚 No showcase items found.")
    blocks = [bold("📚 Published Showcase Items:")]
    for item in items:
        blocks.append(
            _md(
                f"📖 {item.title}",
                f"👤 Author: {item.author}",
                f"📅 {_format_date(item.created_at)}",
            )
        )
    return "\n\n".join(blocks)


def status_message(
    pdf_bucket: str,
    thumbnail_bucket: str,
    role: Optional[str],
    total_users: int,
    user_id,
    store_name: str,
) -> str:
    return "\n".join(
        [
            bold("🤖 Bot Status"),
            "",
            _md("✅ Bot is running", f"✅ Store backend: {store_name}"),
            "",
            bold("📊 Storage Buckets:"),
            _md(f"• PDFs: {pdf_bucket}", f"• Thumbnails: {thumbnail_bucket}"),
            "",
            _md(
                f"👤 Your Role: {role or 'Not authorized'}",
                f"👥 Total Users: {total_users}",
                f"🆔 Your User ID: {user_id}",
            ),
        ]
    )


def userid_message(user_id) -> str:
    return _md(f"👤 Your Telegram User ID: {user_id}", "", "Share this ID with an admin to get access.")


def adduser_usage_message() -> str:
    return "\n".join(
        [
            bold("👥 Add User Command"),
            "",
            _md(
                "To add a new user, send:",
                "adduser USER_ID ROLE",
                "",
                "Roles:",
                "• content_manager - Can manage content",
                "• admin - Full access",
                "",
                "Example:",
                "adduser 123456789 content_manager",
            ),
        ]
    )


def adduser_success_message(user_id: str, role: str) -> str:
    return _md(f"✅ User {user_id} added with role: {role}", "", "✅ Change saved permanently to database.")


def error_message(text: str) -> str:
    return _md(f"❌ {text}")


def unauthorized_message() -> str:
    return error_message("You are not authorized to use this bot.")


def internal_error_message() -> str:
    return error_message("Internal error. Please try again later.")


def pdf_rate_limited_message(retry_after_seconds: int) -> str:
    return error_message(f"Rate limit exceeded. Try again in {retry_after_seconds}s.")


def thumbnail_rate_limited_message() -> str:
    return error_message("Thumbnail rate limit exceeded. Try again later.")


def pdf_error_message(detail: str) -> str:
    return error_message(f"Error processing PDF: {detail}. Please try again.")


def photo_error_message(detail: str) -> str:
    return error_message(f"Error processing photo: {detail}. Please try again.")


def pdf_uploaded_message(object_name: str) -> str:
    return _md("✅ PDF uploaded successfully!", f"📁 File: {object_name}", "", "📝 Now please provide the title of the work:")


def empty_reply_message(field_name: str) -> str:
    return error_message(f"The {field_name} cannot be empty. Please provide the {field_name}:")


def ask_author_message() -> str:
    return _md("📝 Great! Now please provide the author name:")


def ask_description_message() -> str:
    return _md("📝 Perfect! Now please provide a description of the work:")


def published_message(title: str) -> str:
    return "\n".join(
        [
            f"✅ {bold(title)} {_md('has been published successfully!')}",
            "",
            _md("📸 Optionally, you can send a thumbnail image for this work, or send /done to finish."),
        ]
    )


def thumbnail_reprompt_message() -> str:
    return _md("📸 Please send a thumbnail image or type /done to finish.")


def all_done_message() -> str:
    return _md("🎉 All done! Your student work is now live on the website.")


def thumbnail_linked_message() -> str:
    return _md(
        "✅ Thumbnail uploaded and linked to your showcase item!",
        "",
        "🎉 All done! Your student work is now live on the website.",
    )


def thumbnail_unlinked_message() -> str:
    return _md("✅ Thumbnail uploaded!")


def no_photo_message() -> str:
    return error_message("No photo found in the message.")


def cancelled_message() -> str:
    return _md(
        "✅ Process cancelled!",
        "",
        "Your PDF upload has been cancelled. You can start over by sending a new PDF file.",
    )


def nothing_to_cancel_message() -> str:
    return _md("📝 No active process to cancel. Send a PDF file to start uploading content.")


def nothing_to_finish_message() -> str:
    return _md("📝 Nothing to finish yet. /done is available after the description step.")


def text_hint_message() -> str:
    return _md("💡 Send a PDF file to add new student work, or use /help for commands.")


def voice_placeholder_message() -> str:
    return _md("🎤 Voice message received! Voice-to-text feature coming soon.")


def unknown_type_message() -> str:
    return _md(
        "🤖 Sorry, I did not recognize that message type. "
        "Please send a PDF file, photo, or use /help for commands."
    )
