"""Multi-step intake dialog: title -> author -> description -> optional thumbnail.

Conversation state lives only in process memory. A restart discards
in-flight dialogs; records already committed stay published.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from showcase_bot.logging_config import get_logger
from showcase_bot.models.showcase_item import ShowcaseDraft
from showcase_bot.services import formatting
from showcase_bot.services.showcase_service import save_showcase_item, update_thumbnail
from showcase_bot.services.state_machine import STEP_FIELDS, ConversationStep, accepts_text, next_step
from showcase_bot.services.store import DocumentStore

logger = get_logger("conversation_service")


@dataclass
class ConversationState:
    step: ConversationStep
    pdf_object_name: str
    data: dict = field(default_factory=dict)
    showcase_id: Optional[str] = None


class ConversationStore:
    """Per-user state slots with one lock per user id."""

    def __init__(self):
        self._states: dict[str, ConversationState] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    @contextmanager
    def lock(self, user_id) -> Iterator[None]:
        """Hold the user's slot for the duration of one event."""
        key = str(user_id)
        with self._guard:
            user_lock = self._locks.setdefault(key, threading.Lock())
        with user_lock:
            yield

    def get(self, user_id) -> Optional[ConversationState]:
        return self._states.get(str(user_id))

    def put(self, user_id, state: ConversationState) -> None:
        self._states[str(user_id)] = state

    def clear(self, user_id) -> bool:
        return self._states.pop(str(user_id), None) is not None

    def __contains__(self, user_id) -> bool:
        return str(user_id) in self._states

    def __len__(self) -> int:
        return len(self._states)


def start_conversation(conversations: ConversationStore, user_id, pdf_object_name: str) -> ConversationState:
    """Begin the dialog after an accepted PDF upload, replacing any earlier one."""
    if user_id in conversations:
        logger.info(f"Replacing unfinished conversation for user {user_id}")
    state = ConversationState(step=ConversationStep.WAITING_FOR_TITLE, pdf_object_name=pdf_object_name)
    conversations.put(user_id, state)
    logger.info(f"Conversation state initialized for user {user_id}")
    return state


def handle_text(
    store: DocumentStore,
    telegram,
    conversations: ConversationStore,
    user_id,
    chat_id,
    text: str,
) -> bool:
    """Consume a free-text reply for the current step. Returns False when the user is idle."""
    state = conversations.get(user_id)
    if state is None:
        return False

    if not accepts_text(state.step):
        telegram.safe_send_message(chat_id, formatting.thumbnail_reprompt_message())
        return True

    value = text.strip()
    field_name = STEP_FIELDS[state.step]
    if not value:
        telegram.safe_send_message(chat_id, formatting.empty_reply_message(field_name))
        return True

    if state.step == ConversationStep.WAITING_FOR_DESCRIPTION:
        draft = ShowcaseDraft(
            title=state.data.get("title", ""),
            author=state.data.get("author", ""),
            description=value,
            pdf_object_name=state.pdf_object_name,
        )
        # The record goes live here, whether or not a thumbnail follows.
        showcase_id = save_showcase_item(store, draft)
        state.data[field_name] = value
        state.showcase_id = showcase_id
        state.step = next_step(state.step)
        telegram.safe_send_message(chat_id, formatting.published_message(draft.title))
        return True

    state.data[field_name] = value
    state.step = next_step(state.step)
    if state.step == ConversationStep.WAITING_FOR_AUTHOR:
        telegram.safe_send_message(chat_id, formatting.ask_author_message())
    else:
        telegram.safe_send_message(chat_id, formatting.ask_description_message())
    return True


def finish(telegram, conversations: ConversationStore, user_id, chat_id) -> bool:
    """`/done`: only meaningful once the record is committed."""
    state = conversations.get(user_id)
    if state is None or state.step != ConversationStep.WAITING_FOR_THUMBNAIL_OR_DONE:
        telegram.safe_send_message(chat_id, formatting.nothing_to_finish_message())
        return False

    conversations.clear(user_id)
    telegram.safe_send_message(chat_id, formatting.all_done_message())
    return True


def cancel(telegram, conversations: ConversationStore, user_id, chat_id) -> bool:
    """`/cancel`: drop in-flight state. Committed records are not touched."""
    if conversations.clear(user_id):
        telegram.safe_send_message(chat_id, formatting.cancelled_message())
        return True
    telegram.safe_send_message(chat_id, formatting.nothing_to_cancel_message())
    return False


def attach_thumbnail(store: DocumentStore, conversations: ConversationStore, user_id, thumbnail_url: str) -> bool:
    """Link an uploaded thumbnail to the user's committed record and end the dialog.

    Returns False (and leaves the upload unlinked) when no record is committed yet.
    """
    state = conversations.get(user_id)
    if state is None or not state.showcase_id:
        return False

    update_thumbnail(store, state.showcase_id, thumbnail_url)
    conversations.clear(user_id)
    return True
