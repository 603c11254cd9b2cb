from unittest.mock import Mock

import pytest

from showcase_bot.models.showcase_item import PLACEHOLDER_THUMBNAIL
from showcase_bot.services import conversation_service
from showcase_bot.services.conversation_service import ConversationStore
from showcase_bot.services.state_machine import ConversationStep
from showcase_bot.services.store import DocumentStore, StoreError

USER = 100
CHAT = 100


@pytest.fixture
def conversations():
    return ConversationStore()


def answer(store, telegram, conversations, text):
    return conversation_service.handle_text(store, telegram, conversations, USER, CHAT, text)


def run_to_thumbnail_step(store, telegram, conversations):
    conversation_service.start_conversation(conversations, USER, "1700000000000-essay.pdf")
    answer(store, telegram, conversations, "The Sea")
    answer(store, telegram, conversations, "Student A")
    answer(store, telegram, conversations, "A poem about the sea.")


class TestIntakeDialog:
    def test_idle_user_text_is_not_consumed(self, store, telegram, conversations):
        assert answer(store, telegram, conversations, "hello") is False
        assert telegram.sent == []

    def test_each_reply_advances_one_step(self, store, telegram, conversations):
        conversation_service.start_conversation(conversations, USER, "obj.pdf")

        answer(store, telegram, conversations, "The Sea")
        assert conversations.get(USER).step == ConversationStep.WAITING_FOR_AUTHOR
        assert "author name" in telegram.last_text

        answer(store, telegram, conversations, "Student A")
        assert conversations.get(USER).step == ConversationStep.WAITING_FOR_DESCRIPTION
        assert "description" in telegram.last_text
        assert store.list("showcase") == []

    def test_description_commits_exactly_one_published_record(self, store, telegram, conversations):
        run_to_thumbnail_step(store, telegram, conversations)

        records = store.list("showcase")
        assert len(records) == 1
        doc_id, doc = records[0]
        assert doc["title"] == "The Sea"
        assert doc["author"] == "Student A"
        assert doc["description"] == "A poem about the sea."
        assert doc["pdfObjectName"] == "1700000000000-essay.pdf"
        assert doc["status"] == "published"
        assert doc["thumbnailUrl"] == PLACEHOLDER_THUMBNAIL

        state = conversations.get(USER)
        assert state.step == ConversationStep.WAITING_FOR_THUMBNAIL_OR_DONE
        assert state.showcase_id == doc_id
        assert "has been published successfully!" in telegram.last_text
        assert len(telegram.sent) == 3

    def test_replies_are_trimmed(self, store, telegram, conversations):
        conversation_service.start_conversation(conversations, USER, "obj.pdf")
        answer(store, telegram, conversations, "  The Sea  ")
        assert conversations.get(USER).data["title"] == "The Sea"

    @pytest.mark.parametrize("blank", ["", "   ", "\n\t"])
    def test_blank_reply_reprompts_same_step(self, store, telegram, conversations, blank):
        conversation_service.start_conversation(conversations, USER, "obj.pdf")

        assert answer(store, telegram, conversations, blank) is True

        state = conversations.get(USER)
        assert state.step == ConversationStep.WAITING_FOR_TITLE
        assert state.data == {}
        assert telegram.last_text == "❌ The title cannot be empty. Please provide the title:"

    def test_blank_description_does_not_commit(self, store, telegram, conversations):
        conversation_service.start_conversation(conversations, USER, "obj.pdf")
        answer(store, telegram, conversations, "The Sea")
        answer(store, telegram, conversations, "Student A")

        answer(store, telegram, conversations, "  ")

        assert conversations.get(USER).step == ConversationStep.WAITING_FOR_DESCRIPTION
        assert store.list("showcase") == []
        assert "description cannot be empty" in telegram.last_text

    def test_text_in_thumbnail_step_reprompts(self, store, telegram, conversations):
        run_to_thumbnail_step(store, telegram, conversations)

        assert answer(store, telegram, conversations, "another description") is True

        assert "send a thumbnail image or type /done" in telegram.last_text
        assert len(store.list("showcase")) == 1

    def test_new_pdf_replaces_unfinished_dialog(self, store, telegram, conversations):
        conversation_service.start_conversation(conversations, USER, "first.pdf")
        answer(store, telegram, conversations, "Old title")

        conversation_service.start_conversation(conversations, USER, "second.pdf")

        state = conversations.get(USER)
        assert state.step == ConversationStep.WAITING_FOR_TITLE
        assert state.pdf_object_name == "second.pdf"
        assert state.data == {}

    def test_store_failure_keeps_description_step(self, telegram, conversations):
        store = Mock(spec=DocumentStore)
        store.add.side_effect = StoreError("write failed")
        conversation_service.start_conversation(conversations, USER, "obj.pdf")
        answer(store, telegram, conversations, "The Sea")
        answer(store, telegram, conversations, "Student A")

        with pytest.raises(StoreError):
            answer(store, telegram, conversations, "A poem")

        state = conversations.get(USER)
        assert state.step == ConversationStep.WAITING_FOR_DESCRIPTION
        assert state.showcase_id is None


class TestFinishAndCancel:
    def test_done_after_commit_ends_dialog(self, store, telegram, conversations):
        run_to_thumbnail_step(store, telegram, conversations)

        assert conversation_service.finish(telegram, conversations, USER, CHAT) is True

        assert USER not in conversations
        assert "All done!" in telegram.last_text

    def test_done_before_commit_changes_nothing(self, store, telegram, conversations):
        conversation_service.start_conversation(conversations, USER, "obj.pdf")

        assert conversation_service.finish(telegram, conversations, USER, CHAT) is False

        assert conversations.get(USER).step == ConversationStep.WAITING_FOR_TITLE
        assert "Nothing to finish" in telegram.last_text

    def test_cancel_mid_dialog_creates_no_record(self, store, telegram, conversations):
        conversation_service.start_conversation(conversations, USER, "obj.pdf")
        answer(store, telegram, conversations, "The Sea")

        assert conversation_service.cancel(telegram, conversations, USER, CHAT) is True

        assert USER not in conversations
        assert store.list("showcase") == []
        assert "Process cancelled!" in telegram.last_text

    def test_cancel_after_commit_keeps_record(self, store, telegram, conversations):
        run_to_thumbnail_step(store, telegram, conversations)

        conversation_service.cancel(telegram, conversations, USER, CHAT)

        records = store.list("showcase")
        assert len(records) == 1
        assert records[0][1]["status"] == "published"

    def test_cancel_when_idle(self, telegram, conversations):
        assert conversation_service.cancel(telegram, conversations, USER, CHAT) is False
        assert "No active process to cancel" in telegram.last_text


class TestAttachThumbnail:
    def test_links_thumbnail_and_clears_state(self, store, telegram, conversations):
        run_to_thumbnail_step(store, telegram, conversations)
        doc_id = conversations.get(USER).showcase_id
        url = "https://storage.googleapis.com/test-thumbnails/1700000000000-thumbnail.jpg"

        assert conversation_service.attach_thumbnail(store, conversations, USER, url) is True

        doc = store.get("showcase", doc_id)
        assert doc["thumbnailUrl"] == url
        assert doc["status"] == "published"
        assert USER not in conversations

    def test_without_committed_record_leaves_state(self, store, conversations):
        conversation_service.start_conversation(conversations, USER, "obj.pdf")

        assert conversation_service.attach_thumbnail(store, conversations, USER, "https://x/t.jpg") is False

        assert conversations.get(USER).step == ConversationStep.WAITING_FOR_TITLE
        assert store.list("showcase") == []
