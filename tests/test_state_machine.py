import pytest

from showcase_bot.services.state_machine import (
    ConversationStep,
    InvalidTransitionError,
    accepts_text,
    can_transition,
    next_step,
    transition,
)


class TestValidTransitions:
    def test_title_to_author(self):
        result = transition(ConversationStep.WAITING_FOR_TITLE, ConversationStep.WAITING_FOR_AUTHOR)
        assert result == ConversationStep.WAITING_FOR_AUTHOR

    def test_author_to_description(self):
        result = transition(ConversationStep.WAITING_FOR_AUTHOR, ConversationStep.WAITING_FOR_DESCRIPTION)
        assert result == ConversationStep.WAITING_FOR_DESCRIPTION

    def test_description_to_thumbnail(self):
        result = transition(
            ConversationStep.WAITING_FOR_DESCRIPTION, ConversationStep.WAITING_FOR_THUMBNAIL_OR_DONE
        )
        assert result == ConversationStep.WAITING_FOR_THUMBNAIL_OR_DONE


class TestInvalidTransitions:
    def test_skipping_a_step(self):
        with pytest.raises(InvalidTransitionError):
            transition(ConversationStep.WAITING_FOR_TITLE, ConversationStep.WAITING_FOR_DESCRIPTION)

    def test_going_back(self):
        with pytest.raises(InvalidTransitionError):
            transition(ConversationStep.WAITING_FOR_AUTHOR, ConversationStep.WAITING_FOR_TITLE)

    def test_same_step(self):
        with pytest.raises(InvalidTransitionError):
            transition(ConversationStep.WAITING_FOR_TITLE, ConversationStep.WAITING_FOR_TITLE)


class TestNextStep:
    def test_walks_the_dialog(self):
        step = ConversationStep.WAITING_FOR_TITLE
        seen = [step]
        while accepts_text(step):
            step = next_step(step)
            seen.append(step)
        assert seen == [
            ConversationStep.WAITING_FOR_TITLE,
            ConversationStep.WAITING_FOR_AUTHOR,
            ConversationStep.WAITING_FOR_DESCRIPTION,
            ConversationStep.WAITING_FOR_THUMBNAIL_OR_DONE,
        ]

    def test_last_step_has_no_successor(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            next_step(ConversationStep.WAITING_FOR_THUMBNAIL_OR_DONE)
        assert exc_info.value.to_step is None

    def test_thumbnail_step_does_not_accept_text(self):
        assert not accepts_text(ConversationStep.WAITING_FOR_THUMBNAIL_OR_DONE)


class TestCanTransition:
    def test_valid_returns_true(self):
        assert can_transition(ConversationStep.WAITING_FOR_TITLE, ConversationStep.WAITING_FOR_AUTHOR) is True

    def test_invalid_returns_false(self):
        assert can_transition(ConversationStep.WAITING_FOR_TITLE, ConversationStep.WAITING_FOR_TITLE) is False
