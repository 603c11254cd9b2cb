from enum import Enum
from typing import Optional


class ConversationStep(str, Enum):
    WAITING_FOR_TITLE = "waiting_for_title"
    WAITING_FOR_AUTHOR = "waiting_for_author"
    WAITING_FOR_DESCRIPTION = "waiting_for_description"
    WAITING_FOR_THUMBNAIL_OR_DONE = "waiting_for_thumbnail_or_done"


# Idle is the absence of a state record; leaving the last step clears it.
VALID_TRANSITIONS = {
    ConversationStep.WAITING_FOR_TITLE: [ConversationStep.WAITING_FOR_AUTHOR],
    ConversationStep.WAITING_FOR_AUTHOR: [ConversationStep.WAITING_FOR_DESCRIPTION],
    ConversationStep.WAITING_FOR_DESCRIPTION: [ConversationStep.WAITING_FOR_THUMBNAIL_OR_DONE],
    ConversationStep.WAITING_FOR_THUMBNAIL_OR_DONE: [],
}

# Field filled by the free-text reply received in each step.
STEP_FIELDS = {
    ConversationStep.WAITING_FOR_TITLE: "title",
    ConversationStep.WAITING_FOR_AUTHOR: "author",
    ConversationStep.WAITING_FOR_DESCRIPTION: "description",
}


class InvalidTransitionError(Exception):
    def __init__(self, from_step: ConversationStep, to_step: Optional[ConversationStep]):
        self.from_step = from_step
        self.to_step = to_step
        target = to_step.value if to_step else "none"
        super().__init__(f"Invalid transition: {from_step.value} -> {target}")


def can_transition(from_step: ConversationStep, to_step: ConversationStep) -> bool:
    """Check if transition is valid."""
    return to_step in VALID_TRANSITIONS.get(from_step, [])


def transition(from_step: ConversationStep, to_step: ConversationStep) -> ConversationStep:
    """Perform step transition. Raises InvalidTransitionError if not allowed."""
    if not can_transition(from_step, to_step):
        raise InvalidTransitionError(from_step, to_step)
    return to_step


def next_step(current: ConversationStep) -> ConversationStep:
    """Advance after a text reply. Raises InvalidTransitionError from the last step."""
    allowed = VALID_TRANSITIONS.get(current, [])
    if not allowed:
        raise InvalidTransitionError(current, None)
    return transition(current, allowed[0])


def accepts_text(step: ConversationStep) -> bool:
    return step in STEP_FIELDS
