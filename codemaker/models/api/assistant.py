"""Assistant (chat, speech and feedback) API models."""

from pydantic import Field

from codemaker.models.api.common import (
    Input,
    Language,
    Options,
    Output,
    Vote,
    WireModel,
)


class AssistantCompletionRequest(WireModel):
    """Chat message sent to the assistant."""

    message: str
    options: Options = Field(default_factory=Options)


class AssistantCompletionResponse(WireModel):
    """Assistant reply."""

    message: str = ""
    session_id: str | None = None
    message_id: str | None = None


class AssistantCodeCompletionRequest(WireModel):
    """Chat message about a source file; the reply may rewrite the file."""

    message: str
    language: Language
    input: Input
    options: Options = Field(default_factory=Options)


class AssistantCodeCompletionResponse(WireModel):
    """Assistant reply with optional rewritten source."""

    message: str = ""
    output: Output = Field(default_factory=Output)
    session_id: str | None = None
    message_id: str | None = None


class AssistantSpeechRequest(WireModel):
    """Text to be spoken by the assistant."""

    message: str


class AssistantSpeechResponse(WireModel):
    """Base64 encoded audio chunk."""

    audio: str = ""


class RegisterAssistantFeedbackRequest(WireModel):
    """Vote on an assistant message."""

    session_id: str
    message_id: str
    vote: Vote


class RegisterAssistantFeedbackResponse(WireModel):
    """Acknowledgement of assistant feedback."""


__all__ = [
    "AssistantCompletionRequest",
    "AssistantCompletionResponse",
    "AssistantCodeCompletionRequest",
    "AssistantCodeCompletionResponse",
    "AssistantSpeechRequest",
    "AssistantSpeechResponse",
    "RegisterAssistantFeedbackRequest",
    "RegisterAssistantFeedbackResponse",
]
