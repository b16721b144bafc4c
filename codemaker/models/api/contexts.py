"""Source context API models."""

from pydantic import ConfigDict, Field

from codemaker.models.api.common import Input, Language, WireModel


class Context(WireModel):
    """One file's content offered as background context for generation."""

    model_config = ConfigDict(frozen=True)

    language: Language
    input: Input
    path: str


class DiscoverContextRequest(WireModel):
    """Request asking the service which files a source depends on."""

    context: Context


class RequiredContext(WireModel):
    """A dependency reference, relative to the analyzed file."""

    path: str


class DiscoverContextResponse(WireModel):
    """Dependencies discovered for one source file."""

    requires_processing: bool = False
    required_contexts: list[RequiredContext] = Field(default_factory=list)


class CreateContextRequest(WireModel):
    """Request for a new server-side context identifier."""


class CreateContextResponse(WireModel):
    """Server-assigned context identifier."""

    id: str


class RegisterContextRequest(WireModel):
    """Batch of contexts attached to a context identifier."""

    id: str
    contexts: list[Context] = Field(default_factory=list)


class RegisterContextResponse(WireModel):
    """Acknowledgement of a context registration."""


__all__ = [
    "Context",
    "DiscoverContextRequest",
    "RequiredContext",
    "DiscoverContextResponse",
    "CreateContextRequest",
    "CreateContextResponse",
    "RegisterContextRequest",
    "RegisterContextResponse",
]
