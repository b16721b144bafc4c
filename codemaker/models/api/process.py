"""Code generation API models."""

from pydantic import Field

from codemaker.models.api.common import (
    Input,
    Language,
    Mode,
    Options,
    Output,
    WireModel,
)


class ProcessRequest(WireModel):
    """Request to transform a source file."""

    mode: Mode
    language: Language
    input: Input
    path: str | None = None
    options: Options = Field(default_factory=Options)


class ProcessResponse(WireModel):
    """Transformed source file."""

    output: Output = Field(default_factory=Output)


class PredictRequest(WireModel):
    """Request for predictive generation of a source file."""

    language: Language
    input: Input
    options: Options = Field(default_factory=Options)


class PredictResponse(WireModel):
    """Acknowledgement of a predictive generation request."""


class CompletionRequest(WireModel):
    """Request to complete code at a location in a source file."""

    language: Language
    input: Input
    options: Options = Field(default_factory=Options)


class CompletionResponse(WireModel):
    """Completion suggestion."""

    output: Output = Field(default_factory=Output)


__all__ = [
    "ProcessRequest",
    "ProcessResponse",
    "PredictRequest",
    "PredictResponse",
    "CompletionRequest",
    "CompletionResponse",
]
