"""Model listing and health API models."""

from pydantic import Field

from codemaker.models.api.common import WireModel


class Model(WireModel):
    """A generation model offered by the service."""

    id: str
    name: str = ""


class ListModelsRequest(WireModel):
    """Request for the available models."""


class ListModelsResponse(WireModel):
    """Available models."""

    models: list[Model] = Field(default_factory=list)


__all__ = ["Model", "ListModelsRequest", "ListModelsResponse"]
