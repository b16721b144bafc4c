"""API request/response models for the CodeMaker service."""

from codemaker.models.api.assistant import *
from codemaker.models.api.common import *
from codemaker.models.api.contexts import *
from codemaker.models.api.process import *
from codemaker.models.api.system import *

__all__ = [
    # Enums
    "Mode", "Modify", "Language", "LanguageCode", "Visibility", "Vote",

    # Shared
    "WireModel", "Input", "Output", "Options",

    # Context models
    "Context", "DiscoverContextRequest", "RequiredContext", "DiscoverContextResponse",
    "CreateContextRequest", "CreateContextResponse",
    "RegisterContextRequest", "RegisterContextResponse",

    # Generation models
    "ProcessRequest", "ProcessResponse", "PredictRequest", "PredictResponse",
    "CompletionRequest", "CompletionResponse",

    # Assistant models
    "AssistantCompletionRequest", "AssistantCompletionResponse",
    "AssistantCodeCompletionRequest", "AssistantCodeCompletionResponse",
    "AssistantSpeechRequest", "AssistantSpeechResponse",
    "RegisterAssistantFeedbackRequest", "RegisterAssistantFeedbackResponse",

    # System models
    "Model", "ListModelsRequest", "ListModelsResponse",
]
