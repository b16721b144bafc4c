"""HTTP client for CodeMaker API communication."""

import json
import logging
from collections.abc import AsyncIterator
from typing import TypeVar

import httpx

from codemaker.models.api.assistant import (
    AssistantCodeCompletionRequest,
    AssistantCodeCompletionResponse,
    AssistantCompletionRequest,
    AssistantCompletionResponse,
    AssistantSpeechRequest,
    AssistantSpeechResponse,
    RegisterAssistantFeedbackRequest,
    RegisterAssistantFeedbackResponse,
)
from codemaker.models.api.common import WireModel
from codemaker.models.api.contexts import (
    CreateContextRequest,
    CreateContextResponse,
    DiscoverContextRequest,
    DiscoverContextResponse,
    RegisterContextRequest,
    RegisterContextResponse,
)
from codemaker.models.api.process import (
    CompletionRequest,
    CompletionResponse,
    PredictRequest,
    PredictResponse,
    ProcessRequest,
    ProcessResponse,
)
from codemaker.models.api.system import ListModelsRequest, ListModelsResponse
from codemaker.models.config import CLIConfig

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=WireModel)


class CodeMakerError(Exception):
    """Exception raised when the CodeMaker API returns an error."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class UnauthorizedError(CodeMakerError):
    """Exception raised when the API key is missing or rejected."""


class CodeMakerClient:
    """HTTP client for the CodeMaker API."""

    def __init__(
        self,
        config: CLIConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client with configuration."""
        self.config = config
        self.base_url = config.endpoint.rstrip("/")
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.request_timeout,
            headers=self._headers(),
            transport=self.transport,
        )

    async def post(self, endpoint: str, data: dict | None = None) -> dict:
        """Make a POST request to the CodeMaker API."""
        url = f"{self.base_url}{endpoint}"

        try:
            async with self._client() as client:
                response = await client.post(url, json=data or {})
                return self._handle_response(response)

        except CodeMakerError:
            raise
        except httpx.TimeoutException:
            raise CodeMakerError(f"Request timeout: {url}")
        except httpx.ConnectError:
            raise CodeMakerError(f"Cannot connect to CodeMaker at {self.base_url}")
        except Exception as e:
            raise CodeMakerError(f"Request failed: {str(e)}")

    async def get(self, endpoint: str, params: dict | None = None) -> dict:
        """Make a GET request to the CodeMaker API."""
        url = f"{self.base_url}{endpoint}"

        try:
            async with self._client() as client:
                response = await client.get(url, params=params)
                return self._handle_response(response)

        except CodeMakerError:
            raise
        except httpx.TimeoutException:
            raise CodeMakerError(f"Request timeout: {url}")
        except httpx.ConnectError:
            raise CodeMakerError(f"Cannot connect to CodeMaker at {self.base_url}")
        except Exception as e:
            raise CodeMakerError(f"Request failed: {str(e)}")

    def _handle_response(self, response: httpx.Response) -> dict:
        """Handle HTTP response and extract JSON data."""
        if response.status_code >= 400:
            raise self._error_for(response)

        if not response.content:
            return {}

        try:
            data = response.json()
        except json.JSONDecodeError:
            raise CodeMakerError(
                "Failed to parse response: invalid JSON",
                status_code=response.status_code,
            )
        return data if isinstance(data, dict) else {"items": data}

    def _error_for(self, response: httpx.Response) -> CodeMakerError:
        error_details = {}
        try:
            error_data = response.json()
            error_details = error_data if isinstance(error_data, dict) else {}
        except (json.JSONDecodeError, httpx.ResponseNotRead):
            pass

        error_message = error_details.get(
            "detail", error_details.get("message", f"HTTP {response.status_code}")
        )

        if response.status_code in (401, 403):
            return UnauthorizedError(
                error_message,
                status_code=response.status_code,
                details=error_details,
            )
        return CodeMakerError(
            error_message,
            status_code=response.status_code,
            details=error_details,
        )

    async def _call(
        self, endpoint: str, request: WireModel, response_type: type[ResponseT]
    ) -> ResponseT:
        raw_response = await self.post(endpoint, request.to_wire())
        try:
            return response_type.model_validate(raw_response)
        except ValueError as e:
            raise CodeMakerError(
                f"Unexpected response from {endpoint}: {e}", details=raw_response
            )

    async def process(self, request: ProcessRequest) -> ProcessResponse:
        return await self._call("/process", request, ProcessResponse)

    async def predict(self, request: PredictRequest) -> PredictResponse:
        return await self._call("/predict", request, PredictResponse)

    async def completion(self, request: CompletionRequest) -> CompletionResponse:
        return await self._call("/completion", request, CompletionResponse)

    async def discover_context(
        self, request: DiscoverContextRequest
    ) -> DiscoverContextResponse:
        return await self._call("/context/discover", request, DiscoverContextResponse)

    async def create_context(
        self, request: CreateContextRequest | None = None
    ) -> CreateContextResponse:
        return await self._call(
            "/context/create", request or CreateContextRequest(), CreateContextResponse
        )

    async def register_context(
        self, request: RegisterContextRequest
    ) -> RegisterContextResponse:
        return await self._call("/context/register", request, RegisterContextResponse)

    async def assistant_completion(
        self, request: AssistantCompletionRequest
    ) -> AssistantCompletionResponse:
        return await self._call(
            "/assistant/completion", request, AssistantCompletionResponse
        )

    async def assistant_code_completion(
        self, request: AssistantCodeCompletionRequest
    ) -> AssistantCodeCompletionResponse:
        return await self._call(
            "/assistant/code-completion", request, AssistantCodeCompletionResponse
        )

    async def assistant_speech(
        self, request: AssistantSpeechRequest
    ) -> AssistantSpeechResponse:
        return await self._call("/assistant/speech", request, AssistantSpeechResponse)

    async def assistant_speech_stream(
        self, request: AssistantSpeechRequest
    ) -> AsyncIterator[AssistantSpeechResponse]:
        """Stream speech audio chunks, one JSON object per line."""
        url = f"{self.base_url}/assistant/speech/stream"

        try:
            async with self._client() as client:
                async with client.stream("POST", url, json=request.to_wire()) as response:
                    if response.status_code >= 400:
                        await response.aread()
                        raise self._error_for(response)

                    async for line in response.aiter_lines():
                        if not line.strip():
                            continue
                        yield AssistantSpeechResponse.model_validate_json(line)

        except CodeMakerError:
            raise
        except httpx.TimeoutException:
            raise CodeMakerError(f"Request timeout: {url}")
        except httpx.ConnectError:
            raise CodeMakerError(f"Cannot connect to CodeMaker at {self.base_url}")
        except Exception as e:
            raise CodeMakerError(f"Request failed: {str(e)}")

    async def register_assistant_feedback(
        self, request: RegisterAssistantFeedbackRequest
    ) -> RegisterAssistantFeedbackResponse:
        return await self._call(
            "/assistant/feedback", request, RegisterAssistantFeedbackResponse
        )

    async def list_models(
        self, request: ListModelsRequest | None = None
    ) -> ListModelsResponse:
        return await self._call(
            "/models", request or ListModelsRequest(), ListModelsResponse
        )

    async def health_check(self) -> bool:
        """Check if the CodeMaker API is reachable."""
        try:
            response = await self.get("/health")
            return response.get("status") != "unhealthy"
        except CodeMakerError as e:
            logger.warning(f"Health check failed: {e}")
            return False
