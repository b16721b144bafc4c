"""
CodeMaker processing service.

Drives generation workflows over single files and source trees. Every
multi-file operation runs as one cancellable background job:

- ``asyncio.CancelledError`` is never caught; it stops the job and files
  already written stay written.
- ``UnauthorizedError`` is logged with a remediation hint and aborts the
  current file; the batch loop then stops, since every later request would
  fail the same way.
- Any other failure is logged and only skips the current file.

Extended source context is resolved per file and never cached across files.
"""

import logging
import os
from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

from codemaker.core.client import CodeMakerClient, UnauthorizedError
from codemaker.core.errors import log_service_errors, log_unauthorized
from codemaker.core.files import FileAccessor, walk_files
from codemaker.core.jobs import Job, JobRunner
from codemaker.core.languages import is_supported, language_from_extension
from codemaker.core.logging import get_logger
from codemaker.core.resolver import (
    MAXIMUM_SOURCE_GRAPH_DEPTH,
    ContextResolver,
    resolve_context_paths,
)
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
from codemaker.models.api.common import (
    Input,
    Language,
    LanguageCode,
    Mode,
    Modify,
    Options,
    Visibility,
    Vote,
)
from codemaker.models.api.contexts import CreateContextRequest, RegisterContextRequest
from codemaker.models.api.process import (
    CompletionRequest,
    PredictRequest,
    ProcessRequest,
)
from codemaker.models.api.system import Model
from codemaker.models.config import CLIConfig
from codemaker.models.domain.jobs import FileOutcome, JobReport

logger = logging.getLogger(__name__)
progress_logger = get_logger(f"{__name__}.progress")

FileHandler = Callable[[Path], Awaitable[FileOutcome | None]]


class CodeMakerService:
    """Generation workflows on top of the CodeMaker API."""

    def __init__(
        self,
        config: CLIConfig,
        client: CodeMakerClient | None = None,
        files: FileAccessor | None = None,
        runner: JobRunner | None = None,
    ):
        self.config = config
        self.client = client or CodeMakerClient(config)
        self.files = files or FileAccessor()
        self.resolver = ContextResolver(self.client, self.files)
        self.runner = runner or JobRunner()

    # Batch entry points

    async def generate_code(
        self, path: Path, modify: Modify = Modify.NONE, code_path: str | None = None
    ) -> JobReport:
        return await self.process(Mode.CODE, "Generating code", path, modify, code_path)

    async def generate_source_graph_code(self, path: Path) -> JobReport:
        return await self.process_source_graph(
            Mode.CODE, "Generating source graph code", path
        )

    async def generate_inline_code(
        self, path: Path, modify: Modify = Modify.NONE, code_path: str | None = None
    ) -> JobReport:
        return await self.process(
            Mode.INLINE_CODE, "Generating inline code", path, modify, code_path
        )

    async def edit_code(
        self, path: Path, modify: Modify, code_path: str | None, prompt: str
    ) -> JobReport:
        return await self.process(
            Mode.EDIT_CODE, "Editing code", path, modify, code_path, prompt
        )

    async def generate_documentation(
        self,
        path: Path,
        modify: Modify = Modify.NONE,
        code_path: str | None = None,
        text_language: LanguageCode | None = None,
        override_indent: int | None = None,
        minimal_lines_length: int | None = None,
        visibility: Visibility | None = None,
    ) -> JobReport:
        return await self.process(
            Mode.DOCUMENT,
            "Generating documentation",
            path,
            modify,
            code_path,
            text_language=text_language or self.config.language_code,
            override_indent=override_indent,
            minimal_lines_length=minimal_lines_length,
            visibility=visibility,
        )

    async def fix_syntax(
        self, path: Path, modify: Modify = Modify.NONE, code_path: str | None = None
    ) -> JobReport:
        return await self.process(Mode.FIX_SYNTAX, "Fixing code", path, modify, code_path)

    async def predict(self, path: Path) -> JobReport:
        """Run predictive generation over a file or source tree."""
        title = "Predictive generation"

        async def work(job: Job) -> None:
            await self._walk(job, path, self.predict_file)

        return await self.runner.run(title, work)

    async def process(
        self,
        mode: Mode,
        title: str,
        path: Path,
        modify: Modify,
        code_path: str | None = None,
        prompt: str | None = None,
        text_language: LanguageCode | None = None,
        override_indent: int | None = None,
        minimal_lines_length: int | None = None,
        visibility: Visibility | None = None,
    ) -> JobReport:
        """Process every supported file under ``path`` in one background job."""

        async def handle(file: Path) -> FileOutcome:
            return await self.process_file(
                file,
                mode,
                modify,
                code_path,
                prompt,
                text_language,
                override_indent,
                minimal_lines_length,
                visibility,
            )

        async def work(job: Job) -> None:
            await self._walk(job, path, handle)

        return await self.runner.run(title, work)

    async def process_source_graph(self, mode: Mode, title: str, path: Path) -> JobReport:
        """Process files under ``path``, regenerating their dependencies first."""

        async def work(job: Job) -> None:
            visited: set[Path] = set()

            async def handle(file: Path) -> FileOutcome | None:
                return await self.process_source_graph_file(
                    file, mode, visited, on_dependency=job.record
                )

            await self._walk(job, path, handle)

        return await self.runner.run(title, work)

    async def _walk(self, job: Job, path: Path, handle: FileHandler) -> None:
        try:
            for file in walk_files(Path(path), is_supported):
                try:
                    outcome = await handle(file)
                except UnauthorizedError:
                    job.record(file, FileOutcome.FAILED)
                    raise
                if outcome is not None:
                    job.record(file, outcome)
                    progress_logger.info(
                        f"{job.title}: {outcome.value}", path=str(file)
                    )
        except Exception as e:
            job.report.error = str(e)
            logger.error(f"Failed to process task '{job.title}': {e}")

    # Per-file operations

    async def process_file(
        self,
        file: Path,
        mode: Mode,
        modify: Modify,
        code_path: str | None = None,
        prompt: str | None = None,
        text_language: LanguageCode | None = None,
        override_indent: int | None = None,
        minimal_lines_length: int | None = None,
        visibility: Visibility | None = None,
    ) -> FileOutcome:
        """Generate one file and replace its content with the result."""
        try:
            source = self.files.read(file)
            if source is None:
                return FileOutcome.SKIPPED

            language = language_from_extension(file)

            context_id = await self.register_context_for_mode(
                mode, language, source, file
            )

            output = await self._process(
                mode,
                language,
                source,
                file,
                modify,
                code_path,
                prompt,
                context_id,
                text_language,
                override_indent,
                minimal_lines_length,
                visibility,
            )

            self.files.write(file, output)
            return FileOutcome.PROCESSED
        except UnauthorizedError as e:
            log_unauthorized(e)
            raise
        except Exception:
            logger.error(f"Failed to process {mode.value} in file {file}.", exc_info=True)
            return FileOutcome.FAILED

    async def process_source_graph_file(
        self,
        file: Path,
        mode: Mode,
        visited: set[Path],
        depth: int = 0,
        on_dependency: Callable[[Path, FileOutcome], None] | None = None,
    ) -> FileOutcome | None:
        """
        Regenerate the dependencies of ``file`` in code mode, then ``file`` itself.

        Each file is generated at most once per ``visited`` set, which also ends
        dependency cycles. Returns None when the file was already handled.

        An unauthorized error from a dependency propagates up through every
        level; the remediation hint is logged once, at depth 0.
        """
        file = Path(os.path.normpath(file))
        if file in visited:
            return None
        visited.add(file)

        try:
            source = self.files.read(file)
            if source is None:
                return FileOutcome.SKIPPED

            language = language_from_extension(file)

            if depth < MAXIMUM_SOURCE_GRAPH_DEPTH:
                response = await self.resolver.discover_context(language, source, file)
                if response.requires_processing:
                    for dependency in resolve_context_paths(response, file):
                        outcome = await self.process_source_graph_file(
                            dependency, Mode.CODE, visited, depth + 1, on_dependency
                        )
                        if outcome is not None and on_dependency is not None:
                            on_dependency(dependency, outcome)

            context_id = await self.register_context_for_mode(
                mode, language, source, file
            )
            output = await self._process(
                mode, language, source, file, Modify.NONE, context_id=context_id
            )
            self.files.write(file, output)
            return FileOutcome.PROCESSED
        except UnauthorizedError as e:
            if depth == 0:
                log_unauthorized(e)
            raise
        except Exception:
            logger.error(f"Failed to process {mode.value} in file {file}.", exc_info=True)
            return FileOutcome.FAILED

    async def predict_file(self, file: Path) -> FileOutcome:
        """Send one file for predictive generation."""
        try:
            source = self.files.read(file)
            if source is None:
                return FileOutcome.SKIPPED

            language = language_from_extension(file)

            context_id = await self.register_context(language, source, file)

            await self.client.predict(
                PredictRequest(
                    language=language,
                    input=Input(source=source),
                    options=Options(context_id=context_id, model=self.config.model),
                )
            )
            return FileOutcome.PROCESSED
        except UnauthorizedError as e:
            log_unauthorized(e)
            raise
        except Exception:
            logger.error(f"Failed to predict file {file}.", exc_info=True)
            return FileOutcome.FAILED

    # Single-shot operations

    async def completion(self, path: Path, offset: int, multiline: bool = False) -> str:
        """
        Complete code at a character offset of a file.

        Returns:
            The suggested completion, or an empty string if anything failed
        """
        try:
            source = self.files.read(path)
            if source is None:
                return ""

            language = language_from_extension(path)

            context_id = await self.register_context(language, source, path)

            response = await self.client.completion(
                CompletionRequest(
                    language=language,
                    input=Input(source=source),
                    options=Options(
                        code_path=f"@{offset}",
                        allow_multi_line_autocomplete=multiline,
                        context_id=context_id,
                        model=self.config.model,
                    ),
                )
            )
            return response.output.source
        except UnauthorizedError as e:
            log_unauthorized(e)
            raise
        except Exception:
            logger.error(f"Failed to complete code in file {path}.", exc_info=True)
            return ""

    @log_service_errors("process assistant completion")
    async def assistant_completion(self, message: str) -> AssistantCompletionResponse:
        return await self.client.assistant_completion(
            AssistantCompletionRequest(
                message=message,
                options=Options(language=self.config.language_code),
            )
        )

    @log_service_errors("process assistant code completion")
    async def assistant_code_completion(
        self, message: str, path: Path
    ) -> AssistantCodeCompletionResponse:
        """Ask the assistant about a file; a returned source replaces the file."""
        source = self.files.read(path)
        if source is None:
            raise FileNotFoundError(f"Cannot read {path}")

        language = language_from_extension(path)

        context_id = await self.register_context(language, source, path)

        response = await self.client.assistant_code_completion(
            AssistantCodeCompletionRequest(
                message=message,
                language=language,
                input=Input(source=source),
                options=Options(
                    context_id=context_id,
                    model=self.config.model,
                    language=self.config.language_code,
                ),
            )
        )

        if response.output.source:
            self.files.write(path, response.output.source)

        return response

    @log_service_errors("process assistant speech")
    async def assistant_speech(self, message: str) -> AssistantSpeechResponse:
        return await self.client.assistant_speech(AssistantSpeechRequest(message=message))

    async def assistant_speech_stream(
        self, message: str
    ) -> AsyncIterator[AssistantSpeechResponse]:
        try:
            async for chunk in self.client.assistant_speech_stream(
                AssistantSpeechRequest(message=message)
            ):
                yield chunk
        except UnauthorizedError as e:
            log_unauthorized(e)
            raise
        except Exception:
            logger.error("Failed to process assistant speech.", exc_info=True)
            raise

    @log_service_errors("register assistant feedback")
    async def assistant_feedback(
        self, session_id: str, message_id: str, vote: Vote | str
    ) -> RegisterAssistantFeedbackResponse:
        return await self.client.register_assistant_feedback(
            RegisterAssistantFeedbackRequest(
                session_id=session_id, message_id=message_id, vote=Vote(vote)
            )
        )

    async def list_models(self) -> list[Model]:
        response = await self.client.list_models()
        return response.models

    async def health_check(self) -> bool:
        return await self.client.health_check()

    # Context registration

    async def register_context_for_mode(
        self, mode: Mode, language: Language, source: str, path: Path
    ) -> str | None:
        if not mode.supports_extended_context:
            return None

        return await self.register_context(language, source, path)

    async def register_context(
        self, language: Language, source: str, path: Path
    ) -> str | None:
        """
        Resolve and register the extended context of a file.

        Returns:
            The context id, or None when disabled or when resolution failed
        """
        try:
            if not self.config.extended_source_context_enabled:
                return None

            contexts = await self.resolver.resolve(
                language,
                source,
                Path(path),
                self.config.extended_source_context_depth,
            )

            created = await self.client.create_context(CreateContextRequest())
            await self.client.register_context(
                RegisterContextRequest(id=created.id, contexts=contexts)
            )
            return created.id
        except Exception:
            logger.warning(f"Failed to process context of {path}.", exc_info=True)
            return None

    async def _process(
        self,
        mode: Mode,
        language: Language,
        source: str,
        path: Path,
        modify: Modify,
        code_path: str | None = None,
        prompt: str | None = None,
        context_id: str | None = None,
        text_language: LanguageCode | None = None,
        override_indent: int | None = None,
        minimal_lines_length: int | None = None,
        visibility: Visibility | None = None,
    ) -> str:
        response = await self.client.process(
            ProcessRequest(
                mode=mode,
                language=language,
                input=Input(source=source),
                path=str(path),
                options=Options(
                    modify=modify,
                    code_path=code_path,
                    prompt=prompt,
                    detect_syntax_errors=True,
                    context_id=context_id,
                    model=self.config.model,
                    override_indent=override_indent,
                    minimal_lines_length=minimal_lines_length,
                    visibility=visibility,
                    language=text_language,
                ),
            )
        )
        return response.output.source
