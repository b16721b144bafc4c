"""Unit tests for the CodeMaker processing service."""

import asyncio
import logging
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from codemaker.core.client import CodeMakerError, UnauthorizedError
from codemaker.core.errors import UNAUTHORIZED_MESSAGE
from codemaker.core.resolver import MAXIMUM_SOURCE_GRAPH_DEPTH
from codemaker.core.service import CodeMakerService
from codemaker.models.api.assistant import (
    AssistantCodeCompletionResponse,
    RegisterAssistantFeedbackResponse,
)
from codemaker.models.api.common import Language, LanguageCode, Mode, Modify, Output, Vote
from codemaker.models.api.contexts import (
    CreateContextResponse,
    DiscoverContextResponse,
    RegisterContextResponse,
    RequiredContext,
)
from codemaker.models.api.process import CompletionResponse, PredictResponse, ProcessResponse
from codemaker.models.api.system import ListModelsResponse, Model
from codemaker.models.config import CLIConfig
from codemaker.models.domain.jobs import FileOutcome


def generated(request) -> ProcessResponse:
    """Echo the request source with a marker, like a trivial generator."""
    return ProcessResponse(output=Output(source=f"{request.input.source}\n# generated"))


def discovery(*paths: str) -> DiscoverContextResponse:
    return DiscoverContextResponse(
        requires_processing=bool(paths),
        required_contexts=[RequiredContext(path=p) for p in paths],
    )


class ServiceTestCase:
    """Shared fixtures: a service over a mocked API client."""

    def setup_method(self):
        self.client = Mock()
        self.client.process = AsyncMock(side_effect=generated)
        self.client.predict = AsyncMock(return_value=PredictResponse())
        self.client.completion = AsyncMock()
        self.client.discover_context = AsyncMock(return_value=discovery())
        self.client.create_context = AsyncMock(
            return_value=CreateContextResponse(id="ctx-1")
        )
        self.client.register_context = AsyncMock(
            return_value=RegisterContextResponse()
        )
        self.client.assistant_code_completion = AsyncMock()
        self.client.register_assistant_feedback = AsyncMock(
            return_value=RegisterAssistantFeedbackResponse()
        )
        self.client.list_models = AsyncMock()

    def make_service(self, **config) -> CodeMakerService:
        config.setdefault("api_key", "test-key")
        config.setdefault("model", "test-model")
        return CodeMakerService(CLIConfig(**config), client=self.client)

    def write_tree(self, root: Path, files: dict[str, str]) -> None:
        for name, content in files.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)


class TestDirectoryProcessing(ServiceTestCase):
    """Test traversal and per-file fault isolation."""

    @pytest.mark.asyncio
    async def test_processes_every_supported_file(self, tmp_path):
        self.write_tree(
            tmp_path,
            {"a.py": "a", "pkg/b.go": "b", "README.md": "docs", ".git/c.py": "c"},
        )
        service = self.make_service(extended_source_context_enabled=False)

        report = await service.generate_code(tmp_path)

        assert report.processed == [tmp_path / "a.py", tmp_path / "pkg" / "b.go"]
        assert (tmp_path / "a.py").read_text() == "a\n# generated"
        assert (tmp_path / "README.md").read_text() == "docs"
        assert (tmp_path / ".git" / "c.py").read_text() == "c"

        request = self.client.process.call_args_list[1].args[0]
        assert request.mode == Mode.CODE
        assert request.language == Language.GO
        assert request.path == str(tmp_path / "pkg" / "b.go")
        assert request.options.model == "test-model"
        assert request.options.detect_syntax_errors is True

    @pytest.mark.asyncio
    async def test_failure_in_one_file_does_not_stop_others(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a", "b.py": "b", "c.py": "c"})

        async def process(request):
            if request.path.endswith("b.py"):
                raise CodeMakerError("boom", status_code=500)
            return generated(request)

        self.client.process.side_effect = process
        service = self.make_service(extended_source_context_enabled=False)

        report = await service.fix_syntax(tmp_path)

        assert report.processed == [tmp_path / "a.py", tmp_path / "c.py"]
        assert report.failed == [tmp_path / "b.py"]
        assert report.error is None
        assert (tmp_path / "b.py").read_text() == "b"
        assert (tmp_path / "c.py").read_text() == "c\n# generated"

    @pytest.mark.asyncio
    async def test_unauthorized_stops_traversal(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a", "b.py": "b"})
        self.client.process.side_effect = UnauthorizedError("bad key", status_code=401)
        service = self.make_service(extended_source_context_enabled=False)

        report = await service.generate_code(tmp_path)

        assert report.failed == [tmp_path / "a.py"]
        assert report.error == "bad key"
        assert self.client.process.await_count == 1

    @pytest.mark.asyncio
    async def test_unreadable_file_is_skipped(self, tmp_path):
        (tmp_path / "bin.py").write_bytes(b"\xff\xfe\x00")
        service = self.make_service(extended_source_context_enabled=False)

        report = await service.generate_code(tmp_path)

        assert report.skipped == [tmp_path / "bin.py"]
        self.client.process.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_single_file_target(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a", "b.py": "b"})
        service = self.make_service(extended_source_context_enabled=False)

        report = await service.edit_code(
            tmp_path / "a.py", Modify.REPLACE, "main", "Use pathlib"
        )

        assert report.processed == [tmp_path / "a.py"]
        request = self.client.process.call_args.args[0]
        assert request.mode == Mode.EDIT_CODE
        assert request.options.modify == Modify.REPLACE
        assert request.options.code_path == "main"
        assert request.options.prompt == "Use pathlib"

    @pytest.mark.asyncio
    async def test_documentation_options(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a"})
        service = self.make_service(
            extended_source_context_enabled=False, language_code="de"
        )

        await service.generate_documentation(
            tmp_path, override_indent=2, minimal_lines_length=5
        )

        options = self.client.process.call_args.args[0].options
        assert options.language == LanguageCode.DE
        assert options.override_indent == 2
        assert options.minimal_lines_length == 5


class TestCancellation(ServiceTestCase):
    """Test cancellation of background jobs."""

    @pytest.mark.asyncio
    async def test_cancellation_aborts_remaining_files(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a", "b.py": "b", "c.py": "c"})

        async def process(request):
            if request.path.endswith("b.py"):
                raise asyncio.CancelledError()
            return generated(request)

        self.client.process.side_effect = process
        service = self.make_service(extended_source_context_enabled=False)

        with pytest.raises(asyncio.CancelledError):
            await service.generate_code(tmp_path)

        assert self.client.process.await_count == 2
        assert (tmp_path / "a.py").read_text() == "a\n# generated"
        assert (tmp_path / "b.py").read_text() == "b"
        assert (tmp_path / "c.py").read_text() == "c"
        assert service.runner.current.report.cancelled is True

    @pytest.mark.asyncio
    async def test_cancel_running_job(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a", "b.py": "b", "c.py": "c"})
        started = asyncio.Event()

        async def process(request):
            if request.path.endswith("b.py"):
                started.set()
                await asyncio.Event().wait()
            return generated(request)

        self.client.process.side_effect = process
        service = self.make_service(extended_source_context_enabled=False)

        task = asyncio.create_task(service.generate_code(tmp_path))
        await started.wait()
        assert service.runner.current.cancel() is True

        with pytest.raises(asyncio.CancelledError):
            await task

        assert service.runner.current.report.processed == [tmp_path / "a.py"]
        assert (tmp_path / "c.py").read_text() == "c"


class TestExtendedContext(ServiceTestCase):
    """Test context registration around process requests."""

    @pytest.mark.asyncio
    async def test_disabled_makes_no_context_calls(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a", "b.py": "b"})
        service = self.make_service(extended_source_context_enabled=False)

        await service.generate_code(tmp_path)

        self.client.discover_context.assert_not_awaited()
        self.client.create_context.assert_not_awaited()
        self.client.register_context.assert_not_awaited()
        for call in self.client.process.call_args_list:
            assert call.args[0].options.context_id is None

    @pytest.mark.asyncio
    async def test_enabled_registers_context(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "import b", "b.py": "b = 1"})
        self.client.discover_context.side_effect = lambda request: (
            discovery("b.py") if request.context.path.endswith("a.py") else discovery()
        )
        service = self.make_service()

        await service.generate_code(tmp_path / "a.py")

        registration = self.client.register_context.call_args.args[0]
        assert registration.id == "ctx-1"
        assert [c.path for c in registration.contexts] == [str(tmp_path / "b.py")]
        assert self.client.process.call_args.args[0].options.context_id == "ctx-1"

    @pytest.mark.asyncio
    async def test_not_registered_for_documentation(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a"})
        service = self.make_service()

        await service.generate_documentation(tmp_path)

        self.client.discover_context.assert_not_awaited()
        assert self.client.process.call_args.args[0].options.context_id is None

    @pytest.mark.asyncio
    async def test_context_failure_is_soft(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a"})
        self.client.discover_context.side_effect = CodeMakerError("discovery down")
        service = self.make_service()

        report = await service.generate_code(tmp_path)

        assert report.processed == [tmp_path / "a.py"]
        self.client.create_context.assert_not_awaited()
        assert self.client.process.call_args.args[0].options.context_id is None


class TestSourceGraph(ServiceTestCase):
    """Test dependency-first regeneration."""

    @pytest.mark.asyncio
    async def test_dependency_processed_before_dependent(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "import b", "b.py": "b = 1"})
        self.client.discover_context.side_effect = lambda request: (
            discovery("b.py") if request.context.path.endswith("a.py") else discovery()
        )
        service = self.make_service(extended_source_context_enabled=False)

        report = await service.generate_source_graph_code(tmp_path / "a.py")

        processed = [call.args[0].path for call in self.client.process.call_args_list]
        assert processed == [str(tmp_path / "b.py"), str(tmp_path / "a.py")]
        assert all(
            call.args[0].mode == Mode.CODE for call in self.client.process.call_args_list
        )
        assert report.processed == [tmp_path / "b.py", tmp_path / "a.py"]
        assert (tmp_path / "b.py").read_text() == "b = 1\n# generated"

    @pytest.mark.asyncio
    async def test_each_file_generated_once_per_job(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "import b", "b.py": "b = 1"})
        self.client.discover_context.side_effect = lambda request: (
            discovery("b.py") if request.context.path.endswith("a.py") else discovery()
        )
        service = self.make_service(extended_source_context_enabled=False)

        report = await service.generate_source_graph_code(tmp_path)

        assert self.client.process.await_count == 2
        assert report.processed == [tmp_path / "b.py", tmp_path / "a.py"]

    @pytest.mark.asyncio
    async def test_cycle_terminates(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "import b", "b.py": "import a"})
        self.client.discover_context.side_effect = lambda request: (
            discovery("b.py") if request.context.path.endswith("a.py") else discovery("a.py")
        )
        service = self.make_service(extended_source_context_enabled=False)

        await service.generate_source_graph_code(tmp_path / "a.py")

        processed = [call.args[0].path for call in self.client.process.call_args_list]
        assert processed == [str(tmp_path / "b.py"), str(tmp_path / "a.py")]

    @pytest.mark.asyncio
    async def test_dependency_chain_stops_at_maximum_depth(self, tmp_path):
        length = MAXIMUM_SOURCE_GRAPH_DEPTH + 4
        self.write_tree(tmp_path, {f"f{i}.py": f"import f{i + 1}" for i in range(length)})

        def discover(request):
            index = int(Path(request.context.path).stem[1:])
            return discovery(f"f{index + 1}.py") if index + 1 < length else discovery()

        self.client.discover_context.side_effect = discover
        service = self.make_service(extended_source_context_enabled=False)

        report = await service.generate_source_graph_code(tmp_path / "f0.py")

        assert self.client.discover_context.await_count == MAXIMUM_SOURCE_GRAPH_DEPTH
        assert self.client.process.await_count == MAXIMUM_SOURCE_GRAPH_DEPTH + 1
        processed = [call.args[0].path for call in self.client.process.call_args_list]
        assert processed[0] == str(tmp_path / f"f{MAXIMUM_SOURCE_GRAPH_DEPTH}.py")
        assert processed[-1] == str(tmp_path / "f0.py")
        assert (tmp_path / f"f{MAXIMUM_SOURCE_GRAPH_DEPTH + 1}.py").read_text() == (
            f"import f{MAXIMUM_SOURCE_GRAPH_DEPTH + 2}"
        )
        assert len(report.processed) == MAXIMUM_SOURCE_GRAPH_DEPTH + 1

    @pytest.mark.asyncio
    async def test_unauthorized_dependency_stops_job(self, tmp_path, caplog):
        self.write_tree(tmp_path, {"a.py": "import b", "b.py": "b = 1"})
        self.client.discover_context.side_effect = lambda request: (
            discovery("b.py") if request.context.path.endswith("a.py") else discovery()
        )
        self.client.process.side_effect = UnauthorizedError("Invalid API key", 401)
        service = self.make_service(extended_source_context_enabled=False)

        with caplog.at_level(logging.ERROR):
            report = await service.generate_source_graph_code(tmp_path)

        assert self.client.process.await_count == 1
        assert report.failed == [tmp_path / "a.py"]
        assert report.error == "Invalid API key"
        hints = [r for r in caplog.records if r.getMessage() == UNAUTHORIZED_MESSAGE]
        assert len(hints) == 1

    @pytest.mark.asyncio
    async def test_dependency_failure_does_not_stop_dependent(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "import b", "b.py": "b = 1"})
        self.client.discover_context.side_effect = lambda request: (
            discovery("b.py") if request.context.path.endswith("a.py") else discovery()
        )

        async def process(request):
            if request.path.endswith("b.py"):
                raise CodeMakerError("boom")
            return generated(request)

        self.client.process.side_effect = process
        service = self.make_service(extended_source_context_enabled=False)

        report = await service.generate_source_graph_code(tmp_path / "a.py")

        assert report.failed == [tmp_path / "b.py"]
        assert report.processed == [tmp_path / "a.py"]

    @pytest.mark.asyncio
    async def test_unsupported_language_is_a_file_failure(self, tmp_path):
        (tmp_path / "notes.txt").write_text("hello")
        service = self.make_service(extended_source_context_enabled=False)

        outcome = await service.process_source_graph_file(
            tmp_path / "notes.txt", Mode.CODE, set()
        )

        assert outcome == FileOutcome.FAILED
        self.client.process.assert_not_awaited()


class TestSingleShotOperations(ServiceTestCase):
    """Test completion, prediction and assistant operations."""

    @pytest.mark.asyncio
    async def test_completion_encodes_offset(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "def f():\n    "})
        self.client.completion.return_value = CompletionResponse(
            output=Output(source="return 1")
        )
        service = self.make_service(extended_source_context_enabled=False)

        suggestion = await service.completion(tmp_path / "a.py", 13, multiline=True)

        assert suggestion == "return 1"
        options = self.client.completion.call_args.args[0].options
        assert options.code_path == "@13"
        assert options.allow_multi_line_autocomplete is True

    @pytest.mark.asyncio
    async def test_completion_degrades_to_empty(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "x"})
        self.client.completion.side_effect = CodeMakerError("down")
        service = self.make_service(extended_source_context_enabled=False)

        assert await service.completion(tmp_path / "a.py", 0) == ""
        assert await service.completion(tmp_path / "missing.py", 0) == ""
        assert await service.completion(tmp_path / "a.unknown", 0) == ""

    @pytest.mark.asyncio
    async def test_completion_unauthorized_propagates(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "x"})
        self.client.completion.side_effect = UnauthorizedError("bad key")
        service = self.make_service(extended_source_context_enabled=False)

        with pytest.raises(UnauthorizedError):
            await service.completion(tmp_path / "a.py", 0)

    @pytest.mark.asyncio
    async def test_predict_does_not_write(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a", "b.rs": "b"})
        service = self.make_service(extended_source_context_enabled=False)

        report = await service.predict(tmp_path)

        assert self.client.predict.await_count == 2
        assert report.processed == [tmp_path / "a.py", tmp_path / "b.rs"]
        assert (tmp_path / "a.py").read_text() == "a"

    @pytest.mark.asyncio
    async def test_assistant_code_completion_writes_source(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a"})
        self.client.assistant_code_completion.return_value = (
            AssistantCodeCompletionResponse(message="Done", output=Output(source="b"))
        )
        service = self.make_service(extended_source_context_enabled=False)

        response = await service.assistant_code_completion("Rewrite", tmp_path / "a.py")

        assert response.message == "Done"
        assert (tmp_path / "a.py").read_text() == "b"

    @pytest.mark.asyncio
    async def test_assistant_code_completion_keeps_file_without_source(self, tmp_path):
        self.write_tree(tmp_path, {"a.py": "a"})
        self.client.assistant_code_completion.return_value = (
            AssistantCodeCompletionResponse(message="Looks fine")
        )
        service = self.make_service(extended_source_context_enabled=False)

        await service.assistant_code_completion("Review", tmp_path / "a.py")

        assert (tmp_path / "a.py").read_text() == "a"

    @pytest.mark.asyncio
    async def test_assistant_feedback_accepts_vote_string(self):
        service = self.make_service()

        await service.assistant_feedback("s-1", "m-1", "up")

        request = self.client.register_assistant_feedback.call_args.args[0]
        assert request.vote == Vote.UP
        assert request.session_id == "s-1"

    @pytest.mark.asyncio
    async def test_list_models(self):
        self.client.list_models.return_value = ListModelsResponse(
            models=[Model(id="m1", name="Model One")]
        )
        service = self.make_service()

        models = await service.list_models()

        assert [m.id for m in models] == ["m1"]

    @pytest.mark.asyncio
    async def test_health_check(self):
        self.client.health_check = AsyncMock(return_value=False)
        service = self.make_service()

        assert await service.health_check() is False
