"""
Extended source context resolution.

Starting from one file, the service is asked which files it depends on; those
files are explored breadth first, wave by wave, until the depth or size bound
is reached. The traversal itself is a pure function over an injected
``discover`` callable so it can run without a live API or filesystem.
"""

import logging
import os
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

from codemaker.core.client import CodeMakerClient
from codemaker.core.files import FileAccessor
from codemaker.core.languages import is_supported, language_from_extension
from codemaker.models.api.common import Input, Language
from codemaker.models.api.contexts import (
    Context,
    DiscoverContextRequest,
    DiscoverContextResponse,
)

logger = logging.getLogger(__name__)

MAXIMUM_SOURCE_GRAPH_DEPTH = 16

MAXIMUM_SOURCE_CONTEXT_SIZE = 10

Discover = Callable[[Path], Awaitable[list[Path]]]


@dataclass
class TraversalResult:
    """Ordered context paths found by a breadth-first traversal."""

    paths: list[Path] = field(default_factory=list)
    depth: int = 0
    discoveries: int = 0


@dataclass
class _WaveState:
    remaining: int
    depth: int


def resolve_context_paths(
    response: DiscoverContextResponse, path: Path | str
) -> list[Path]:
    """
    Resolve discovered references against the directory of ``path``.

    Only references to existing files are kept, in discovery order.
    """
    parent = Path(path).parent
    paths = [
        Path(os.path.normpath(parent / required.path))
        for required in response.required_contexts
    ]
    return [p for p in paths if p.is_file()]


async def traverse(
    seed_paths: list[Path],
    discover: Discover,
    maximum_depth: int = MAXIMUM_SOURCE_GRAPH_DEPTH,
    maximum_size: int = MAXIMUM_SOURCE_CONTEXT_SIZE,
    exclude: set[Path] | None = None,
) -> TraversalResult:
    """
    Explore dependencies breadth first, starting with ``seed_paths`` as wave 1.

    Args:
        seed_paths: Dependencies of the originating file
        discover: Returns the dependency paths of one file
        maximum_depth: Number of waves to explore (capped at 16)
        maximum_size: Maximum number of paths returned
        exclude: Paths never to include, typically the originating file

    Returns:
        TraversalResult with paths in resolution order
    """
    maximum_depth = min(maximum_depth, MAXIMUM_SOURCE_GRAPH_DEPTH)
    result = TraversalResult()
    seen = set(exclude or ())

    queue: deque[Path] = deque()
    for path in seed_paths:
        if path not in seen:
            seen.add(path)
            queue.append(path)

    if not queue:
        return result

    state = _WaveState(remaining=len(queue), depth=1)

    while queue and len(result.paths) < maximum_size:
        child = queue.popleft()
        result.paths.append(child)

        if state.depth + 1 <= maximum_depth and len(result.paths) < maximum_size:
            result.discoveries += 1
            for path in await discover(child):
                if path not in seen:
                    seen.add(path)
                    queue.append(path)

        state.remaining -= 1
        if state.remaining == 0 and queue:
            state.remaining = len(queue)
            state.depth += 1

    result.depth = state.depth
    return result


class ContextResolver:
    """Builds the extended source context of a file."""

    def __init__(self, client: CodeMakerClient, files: FileAccessor):
        self.client = client
        self.files = files

    async def discover_context(
        self, language: Language, source: str, path: Path
    ) -> DiscoverContextResponse:
        request = DiscoverContextRequest(
            context=Context(language=language, input=Input(source=source), path=str(path))
        )
        return await self.client.discover_context(request)

    async def discover_context_paths(
        self, language: Language, source: str, path: Path
    ) -> list[Path]:
        response = await self.discover_context(language, source, path)
        return resolve_context_paths(response, path)

    def _language_of(self, path: Path, fallback: Language) -> Language:
        if is_supported(path):
            return language_from_extension(path)
        return fallback

    async def resolve(
        self,
        language: Language,
        source: str,
        path: Path,
        maximum_depth: int = MAXIMUM_SOURCE_GRAPH_DEPTH,
    ) -> list[Context]:
        """
        Resolve the contexts of ``path`` for server-side registration.

        Returns:
            At most ``MAXIMUM_SOURCE_CONTEXT_SIZE`` contexts in resolution order
        """
        path = Path(path)

        async def discover(child: Path) -> list[Path]:
            child_source = self.files.read(child)
            if child_source is None:
                return []
            child_language = self._language_of(child, language)
            return await self.discover_context_paths(child_language, child_source, child)

        seed_paths = await self.discover_context_paths(language, source, path)
        traversal = await traverse(
            seed_paths,
            discover,
            maximum_depth=maximum_depth,
            maximum_size=MAXIMUM_SOURCE_CONTEXT_SIZE,
            exclude={Path(os.path.normpath(path))},
        )
        logger.debug(
            f"Resolved {len(traversal.paths)} context paths for {path} "
            f"(depth {traversal.depth}, {traversal.discoveries + 1} discoveries)"
        )

        contexts = []
        for resolved in traversal.paths:
            context_source = self.files.read(resolved)
            if context_source is None:
                continue
            contexts.append(
                Context(
                    language=self._language_of(resolved, language),
                    input=Input(source=context_source),
                    path=str(resolved),
                )
            )
        return contexts
