"""Render orchestration: one run per output target."""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from quire.backends import BackendRegistry, register_builtin_backends
from quire.backends.base import BackendFactory, OutputBackend
from quire.config import OutputTarget, RenderOptions
from quire.events import PageEvent, RenderEvent
from quire.exceptions import DirectoryError, QuireError
from quire.fs import prepare_output_directory, write_file
from quire.hooks import HookRegistry
from quire.logger import get_logger
from quire.models import Entity
from quire.plugins import register_builtin_plugins
from quire.registry import NamedRegistry
from quire.routers import RouterFactory, RouterRegistry, register_builtin_routers
from quire.routers.base import Document, Router

RenderJob = Callable[[RenderEvent], Awaitable[None]]
"""Type for pre/post render jobs: (event) -> awaitable"""

NOJEKYLL_TEXT = (
    "Quire added this file to prevent GitHub Pages from using Jekyll. "
    "You can turn off this behavior with the github_pages option.\n"
)


class RenderState(str, Enum):
    """Where the renderer is in a run."""

    IDLE = "idle"
    BACKEND_READY = "backend_ready"
    ROUTED = "routed"
    DIRECTORY_PREPARED = "directory_prepared"
    RENDERING = "rendering"
    FINALIZED = "finalized"


def _default_paths() -> list[Path]:
    return []


def _default_str_list() -> list[str]:
    return []


@dataclass
class RenderResult:
    """Outcome of rendering one output target."""

    target: OutputTarget
    written: list[Path] = field(default_factory=_default_paths)
    failed: list[str] = field(default_factory=_default_str_list)  # document paths
    error: str | None = None  # set when the whole target was aborted

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failed


class Renderer:
    """Drive backends and routers to turn an entity graph into output files.

    A renderer can be reused for many runs. Each call to :meth:`write_output`
    creates a fresh backend and router, so addresses never leak between
    targets; only the graph and the hook subscriptions made outside a run
    survive.
    """

    def __init__(self, options: RenderOptions | None = None, *, builtins: bool = True) -> None:
        """Create a renderer.

        Args:
            options: Default options for every target
            builtins: Register the built-in routers, backends and plugins
        """
        self.options = options or RenderOptions()
        self.hooks = HookRegistry()
        self.backends: BackendRegistry = NamedRegistry("backend")
        self.routers: RouterRegistry = NamedRegistry("router")
        self.pre_render_jobs: list[RenderJob] = []
        self.post_render_jobs: list[RenderJob] = []
        self.plugins: list[object] = []

        # Run-scoped state
        self.state = RenderState.IDLE
        self.backend: OutputBackend | None = None
        self.router: Router | None = None
        self.target_options: RenderOptions = self.options
        self.render_start_time = 0

        if builtins:
            register_builtin_routers(self.routers)
            register_builtin_backends(self.backends)
            register_builtin_plugins(self)

    def define_backend(self, name: str, factory: BackendFactory) -> None:
        """Register an output backend under a new name.

        Raises:
            ConfigurationError: If the name is already taken
        """
        self.backends.define(name, factory)

    def define_router(self, name: str, factory: RouterFactory) -> None:
        """Register a routing strategy under a new name.

        Raises:
            ConfigurationError: If the name is already taken
        """
        self.routers.define(name, factory)

    async def write_outputs(self, root: Entity, targets: list[OutputTarget]) -> list[RenderResult]:
        """Render every target in turn; a failing target does not affect the others."""
        return [await self.write_output(root, target) for target in targets]

    async def write_output(self, root: Entity, target: OutputTarget) -> RenderResult:
        """Render the graph below ``root`` into one output target.

        Never raises for configuration, directory, render or write problems:
        they are logged and reported in the returned result.
        """
        logger = get_logger()
        options = self.options.for_target(target)
        result = RenderResult(target=target)

        run_snapshot = self.hooks.snapshot()
        self.target_options = options
        self.render_start_time = int(time.time() * 1000)
        logger.target_started(options.backend, target.path)

        try:
            await self._run(root, target.path, options, result)
        except QuireError as e:
            logger.error(f"Error: {e}")
            result.error = str(e)
        except Exception as e:
            logger.error(f"Unexpected error while rendering {target.path}: {e}")
            result.error = str(e)
        finally:
            self.backend = None
            self.router = None
            self.pre_render_jobs.clear()
            self.post_render_jobs.clear()
            self.target_options = self.options
            self._set_state(RenderState.IDLE)
            self.hooks.restore(run_snapshot)

        if result.error is None:
            logger.target_finished(len(result.written), target.path)
        return result

    async def _run(
        self, root: Entity, output_path: Path, options: RenderOptions, result: RenderResult
    ) -> None:
        # Unknown backends fail before anything touches the filesystem
        factory = self.backends.get(options.backend)
        backend = factory(self, options)
        self.backend = backend
        await backend.setup(self)
        self._set_state(RenderState.BACKEND_READY)

        try:
            router = backend.build_router(output_path)
            self.router = router
            documents = router.build_documents(root)
            self._set_state(RenderState.ROUTED)

            event = RenderEvent(output_path=output_path, root=root, documents=documents)
            self.hooks.trigger(RenderEvent.BEGIN, event)
            await self._run_jobs(self.pre_render_jobs, event, "pre-render")

            if len(documents) > 1:
                self._prepare_output_directory(output_path, options)
            self._set_state(RenderState.DIRECTORY_PREPARED)

            self._set_state(RenderState.RENDERING)
            for document in documents:
                await self._render_document(backend, router, document, output_path, result)

            self.hooks.trigger(RenderEvent.END, event)
            self._set_state(RenderState.FINALIZED)
        finally:
            await backend.teardown(self)

        await self._run_jobs(self.post_render_jobs, event, "post-render")

    def _prepare_output_directory(self, directory: Path, options: RenderOptions) -> None:
        prepare_output_directory(directory, clean=options.clean_output_dir)
        try:
            if options.github_pages:
                write_file(directory / ".nojekyll", NOJEKYLL_TEXT)
            if options.cname:
                write_file(directory / "CNAME", options.cname)
        except OSError as e:
            raise DirectoryError(f"Could not write site files to {directory}: {e}") from e

    async def _render_document(
        self,
        backend: OutputBackend,
        router: Router,
        document: Document,
        output_path: Path,
        result: RenderResult,
    ) -> None:
        logger = get_logger()
        filename = output_path / document.path if document.path else output_path

        page_snapshot = self.hooks.snapshot()
        try:
            router.set_current_document(document)
            page = PageEvent(document=document, url=document.path, filename=filename)
            self.hooks.trigger(PageEvent.BEGIN, page)
            contents = backend.render(document)
            if inspect.isawaitable(contents):
                contents = await contents
            page.contents = contents
            self.hooks.trigger(PageEvent.END, page)
        except Exception as e:
            logger.error(f"Could not render {document.path or filename}: {e}")
            result.failed.append(document.path)
            return
        finally:
            self.hooks.restore(page_snapshot)

        if page.contents is None:
            logger.debug(f"Skipping {filename}: no contents")
            return

        try:
            write_file(filename, page.contents)
        except OSError as e:
            logger.write_failed(filename, e)
            result.failed.append(document.path)
            return

        result.written.append(filename)
        logger.file_written(filename)

    async def _run_jobs(self, jobs: list[RenderJob], event: RenderEvent, phase: str) -> None:
        """Run a job list concurrently, log each failure, then clear the list."""
        if not jobs:
            return
        pending = list(jobs)
        get_logger().detail(f"Running {len(pending)} {phase} jobs")

        async def call(job: RenderJob) -> None:
            await job(event)

        outcomes = await asyncio.gather(*(call(job) for job in pending), return_exceptions=True)
        jobs.clear()
        for job, outcome in zip(pending, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                name = getattr(job, "__qualname__", repr(job))
                get_logger().error(f"The {phase} job {name} failed: {outcome}")

    def _set_state(self, state: RenderState) -> None:
        if state is not self.state:
            get_logger().debug(f"Renderer state: {self.state.value} -> {state.value}")
        self.state = state
