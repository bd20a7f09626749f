"""Site: configuration, handlers, pages and the staged build scheduler."""

import asyncio
import logging
import os
import shutil
import tomllib
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from pagewright.errors import BuildError
from pagewright.handlers.base import ContentHandler
from pagewright.handlers.loader import load_handler_class
from pagewright.models.config import (
    END_OPERATION,
    RENDER_OPERATION,
    START_OPERATION,
    SiteConfig,
    SiteSection,
)
from pagewright.models.criteria import PageCriteria
from pagewright.services.limiter import run_bounded
from pagewright.services.page import Page
from pagewright.services.pages import PageRegistry
from pagewright.services.registry import HandlerRegistry

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "config.toml"

# Stages that bracket every build and need not be listed in the configuration.
_SYNTHETIC_OPERATIONS = (START_OPERATION, END_OPERATION)


def _is_hidden(name: str) -> bool:
    return name.startswith((".", "_"))


def _nearest_existing(path: Path) -> Path:
    for candidate in (path, *path.parents):
        if candidate.exists():
            return candidate
    return path


class Site:
    def __init__(self, config: Optional[SiteConfig] = None, root: Optional[Path] = None) -> None:
        self.config = config or SiteConfig()
        # Relative configuration paths resolve against this directory.
        self.root = Path(root) if root is not None else Path.cwd()
        self.concurrency = self.config.build.concurrency

        self.handlers = HandlerRegistry()
        self.pages = PageRegistry(self)

    # ── Configuration ─────────────────────────────────────────────────────────

    @property
    def meta(self) -> SiteSection:
        return self.config.site

    @property
    def content_root(self) -> Path:
        return (self.root / self.config.content.path).resolve()

    @property
    def output_root(self) -> Path:
        return (self.root / self.config.output.path).resolve()

    @property
    def static_root(self) -> Path:
        return (self.root / self.config.static.path).resolve()

    @property
    def static_output_root(self) -> Path:
        return self.output_root / self.config.static.output

    @property
    def transform_operations(self) -> List[str]:
        return self.config.transform.operations

    async def load_config(self, config_path: Path) -> None:
        """Read, validate and apply the TOML configuration at *config_path*."""
        config_path = Path(config_path).resolve()
        logger.debug("Site: loading config file '%s'", config_path)

        if not config_path.is_file() or not os.access(config_path, os.R_OK):
            raise BuildError(f"could not open configuration file '{config_path}' for reading")

        try:
            text = await asyncio.to_thread(config_path.read_text, encoding="utf-8")
        except OSError as exc:
            raise BuildError(f"could not open configuration file '{config_path}' for reading") from exc

        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise BuildError(f"could not parse configuration file '{config_path}': {exc}") from exc

        try:
            config = SiteConfig.model_validate(data)
        except ValidationError as exc:
            raise BuildError(
                f"invalid configuration file '{config_path}'",
                data=exc.errors(include_url=False),
            ) from exc

        await self.configure(config, config_path.parent)

    async def configure(self, config: SiteConfig, root: Optional[Path] = None) -> None:
        """Apply *config*, discarding every handler and page, then load the handlers."""
        self.config = config
        if root is not None:
            self.root = Path(root)
        self.concurrency = config.build.concurrency

        self._check_permissions()

        self.handlers.remove_all()
        self.pages.remove_all()

        self.ensure_transform_operation(RENDER_OPERATION)

        count = len(config.handlers)
        logger.debug("Site: loading %d %s", count, "handler" if count == 1 else "handlers")

        for name, handler_config in config.handlers.items():
            handler_class = load_handler_class(handler_config.handler)
            logger.debug("Site: creating handler '%s' from '%s'", name, handler_config.handler)
            handler = handler_class(self, name, handler_config.options, handler_config.extensions)
            await self.handlers.add(handler)

    def _check_permissions(self) -> None:
        content_root = self.content_root
        if not content_root.is_dir():
            raise BuildError(f"content directory '{content_root}' does not exist or is not a directory")
        if not os.access(content_root, os.R_OK | os.X_OK):
            raise BuildError(f"content directory '{content_root}' read permission denied")

        writable = _nearest_existing(self.output_root)
        if not os.access(writable, os.W_OK):
            raise BuildError(f"output directory '{self.output_root}' write permission denied")

    def ensure_transform_operation(self, operation: str) -> None:
        """Raise unless *operation* is a stage of this build."""
        if operation in _SYNTHETIC_OPERATIONS:
            return
        if operation not in self.transform_operations:
            raise BuildError(
                f"site configuration does not specify required operation '{operation}' "
                "in the transform.operations array"
            )

    # ── Handlers & pages ──────────────────────────────────────────────────────

    def get_handler(self, name: str) -> ContentHandler:
        return self.handlers.get(name)

    def get_page(self, path: str) -> Page:
        return self.pages.get_page(path)

    def get_page_from(self, page: Page, relative_content_path: str) -> Page:
        return self.pages.get_page_from(page, relative_content_path)

    def get_pages(self, criteria: Optional[PageCriteria] = None) -> List[Page]:
        return self.pages.get_pages(criteria)

    # ── Content collection ────────────────────────────────────────────────────

    def collect(self, root_directory: Path) -> List[Path]:
        """Return every file below *root_directory*, skipping dotted and underscored entries."""
        if not root_directory.is_absolute():
            raise BuildError(f"collection root '{root_directory}' must be absolute")

        files: List[Path] = []
        for directory, dirnames, filenames in os.walk(root_directory):
            dirnames[:] = sorted(name for name in dirnames if not _is_hidden(name))
            for filename in sorted(filenames):
                if not _is_hidden(filename):
                    files.append(Path(directory) / filename)
        return files

    def collect_content_files(self) -> List[str]:
        """Return content-root-relative POSIX paths of files some handler claims."""
        filenames = []
        for filename in self.collect(self.content_root):
            if self.handlers.has_extension(filename.suffix):
                filenames.append(filename.relative_to(self.content_root).as_posix())
        return filenames

    def add_content(self, content_path: str) -> Page:
        """Dispatch a content file to the handler for its extension."""
        handler = self.handlers.get_handler_for_extension(Path(content_path).suffix)
        return handler.add_content(content_path)

    # ── Static files ──────────────────────────────────────────────────────────

    async def copy_static(self) -> int:
        if not self.config.static.copy_files:
            return 0

        static_root = self.static_root
        if not static_root.is_dir():
            logger.info("Site: static directory '%s' does not exist; skipping copy", static_root)
            return 0

        files = self.collect(static_root)
        await run_bounded([lambda f=f: self._copy_static_file(f) for f in files], self.concurrency)
        return len(files)

    async def _copy_static_file(self, filename: Path) -> None:
        destination = self.static_output_root / filename.relative_to(self.static_root)
        try:
            await asyncio.to_thread(destination.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copy2, filename, destination)
        except OSError as exc:
            raise BuildError(f"could not copy static file '{filename}' to '{destination}'") from exc

    # ── Ingest ────────────────────────────────────────────────────────────────

    async def ingest_page(self, page: Page) -> None:
        await page.handler.ingest(page)

    async def ingest(self) -> None:
        await run_bounded([page.ingest for page in self.pages], self.concurrency)

    async def classify(self) -> None:
        """Settle page ownership from metadata before any transform runs."""
        for page in self.pages:
            name = page.meta.handler
            if name and name != page.handler.name:
                previous = page.handler
                handler = self.handlers.get(name)
                logger.debug("Site: page '%s' moves from handler '%s' to '%s'", page.source_path, previous.name, name)
                page.assign_handler(handler)
                await handler.inherit_page(page, previous)

            if not page.meta.title and not page.meta.static:
                logger.warning("Site: page '%s' has no title", page.source_path)

    # ── Transform ─────────────────────────────────────────────────────────────

    async def transform_page(self, page: Page, operation: Optional[str] = None) -> None:
        """Run *operation* on *page*, or every configured operation in order."""
        if operation is None:
            for name in self.transform_operations:
                await self.transform_page(page, name)
            return
        await page.handler.transform(page, operation)

    async def transform(self, operation: Optional[str] = None) -> None:
        """Run one stage on every page, or all stages when *operation* is None."""
        if operation is None:
            for name in (START_OPERATION, *self.transform_operations, END_OPERATION):
                await self.transform(name)
            return

        logger.debug("Site: transform stage '%s'", operation)

        await self.handlers.for_each(lambda handler: handler.transform_global(f"{operation}-pre"))
        await run_bounded(
            [lambda page=page: page.transform(operation) for page in self.pages],
            self.concurrency,
        )
        await self.handlers.for_each(lambda handler: handler.transform_global(operation))
        await self.handlers.for_each(lambda handler: handler.transform_global(f"{operation}-post"))

    # ── Render & output ───────────────────────────────────────────────────────

    async def render_page(self, page: Page, variant: str, data: Any = None) -> str:
        return await page.handler.render(page, variant, data)

    async def output_page(self, page: Page) -> None:
        await page.handler.output(page)
        page.stamp_output()

    async def output(self) -> None:
        await run_bounded([page.output for page in self.pages], self.concurrency)
