"""Content handler registry and extension dispatch."""

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Iterator, List

from pagewright.errors import BuildError

if TYPE_CHECKING:
    from pagewright.handlers.base import ContentHandler

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Maps handler names to handlers and extensions to handler names.

    Extensions include the leading ``.`` and are matched exactly
    (case-sensitive).  No two registered handlers may claim the same one.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, "ContentHandler"] = {}
        self._extensions: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator["ContentHandler"]:
        return iter(list(self._handlers.values()))

    async def add(self, handler: "ContentHandler") -> None:
        """Register *handler*, replacing any handler with the same name."""
        if handler.name in self._handlers:
            logger.debug("Registry: replacing handler '%s'", handler.name)
            await self.remove(handler.name)

        for extension in handler.extensions:
            owner = self._extensions.get(extension)
            if owner is not None:
                raise BuildError(
                    f"content handler '{handler.name}' declares extension '{extension}' "
                    f"already claimed by '{owner}'"
                )

        self._handlers[handler.name] = handler
        for extension in handler.extensions:
            self._extensions[extension] = handler.name

        await handler.setup()

    async def remove(self, name: str) -> None:
        handler = self.get(name)
        del self._handlers[name]
        self._extensions = {ext: owner for ext, owner in self._extensions.items() if owner != name}
        await handler.unregister()

    def remove_all(self) -> None:
        self._handlers = {}
        self._extensions = {}

    def has(self, name: str) -> bool:
        return name in self._handlers

    def get(self, name: str) -> "ContentHandler":
        handler = self._handlers.get(name)
        if handler is None:
            raise BuildError(f"cannot find handler named '{name}' (is it defined in the site configuration?)")
        return handler

    def has_extension(self, extension: str) -> bool:
        return extension in self._extensions

    def get_handler_for_extension(self, extension: str) -> "ContentHandler":
        name = self._extensions.get(extension)
        if name is None:
            raise BuildError(f"no content handler for extension '{extension}'")
        return self._handlers[name]

    async def for_each(self, callback: Callable[["ContentHandler"], Awaitable[Any]]) -> List[Any]:
        """Run *callback* for every handler concurrently and wait for all of them."""
        return list(await asyncio.gather(*(callback(handler) for handler in list(self._handlers.values()))))
