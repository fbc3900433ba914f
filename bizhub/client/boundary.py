from collections.abc import Awaitable, Callable
from typing import Any, Optional

from bizhub.utils import Logger

logger = Logger("boundary")


class ErrorBoundary:
    """
    Runs a render callable and keeps its failure instead of propagating it.

    ``retry()`` clears the failure and renders again; ``reload()`` first
    runs ``on_reload`` (typically ``PermissionContext.load``).
    """

    def __init__(
        self,
        render: Callable[[], Awaitable[Any]],
        *,
        fallback: Any = None,
        on_reload: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self._render = render
        self.fallback = fallback
        self._on_reload = on_reload
        self.error: Optional[BaseException] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    async def run(self) -> Any:
        try:
            result = await self._render()
        except Exception as e:
            logger.exception("ErrorBoundary caught an error")
            self.error = e
            return self.fallback
        self.error = None
        return result

    async def retry(self) -> Any:
        self.error = None
        return await self.run()

    async def reload(self) -> Any:
        if self._on_reload is not None:
            await self._on_reload()
        return await self.retry()
