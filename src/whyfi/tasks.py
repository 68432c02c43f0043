"""On-demand diagnostic task with a generation token.

Each start bumps the generation and runs the coroutine in its own asyncio
task. The completion handler only mutates state if its generation is still
current, so a result arriving after ``clear()`` (or after a newer start) is
dropped instead of resurrecting a cleared result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Generic, TypeVar

from whyfi.errors import DiagnosisError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger("whyfi.tasks")

T = TypeVar("T")


def error_message(exc: BaseException) -> str:
    """User-facing text for a task failure."""
    if isinstance(exc, DiagnosisError):
        return exc.user_message
    return str(exc) or type(exc).__name__


class DiagnosticTask(Generic[T]):
    """One kind of on-demand task: loading flag, last result, last error."""

    def __init__(
        self,
        name: str,
        *,
        on_finish: Callable[[DiagnosticTask[T]], None] | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        self.name = name
        self._on_finish = on_finish
        self._on_cancel = on_cancel
        self._generation = 0
        self._loading = False
        self._result: T | None = None
        self._error: str | None = None
        self._status = ""
        self._task: asyncio.Task[None] | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def result(self) -> T | None:
        return self._result

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def status(self) -> str:
        """Progress text while running; empty when idle."""
        return self._status

    def set_status(self, status: str, generation: int) -> None:
        if generation == self._generation and self._loading:
            self._status = status

    def start(
        self,
        factory: Callable[[int], Awaitable[T]],
        *,
        status: str = "",
    ) -> bool:
        """Run ``factory(generation)`` in the background.

        Returns False (and changes nothing) if this task is already running.
        """
        if self._loading:
            logger.warning("%s already running, start ignored", self.name)
            return False

        self._generation += 1
        generation = self._generation
        self._loading = True
        self._result = None
        self._error = None
        self._status = status
        self._task = asyncio.get_running_loop().create_task(self._drive(factory, generation))
        logger.info("%s started (generation %d)", self.name, generation)
        return True

    def clear(self) -> None:
        """Discard result and error; cancel if running. Safe to call anytime."""
        if self._loading:
            self._generation += 1
            if self._on_cancel is not None:
                self._on_cancel()
            if self._task is not None and not self._task.done():
                self._task.cancel()
            self._loading = False
            self._status = ""
            logger.info("%s cancelled", self.name)
        self._task = None
        self._result = None
        self._error = None

    async def wait(self) -> None:
        """Wait for the current run, if any, to settle."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def _drive(self, factory: Callable[[int], Awaitable[T]], generation: int) -> None:
        try:
            result = await factory(generation)
        except Exception as e:
            if generation != self._generation:
                return
            logger.error("%s failed: %s", self.name, e)
            self._error = error_message(e)
        else:
            if generation != self._generation:
                logger.debug("Dropping stale %s result (generation %d)", self.name, generation)
                return
            self._result = result
            logger.info("%s finished", self.name)

        self._loading = False
        self._status = ""
        if self._on_finish is not None:
            self._on_finish(self)
