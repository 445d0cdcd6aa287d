"""
This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at http://mozilla.org/MPL/2.0/.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from functools import partial
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

LOGGER = logging.getLogger(__name__)

__all__ = (
    "InactivityTimer",
    "create_task",
)

_background_tasks: set[asyncio.Task[Any]] = set()


T = TypeVar("T")


def create_task(
    coro: Coroutine[Any, Any, T],
    *,
    suppressed_exceptions: tuple[type[Exception], ...] = (),
    event_loop: asyncio.AbstractEventLoop | None = None,
    **kwargs: Any,
) -> asyncio.Task[T]:
    """
    Wrapper for creating an :obj:`asyncio.Task` which logs exceptions raised in the task.

    A strong reference to the task is held until it finishes, so fire-and-forget callers
    don't need to keep one around.

    Args:
        coro: The function to call.
        suppressed_exceptions: Exceptions to be handled by the task.
        event_loop: The loop to create the task from.
        kwargs: Passed to :py:func:`asyncio.create_task`.
    """
    if event_loop is not None:
        task = event_loop.create_task(coro, **kwargs)
    else:
        task = asyncio.create_task(coro, **kwargs)

    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    task.add_done_callback(partial(_log_task_exception, suppressed_exceptions=suppressed_exceptions))
    return task


def _log_task_exception(task: asyncio.Task[Any], *, suppressed_exceptions: tuple[type[Exception], ...]) -> None:
    """Retrieve and log the exception raised in ``task`` if one exists."""
    with contextlib.suppress(asyncio.CancelledError):
        exception = task.exception()
        if exception is None:
            return

        if isinstance(exception, suppressed_exceptions):
            LOGGER.debug("Suppressed %r in task %s.", exception, task.get_name())
            return

        LOGGER.error("Error in task %s %d!", task.get_name(), id(task), exc_info=exception)


class InactivityTimer:
    """
    A single-shot timer which runs ``callback`` once ``timeout`` seconds pass without a :meth:`reset`.

    ``deadline`` is expressed in event loop time, see :meth:`asyncio.loop.time`.
    """

    def __init__(self, timeout: float, callback: Callable[[], Coroutine[Any, Any, Any]], *, name: str | None = None) -> None:
        self.timeout: float = timeout
        self.callback: Callable[[], Coroutine[Any, Any, Any]] = callback
        self.name: str = name or f"inactivity-timer-{id(self)}"
        self.deadline: float | None = None
        self._handle: asyncio.TimerHandle | None = None

    def __repr__(self) -> str:
        return f"<InactivityTimer name={self.name!r} timeout={self.timeout} deadline={self.deadline}>"

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        loop = asyncio.get_running_loop()
        self.cancel()
        self._handle = loop.call_later(self.timeout, self._fire)
        self.deadline = self._handle.when()
        LOGGER.debug("%s: armed until %s", self.name, self.deadline)

    def reset(self) -> None:
        """Push the deadline back by ``timeout`` seconds from now. Does nothing once fired or cancelled."""
        if self._handle is None:
            return
        self.start()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        LOGGER.debug("%s: fired", self.name)
        create_task(self.callback(), name=self.name)
