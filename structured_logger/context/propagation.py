"""
Context fork helpers

asyncio copies the current context into every new task on its own.
Threads and executor workers start from an empty context, so work handed
to them has to be bound to a snapshot of the spawning flow first.
"""

from concurrent.futures import Executor, Future
from contextvars import copy_context
from functools import wraps
from typing import Any, Callable, Optional, TypeVar
import threading


T = TypeVar("T")


def bind_context(func: Callable[..., T]) -> Callable[..., T]:
    """
    Snapshot the current context and bind func to it.

    Every call of the returned function runs in its own copy of the
    snapshot, so values it sets never leak back to the caller or to other
    calls.

    Example:
        with correlation_scope("req-1"):
            worker = threading.Thread(target=bind_context(handle_request))
        worker.start()
    """
    snapshot = copy_context()

    @wraps(func)
    def runner(*args: Any, **kwargs: Any) -> T:
        return snapshot.copy().run(func, *args, **kwargs)

    return runner


def submit_with_context(
    executor: Executor, func: Callable[..., T], *args: Any, **kwargs: Any
) -> "Future[T]":
    """Submit func to an executor, running it in a copy of the caller's context."""
    return executor.submit(bind_context(func), *args, **kwargs)


class ContextThread(threading.Thread):
    """
    Thread whose target runs in a copy of the spawning thread's context.

    The copy is taken when the thread object is created.
    """

    def __init__(
        self,
        group: None = None,
        target: Optional[Callable[..., Any]] = None,
        name: Optional[str] = None,
        args: tuple = (),
        kwargs: Optional[dict] = None,
        *,
        daemon: Optional[bool] = None,
    ):
        super().__init__(
            group=group,
            target=target,
            name=name,
            args=args,
            kwargs=kwargs,
            daemon=daemon,
        )
        self._spawn_context = copy_context()

    def run(self) -> None:
        self._spawn_context.run(super().run)
