"""Concurrent file reads and per-path write locks."""

from __future__ import annotations

import asyncio
import threading
from queue import Queue
from typing import TYPE_CHECKING, Any, TypeVar

from folio.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Coroutine
    from pathlib import Path

T = TypeVar("T")

_PATH_LOCKS: dict[str, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _run_in_background_thread(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine in a dedicated thread with its own event loop.

    Args:
        coro: The coroutine to run.

    Raises:
        AsyncExecutionError: If the coroutine raises an exception.

    Returns:
        The result of the coroutine.
    """
    output: Queue[T | BaseException] = Queue(maxsize=1)

    def _runner() -> None:
        try:
            output.put(asyncio.run(coro))
        except BaseException as exc:
            output.put(exc)

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()

    result = output.get()
    if isinstance(result, BaseException):
        raise AsyncExecutionError(result=result) from result
    return result


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine from both sync and async contexts.

    Inside a running event loop the coroutine is executed on a helper thread
    with its own loop, so sync callers never need to know which context they
    are in.

    Args:
        coro: The coroutine to run.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    return _run_in_background_thread(coro)


def _read_text_or_error(path: Path) -> str | OSError | UnicodeDecodeError:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return exc


async def _read_all(paths: list[Path]) -> list[str | OSError | UnicodeDecodeError]:
    return list(await asyncio.gather(*(asyncio.to_thread(_read_text_or_error, path) for path in paths)))


def read_texts(paths: list[Path]) -> list[str | OSError | UnicodeDecodeError]:
    """Read several UTF-8 files concurrently.

    Args:
        paths (list[Path]): Files to read.

    Returns:
        list[str | OSError | UnicodeDecodeError]: File contents, or the read error, in input order.
    """
    if not paths:
        return []
    return run_async(_read_all(paths))


def path_lock(path: Path) -> threading.Lock:
    """Return the lock serializing read-modify-write cycles on a file path.

    Args:
        path (Path): File being rewritten.

    Returns:
        threading.Lock: Lock shared by every caller using the same resolved path.
    """
    key = str(path.resolve())
    with _PATH_LOCKS_GUARD:
        return _PATH_LOCKS.setdefault(key, threading.Lock())
