"""Adapters that turn timers and file reads into deferred values."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, TypeVar, Union, overload

from ._deferred import Deferred, Settle
from ._eventloop import EventLoop, current_event_loop

T = TypeVar("T")
StrPath = Union[str, "os.PathLike[str]"]


def delay(
    seconds: float, value: T | None = None, *, loop: EventLoop | None = None
) -> Deferred[T | None]:
    """Return a deferred that is fulfilled with ``value`` after ``seconds``."""
    loop = loop or current_event_loop()

    def producer(settle: Settle, reject: Settle) -> None:
        loop.call_later(seconds, settle, value)

    return Deferred(producer, loop=loop)


def delay_reject(
    seconds: float, reason: Any, *, loop: EventLoop | None = None
) -> Deferred[Any]:
    """Return a deferred that is rejected with ``reason`` after ``seconds``."""
    loop = loop or current_event_loop()

    def producer(settle: Settle, reject: Settle) -> None:
        loop.call_later(seconds, reject, reason)

    return Deferred(producer, loop=loop)


@overload
def read_file(
    path: StrPath, encoding: None = ..., *, loop: EventLoop | None = ...
) -> Deferred[bytes]: ...


@overload
def read_file(
    path: StrPath, encoding: str, *, loop: EventLoop | None = ...
) -> Deferred[str]: ...


def read_file(
    path: StrPath, encoding: str | None = None, *, loop: EventLoop | None = None
) -> Deferred[Any]:
    """
    Read a file on the next turn of the event loop.

    The returned deferred is fulfilled with the contents of the file (as bytes, or
    as text if ``encoding`` was given), or rejected with the :exc:`OSError` or
    :exc:`UnicodeDecodeError` raised while reading it.

    """

    def producer(settle: Settle, reject: Settle) -> None:
        try:
            if encoding is None:
                data: str | bytes = Path(path).read_bytes()
            else:
                data = Path(path).read_text(encoding)
        except (OSError, UnicodeDecodeError) as exc:
            reject(exc)
        else:
            settle(data)

    return Deferred(producer, loop=loop)
