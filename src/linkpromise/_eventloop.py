from __future__ import annotations

import logging
import sys
import time
from bisect import insort_right
from collections.abc import Callable
from contextvars import ContextVar, Token
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

import sniffio

from ._queue import FIFOQueue

if sys.version_info >= (3, 10):
    from typing import TypeAlias
else:
    from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from ._deferred import Deferred

T_Retval = TypeVar("T_Retval")
Clock: TypeAlias = Callable[[], float]
_current_event_loop: ContextVar[EventLoop] = ContextVar("current_event_loop")
logger = logging.getLogger(__name__)


class ProducerFaultPolicy(Enum):
    """What happens to a deferred whose producer raises an exception."""

    #: the exception is logged and discarded; the deferred stays pending forever
    SWALLOW = "swallow"
    #: the deferred is rejected with the exception
    REJECT = "reject"


class Handle:
    __slots__ = ("callback", "args")

    def __init__(self, callback: Callable[..., Any], args: tuple[Any, ...]):
        self.callback = callback
        self.args = args

    def run(self) -> None:
        self.callback(*self.args)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.callback!r}>"


class DelayedCallback(Handle):
    __slots__ = ("deadline",)

    def __init__(
        self, deadline: float, callback: Callable[..., Any], args: tuple[Any, ...]
    ):
        super().__init__(callback, args)
        self.deadline = deadline

    def __lt__(self, other: Any) -> bool:
        return self.deadline < other.deadline


def run(
    main: Callable[[], Any],
    *,
    producer_faults: ProducerFaultPolicy = ProducerFaultPolicy.SWALLOW,
    debug: bool = False,
) -> Any:
    """
    Call ``main`` inside a fresh event loop and run the loop.

    If ``main`` returns a deferred value (or any other thenable), the loop runs until
    it has settled and its fulfillment value is returned, or its rejection reason
    raised. Otherwise the loop runs until it has nothing left to do and the return
    value of ``main`` is passed through as is.

    """
    if _current_event_loop.get(None) is not None:
        raise RuntimeError("already running in a linkpromise event loop")

    return EventLoop(producer_faults=producer_faults, debug=debug).run(main)


class EventLoop:
    """
    Single-threaded cooperative scheduler.

    Callbacks passed to :meth:`call_soon` run on a later :meth:`step`, in the order
    they were scheduled. Callbacks scheduled while a step is in progress wait for
    the next step. Callbacks passed to :meth:`call_later` are ordered by deadline,
    and by registration order when the deadlines are equal.

    :param producer_faults: what to do when a deferred's producer raises
    :param clock: monotonic time source, in seconds
    :param sleep: called with the number of seconds to wait for the next timer
    :param debug: log every callback run at the ``DEBUG`` level

    """

    def __init__(
        self,
        *,
        producer_faults: ProducerFaultPolicy = ProducerFaultPolicy.SWALLOW,
        clock: Clock = time.monotonic,
        sleep: Callable[[float], Any] = time.sleep,
        debug: bool = False,
    ) -> None:
        self.producer_faults = producer_faults
        self.debug = debug
        self._clock = clock
        self._sleep = sleep
        self._scheduled_callbacks: FIFOQueue[Handle] = FIFOQueue()
        self._delayed_callbacks: list[DelayedCallback] = []
        self._start_time = clock()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> Handle:
        handle = Handle(callback, args)
        self._scheduled_callbacks.enqueue(handle)
        return handle

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> DelayedCallback:
        handle = DelayedCallback(self.time() + max(delay, 0), callback, args)
        insort_right(self._delayed_callbacks, handle)
        return handle

    def has_pending(self) -> bool:
        return not self._scheduled_callbacks.empty() or bool(self._delayed_callbacks)

    def time(self) -> float:
        return self._clock() - self._start_time

    def _schedule_due_callbacks(self) -> None:
        current_time = self.time()
        while (
            self._delayed_callbacks
            and self._delayed_callbacks[0].deadline <= current_time
        ):
            self._scheduled_callbacks.enqueue(self._delayed_callbacks.pop(0))

    def step(self) -> None:
        old_name, sniffio.thread_local.name = sniffio.thread_local.name, "linkpromise"
        try:
            self._schedule_due_callbacks()

            # If there are no callbacks to handle, sleep until the first deadline
            if self._scheduled_callbacks.empty() and self._delayed_callbacks:
                self._sleep(max(self._delayed_callbacks[0].deadline - self.time(), 0))
                self._schedule_due_callbacks()

            # Handle all the scheduled callbacks accumulated so far
            for _ in range(len(self._scheduled_callbacks)):
                handle = self._scheduled_callbacks.dequeue()
                if self.debug:
                    logger.debug("Running %r", handle)

                handle.run()
        finally:
            sniffio.thread_local.name = old_name

    def _enter(self) -> Token[EventLoop]:
        if _current_event_loop.get(None) is not None:
            raise RuntimeError("already running in a linkpromise event loop")

        return _current_event_loop.set(self)

    def _run_until(self, deferred: Deferred[Any] | None = None) -> None:
        while self.has_pending() and (deferred is None or not deferred.done()):
            self.step()

    def run_until_idle(self) -> None:
        token = self._enter()
        try:
            self._run_until()
        finally:
            _current_event_loop.reset(token)

    def run_until_settled(self, deferred: Deferred[T_Retval]) -> T_Retval:
        token = self._enter()
        try:
            self._run_until(deferred)
        finally:
            _current_event_loop.reset(token)

        return deferred.result()

    def run(self, main: Callable[[], Any]) -> Any:
        from ._deferred import ensure_deferred, is_thenable

        token = self._enter()
        try:
            retval = main()
            if not is_thenable(retval):
                self._run_until()
                return retval

            deferred = ensure_deferred(retval)
            self._run_until(deferred)
        finally:
            _current_event_loop.reset(token)

        return deferred.result()


def current_event_loop() -> EventLoop:
    try:
        return _current_event_loop.get()
    except LookupError:
        raise RuntimeError(
            "there is no linkpromise event loop running in this context"
        ) from None


def current_time() -> float:
    return current_event_loop().time()
