from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from enum import Enum
from typing import Any, Generic, NamedTuple, Protocol, TypeVar, Union

from ._eventloop import EventLoop, ProducerFaultPolicy, current_event_loop
from ._exceptions import InvalidStateError, RejectedError
from ._queue import FIFOQueue

if sys.version_info >= (3, 10):
    from typing import TypeAlias
else:
    from typing_extensions import TypeAlias

T_Retval = TypeVar("T_Retval")
logger = logging.getLogger(__name__)

Settle: TypeAlias = Callable[[Any], None]
Producer: TypeAlias = Callable[[Settle, Settle], Any]
Handler: TypeAlias = Union[Callable[[Any], Any], None]


class Thenable(Protocol):
    def then(
        self, on_fulfilled: Handler = None, on_rejected: Handler = None
    ) -> Any: ...


class DeferredState(Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class Continuation(NamedTuple):
    child: Deferred[Any]
    on_fulfilled: Handler
    on_rejected: Handler


class Cleanup(NamedTuple):
    child: Deferred[Any]
    action: Callable[[], Any] | None


def is_thenable(value: object) -> bool:
    """Return ``True`` if ``value`` exposes a callable ``then()`` method."""
    if isinstance(value, Deferred):
        return True

    return callable(getattr(value, "then", None))


class Deferred(Generic[T_Retval]):
    """
    A value that will become available later, or fail to.

    A deferred starts out pending and settles exactly once, either by being
    fulfilled with a value or rejected with a reason. Further settlement attempts
    are ignored.

    If a ``producer`` is given, it is called on a later turn of the event loop (never
    during construction) with two callables: one that fulfills this deferred with
    its argument, and one that rejects it. If the producer raises, the event loop's
    :class:`ProducerFaultPolicy` decides the outcome.

    Callbacks registered with :meth:`then`, :meth:`catch_` and :meth:`finally_` are
    kept in FIFO queues until the deferred settles and are then invoked in the
    order they were registered. Each registration returns a new deferred which is
    settled from the callback's outcome.

    :param producer: callable taking ``(settle, reject)``
    :param loop: the event loop to schedule the producer on (defaults to the
        currently running one)

    """

    __slots__ = (
        "_state",
        "_value",
        "_reason",
        "_continuations",
        "_cleanups",
        "_propagating",
    )

    _value: T_Retval

    def __init__(
        self, producer: Producer | None = None, *, loop: EventLoop | None = None
    ) -> None:
        self._state = DeferredState.PENDING
        self._reason: Any = None
        self._continuations: FIFOQueue[Continuation] = FIFOQueue()
        self._cleanups: FIFOQueue[Cleanup] = FIFOQueue()
        self._propagating = False
        if producer is not None:
            if not callable(producer):
                raise TypeError(f"producer must be callable, not {producer!r}")

            loop = loop or current_event_loop()
            loop.call_soon(self._run_producer, producer, loop.producer_faults)

    @classmethod
    def resolve(
        cls, value: T_Retval, *, loop: EventLoop | None = None
    ) -> Deferred[T_Retval]:
        """Return a deferred that is fulfilled with ``value`` on the next loop turn."""
        return cls(lambda settle, reject: settle(value), loop=loop)

    @classmethod
    def reject(cls, reason: Any, *, loop: EventLoop | None = None) -> Deferred[Any]:
        """Return a deferred that is rejected with ``reason`` on the next loop turn."""
        return cls(lambda settle, reject: reject(reason), loop=loop)

    @property
    def state(self) -> DeferredState:
        return self._state

    @property
    def value(self) -> T_Retval:
        if self._state is not DeferredState.FULFILLED:
            raise InvalidStateError(f"This {self.__class__.__name__} is not fulfilled")

        return self._value

    @property
    def reason(self) -> Any:
        if self._state is not DeferredState.REJECTED:
            raise InvalidStateError(f"This {self.__class__.__name__} is not rejected")

        return self._reason

    def done(self) -> bool:
        return self._state is not DeferredState.PENDING

    def result(self) -> T_Retval:
        """
        Return the fulfillment value.

        :raises InvalidStateError: if the deferred is still pending
        :raises RejectedError: if the deferred was rejected with a reason that is not
            an exception (otherwise that exception is raised as is)

        """
        if self._state is DeferredState.PENDING:
            raise InvalidStateError(f"This {self.__class__.__name__} is still pending")

        if self._state is DeferredState.REJECTED:
            if isinstance(self._reason, BaseException):
                raise self._reason

            raise RejectedError(self._reason)

        return self._value

    def then(
        self, on_fulfilled: Handler = None, on_rejected: Handler = None
    ) -> Deferred[Any]:
        child: Deferred[Any] = Deferred()
        self._continuations.enqueue(Continuation(child, on_fulfilled, on_rejected))
        if self._state is not DeferredState.PENDING:
            self._propagate()

        return child

    def catch_(self, on_rejected: Handler) -> Deferred[Any]:
        return self.then(None, on_rejected)

    def finally_(self, on_settled: Callable[[], Any] | None) -> Deferred[T_Retval]:
        child: Deferred[T_Retval] = Deferred()
        if self._state is DeferredState.PENDING:
            self._cleanups.enqueue(Cleanup(child, on_settled))
        else:
            self._run_cleanup(Cleanup(child, on_settled))

        return child

    def _run_producer(self, producer: Producer, policy: ProducerFaultPolicy) -> None:
        try:
            producer(self._fulfill, self._reject)
        except Exception as exc:
            if policy is ProducerFaultPolicy.REJECT:
                logger.debug("Producer of %r raised %r; rejecting", self, exc)
                self._reject(exc)
            else:
                logger.warning(
                    "Producer of %r raised %r; it will never settle",
                    self,
                    exc,
                    exc_info=exc,
                )

    def _fulfill(self, value: T_Retval) -> None:
        if self._state is DeferredState.PENDING:
            self._state = DeferredState.FULFILLED
            self._value = value
            logger.debug("%r fulfilled", self)
            self._propagate()

    def _reject(self, reason: Any) -> None:
        if self._state is DeferredState.PENDING:
            self._state = DeferredState.REJECTED
            self._reason = reason
            if self._continuations.empty() and self._cleanups.empty():
                logger.debug("%r rejected with nothing attached to observe it", self)
            else:
                logger.debug("%r rejected", self)

            self._propagate()

    def _settle_like(self, other: Deferred[Any]) -> None:
        if other._state is DeferredState.FULFILLED:
            self._fulfill(other._value)
        elif other._state is DeferredState.REJECTED:
            self._reject(other._reason)

    def _adopt(self, result: Any) -> None:
        """
        Settle this deferred from a continuation's return value.

        A thenable is flattened one level only: this deferred is settled with
        whatever that thenable's ``then()`` hands over, even if that is another
        thenable.

        """
        if result is self:
            self._reject(TypeError("a deferred cannot be settled with itself"))
        elif is_thenable(result):
            try:
                result.then(self._fulfill, self._reject)
            except Exception as exc:
                logger.debug("then() of %r raised %r; rejecting %r", result, exc, self)
                self._reject(exc)
        else:
            self._fulfill(result)

    def _propagate(self) -> None:
        # Cleanups wait until the outermost propagation has run every continuation
        if self._propagating:
            self._continuations.drain(self._run_continuation)
            return

        self._propagating = True
        try:
            self._continuations.drain(self._run_continuation)
        finally:
            self._propagating = False

        self._cleanups.drain(self._run_cleanup)

    def _run_continuation(self, continuation: Continuation) -> None:
        if self._state is DeferredState.FULFILLED:
            handler, payload = continuation.on_fulfilled, self._value
        else:
            handler, payload = continuation.on_rejected, self._reason

        if not callable(handler):
            continuation.child._settle_like(self)
            return

        try:
            result = handler(payload)
        except Exception as exc:
            logger.debug("Handler %r raised %r; rejecting", handler, exc)
            continuation.child._reject(exc)
            return

        continuation.child._adopt(result)

    def _run_cleanup(self, cleanup: Cleanup) -> None:
        if callable(cleanup.action):
            try:
                cleanup.action()
            except Exception as exc:
                logger.debug("Cleanup %r raised %r; rejecting", cleanup.action, exc)
                cleanup.child._reject(exc)
                return

        cleanup.child._settle_like(self)

    def __repr__(self) -> str:
        if self._state is DeferredState.FULFILLED:
            detail = f" value={self._value!r}"
        elif self._state is DeferredState.REJECTED:
            detail = f" reason={self._reason!r}"
        else:
            detail = ""

        return f"<{self.__class__.__name__} {self._state.value}{detail}>"


def ensure_deferred(value: Any) -> Deferred[Any]:
    """
    Wrap ``value`` in a :class:`Deferred`.

    Deferred values are returned as is, other thenables are mirrored by a new
    deferred and anything else produces an already fulfilled deferred.

    """
    if isinstance(value, Deferred):
        return value

    deferred: Deferred[Any] = Deferred()
    deferred._adopt(value)
    return deferred


def resolve(value: T_Retval, *, loop: EventLoop | None = None) -> Deferred[T_Retval]:
    """Shortcut for :meth:`Deferred.resolve`."""
    return Deferred.resolve(value, loop=loop)


def reject(reason: Any, *, loop: EventLoop | None = None) -> Deferred[Any]:
    """Shortcut for :meth:`Deferred.reject`."""
    return Deferred.reject(reason, loop=loop)
