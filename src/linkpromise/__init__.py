from __future__ import annotations

from types import FunctionType
from typing import Any

from ._adapters import delay as delay
from ._adapters import delay_reject as delay_reject
from ._adapters import read_file as read_file
from ._deferred import Deferred as Deferred
from ._deferred import DeferredState as DeferredState
from ._deferred import Thenable as Thenable
from ._deferred import ensure_deferred as ensure_deferred
from ._deferred import is_thenable as is_thenable
from ._deferred import reject as reject
from ._deferred import resolve as resolve
from ._eventloop import EventLoop as EventLoop
from ._eventloop import ProducerFaultPolicy as ProducerFaultPolicy
from ._eventloop import current_event_loop as current_event_loop
from ._eventloop import current_time as current_time
from ._eventloop import run as run
from ._exceptions import InvalidStateError as InvalidStateError
from ._exceptions import RejectedError as RejectedError
from ._linkedlist import ListNode as ListNode
from ._linkedlist import SinglyLinkedList as SinglyLinkedList
from ._linkedlist import empty as empty
from ._queue import FIFOQueue as FIFOQueue

# Re-export imports so they look like they live directly in this package
key: str
value: Any
for key, value in list(locals().items()):
    if isinstance(value, (type, FunctionType)) and value.__module__.startswith(
        f"{__name__}."
    ):
        value.__module__ = __name__
