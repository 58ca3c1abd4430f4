from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

from ._linkedlist import Empty, SinglyLinkedList, empty

T = TypeVar("T")


class FIFOQueue(Generic[T]):
    """First-in, first-out queue backed by a :class:`SinglyLinkedList`."""

    __slots__ = ("_list",)

    def __init__(self) -> None:
        self._list: SinglyLinkedList[T] = SinglyLinkedList()

    def empty(self) -> bool:
        return self._list.head is None

    def peek(self) -> T | Empty:
        if self._list.head is None:
            return empty

        return self._list.head.value

    def enqueue(self, value: T) -> None:
        self._list.append(value)

    def dequeue(self) -> T | Empty:
        node = self._list.remove_head()
        if node is empty:
            return empty

        return node.value

    def drain(self, callback: Callable[[T], Any]) -> None:
        """
        Remove every element from the queue, passing each one to ``callback``.

        Each element is dequeued before ``callback`` sees it, and draining goes on
        until the queue is empty. Elements enqueued by ``callback`` while the drain
        is in progress are therefore visited too, once, in FIFO order, either by
        this drain or by a nested one started from within ``callback``.

        """
        while self._list.head is not None:
            callback(self.dequeue())

    def clear(self) -> None:
        while self._list.head is not None:
            self._list.remove_head()

    def __len__(self) -> int:
        return len(self._list)

    def __iter__(self) -> Iterator[T]:
        return iter(self._list)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self._list)!r})"
