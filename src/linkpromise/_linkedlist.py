from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

T = TypeVar("T")


class Empty:
    """Marker returned when removing from an empty list or queue."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "empty"


empty = Empty()  # sentinel, to be used where None is a valid value too


class ListNode(Generic[T]):
    __slots__ = ("value", "next")

    def __init__(self, value: T, next: ListNode[T] | None = None) -> None:
        self.value = value
        self.next = next

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.value!r})"


class SinglyLinkedList(Generic[T]):
    """
    A singly linked list that owns its chain of nodes.

    ``head`` owns the chain transitively while ``tail`` is only a shortcut to the
    last node, kept so that appending stays O(1). Removing a node detaches it from
    the chain and hands it over to the caller.

    Removing from an empty list is not an error: the :data:`empty` marker is
    returned instead and the size stays at zero.
    """

    __slots__ = ("_head", "_tail", "_size")

    def __init__(self) -> None:
        self._head: ListNode[T] | None = None
        self._tail: ListNode[T] | None = None
        self._size = 0

    @property
    def head(self) -> ListNode[T] | None:
        return self._head

    @property
    def tail(self) -> ListNode[T] | None:
        return self._tail

    @property
    def size(self) -> int:
        return self._size

    def append(self, value: T) -> Self:
        node = ListNode(value)
        if self._tail is None:
            self._head = self._tail = node
        else:
            self._tail.next = node
            self._tail = node

        self._size += 1
        return self

    def prepend(self, value: T) -> Self:
        self._head = ListNode(value, self._head)
        if self._tail is None:
            self._tail = self._head

        self._size += 1
        return self

    def remove_head(self) -> ListNode[T] | Empty:
        node = self._head
        if node is None:
            return empty

        self._head = node.next
        if self._head is None:
            self._tail = None

        node.next = None
        self._size -= 1
        return node

    def remove_tail(self) -> ListNode[T] | Empty:
        node = self._tail
        if node is None:
            return empty

        if self._head is node:
            self._head = self._tail = None
        else:
            # No backward links, so walk up to the predecessor of the tail
            current = self._head
            while current.next is not node:
                current = current.next

            current.next = None
            self._tail = current

        self._size -= 1
        return node

    def traverse(self, visit: Callable[[T], Any]) -> None:
        """
        Call ``visit`` with every value in the list, from head to tail.

        The successor of each node is looked up before the node is visited, so the
        visitor is free to remove the node it was just handed.

        """
        node = self._head
        while node is not None:
            next_node = node.next
            visit(node.value)
            node = next_node

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._head is not None

    def __iter__(self) -> Iterator[T]:
        node = self._head
        while node is not None:
            yield node.value
            node = node.next

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self)!r})"
