from __future__ import annotations

from linkpromise import ListNode, SinglyLinkedList, empty


def assert_consistent(linked: SinglyLinkedList) -> None:
    if linked.size == 0:
        assert linked.head is None
        assert linked.tail is None
        return

    count = 0
    node = linked.head
    last = None
    while node is not None:
        count += 1
        last = node
        node = node.next

    assert count == linked.size
    assert last is linked.tail
    assert linked.tail.next is None


def test_append_and_prepend() -> None:
    linked = SinglyLinkedList()
    linked.append(2).append(3).prepend(1)
    assert list(linked) == [1, 2, 3]
    assert len(linked) == 3
    assert linked.head.value == 1
    assert linked.tail.value == 3
    assert_consistent(linked)


def test_prepend_on_empty_list_sets_tail() -> None:
    linked = SinglyLinkedList()
    linked.prepend("a")
    assert linked.head is linked.tail
    assert_consistent(linked)


def test_remove_head_detaches_node() -> None:
    linked = SinglyLinkedList().append(1).append(2)
    node = linked.remove_head()
    assert isinstance(node, ListNode)
    assert node.value == 1
    assert node.next is None
    assert list(linked) == [2]
    assert_consistent(linked)


def test_remove_tail_recomputes_tail() -> None:
    linked = SinglyLinkedList().append(1).append(2).append(3)
    node = linked.remove_tail()
    assert node.value == 3
    assert linked.tail.value == 2
    assert list(linked) == [1, 2]
    assert_consistent(linked)


def test_remove_last_remaining_node() -> None:
    for remove in (SinglyLinkedList.remove_head, SinglyLinkedList.remove_tail):
        linked = SinglyLinkedList().append("only")
        assert remove(linked).value == "only"
        assert not linked
        assert_consistent(linked)


def test_remove_from_empty_list_is_soft() -> None:
    linked = SinglyLinkedList()
    assert linked.remove_head() is empty
    assert linked.remove_tail() is empty
    assert linked.size == 0
    assert not empty
    assert_consistent(linked)


def test_traverse_visits_head_to_tail() -> None:
    linked = SinglyLinkedList().append("a").append("b").append("c")
    visited = []
    linked.traverse(visited.append)
    assert visited == ["a", "b", "c"]


def test_traverse_tolerates_removing_visited_node() -> None:
    linked = SinglyLinkedList().append(1).append(2).append(3)
    visited = []

    def visit(value: int) -> None:
        visited.append(value)
        linked.remove_head()

    linked.traverse(visit)
    assert visited == [1, 2, 3]
    assert linked.size == 0
    assert_consistent(linked)


def test_repr() -> None:
    assert repr(SinglyLinkedList().append(1).append(2)) == "SinglyLinkedList([1, 2])"
