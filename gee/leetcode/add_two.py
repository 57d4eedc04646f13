"""Add two non-negative numbers stored as reversed digit lists."""

from __future__ import annotations

import dataclasses
from typing import Iterable, Iterator, Optional


@dataclasses.dataclass
class ListNode:
    """A singly linked list node holding one decimal digit."""

    val: int = 0
    next: Optional["ListNode"] = None

    @classmethod
    def from_iterable(cls, values: Iterable[int]) -> Optional["ListNode"]:
        """Build a list from ``values`` in order; an empty iterable gives None."""
        head: Optional[ListNode] = None
        for value in reversed(list(values)):
            head = cls(value, head)
        return head

    def __iter__(self) -> Iterator[int]:
        node: Optional[ListNode] = self
        while node is not None:
            yield node.val
            node = node.next


def add_two_numbers(l1: Optional[ListNode], l2: Optional[ListNode]) -> Optional[ListNode]:
    """Return the digit list of the sum of two reversed digit lists."""
    dummy = ListNode(0)
    tail = dummy
    carry = 0
    while l1 is not None or l2 is not None or carry:
        v1 = v2 = 0
        if l1 is not None:
            v1, l1 = l1.val, l1.next
        if l2 is not None:
            v2, l2 = l2.val, l2.next
        carry, digit = divmod(v1 + v2 + carry, 10)
        tail.next = ListNode(digit)
        tail = tail.next
    return dummy.next