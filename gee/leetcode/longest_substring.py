"""Length of the longest substring without repeating characters."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Set


def length_of_longest_substring_bitset(s: str) -> int:
    """Sliding window that marks the characters currently in the window."""
    if not s:
        return 0
    seen: Set[str] = set()
    n = len(s)
    result = left = right = 0
    while left < n:
        if s[right] in seen:
            seen.discard(s[left])
            left += 1
        else:
            seen.add(s[right])
            right += 1
        result = max(result, right - left)
        if left + result >= n or right >= n:
            break
    return result


def length_of_longest_substring_window(s: str) -> int:
    """Sliding window counting the characters inside it."""
    if not s:
        return 0
    freq: Counter = Counter()
    n = len(s)
    result, left, right = 0, 0, -1
    while left < n:
        if right + 1 < n and freq[s[right + 1]] == 0:
            freq[s[right + 1]] += 1
            right += 1
        else:
            freq[s[left]] -= 1
            left += 1
        result = max(result, right - left + 1)
    return result


def length_of_longest_substring_hash(s: str) -> int:
    """Sliding window that jumps past the last position of a repeated character."""
    last_seen: Dict[str, int] = {}
    start = result = 0
    for index, char in enumerate(s):
        previous = last_seen.get(char)
        if previous is not None and previous >= start:
            start = previous + 1
        last_seen[char] = index
        result = max(result, index + 1 - start)
    return result