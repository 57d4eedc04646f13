"""Median of two sorted arrays in logarithmic time."""

from __future__ import annotations

from typing import Sequence, Tuple


def _partition(a: Sequence[int], b: Sequence[int], k: int) -> Tuple[int, int]:
    low, high = 0, len(a)
    while low <= high:
        i = low + (high - low) // 2
        j = k - i
        if i > 0 and a[i - 1] > b[j]:
            high = i - 1
        elif i != len(a) and a[i] < b[j - 1]:
            low = i + 1
        else:
            return i, j
    raise ValueError("input arrays must be sorted")


def find_median_sorted_arrays(nums1: Sequence[int], nums2: Sequence[int]) -> float:
    """Return the median of the union of two ascending sequences."""
    a, b = (nums1, nums2) if len(nums1) <= len(nums2) else (nums2, nums1)
    total = len(a) + len(b)
    if total == 0:
        raise ValueError("both arrays are empty")
    i, j = _partition(a, b, (total + 1) // 2)

    left_candidates = [x for x in (a[i - 1] if i > 0 else None, b[j - 1] if j > 0 else None) if x is not None]
    mid_left = max(left_candidates)
    if total % 2 == 1:
        return float(mid_left)

    right_candidates = [
        x for x in (a[i] if i < len(a) else None, b[j] if j < len(b) else None) if x is not None
    ]
    mid_right = min(right_candidates)
    return (mid_left + mid_right) / 2