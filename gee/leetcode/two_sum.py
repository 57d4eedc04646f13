"""Find two positions whose values add up to a target."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence


def two_sum(nums: Sequence[int], target: int) -> Optional[List[int]]:
    """Return ``[i, j]`` with ``i < j`` and ``nums[i] + nums[j] == target``, or None."""
    seen: Dict[int, int] = {}
    for index, value in enumerate(nums):
        partner = seen.get(target - value)
        if partner is not None:
            return [partner, index]
        seen[value] = index
    return None