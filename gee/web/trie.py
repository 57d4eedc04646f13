"""A prefix tree of URL path segments with ``:param`` and ``*wildcard`` parts."""

from __future__ import annotations

import dataclasses
from typing import List, Optional, Sequence


@dataclasses.dataclass(eq=False)
class Node:
    """One path segment in the route tree.

    ``pattern`` is the full route ending at this node, or "" when no
    route ends here. ``is_wild`` marks ``:param`` and ``*wildcard`` parts.
    """

    pattern: str = ""
    part: str = ""
    children: List["Node"] = dataclasses.field(default_factory=list)
    is_wild: bool = False

    def match_child(self, part: str) -> Optional["Node"]:
        """Return the first child that matches ``part``, or None."""
        return next(
            (child for child in self.children if child.part == part or child.is_wild),
            None,
        )

    def match_children(self, part: str) -> List["Node"]:
        """Return every child that matches ``part``."""
        return [child for child in self.children if child.part == part or child.is_wild]

    def insert(self, pattern: str, parts: Sequence[str], height: int = 0) -> None:
        """Add the route ``pattern`` whose segments are ``parts``."""
        if len(parts) == height:
            self.pattern = pattern
            return
        part = parts[height]
        child = self.match_child(part)
        if child is None:
            child = Node(part=part, is_wild=part[0] in ":*")
            self.children.append(child)
        child.insert(pattern, parts, height + 1)

    def search(self, parts: Sequence[str], height: int = 0) -> Optional["Node"]:
        """Return the node of the route matching ``parts``, or None."""
        if len(parts) == height or self.part.startswith("*"):
            return self if self.pattern else None
        for child in self.match_children(parts[height]):
            result = child.search(parts, height + 1)
            if result is not None:
                return result
        return None