"""Route registration and dispatch by method and path."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from gee.web.trie import Node

if TYPE_CHECKING:
    from gee.web.context import Context

HandlerFunc = Callable[["Context"], None]

_log = logging.getLogger("gee.web")


def _key(method: str, pattern: str) -> str:
    return f"{method}-{pattern}"


def parse_pattern(pattern: str) -> List[str]:
    """Split a path into its non-empty segments, stopping after a ``*`` segment."""
    parts: List[str] = []
    for item in pattern.split("/"):
        if item:
            parts.append(item)
            if item.startswith("*"):
                break
    return parts


def _not_found(ctx: "Context") -> None:
    ctx.write(f"404 NOT FOUND {ctx.path}\n")


class Router:
    """Holds one route tree per HTTP method and the handler of each route."""

    def __init__(self) -> None:
        self.roots: Dict[str, Node] = {}
        self.handlers: Dict[str, Optional[HandlerFunc]] = {}

    def add_route(self, method: str, pattern: str, handler: Optional[HandlerFunc]) -> None:
        """Register ``handler`` for ``method`` requests matching ``pattern``."""
        _log.info("Route %4s - %s", method, pattern)
        parts = parse_pattern(pattern)
        self.roots.setdefault(method, Node()).insert(pattern, parts, 0)
        self.handlers[_key(method, pattern)] = handler

    def get_route(self, method: str, path: str) -> Tuple[Optional[Node], Dict[str, str]]:
        """Return the matching route node and the path parameters it binds.

        When nothing matches the node is None and the parameters are empty.
        """
        root = self.roots.get(method)
        if root is None:
            return None, {}
        search_parts = parse_pattern(path)
        node = root.search(search_parts, 0)
        if node is None:
            return None, {}
        params: Dict[str, str] = {}
        for i, part in enumerate(parse_pattern(node.pattern)):
            if part.startswith(":"):
                params[part[1:]] = search_parts[i]
            if part.startswith("*") and len(part) > 1:
                params[part[1:]] = "/".join(search_parts[i:])
                break
        return node, params

    def handle(self, ctx: "Context") -> None:
        """Append the route's handler (or a not-found handler) to ``ctx`` and run the chain."""
        node, params = self.get_route(ctx.method, ctx.path)
        if node is not None:
            ctx.params = params
            ctx.handlers.append(self.handlers[_key(ctx.method, node.pattern)])
        else:
            ctx.handlers.append(_not_found)
        ctx.next()