"""The web engine: route groups, middleware, static files and templates."""

from __future__ import annotations

import glob
import html
import logging
import mimetypes
import posixpath
import time
import traceback
from http import HTTPStatus
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional
from wsgiref.simple_server import make_server

import jinja2

from gee.web.context import Context
from gee.web.router import HandlerFunc, Router

_log = logging.getLogger("gee.web")


class RouterGroup:
    """Routes sharing a path prefix and a middleware list."""

    def __init__(
        self,
        prefix: str = "",
        parent: Optional["RouterGroup"] = None,
        engine: Optional["Engine"] = None,
    ):
        self.prefix = prefix
        self.middlewares: List[HandlerFunc] = []
        self.parent = parent
        self.engine = engine

    def group(self, prefix: str) -> "RouterGroup":
        """Create a group whose routes start with ``prefix``."""
        engine = self.engine
        new_group = RouterGroup(prefix=engine.prefix + prefix, parent=self, engine=engine)
        engine.groups.append(new_group)
        return new_group

    def add_route(self, method: str, pattern: str, handler: HandlerFunc) -> None:
        """Register ``handler`` for ``method`` at this group's prefix plus ``pattern``."""
        self.engine.router.add_route(method, self.prefix + pattern, handler)

    def get(self, pattern: str, handler: HandlerFunc) -> None:
        """Register a GET route."""
        self.add_route("GET", pattern, handler)

    def post(self, pattern: str, handler: HandlerFunc) -> None:
        """Register a POST route."""
        self.add_route("POST", pattern, handler)

    def use(self, *args: HandlerFunc) -> None:
        """Add middleware run for every request under this group's prefix."""
        self.middlewares.extend(args)

    def static(self, relative_path: str, root: str) -> None:
        """Serve the files under directory ``root`` at ``relative_path``."""
        pattern = relative_path.rstrip("/") + "/*filepath"
        self.get(pattern, _static_handler(Path(root)))


def _resolve(root: Path, name: str) -> Path:
    cleaned = posixpath.normpath("/" + name).lstrip("/")
    return root / cleaned if cleaned else root


def _listing(directory: Path) -> str:
    lines = ["<pre>"]
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        name = entry.name + ("/" if entry.is_dir() else "")
        lines.append(f'<a href="{html.escape(name)}">{html.escape(name)}</a>')
    lines.append("</pre>")
    return "\n".join(lines) + "\n"


def _static_handler(root: Path) -> HandlerFunc:
    def handler(ctx: Context) -> None:
        target = _resolve(root, ctx.params.get("filepath", ""))
        if not target.exists():
            ctx.status(404)
            return
        if target.is_dir():
            index = target / "index.html"
            if not index.is_file():
                ctx.html(200, _listing(target))
                return
            target = index
        ctype = mimetypes.guess_type(target.name)[0] or "application/octet-stream"
        ctx.set_header("Content-Type", ctype)
        ctx.data(200, target.read_bytes())

    return handler


class Engine(RouterGroup):
    """A WSGI application dispatching requests through groups and routes."""

    def __init__(self) -> None:
        super().__init__(engine=self)
        self.router = Router()
        self.groups: List[RouterGroup] = [self]
        self.templates: Optional[jinja2.Environment] = None
        self._func_map: Dict[str, Callable[..., Any]] = {}

    def __call__(self, environ: Dict[str, Any], start_response) -> Iterable[bytes]:
        path = environ.get("PATH_INFO", "")
        middlewares = [
            middleware
            for group in self.groups
            if path.startswith(group.prefix)
            for middleware in group.middlewares
        ]
        ctx = Context(environ, self)
        ctx.handlers = middlewares
        self.router.handle(ctx)

        code = ctx.response_status or 200
        try:
            phrase = HTTPStatus(code).phrase
        except ValueError:
            phrase = ""
        start_response(f"{code} {phrase}".rstrip(), list(ctx.headers.items()))
        return [bytes(ctx.body)]

    def set_func_map(self, func_map: Mapping[str, Callable[..., Any]]) -> None:
        """Set the functions made available to templates."""
        self._func_map = dict(func_map)

    def load_html_glob(self, pattern: str) -> None:
        """Load every file matching ``pattern`` as a template named by its file name."""
        files = [Path(name) for name in sorted(glob.glob(pattern)) if Path(name).is_file()]
        if not files:
            raise ValueError(f"pattern matches no files: {pattern}")
        sources = {path.name: path.read_text(encoding="utf-8") for path in files}
        env = jinja2.Environment(loader=jinja2.DictLoader(sources), autoescape=True)
        env.globals.update(self._func_map)
        env.filters.update(self._func_map)
        self.templates = env

    def run(self, addr: str) -> None:
        """Serve on ``addr`` ("host:port" or ":port") until interrupted."""
        host, _, port = addr.rpartition(":")
        with make_server(host, int(port), self) as server:
            server.serve_forever()


def _request_uri(ctx: Context) -> str:
    query = ctx.environ.get("QUERY_STRING", "")
    return ctx.path + (f"?{query}" if query else "")


def logger() -> HandlerFunc:
    """Middleware logging each request's status, URI and duration."""

    def middleware(ctx: Context) -> None:
        start = time.perf_counter()
        ctx.next()
        elapsed = time.perf_counter() - start
        _log.info("[%d] %s in %.6fs", ctx.status_code, _request_uri(ctx), elapsed)

    return middleware


def recovery() -> HandlerFunc:
    """Middleware turning an exception in later handlers into a 500 response."""

    def middleware(ctx: Context) -> None:
        try:
            ctx.next()
        except Exception as exc:
            _log.error("%s\n%s\n", exc, traceback.format_exc())
            ctx.fail(500, "Internal Server Error")

    return middleware


def default() -> Engine:
    """Return an engine that already uses the logger and recovery middleware."""
    engine = Engine()
    engine.use(logger(), recovery())
    return engine