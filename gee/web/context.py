"""Per-request context handed to handlers."""

from __future__ import annotations

import json as _json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional
from urllib.parse import parse_qs

if TYPE_CHECKING:
    from gee.web.engine import Engine

_FORM_METHODS = {"POST", "PUT", "PATCH"}
_FORM_TYPE = "application/x-www-form-urlencoded"


class Context:
    """Wraps a WSGI request and collects the response written by handlers.

    The response status and headers are fixed by the first call to
    :meth:`status` or :meth:`write`; later changes to them are ignored,
    while ``status_code`` always holds the last status asked for.
    """

    def __init__(self, environ: Dict[str, Any], engine: Optional["Engine"] = None):
        self.environ = environ
        self.engine = engine
        self.path: str = environ.get("PATH_INFO", "")
        self.method: str = environ.get("REQUEST_METHOD", "GET").upper()
        self.params: Dict[str, str] = {}
        self.status_code = 0
        self.handlers: List[Callable[["Context"], None]] = []
        self.index = -1
        self.headers: Dict[str, str] = {}
        self.body = bytearray()
        self.response_status: Optional[int] = None
        self._form: Optional[Dict[str, List[str]]] = None

    # ---- request --------------------------------------------------------

    def _query_values(self) -> Dict[str, List[str]]:
        return parse_qs(self.environ.get("QUERY_STRING", ""), keep_blank_values=True)

    def _post_values(self) -> Dict[str, List[str]]:
        if self._form is None:
            self._form = {}
            ctype = self.environ.get("CONTENT_TYPE", "").split(";")[0].strip().lower()
            if self.method in _FORM_METHODS and ctype == _FORM_TYPE:
                try:
                    length = int(self.environ.get("CONTENT_LENGTH") or 0)
                except ValueError:
                    length = 0
                stream = self.environ.get("wsgi.input")
                raw = stream.read(length) if stream is not None and length > 0 else b""
                self._form = parse_qs(raw.decode("utf-8", "replace"), keep_blank_values=True)
        return self._form

    def post_form(self, key: str) -> str:
        """Return the form value of ``key``: the request body first, then the query."""
        values = self._post_values().get(key) or self._query_values().get(key)
        return values[0] if values else ""

    def query(self, key: str) -> str:
        """Return the first query-string value of ``key``, or ""."""
        values = self._query_values().get(key)
        return values[0] if values else ""

    def param(self, key: str) -> str:
        """Return the path parameter ``key``, or ""."""
        return self.params.get(key, "")

    # ---- response -------------------------------------------------------

    def status(self, code: int) -> None:
        """Set the response status."""
        self.status_code = code
        if self.response_status is None:
            self.response_status = code

    def set_header(self, key: str, value: str) -> None:
        """Set a response header, unless the header has already been written."""
        if self.response_status is None:
            self.headers[key] = value

    def write(self, data: bytes | str) -> None:
        """Append ``data`` to the response body."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if self.response_status is None:
            self.response_status = 200
        self.body.extend(data)

    def string(self, code: int, fmt: str, *args: Any) -> None:
        """Write plain text, %-formatting ``fmt`` with ``args``."""
        self.set_header("Content-Type", "text/plain; charset=utf-8")
        self.status(code)
        self.write(fmt % args if args else fmt)

    def json(self, code: int, obj: Any) -> None:
        """Write ``obj`` encoded as JSON."""
        self.set_header("Content-Type", "application/json; charset=utf-8")
        self.status(code)
        try:
            encoded = _json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            self.status(500)
            self.write(f"{exc}\n")
            return
        self.write(encoded + "\n")

    def data(self, code: int, data: bytes) -> None:
        """Write raw bytes."""
        self.status(code)
        self.write(data)

    def html(self, code: int, html: str) -> None:
        """Write an HTML string."""
        self.set_header("Content-Type", "text/html")
        self.status(code)
        self.write(html)

    def render(self, code: int, name: str, data: Any = None) -> None:
        """Render the engine's template ``name``.

        A mapping supplies the template's variables; any other value is
        available to the template as ``data``.
        """
        self.set_header("Content-Type", "text/html")
        self.status(code)
        templates = getattr(self.engine, "templates", None)
        if templates is None:
            self.fail(500, "templates are not loaded")
            return
        if data is None:
            variables: Mapping[str, Any] = {}
        elif isinstance(data, Mapping):
            variables = data
        else:
            variables = {"data": data}
        try:
            text = templates.get_template(name).render(variables)
        except Exception as exc:
            self.fail(500, str(exc))
            return
        self.write(text)

    def fail(self, code: int, message: str) -> None:
        """Stop the handler chain and answer with a JSON error message."""
        self.index = len(self.handlers)
        self.json(code, {"message": message})

    # ---- chain ----------------------------------------------------------

    def next(self) -> None:
        """Run the remaining handlers in order."""
        self.index += 1
        while self.index < len(self.handlers):
            self.handlers[self.index](self)
            self.index += 1