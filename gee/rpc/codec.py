"""Message framing for RPC headers and bodies."""

from __future__ import annotations

import abc
import dataclasses
import enum
import json
import logging
import struct
from typing import Any, Callable, Dict

_log = logging.getLogger(__name__)

_LENGTH = struct.Struct(">I")


class CodecType(str, enum.Enum):
    """Content types a connection may negotiate."""

    GOB = "application/gob"
    JSON = "application/json"


@dataclasses.dataclass
class Header:
    """Metadata sent before every request and response body."""

    service_method: str = ""
    seq: int = 0
    error: str = ""


class Codec(abc.ABC):
    """Reads and writes header/body pairs on a connection."""

    @abc.abstractmethod
    def read_header(self) -> Header:
        """Read the next header; raise EOFError at the end of the stream."""

    @abc.abstractmethod
    def read_body(self) -> Any:
        """Read the body following a header."""

    @abc.abstractmethod
    def write(self, header: Header, body: Any) -> None:
        """Write a header and its body."""

    @abc.abstractmethod
    def close(self) -> None:
        """Close the underlying connection."""


def _encode_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"cannot encode {type(obj).__name__}")


class StreamCodec(Codec):
    """Length-prefixed JSON frames over a socket or binary stream.

    Each value is a 4-byte big-endian length followed by that many bytes
    of UTF-8 JSON.
    """

    def __init__(self, conn: Any):
        self._conn = conn
        if hasattr(conn, "makefile"):
            self._reader = conn.makefile("rb")
            self._writer = conn.makefile("wb")
        else:
            self._reader = self._writer = conn
        self._closed = False

    def _read_exact(self, size: int, at_start: bool) -> bytes:
        data = bytearray()
        while len(data) < size:
            chunk = self._reader.read(size - len(data))
            if not chunk:
                if at_start and not data:
                    raise EOFError("end of stream")
                raise EOFError("unexpected end of stream")
            data.extend(chunk)
        return bytes(data)

    def _read_frame(self) -> Any:
        (size,) = _LENGTH.unpack(self._read_exact(_LENGTH.size, at_start=True))
        payload = self._read_exact(size, at_start=False)
        return json.loads(payload.decode("utf-8"))

    def _frame(self, value: Any) -> bytes:
        payload = json.dumps(value, default=_encode_default).encode("utf-8")
        return _LENGTH.pack(len(payload)) + payload

    def read_header(self) -> Header:
        obj = self._read_frame()
        if not isinstance(obj, dict):
            raise ValueError("malformed header")
        header = Header(
            service_method=str(obj.get("ServiceMethod", "")),
            seq=int(obj.get("Seq", 0)),
            error=str(obj.get("Error", "")),
        )
        _log.debug("read header %s", header)
        return header

    def read_body(self) -> Any:
        body = self._read_frame()
        _log.debug("read body %r", body)
        return body

    def write(self, header: Header, body: Any) -> None:
        _log.debug("write header %s body %r", header, body)
        try:
            data = self._frame(
                {"ServiceMethod": header.service_method, "Seq": header.seq, "Error": header.error}
            ) + self._frame(body)
            self._writer.write(data)
            self._writer.flush()
        except Exception as exc:
            _log.warning("rpc codec: error encoding message: %s", exc)
            self.close()
            raise

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for stream in {id(s): s for s in (self._reader, self._writer)}.values():
            if stream is not self._conn:
                stream.close()
        self._conn.close()


_CODECS: Dict[CodecType, Callable[[Any], Codec]] = {CodecType.JSON: StreamCodec}

DEFAULT_CODEC_TYPE = CodecType.JSON


def new_codec(codec_type: CodecType | str, conn: Any) -> Codec:
    """Return a codec of ``codec_type`` on ``conn``; raise ValueError if unsupported."""
    try:
        factory = _CODECS[CodecType(codec_type)]
    except (ValueError, KeyError):
        raise ValueError(f"invalid codec type {codec_type}") from None
    return factory(conn)