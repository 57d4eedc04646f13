"""Immutable view over cached bytes."""

from __future__ import annotations


class ByteView:
    """An immutable holder for a cached value."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview = b""):
        self._data = bytes(data)

    def __len__(self) -> int:
        return len(self._data)

    def __str__(self) -> str:
        return self._data.decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"ByteView({self._data!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ByteView):
            return self._data == other._data
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._data)

    def byte_slice(self) -> bytes:
        """Return a copy of the held bytes."""
        return bytes(self._data)