"""Binary streams and the little-endian encoding used for checkpoint data."""

from __future__ import annotations

import os
import struct
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Mapping

_SIZE = struct.Struct("<Q")
_UINT32 = struct.Struct("<I")
_DOUBLE = struct.Struct("<d")
_BOOL = struct.Struct("<?")


class BasicBinaryStream(ABC):
    """A stream of raw bytes that can be written, read and skipped."""

    @abstractmethod
    def write(self, data: bytes) -> None: ...

    @abstractmethod
    def read(self, size: int) -> bytes: ...

    def skip(self, size: int) -> None:
        self.read(size)


class BinaryNullStream(BasicBinaryStream):
    """Discards writes and reads zeros; counts the bytes that pass."""

    def __init__(self) -> None:
        self.pos = 0

    def write(self, data: bytes) -> None:
        self.pos += len(data)

    def read(self, size: int) -> bytes:
        self.pos += size
        return bytes(size)

    def skip(self, size: int) -> None:
        self.pos += size

    def reset(self) -> None:
        self.pos = 0


class BinaryStream(BasicBinaryStream):
    """A fixed-size in-memory buffer.

    ``size`` is either the buffer capacity or initial bytes to read from.
    """

    def __init__(self, size: int | bytes | bytearray) -> None:
        self._buf = bytearray(size)
        self.pos = 0

    @property
    def size(self) -> int:
        return len(self._buf)

    def _advance(self, size: int, where: str) -> int:
        start = self.pos
        if start + size > len(self._buf):
            raise IndexError(f"BinaryStream.{where}: out of range")
        self.pos = start + size
        return start

    def write(self, data: bytes) -> None:
        start = self._advance(len(data), "write")
        self._buf[start:self.pos] = data

    def read(self, size: int) -> bytes:
        start = self._advance(size, "read")
        return bytes(self._buf[start:self.pos])

    def skip(self, size: int) -> None:
        self._advance(size, "skip")

    def reset(self) -> None:
        self.pos = 0

    def getvalue(self) -> bytes:
        """Bytes up to the current position."""
        return bytes(self._buf[:self.pos])


class BinaryFileStream(BasicBinaryStream):
    """A binary file opened for reading ("r") or writing ("w")."""

    def __init__(self, fname: str | os.PathLike, mode: str = "r") -> None:
        self._file = open(fname, mode.replace("b", "") + "b")

    def write(self, data: bytes) -> None:
        self._file.write(data)

    def read(self, size: int) -> bytes:
        data = self._file.read(size)
        if len(data) < size:
            raise EOFError(f"expected {size} bytes, got {len(data)}")
        return data

    def skip(self, size: int) -> None:
        self._file.seek(size, os.SEEK_CUR)

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "BinaryFileStream":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def write_size(stream: BasicBinaryStream, value: int) -> None:
    stream.write(_SIZE.pack(value))


def read_size(stream: BasicBinaryStream) -> int:
    return _SIZE.unpack(stream.read(_SIZE.size))[0]


def write_uint32(stream: BasicBinaryStream, value: int) -> None:
    stream.write(_UINT32.pack(value))


def read_uint32(stream: BasicBinaryStream) -> int:
    return _UINT32.unpack(stream.read(_UINT32.size))[0]


def write_double(stream: BasicBinaryStream, value: float) -> None:
    stream.write(_DOUBLE.pack(value))


def read_double(stream: BasicBinaryStream) -> float:
    return _DOUBLE.unpack(stream.read(_DOUBLE.size))[0]


def write_bool(stream: BasicBinaryStream, value: bool) -> None:
    stream.write(_BOOL.pack(bool(value)))


def read_bool(stream: BasicBinaryStream) -> bool:
    return stream.read(1) != b"\x00"


def write_string(stream: BasicBinaryStream, value: str) -> None:
    data = value.encode("utf-8")
    write_size(stream, len(data))
    stream.write(data)


def read_string(stream: BasicBinaryStream) -> str:
    return stream.read(read_size(stream)).decode("utf-8")


def write_sequence(stream: BasicBinaryStream, items: Iterable[Any],
                   write_item: Callable[[BasicBinaryStream, Any], None]) -> None:
    items = list(items)
    write_size(stream, len(items))
    for item in items:
        write_item(stream, item)


def read_sequence(stream: BasicBinaryStream,
                  read_item: Callable[[BasicBinaryStream], Any]) -> list:
    return [read_item(stream) for _ in range(read_size(stream))]


def write_mapping(stream: BasicBinaryStream, mapping: Mapping[Any, Any],
                  write_key: Callable[[BasicBinaryStream, Any], None],
                  write_value: Callable[[BasicBinaryStream, Any], None]) -> None:
    write_size(stream, len(mapping))
    for key, value in mapping.items():
        write_key(stream, key)
        write_value(stream, value)


def read_mapping(stream: BasicBinaryStream,
                 read_key: Callable[[BasicBinaryStream], Any],
                 read_value: Callable[[BasicBinaryStream], Any]) -> dict:
    result = {}
    for _ in range(read_size(stream)):
        key = read_key(stream)
        result[key] = read_value(stream)
    return result


def serialized_size(obj: Any, write_obj: Callable[[BasicBinaryStream, Any], None]) -> int:
    """Number of bytes ``write_obj`` produces for ``obj``."""
    stream = BinaryNullStream()
    write_obj(stream, obj)
    return stream.pos


def serialize(obj: Any, write_obj: Callable[[BasicBinaryStream, Any], None],
              size: int | None = None) -> bytes:
    """Encode ``obj`` into a buffer of ``size`` bytes (default: exactly enough)."""
    if size is None:
        size = serialized_size(obj, write_obj)
    stream = BinaryStream(size)
    write_obj(stream, obj)
    return stream.getvalue()