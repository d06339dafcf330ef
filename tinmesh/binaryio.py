"""Typed binary reads and writes on a :class:`~tinmesh.files.FileLike`."""

from __future__ import annotations

import enum
import struct
import sys
from dataclasses import dataclass, field

from tinmesh.files import FileLike

_TYPE_CODES = {
    "int8": "b",
    "uint8": "B",
    "int16": "h",
    "uint16": "H",
    "int32": "i",
    "uint32": "I",
    "int64": "q",
    "uint64": "Q",
    "float32": "f",
    "float64": "d",
}


class Endianness(enum.Enum):
    LITTLE = "<"
    BIG = ">"

    @classmethod
    def native(cls) -> Endianness:
        return cls.LITTLE if sys.byteorder == "little" else cls.BIG


class IOOperation(enum.Enum):
    READ = "read"
    WRITE = "write"


@dataclass
class BinaryIOError:
    """Description of one failed read or write; empty when ``type_name`` is None."""

    type_name: str | None = None
    where: int = 0
    what: IOOperation = IOOperation.READ
    expected_bytes: int = 0
    actual_bytes: int = 0

    def is_error(self) -> bool:
        return self.type_name is not None

    def __str__(self) -> str:
        if not self.is_error():
            return ""
        action = "reading" if self.what is IOOperation.READ else "writing"
        return (
            f"{action} failed at {self.where} expected {self.expected_bytes} bytes, "
            f"got {self.actual_bytes} bytes on type {self.type_name}"
        )


@dataclass
class BinaryIOErrorTracker:
    """Keeps the first and the most recent error of a run of operations."""

    first_error: BinaryIOError = field(default_factory=BinaryIOError)
    last_error: BinaryIOError = field(default_factory=BinaryIOError)

    def record(self, error: BinaryIOError) -> None:
        self.last_error = error
        if not self.first_error.is_error():
            self.first_error = error

    def has_error(self) -> bool:
        return self.first_error.is_error() or self.last_error.is_error()

    def __str__(self) -> str:
        if self.first_error.is_error() and self.first_error == self.last_error:
            return f"error: {self.first_error}"
        out = ""
        if self.first_error.is_error():
            out += f"first error: {self.first_error}"
        if self.last_error.is_error():
            out += ", last error: " if out else "last error: "
            out += str(self.last_error)
        return out


def _element_format(type_name: str) -> str:
    try:
        return _TYPE_CODES[type_name]
    except KeyError:
        raise ValueError(f"unknown binary type {type_name!r}") from None


class BinaryIO:
    """Sequential typed reader and writer with separate read and write positions."""

    def __init__(
        self,
        f: FileLike,
        endianness: Endianness = Endianness.LITTLE,
        read_pos: int = 0,
        write_pos: int = 0,
    ):
        self.file = f
        self.endianness = endianness
        self.read_pos = read_pos
        self.write_pos = write_pos

    def read(
        self, type_name: str, count: int = 1, errors: BinaryIOErrorTracker | None = None
    ) -> list:
        """Read ``count`` values of ``type_name``.

        Only complete elements are returned. A short read is recorded in
        ``errors``, or raised as :class:`OSError` when no tracker is given.
        """
        code = _element_format(type_name)
        if count <= 0:
            raise ValueError("count must be positive")
        elem_size = struct.calcsize(code)
        bytes_to_read = elem_size * count
        data = self.file.read(self.read_pos, bytes_to_read)
        if len(data) != bytes_to_read:
            error = BinaryIOError(
                type_name=type_name,
                where=self.read_pos,
                what=IOOperation.READ,
                expected_bytes=bytes_to_read,
                actual_bytes=len(data),
            )
            if errors is None:
                raise OSError(str(error))
            errors.record(error)
        self.read_pos += len(data)
        complete = len(data) // elem_size
        fmt = f"{self.endianness.value}{complete}{code}"
        return list(struct.unpack(fmt, data[: complete * elem_size]))

    def write(
        self, type_name: str, values, errors: BinaryIOErrorTracker | None = None
    ) -> None:
        """Write ``values`` as ``type_name`` at the write position.

        A failed write is recorded in ``errors``, or raised as :class:`OSError`
        when no tracker is given.
        """
        code = _element_format(type_name)
        values = list(values)
        data = struct.pack(f"{self.endianness.value}{len(values)}{code}", *values)
        try:
            self.file.write(self.write_pos, data)
        except OSError:
            error = BinaryIOError(
                type_name=type_name,
                where=self.write_pos,
                what=IOOperation.WRITE,
                expected_bytes=len(data),
                actual_bytes=0,
            )
            if errors is None:
                raise
            errors.record(error)
            return
        self.write_pos += len(data)