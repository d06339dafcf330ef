"""Random-access file abstraction over disk files and in-memory buffers."""

from __future__ import annotations

import enum
import logging
import os
from abc import ABC, abstractmethod

_log = logging.getLogger(__name__)

MAX_CHUNK_SIZE = 2**31 - 1
"""Largest number of bytes moved by a single read or write."""

_GETLINE_CHUNK_SIZE = 4 * 1024


class OpenMode(enum.Enum):
    """How a :class:`File` is opened."""

    R = "rb"
    """Read only; the file must exist."""
    RW = "r+b"
    """Read and write; the file must exist."""
    RWC = "x+b"
    """Read and write; the file is created and must not exist yet."""
    RWCF = "w+b"
    """Read and write; the file is created or truncated."""


class FileLike(ABC):
    """A byte container that is read and written at explicit offsets."""

    @property
    def name(self) -> str:
        return ""

    @abstractmethod
    def is_good(self) -> bool:
        """Whether the object can still be read from and written to."""

    @abstractmethod
    def size(self) -> int:
        """Current size in bytes."""

    @abstractmethod
    def read(self, offset: int, count: int) -> bytes:
        """Read up to ``count`` bytes starting at ``offset``."""

    @abstractmethod
    def write(self, offset: int, data: bytes) -> None:
        """Write ``data`` at ``offset``, growing the object as needed."""

    def flush(self) -> None:
        """Push buffered data to the underlying storage."""


def _check_chunk_size(count: int, what: str) -> None:
    if count > MAX_CHUNK_SIZE:
        raise ValueError(f"huge {what} > {MAX_CHUNK_SIZE} bytes, won't do that")


class File(FileLike):
    """A file on disk, addressed by byte offsets."""

    def __init__(self, filename: str | os.PathLike | None = None, mode: OpenMode = OpenMode.R):
        self._fp = None
        self._size = 0
        self._good = False
        self._name = ""
        if filename is not None:
            self.open(filename, mode)

    def __enter__(self) -> File:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def name(self) -> str:
        return self._name

    def open(self, filename: str | os.PathLike, mode: OpenMode = OpenMode.R) -> None:
        """Open ``filename``; raises :class:`OSError` when that fails."""
        self.close()
        self._fp = open(filename, mode.value)
        _log.debug("opened %s with mode %s", filename, mode.value)
        self._name = os.fspath(filename)
        self._good = True
        try:
            self._size = self._fp.seek(0, os.SEEK_END)
        except OSError:
            _log.error("unable to seek to the end of file %s", self._name)
            self._good = False
            self._size = 0

    def close(self) -> None:
        """Close the file; closing a closed file does nothing."""
        if self._fp is None:
            return
        fp = self._fp
        self._fp = None
        self._size = 0
        self._good = False
        self._name = ""
        fp.close()

    def is_good(self) -> bool:
        return self._fp is not None and self._good

    def size(self) -> int:
        return self._size

    def read(self, offset: int, count: int) -> bytes:
        if not self.is_good():
            return b""
        _check_chunk_size(count, "read")
        try:
            self._fp.seek(offset)
        except (OSError, ValueError):
            _log.error("unable to seek to %d in file %s", offset, self._name)
            self._good = False
            return b""
        return self._fp.read(count)

    def write(self, offset: int, data: bytes) -> None:
        if not self.is_good():
            raise OSError(f"file {self._name!r} is not in a good state")
        data = bytes(data)
        if len(data) > MAX_CHUNK_SIZE:
            self._good = False
            _check_chunk_size(len(data), "write")
        try:
            self._fp.seek(offset)
            self._fp.write(data)
        except (OSError, ValueError):
            _log.error("unable to write %d bytes into file %s", len(data), self._name)
            self._good = False
            raise
        self._size = max(self._size, offset + len(data))

    def flush(self) -> None:
        if self._fp is not None:
            self._fp.flush()


class MemoryFile(FileLike):
    """A growable in-memory byte buffer with the same interface as :class:`File`."""

    def __init__(self, data: bytes = b""):
        self._data = bytearray(data)
        self._good = True

    @property
    def name(self) -> str:
        return "<memory>"

    @property
    def data(self) -> bytes:
        return bytes(self._data)

    def is_good(self) -> bool:
        return self._good

    def size(self) -> int:
        return len(self._data)

    def read(self, offset: int, count: int) -> bytes:
        if not self._good or count == 0:
            return b""
        _check_chunk_size(count, "read")
        if offset > len(self._data):
            self._good = False
            return b""
        return bytes(self._data[offset : offset + count])

    def write(self, offset: int, data: bytes) -> None:
        if not self._good:
            raise OSError("memory file is not in a good state")
        if not data:
            return
        if len(data) > MAX_CHUNK_SIZE:
            self._good = False
            _check_chunk_size(len(data), "write")
        end = offset + len(data)
        if end > len(self._data):
            self._data.extend(bytes(end - len(self._data)))
        self._data[offset:end] = data

    def flush(self) -> None:
        pass


def getline(f: FileLike, from_offset: int) -> tuple[str, int]:
    """Read one line starting at ``from_offset``.

    Returns the line without its newline and the offset just past it.
    """
    if not f.is_good():
        raise OSError("file-like object is not in a good state, cannot getline")
    parts: list[bytes] = []
    position = from_offset
    found = False
    while True:
        chunk = f.read(position, _GETLINE_CHUNK_SIZE)
        position += len(chunk)
        index = chunk.find(b"\n")
        if index >= 0:
            parts.append(chunk[:index])
            found = True
            break
        parts.append(chunk)
        if len(chunk) != _GETLINE_CHUNK_SIZE:
            break
    raw = b"".join(parts)
    next_offset = from_offset + len(raw) + (1 if found else 0)
    return raw.decode("utf-8", errors="surrogateescape"), next_offset