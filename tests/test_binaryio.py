import pytest

from tinmesh.binaryio import (
    BinaryIO,
    BinaryIOError,
    BinaryIOErrorTracker,
    Endianness,
    IOOperation,
)
from tinmesh.files import MemoryFile


def test_little_endian_wire_bytes():
    mf = MemoryFile()
    BinaryIO(mf, Endianness.LITTLE).write("uint16", [0x0102])
    assert mf.data == b"\x02\x01"


def test_big_endian_wire_bytes():
    mf = MemoryFile()
    BinaryIO(mf, Endianness.BIG).write("uint16", [0x0102])
    assert mf.data == b"\x01\x02"


@pytest.mark.parametrize("endianness", list(Endianness))
@pytest.mark.parametrize(
    "type_name,values",
    [
        ("int8", [-5, 7]),
        ("uint32", [1, 4000000000]),
        ("int64", [-(2**40), 2**40]),
        ("float64", [3.5, -0.25]),
    ],
)
def test_round_trip(endianness, type_name, values):
    mf = MemoryFile()
    bio = BinaryIO(mf, endianness)
    tracker = BinaryIOErrorTracker()
    bio.write(type_name, values, tracker)
    assert bio.read(type_name, len(values), tracker) == values
    assert not tracker.has_error()
    assert bio.read_pos == bio.write_pos == mf.size()


def test_sequential_reads_advance():
    mf = MemoryFile()
    bio = BinaryIO(mf)
    bio.write("int32", [10, 20, 30])
    assert bio.read("int32") == [10]
    assert bio.read("int32", 2) == [20, 30]


def test_short_read_is_recorded():
    mf = MemoryFile(b"\x01\x00")
    bio = BinaryIO(mf)
    tracker = BinaryIOErrorTracker()
    assert bio.read("uint32", 1, tracker) == []
    assert tracker.has_error()
    err = tracker.last_error
    assert err.what is IOOperation.READ
    assert err.where == 0
    assert err.expected_bytes == 4
    assert err.actual_bytes == 2
    assert str(tracker) == "error: " + str(err)
    assert str(err) == "reading failed at 0 expected 4 bytes, got 2 bytes on type uint32"
    assert bio.read_pos == 2


def test_short_read_without_tracker_raises():
    bio = BinaryIO(MemoryFile(b"\x01"))
    with pytest.raises(OSError):
        bio.read("uint16")


def test_tracker_keeps_first_and_last():
    tracker = BinaryIOErrorTracker()
    assert str(tracker) == ""
    first = BinaryIOError("uint8", 0, IOOperation.READ, 1, 0)
    last = BinaryIOError("float64", 8, IOOperation.WRITE, 8, 0)
    tracker.record(first)
    tracker.record(last)
    assert tracker.first_error == first
    assert tracker.last_error == last
    assert str(tracker) == f"first error: {first}, last error: {last}"


def test_empty_error_has_empty_text():
    err = BinaryIOError()
    assert not err.is_error()
    assert str(err) == ""


def test_write_failure_is_recorded():
    mf = MemoryFile(b"ab")
    mf.read(5, 1)
    assert not mf.is_good()
    bio = BinaryIO(mf, write_pos=2)
    tracker = BinaryIOErrorTracker()
    bio.write("uint16", [1, 2], tracker)
    err = tracker.first_error
    assert err.what is IOOperation.WRITE
    assert err.where == 2
    assert err.expected_bytes == 4
    assert bio.write_pos == 2
    assert str(err).startswith("writing failed at 2")


def test_write_failure_without_tracker_raises():
    mf = MemoryFile()
    mf.read(1, 1)
    with pytest.raises(OSError):
        BinaryIO(mf).write("uint8", [1])


def test_unknown_type_and_bad_count():
    bio = BinaryIO(MemoryFile(b"\x00" * 8))
    with pytest.raises(ValueError):
        bio.read("complex", 1)
    with pytest.raises(ValueError):
        bio.read("uint8", 0)