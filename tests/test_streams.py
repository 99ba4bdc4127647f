import io
import os

import pytest
import formstream
from formstream._streams import MEMORY_ORIGIN, TEMP_ORIGIN, is_anonymous_origin


@pytest.fixture
def factory():
    return formstream.IOStreamFactory()


@pytest.mark.parametrize(
    "source", ["stream contents", b"stream contents", bytearray(b"stream contents")]
)
def test_wrap_raw_content(factory, source):
    stream = factory.wrap(source)

    assert stream.seekable()
    assert stream.readable()
    assert stream.size() == 15
    assert stream.origin == MEMORY_ORIGIN
    assert stream.read_all() == b"stream contents"


def test_wrap_memoryview(factory):
    assert factory.wrap(memoryview(b"abc")).read_all() == b"abc"


def test_wrap_str_is_utf8_encoded(factory):
    stream = factory.wrap("äa")

    assert stream.size() == 3
    assert stream.read_all() == "äa".encode("utf-8")


def test_wrap_file(factory, tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"\x00\x01\x02")

    with open(path, "rb") as fp:
        stream = factory.wrap(fp)
        assert stream.origin == str(path)
        assert stream.size() == 3
        assert stream.seekable()
        assert stream.read(2) == b"\x00\x01"
        stream.rewind()
        assert stream.read_all() == b"\x00\x01\x02"


def test_wrap_text_file_without_descriptor(factory):
    stream = factory.wrap(io.StringIO("äa"))

    assert stream.origin is None
    assert stream.size() is None
    assert stream.read_all() == "äa".encode("utf-8")


def test_wrap_text_file_on_disk_has_no_size(factory, tmp_path):
    path = tmp_path / "notes.txt"
    path.write_bytes(b"a\r\nb\r\n")

    with open(path, "r") as fp:
        stream = factory.wrap(fp)
        assert stream.size() is None
        assert stream.read_all() == b"a\nb\n"


def test_wrap_bytesio_keeps_position_when_sizing(factory):
    fp = io.BytesIO(b"hello world")
    fp.seek(6)
    stream = factory.wrap(fp)

    assert stream.size() == 11
    assert stream.read_all() == b"world"
    assert stream.origin is None


def test_pipe_has_no_size():
    r, w = os.pipe()
    os.write(w, b"abc")
    os.close(w)
    with os.fdopen(r, "rb") as fp:
        stream = formstream.IOStream(fp)
        assert stream.size() is None
        assert not stream.seekable()
        assert stream.origin is None
        assert stream.read_all() == b"abc"


def test_wrap_iterator(factory):
    stream = factory.wrap(iter([b"abc", "dé", b"f"]))

    assert isinstance(stream, formstream.IteratorStream)
    assert not stream.seekable()
    assert stream.size() is None
    assert stream.read(2) == b"ab"
    assert stream.read(3) == b"cd\xc3"
    assert stream.read_all() == b"\xa9f"
    assert stream.read_all() == b""
    with pytest.raises(io.UnsupportedOperation):
        stream.rewind()


def test_wrap_byte_stream_is_passthrough(factory):
    stream = formstream.IOStream(io.BytesIO(b"x"))

    assert factory.wrap(stream) is stream


@pytest.mark.parametrize("source", [42, None, object(), {"a": 1}, 1.5])
def test_wrap_unsupported(factory, source):
    with pytest.raises(formstream.UnsupportedSourceType):
        factory.wrap(source)


def test_unsupported_source_type_is_type_error(factory):
    with pytest.raises(TypeError):
        factory.wrap(42)


@pytest.mark.parametrize(
    ["origin", "expected"],
    [
        (None, True),
        (3, True),
        (MEMORY_ORIGIN, True),
        (TEMP_ORIGIN, True),
        ("/tmp/upload.png", False),
        ("upload.png", False),
        ("<stdin>", True),
        ("<stderr>", True),
        ("<upload.png", False),
    ],
)
def test_is_anonymous_origin(origin, expected):
    assert is_anonymous_origin(origin) is expected


def test_spooled_stream_honors_threshold_exactly():
    sink = formstream.SpooledStream(10)
    sink.write(b"x" * 10)
    assert sink.in_memory

    sink.write(b"y")
    assert not sink.in_memory
    assert sink.size() == 11

    sink.rewind()
    assert sink.read_all() == b"x" * 10 + b"y"
    sink.close()
    assert sink.closed


def test_spooled_stream_large_single_write():
    with formstream.SpooledStream(4) as sink:
        sink.write(b"0123456789")
        assert not sink.in_memory
        sink.rewind()
        assert sink.read(4) == b"0123"
        assert sink.read_all() == b"456789"
        assert sink.origin == TEMP_ORIGIN


def test_create_empty(factory):
    sink = factory.create_empty(1024)

    assert isinstance(sink, formstream.SpooledStream)
    assert sink.max_memory == 1024
    assert sink.size() == 0
    assert sink.read_all() == b""


def test_get_stream_factory():
    assert isinstance(formstream.get_stream_factory(), formstream.IOStreamFactory)
