import collections.abc
import io
import logging
import os
import stat
import tempfile
import typing

from formstream.exceptions import UnsupportedSourceType
from .base import ByteStream, StreamFactory, SourceType, MEMORY_ORIGIN, TEMP_ORIGIN

logger = logging.getLogger(__name__)


def _to_bytes(data: typing.Union[str, bytes, bytearray, memoryview]) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class IOStream(ByteStream):
    """ByteStream over a file object. Text-mode files are encoded
    as UTF-8 while reading.
    """

    def __init__(
        self, fp: typing.Union[typing.BinaryIO, typing.TextIO], origin=None
    ):
        self._fp = fp
        if origin is None:
            name = getattr(fp, "name", None)
            # Files opened from a descriptor are named by an int.
            if isinstance(name, (str, bytes, os.PathLike)):
                origin = os.fsdecode(name)
        self._origin = origin

    @property
    def origin(self) -> typing.Optional[str]:
        return self._origin

    def seekable(self) -> bool:
        seekable = getattr(self._fp, "seekable", None)
        if seekable is None:
            return hasattr(self._fp, "seek")
        return bool(seekable())

    def readable(self) -> bool:
        readable = getattr(self._fp, "readable", None)
        if readable is None:
            return hasattr(self._fp, "read")
        return bool(readable())

    def rewind(self) -> None:
        self._fp.seek(0)

    def read(self, size: int = -1) -> bytes:
        return _to_bytes(self._fp.read(size) or b"")

    def size(self) -> typing.Optional[int]:
        # Text is re-encoded while reading, so its size on disk says nothing.
        if isinstance(self._fp, io.TextIOBase):
            return None
        try:
            st = os.fstat(self._fp.fileno())
        except (AttributeError, OSError):
            pass
        else:
            # Pipes and sockets report a size of 0 that means nothing.
            return st.st_size if stat.S_ISREG(st.st_mode) else None

        if not self.seekable():
            return None
        position = self._fp.tell()
        end = self._fp.seek(0, io.SEEK_END)
        self._fp.seek(position)
        return end

    def write(self, data: bytes) -> int:
        return self._fp.write(data)

    def close(self) -> None:
        self._fp.close()

    def __repr__(self) -> str:
        return f"<IOStream origin={self._origin!r}>"


class IteratorStream(ByteStream):
    """ByteStream over an iterator of chunks. Can only be read once."""

    def __init__(
        self,
        iterator: typing.Iterator[typing.Union[str, bytes]],
        size: typing.Optional[int] = None,
    ):
        self._iterator = iterator
        self._size = size
        self._buffer = bytearray()

    def seekable(self) -> bool:
        return False

    def readable(self) -> bool:
        return True

    def rewind(self) -> None:
        raise io.UnsupportedOperation("iterator streams can't be rewound")

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            return self.read_all()
        while len(self._buffer) < size:
            chunk = next(self._iterator, None)
            if chunk is None:
                break
            self._buffer += _to_bytes(chunk)
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def read_all(self) -> bytes:
        data = bytes(self._buffer) + b"".join(_to_bytes(x) for x in self._iterator)
        self._buffer.clear()
        return data

    def size(self) -> typing.Optional[int]:
        return self._size


class SpooledStream(ByteStream):
    """Growable sink that keeps up to 'max_memory' bytes in memory
    and moves everything to an anonymous temporary file on the
    write that would go past it.
    """

    def __init__(self, max_memory: int):
        self.max_memory = max_memory
        self._file: typing.BinaryIO = io.BytesIO()
        self._in_memory = True
        self._size = 0

    @property
    def origin(self) -> str:
        return TEMP_ORIGIN

    @property
    def in_memory(self) -> bool:
        return self._in_memory

    @property
    def closed(self) -> bool:
        return self._file.closed

    def seekable(self) -> bool:
        return True

    def readable(self) -> bool:
        return True

    def rewind(self) -> None:
        self._file.seek(0)

    def read(self, size: int = -1) -> bytes:
        return self._file.read(size)

    def size(self) -> int:
        return self._size

    def write(self, data: bytes) -> int:
        end = max(self._size, self._file.tell() + len(data))
        if self._in_memory and end > self.max_memory:
            self.rollover()
        written = self._file.write(data)
        self._size = max(self._size, self._file.tell())
        return written

    def rollover(self) -> None:
        """Moves the buffered bytes to a temporary file."""
        if not self._in_memory:
            return
        logger.debug(
            "Spilling %d buffered bytes to a temporary file (limit %d)",
            self._size,
            self.max_memory,
        )
        new_file = typing.cast(typing.BinaryIO, tempfile.TemporaryFile())
        try:
            new_file.write(self._file.getvalue())
            new_file.seek(self._file.tell())
        except BaseException:
            new_file.close()
            raise
        old_file = self._file
        self._file = new_file
        self._in_memory = False
        old_file.close()

    def close(self) -> None:
        self._file.close()

    def __repr__(self) -> str:
        where = "memory" if self._in_memory else "disk"
        return f"<SpooledStream size={self._size} in {where}>"


class IOStreamFactory(StreamFactory):
    """Default StreamFactory backed by file objects and temporary files."""

    def wrap(self, source: SourceType) -> ByteStream:
        if isinstance(source, ByteStream):
            return source
        if isinstance(source, (str, bytes, bytearray, memoryview)):
            return IOStream(io.BytesIO(_to_bytes(source)), origin=MEMORY_ORIGIN)
        if hasattr(source, "read"):
            return IOStream(source)
        if isinstance(source, collections.abc.Iterator):
            return IteratorStream(source)
        raise UnsupportedSourceType(
            "resource must be str, bytes, a file object, an iterator of chunks "
            f"or a ByteStream, got {type(source).__name__!r}"
        )

    def create_empty(self, buffer_hint: int) -> SpooledStream:
        return SpooledStream(buffer_hint)
