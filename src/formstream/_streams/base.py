import typing

from formstream.utils import CHUNK_SIZE

# Origins under this scheme belong to anonymous in-memory or temporary
# streams and never imply a filename.
ANONYMOUS_ORIGIN_SCHEME = "memory://"
MEMORY_ORIGIN = ANONYMOUS_ORIGIN_SCHEME + "bytes"
TEMP_ORIGIN = ANONYMOUS_ORIGIN_SCHEME + "temp"

SourceType = typing.Union[
    str,
    bytes,
    bytearray,
    memoryview,
    typing.BinaryIO,
    typing.TextIO,
    typing.Iterator[typing.Union[str, bytes]],
    "ByteStream",
]


def is_anonymous_origin(origin: typing.Optional[str]) -> bool:
    if not isinstance(origin, str):
        return True
    # Standard streams are named "<stdin>", "<stdout>" and so on.
    if origin.startswith("<") and origin.endswith(">"):
        return True
    return origin.startswith(ANONYMOUS_ORIGIN_SCHEME)


class ByteStream:
    """Readable and optionally seekable source of bytes. Sinks are
    ByteStreams that also implement 'write()'.

    Streams that can't seek can only be read once, so any body built
    from them can't be built a second time with the same content.
    """

    def seekable(self) -> bool:
        raise NotImplementedError()

    def readable(self) -> bool:
        raise NotImplementedError()

    def rewind(self) -> None:
        raise NotImplementedError()

    def read(self, size: int = -1) -> bytes:
        raise NotImplementedError()

    def read_all(self) -> bytes:
        """Reads everything from the current position to the end."""
        chunks = []
        data = self.read(CHUNK_SIZE)
        while data:
            chunks.append(data)
            data = self.read(CHUNK_SIZE)
        return b"".join(chunks)

    def size(self) -> typing.Optional[int]:
        """Total size in bytes, or 'None' if it can't be known upfront."""
        raise NotImplementedError()

    @property
    def origin(self) -> typing.Optional[str]:
        """Where the bytes come from, usually a file path."""
        return None

    def write(self, data: bytes) -> int:
        raise NotImplementedError()

    def close(self) -> None:
        pass

    def __enter__(self) -> "ByteStream":
        return self

    def __exit__(self, *_: typing.Any) -> None:
        self.close()


class StreamFactory:
    """Turns raw resources into ByteStreams and creates output sinks."""

    def wrap(self, source: SourceType) -> ByteStream:
        raise NotImplementedError()

    def create_empty(self, buffer_hint: int) -> ByteStream:
        """Creates a growable, readable and writable sink that holds
        up to 'buffer_hint' bytes in memory.
        """
        raise NotImplementedError()
