import logging
import typing

from ._streams import (
    ByteStream,
    LocatorType,
    StreamFactory,
    SourceType,
    get_stream_factory,
    is_anonymous_origin,
)
from .boundary import BoundaryGenerator
from .exceptions import FactoryResolutionError
from .mimetype import MimetypeHelper
from .models import Headers, HeadersType, Part
from .utils import CHUNK_SIZE, basename, escape_form_value, estimate_buffer_threshold

logger = logging.getLogger(__name__)

OptionsType = typing.Mapping[str, typing.Any]


def infer_headers(
    name: typing.Optional[str],
    stream: ByteStream,
    filename: typing.Optional[str],
    headers: Headers,
    mimetype_helper: MimetypeHelper,
) -> Headers:
    """Adds 'Content-Disposition', 'Content-Length' and 'Content-Type'
    to 'headers' unless a header with that name is already there in
    any casing. Returns the same Headers object.
    """
    if "content-disposition" not in headers:
        disposition = f'form-data; name="{escape_form_value(name or "")}"'
        if filename:
            disposition += f'; filename="{escape_form_value(basename(filename))}"'
        headers.add("Content-Disposition", disposition)

    # A known length of 0 is still a length.
    if "content-length" not in headers:
        length = stream.size()
        if length is not None:
            headers.add("Content-Length", str(length))

    if "content-type" not in headers and filename:
        content_type = mimetype_helper.lookup(filename)
        if content_type:
            headers.add("Content-Type", content_type)

    return headers


def _copy_content(stream: ByteStream, sink: ByteStream) -> None:
    if not stream.seekable():
        sink.write(stream.read_all())
        return
    stream.rewind()
    data = stream.read(CHUNK_SIZE)
    while data:
        sink.write(data)
        data = stream.read(CHUNK_SIZE)


def assemble(
    parts: typing.Iterable[Part], boundary: str, sink: ByteStream
) -> ByteStream:
    """Writes the multipart encoding of 'parts' into 'sink' and rewinds
    it. The sink is closed if anything goes wrong on the way.
    """
    boundary_bytes = boundary.encode("utf-8")
    try:
        for part in parts:
            sink.write(b"--%b\r\n%b\r\n" % (boundary_bytes, part.headers.render()))
            _copy_content(part.stream, sink)
            sink.write(b"\r\n")
        sink.write(b"--%b--\r\n" % boundary_bytes)
        sink.rewind()
    except BaseException:
        sink.close()
        raise
    return sink


class MultipartStream(ByteStream):
    """The built 'multipart/form-data' body. Reads like any other
    ByteStream and knows the boundary it was built with.
    """

    def __init__(self, stream: ByteStream, boundary: str):
        self._stream = stream
        self._boundary = boundary

    @property
    def boundary(self) -> str:
        return self._boundary

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self._boundary}"

    @property
    def origin(self) -> typing.Optional[str]:
        return self._stream.origin

    def seekable(self) -> bool:
        return self._stream.seekable()

    def readable(self) -> bool:
        return self._stream.readable()

    def rewind(self) -> None:
        self._stream.rewind()

    def read(self, size: int = -1) -> bytes:
        return self._stream.read(size)

    def read_all(self) -> bytes:
        return self._stream.read_all()

    def size(self) -> typing.Optional[int]:
        return self._stream.size()

    def close(self) -> None:
        self._stream.close()

    def __iter__(self) -> typing.Iterator[bytes]:
        data = self.read(CHUNK_SIZE)
        while data:
            yield data
            data = self.read(CHUNK_SIZE)

    def __enter__(self) -> "MultipartStream":
        return self

    def __repr__(self) -> str:
        return f"<MultipartStream boundary={self._boundary!r}>"


class MultipartStreamBuilder:
    """Builds a 'multipart/form-data' body out of strings, bytes, files
    and streams.

    Parts are kept in the order they're added and a name may be used
    by more than one part. Headers that aren't given are inferred when
    the part is added: 'Content-Disposition' from the name and filename,
    'Content-Length' from the stream size and 'Content-Type' from the
    filename's extension. The filename is taken from the stream's origin
    (a file's path) unless one is passed explicitly.

    The boundary is generated on first use and stays the same until
    'reset()'. Nothing checks that it doesn't occur inside a part.

    Instances aren't thread-safe.
    """

    def __init__(
        self,
        stream_factory: typing.Optional[StreamFactory] = None,
        *,
        locator: LocatorType = get_stream_factory,
        mimetype_helper: typing.Optional[MimetypeHelper] = None,
        buffer_threshold: int = 0,
    ):
        if stream_factory is None:
            stream_factory = self._locate_stream_factory(locator)
        elif not (
            callable(getattr(stream_factory, "wrap", None))
            and callable(getattr(stream_factory, "create_empty", None))
        ):
            raise TypeError(
                "stream_factory must be a StreamFactory or None, "
                f"got {type(stream_factory).__name__!r}"
            )

        self._stream_factory = stream_factory
        self._mimetype_helper = mimetype_helper
        self._buffer_threshold = buffer_threshold
        self._boundary = BoundaryGenerator()
        self._parts: typing.List[Part] = []

    @staticmethod
    def _locate_stream_factory(locator: LocatorType) -> StreamFactory:
        try:
            stream_factory = locator()
        except (ImportError, LookupError) as err:
            raise FactoryResolutionError(
                f"locating a StreamFactory failed: {err}", error=err
            ) from err
        if stream_factory is None:
            raise FactoryResolutionError(
                "no StreamFactory could be located, pass one to "
                "MultipartStreamBuilder()"
            )
        return stream_factory

    @property
    def stream_factory(self) -> StreamFactory:
        return self._stream_factory

    @property
    def parts(self) -> typing.Tuple[Part, ...]:
        return tuple(self._parts)

    @property
    def mimetype_helper(self) -> MimetypeHelper:
        if self._mimetype_helper is None:
            self._mimetype_helper = MimetypeHelper()
        return self._mimetype_helper

    @property
    def buffer_threshold(self) -> int:
        return self._buffer_threshold

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.get_boundary()}"

    def add_part(
        self,
        name: typing.Optional[str],
        resource: SourceType,
        headers: typing.Optional[HeadersType] = None,
        *,
        filename: typing.Optional[str] = None,
    ) -> "MultipartStreamBuilder":
        """Adds a part. 'resource' is wrapped by the StreamFactory, so an
        unsupported resource fails here and leaves the builder untouched.
        """
        stream = self._stream_factory.wrap(resource)
        if not filename:
            origin = stream.origin
            filename = None if is_anonymous_origin(origin) else origin

        part_headers = infer_headers(
            name, stream, filename, Headers(headers), self.mimetype_helper
        )
        self._parts.append(Part(name, stream, part_headers, filename))
        return self

    def add_part_with_options(
        self,
        name: typing.Optional[str],
        resource: SourceType,
        options: typing.Optional[OptionsType] = None,
    ) -> "MultipartStreamBuilder":
        """Same as 'add_part()' with headers and filename given as
        '{"headers": {...}, "filename": "..."}'.
        """
        options = dict(options or {})
        headers = options.pop("headers", None)
        filename = options.pop("filename", None)
        if options:
            raise TypeError(f"unexpected options: {', '.join(sorted(options))}")
        return self.add_part(name, resource, headers, filename=filename)

    def build(self) -> MultipartStream:
        """Serializes all parts into a new stream positioned at the start.
        Can be called again to get the same bytes as long as every part
        stream is seekable.
        """
        if self._buffer_threshold > 0:
            threshold = self._buffer_threshold
        else:
            threshold = estimate_buffer_threshold()

        boundary = self.get_boundary()
        sink = self._stream_factory.create_empty(threshold)
        assemble(self._parts, boundary, sink)
        logger.debug(
            "Built multipart body with %d part(s), %s bytes",
            len(self._parts),
            sink.size(),
        )
        return MultipartStream(sink, boundary)

    def get_boundary(self) -> str:
        return self._boundary.current()

    def set_boundary(self, boundary: str) -> "MultipartStreamBuilder":
        self._boundary.set(boundary)
        return self

    def set_buffer_threshold(self, threshold: int) -> "MultipartStreamBuilder":
        """Sets how many bytes of output stay in memory before spilling
        to a temporary file. Values <= 0 mean 'estimate from memory'.
        """
        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise TypeError(f"threshold must be an int, got {threshold!r}")
        self._buffer_threshold = threshold
        return self

    def set_mimetype_helper(
        self, mimetype_helper: MimetypeHelper
    ) -> "MultipartStreamBuilder":
        self._mimetype_helper = mimetype_helper
        return self

    def reset(self) -> "MultipartStreamBuilder":
        """Clears all parts and the boundary so the builder can be reused."""
        self._parts = []
        self._boundary.reset()
        return self

    def __repr__(self) -> str:
        return f"<MultipartStreamBuilder parts={len(self._parts)}>"
