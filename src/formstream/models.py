import typing

if typing.TYPE_CHECKING:
    from ._streams import ByteStream


HeaderValueType = typing.Union[str, bytes, int]
HeadersType = typing.Union[
    typing.Mapping[str, HeaderValueType],
    typing.Mapping[bytes, HeaderValueType],
    typing.Iterable[typing.Tuple[str, HeaderValueType]],
    typing.Iterable[typing.Tuple[bytes, HeaderValueType]],
    "Headers",
]


class Headers:
    """Ordered multimapping of header names to values.

    Every header is kept in insertion order with its name spelled the
    way it was given. A parallel index keyed by the case-folded name
    makes membership checks O(1) and case-insensitive, so 'CONTENT-TYPE'
    and 'content-type' are the same header for lookups while both
    spellings survive rendering.
    """

    def __init__(self, values: typing.Optional[HeadersType] = None):
        self._entries: typing.List[typing.Tuple[str, str]] = []
        self._index: typing.Dict[str, typing.List[int]] = {}
        if values:
            self.extend(values)

    def get_one(
        self, key: typing.Union[str, bytes], default: typing.Optional[str] = None
    ) -> typing.Optional[str]:
        try:
            return self._entries[self._index[self._fold(key)][0]][1]
        except (KeyError, IndexError):
            return default

    get = get_one

    def get_all(self, key: typing.Union[str, bytes]) -> typing.List[str]:
        return [self._entries[i][1] for i in self._index.get(self._fold(key), ())]

    def pop(
        self, key: typing.Union[str, bytes], default: typing.Optional[str] = None
    ) -> typing.Optional[str]:
        """Removes every occurrence of 'key' and returns the first value."""
        value = self.get_one(key, default)
        del self[key]
        return value

    def add(self, key: typing.Union[str, bytes], value: HeaderValueType) -> None:
        name = self._normalize_key(key)
        self._index.setdefault(name.lower(), []).append(len(self._entries))
        self._entries.append((name, self._normalize_value(value)))

    def extend(self, items: HeadersType) -> None:
        for k, v in items.items() if hasattr(items, "items") else items:
            self.add(k, v)

    def keys(self) -> typing.Iterable[str]:
        """Yields each header name once, spelled as its first occurrence."""
        for positions in self._index.values():
            yield self._entries[positions[0]][0]

    def values(self) -> typing.Iterable[str]:
        for _, value in self._entries:
            yield value

    def items(self) -> typing.Iterable[typing.Tuple[str, str]]:
        return iter(self._entries)

    def copy(self) -> "Headers":
        return Headers(self._entries)

    def render(self) -> bytes:
        """Renders each header as a 'Name: Value' line terminated by CRLF."""
        return b"".join(
            f"{name}: {value}\r\n".encode("utf-8") for name, value in self._entries
        )

    def __contains__(self, item: typing.Union[str, bytes]) -> bool:
        return self._fold(item) in self._index

    def __getitem__(self, item: typing.Union[str, bytes]) -> str:
        try:
            return self._entries[self._index[self._fold(item)][0]][1]
        except KeyError:
            raise KeyError(item) from None

    def __setitem__(
        self, key: typing.Union[str, bytes], value: HeaderValueType
    ) -> None:
        folded = self._fold(key)
        if folded not in self._index:
            self.add(key, value)
            return
        first, *rest = self._index[folded]
        self._entries[first] = (self._entries[first][0], self._normalize_value(value))
        if rest:
            self._remove_positions(rest)

    def __delitem__(self, key: typing.Union[str, bytes]) -> None:
        positions = self._index.get(self._fold(key))
        if positions:
            self._remove_positions(positions)

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"<Headers {self._entries!r}>"

    __str__ = __repr__

    def _remove_positions(self, positions: typing.Iterable[int]) -> None:
        dropped = set(positions)
        entries = [x for i, x in enumerate(self._entries) if i not in dropped]
        self._entries = []
        self._index = {}
        for name, value in entries:
            self.add(name, value)

    def _fold(self, key: typing.Union[str, bytes]) -> str:
        return self._normalize_key(key).lower()

    @staticmethod
    def _normalize_key(key: typing.Union[str, bytes]) -> str:
        if isinstance(key, bytes):
            key = key.decode("utf-8")
        return key

    @staticmethod
    def _normalize_value(value: HeaderValueType) -> str:
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        elif isinstance(value, int):
            value = str(value)
        return value


class Part:
    """One segment of a multipart body. The stream and headers are
    settled when the part is appended to a builder and aren't
    touched again afterwards.
    """

    __slots__ = ("_name", "_stream", "_headers", "_filename")

    def __init__(
        self,
        name: typing.Optional[str],
        stream: "ByteStream",
        headers: Headers,
        filename: typing.Optional[str] = None,
    ):
        self._name = name
        self._stream = stream
        self._headers = headers
        self._filename = filename

    @property
    def name(self) -> typing.Optional[str]:
        return self._name

    @property
    def stream(self) -> "ByteStream":
        return self._stream

    @property
    def headers(self) -> Headers:
        return self._headers

    @property
    def filename(self) -> typing.Optional[str]:
        return self._filename

    def __repr__(self) -> str:
        return f"<Part name={self._name!r} filename={self._filename!r}>"
