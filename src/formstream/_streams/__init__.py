import logging
import typing

from .base import (
    ByteStream,
    StreamFactory,
    SourceType,
    ANONYMOUS_ORIGIN_SCHEME,
    MEMORY_ORIGIN,
    TEMP_ORIGIN,
    is_anonymous_origin,
)
from .sync import IOStream, IteratorStream, SpooledStream, IOStreamFactory

__all__ = [
    "ByteStream",
    "StreamFactory",
    "SourceType",
    "IOStream",
    "IteratorStream",
    "SpooledStream",
    "IOStreamFactory",
    "ANONYMOUS_ORIGIN_SCHEME",
    "MEMORY_ORIGIN",
    "TEMP_ORIGIN",
    "is_anonymous_origin",
    "LocatorType",
    "get_stream_factory",
]

logger = logging.getLogger(__name__)

LocatorType = typing.Callable[[], typing.Optional[StreamFactory]]


def get_stream_factory() -> typing.Optional[StreamFactory]:
    """Gets the StreamFactory used when a builder isn't given one.
    Locators return 'None' when they can't provide a factory.
    """
    logger.debug("Using the default IOStreamFactory")
    return IOStreamFactory()
