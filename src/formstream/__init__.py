from .exceptions import (
    FormStreamError,
    UnsupportedSourceType,
    FactoryResolutionError,
    ConfigurationError,
)
from .models import Headers, Part
from .mimetype import MimetypeHelper, CustomMimetypeHelper
from .boundary import BoundaryGenerator
from .builder import MultipartStreamBuilder, MultipartStream, infer_headers, assemble
from ._streams import (
    ByteStream,
    StreamFactory,
    IOStream,
    IteratorStream,
    SpooledStream,
    IOStreamFactory,
    get_stream_factory,
)

__all__ = [
    "FormStreamError",
    "UnsupportedSourceType",
    "FactoryResolutionError",
    "ConfigurationError",
    "Headers",
    "Part",
    "MimetypeHelper",
    "CustomMimetypeHelper",
    "BoundaryGenerator",
    "MultipartStreamBuilder",
    "MultipartStream",
    "infer_headers",
    "assemble",
    "ByteStream",
    "StreamFactory",
    "IOStream",
    "IteratorStream",
    "SpooledStream",
    "IOStreamFactory",
    "get_stream_factory",
]

__version__ = "dev"
