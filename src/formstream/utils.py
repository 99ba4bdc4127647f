import functools
import logging
import os
import re
import typing

from .exceptions import ConfigurationError

try:
    import resource
except ImportError:  # Windows
    resource = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
MEMORY_LIMIT_ENV = "FORMSTREAM_MEMORY_LIMIT"
FALLBACK_BUFFER_THRESHOLD = 100 * 1024 * 1024

# Browsers percent-encode these inside quoted multipart parameters.
FORM_VALUE_ESCAPES = {ord('"'): "%22", ord("\r"): "%0D", ord("\n"): "%0A"}

_BYTE_SIZE_RE = re.compile(r"^\s*(-?\d+)\s*([A-Za-z]?)\s*$")
_BYTE_SIZE_UNITS = {"": 1, "k": 1024, "m": 1024 ** 2, "g": 1024 ** 3}


def basename(path: str) -> str:
    """Gets the trailing segment of a path or stream URI.
    Works on the string alone so the result doesn't depend on the
    active locale and non-ASCII names come back untouched.
    """
    separators = "/" if os.sep == "/" else "/" + os.sep
    path = path.rstrip(separators)
    for sep in separators:
        path = path.rpartition(sep)[2]
    return path


def escape_form_value(value: str) -> str:
    """Escapes a value that goes between quotes in a 'Content-Disposition'."""
    return value.translate(FORM_VALUE_ESCAPES)


def parse_byte_size(value: str) -> typing.Optional[int]:
    """Parses a memory limit like '512M', '2g' or '1048576' into bytes.
    Negative values mean 'unlimited' and come back as 'None'.
    """
    match = _BYTE_SIZE_RE.match(value)
    if match is None:
        raise ConfigurationError(f"can't parse memory limit {value!r}")
    number, unit = match.groups()
    try:
        multiplier = _BYTE_SIZE_UNITS[unit.lower()]
    except KeyError:
        raise ConfigurationError(
            f"unknown unit {unit!r} in memory limit {value!r}"
        ) from None
    size = int(number)
    if size < 0:
        return None
    return size * multiplier


@functools.lru_cache(maxsize=None)
def detect_memory_limit() -> typing.Optional[int]:
    """Best guess at how much memory this process may use. Tries the
    address space rlimit first, then the physical memory that's
    currently available. Returns 'None' if neither is known.
    """
    if resource is not None:
        try:
            soft, _ = resource.getrlimit(resource.RLIMIT_AS)
        except (AttributeError, ValueError, OSError):
            soft = resource.RLIM_INFINITY
        if soft != resource.RLIM_INFINITY and soft > 0:
            return soft
    try:
        pages = os.sysconf("SC_AVPHYS_PAGES")
        page_size = os.sysconf("SC_PAGE_SIZE")
    except (AttributeError, ValueError, OSError):
        return None
    if pages > 0 and page_size > 0:
        return pages * page_size
    return None


@functools.lru_cache(maxsize=32)
def _threshold_for(memory_limit: typing.Optional[str]) -> int:
    if memory_limit is None:
        limit = detect_memory_limit()
    else:
        limit = parse_byte_size(memory_limit)
    threshold = limit // 4 if limit else FALLBACK_BUFFER_THRESHOLD
    logger.debug(
        "Estimated buffer threshold of %d bytes (memory limit: %r)", threshold, limit
    )
    return threshold


def estimate_buffer_threshold(memory_limit: typing.Optional[str] = None) -> int:
    """Returns how many bytes of output may be held in memory before
    spilling to disk: a quarter of the memory limit. The limit is read
    from 'memory_limit', then '$FORMSTREAM_MEMORY_LIMIT', then detected
    from the system. Falls back to 100 MiB when there's no limit.
    """
    if memory_limit is None:
        memory_limit = os.environ.get(MEMORY_LIMIT_ENV) or None
    return _threshold_for(memory_limit)
