import binascii
import os
import time
import typing


def generate_boundary() -> str:
    """Random hex token with the current time appended so that
    two builders can't collide even with a weak entropy source.
    """
    return binascii.hexlify(os.urandom(16)).decode() + format(time.time_ns(), "x")


class BoundaryGenerator:
    """Holds the boundary for one build session. The value is
    generated on first use and kept until it's reset.
    """

    def __init__(self):
        self._boundary: typing.Optional[str] = None

    def current(self) -> str:
        if self._boundary is None:
            self._boundary = generate_boundary()
        return self._boundary

    def set(self, value: str) -> None:
        if not isinstance(value, str) or not value:
            raise ValueError(f"boundary must be a non-empty string, got {value!r}")
        self._boundary = value

    def reset(self) -> None:
        self._boundary = None
