import typing


class FormStreamError(Exception):
    """Base error type for 'formstream' which carries the
    encapsulated error if this error wraps a different exception.
    """

    def __init__(self, message: str, error: typing.Optional[Exception] = None):
        super().__init__(message)

        self.message = message
        self.error = error


class UnsupportedSourceType(FormStreamError, TypeError):
    """Error raised when a part's resource can't be turned into a ByteStream"""


class FactoryResolutionError(FormStreamError):
    """Error raised when no StreamFactory was given and none could be located"""


class ConfigurationError(FormStreamError, ValueError):
    """Error raised when the memory limit configuration can't be parsed"""
