"""Exception types raised by the GlassFrog client."""


class GlassfrogError(Exception):
    """Base class for all client errors."""


class ArgumentError(GlassfrogError, ValueError):
    """Raised before any request when caller-supplied options cannot be used."""


class StructuralError(GlassfrogError):
    """Raised when circles and roles do not describe a single-rooted hierarchy."""


class TransportError(GlassfrogError):
    """Raised when a request fails or its response cannot be decoded."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
