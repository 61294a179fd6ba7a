class LDGlobError(Exception):
    """Base class for every error raised by ldglob."""


class GlobTraversalError(LDGlobError, OSError):
    """Raised when listing or probing a path fails for a reason other than absence."""
    def __init__(self, path: str, status: int | None = None, reason: str | None = None) -> None:
        self.path = path
        self.status = status
        detail = reason or (f"status {status}" if status is not None else "transport failure")
        super().__init__(f"Unable to traverse '{path}': {detail}")


class CombinationError(LDGlobError, OSError):
    """Raised when a matched resource cannot be fetched, parsed or serialized."""
    def __init__(self, url: str, status: int | None = None, reason: str | None = None) -> None:
        self.url = url
        self.status = status
        detail = reason or (f"status {status}" if status is not None else "transport failure")
        super().__init__(f"Unable to combine '{url}': {detail}")


class NotAcceptableError(LDGlobError, ValueError):
    """Raised when no provided media type satisfies the Accept header."""
    def __init__(self, accept: str | None) -> None:
        self.accept = accept
        super().__init__(f"No acceptable media type for Accept: {accept!r}")


class UnsupportedMediaTypeError(LDGlobError, ValueError):
    """Raised by the codec for a content type it cannot parse or serialize."""
    def __init__(self, content_type: str) -> None:
        self.content_type = content_type
        super().__init__(f"Unsupported RDF media type: {content_type!r}")
