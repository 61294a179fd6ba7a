from typing import TYPE_CHECKING

from ._combine import combine
from ._exceptions import (
    CombinationError,
    GlobTraversalError,
    LDGlobError,
    NotAcceptableError,
    UnsupportedMediaTypeError,
)
from ._glob import RemoteGlob, expand
from ._handler import GlobHandler, SimpleGlobHandler, create_glob
from ._memory import MemoryTransport
from ._mime import RDF_MIME_TYPES
from ._namespace import RemoteNamespace
from ._negotiate import negotiate_or_raise, preferred_media_type, preferred_media_types
from ._pattern import GlobStar, Literal, Pattern, Wildcard, compile_pattern, has_magic
from ._rdf import RdfCodec
from ._state import TraversalState
from ._typing import ProbeKind, ProbeResult, Response, Transport

if TYPE_CHECKING:
    from ._transport import HttpxTransport


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "HttpxTransport":
        from ._transport import HttpxTransport

        globals()["HttpxTransport"] = HttpxTransport
        return HttpxTransport
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "CombinationError",
    "GlobHandler",
    "GlobStar",
    "GlobTraversalError",
    "HttpxTransport",
    "LDGlobError",
    "Literal",
    "MemoryTransport",
    "NotAcceptableError",
    "Pattern",
    "ProbeKind",
    "ProbeResult",
    "RDF_MIME_TYPES",
    "RdfCodec",
    "RemoteGlob",
    "RemoteNamespace",
    "Response",
    "SimpleGlobHandler",
    "Transport",
    "TraversalState",
    "UnsupportedMediaTypeError",
    "Wildcard",
    "combine",
    "compile_pattern",
    "create_glob",
    "expand",
    "has_magic",
    "negotiate_or_raise",
    "preferred_media_type",
    "preferred_media_types",
]
__version__ = "0.1.0"
