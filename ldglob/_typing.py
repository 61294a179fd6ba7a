from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import NamedTuple, Protocol


class ProbeKind(enum.Enum):
    ABSENT = "absent"
    FILE = "file"
    DIRECTORY = "directory"


class ProbeResult(NamedTuple):
    kind: ProbeKind
    canonical: str | None = None

    @property
    def exists(self) -> bool:
        return self.kind is not ProbeKind.ABSENT

    @property
    def is_dir(self) -> bool:
        return self.kind is ProbeKind.DIRECTORY


ABSENT = ProbeResult(ProbeKind.ABSENT)


class Response:
    """A status/headers/body triple exchanged with a transport.

    Header names are folded to lower case so lookups are case-insensitive.
    """

    __slots__ = ("status", "headers", "body", "url")

    def __init__(
        self,
        status: int,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        body: bytes | str = b"",
        url: str | None = None,
    ) -> None:
        self.status: int = status
        items = headers.items() if isinstance(headers, Mapping) else (headers or ())
        self.headers: dict[str, str] = {}
        for key, value in items:
            key = key.lower()
            if key in self.headers:
                self.headers[key] += ", " + value
            else:
                self.headers[key] = value
        self.body: bytes = body.encode("utf-8") if isinstance(body, str) else body
        self.url: str | None = url

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500

    @property
    def content_type(self) -> str | None:
        value = self.headers.get("content-type")
        if not value:
            return None
        return value.split(";", 1)[0].strip().lower() or None

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding)

    def __repr__(self) -> str:
        return f"Response(status={self.status}, url={self.url!r})"


class Transport(Protocol):
    async def send(
        self, method: str, url: str, headers: Mapping[str, str] | None = None
    ) -> Response: ...


Lister = Callable[[str], Awaitable[list[str]]]
Prober = Callable[[str], Awaitable[ProbeResult]]
