from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from urllib.parse import urlsplit

from ._combine import combine
from ._glob import RemoteGlob
from ._mime import DEFAULT_ACCEPT, RDF_MIME_TYPES
from ._namespace import RemoteNamespace
from ._negotiate import preferred_media_type
from ._pattern import has_magic, is_magic
from ._rdf import RdfCodec
from ._typing import Response, Transport

logger = logging.getLogger(__name__)

NOT_ACCEPTABLE = 406


def not_acceptable() -> Response:
    return Response(NOT_ACCEPTABLE)


def split_pattern(path: str) -> tuple[str, str]:
    """Split a URL path into its literal directory prefix and the glob remainder.

    ``"/data/**/*.ttl"`` -> ``("/data", "**/*.ttl")``
    """
    parts = path.split("/")
    literal: list[str] = []
    for i, part in enumerate(parts):
        if is_magic(part):
            prefix = "/" + "/".join(p for p in literal if p)
            return prefix, "/".join(parts[i:])
        literal.append(part)
    return "/" + "/".join(p for p in literal[:-1] if p), parts[-1]


def _header(headers: Mapping[str, str] | None, name: str) -> str | None:
    if not headers:
        return None
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


class GlobHandler:
    """Answer glob requests by expanding, fetching and merging RDF resources.

    Usable as a transport itself: :meth:`send` handles ``GET`` and returns
    ``None`` for anything that is not a glob, so it can sit in front of the
    transport it wraps.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        codec: RdfCodec | None = None,
        follow: bool = False,
        nodir: bool = False,
        dot: bool = False,
        provided: Iterable[str] = RDF_MIME_TYPES,
        accept: str = DEFAULT_ACCEPT,
    ) -> None:
        self.provided: tuple[str, ...] = tuple(provided)
        if not self.provided:
            raise ValueError("'provided' must name at least one media type.")
        if not accept or not accept.strip():
            raise ValueError(f"Invalid accept value: {accept!r}.")
        self._transport = transport
        self._codec = codec or RdfCodec()
        self.follow: bool = follow
        self.nodir: bool = nodir
        self.dot: bool = dot
        self.accept: str = accept

    def matches(self, path: str) -> bool:
        return has_magic(path)

    def namespace(self, url: str) -> RemoteNamespace:
        return RemoteNamespace(self._transport, url, codec=self._codec, accept=self.accept)

    async def resolve(self, url: str) -> tuple[str, list[str]]:
        """Return the directory the matches are relative to, and the matches."""
        namespace = self.namespace(url)
        prefix, pattern = split_pattern(urlsplit(url).path)
        glob = RemoteGlob(
            pattern,
            namespace.list,
            namespace.probe,
            root=prefix,
            follow=self.follow,
            nodir=self.nodir,
            dot=self.dot,
        )
        return prefix, await glob.expand()

    async def handle(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> Response | None:
        path = urlsplit(url).path
        if not self.matches(path):
            # not a glob, somebody else should answer
            return None

        accept = _header(headers, "accept")
        output_type = preferred_media_type(accept, self.provided)
        if output_type is None:
            logger.debug("no acceptable output type for Accept: %r", accept)
            return not_acceptable()

        directory, names = await self.resolve(url)
        logger.debug("%s matched %d resources", url, len(names))
        base = self.namespace(url).url_for(directory, container=True)
        body = await combine(
            names, base, output_type, self._transport, codec=self._codec, accept=self.accept
        )
        return Response(200, {"Content-Type": output_type}, body, url=url)

    async def send(
        self, method: str, url: str, headers: Mapping[str, str] | None = None
    ) -> Response | None:
        if method.upper() != "GET":
            return None
        return await self.handle(url, headers)


class SimpleGlobHandler(GlobHandler):
    """Prefix matching only: ``/dir/abc*`` keeps the members of ``/dir``
    whose names start with ``abc``, ignoring case."""

    def matches(self, path: str) -> bool:
        return path.endswith("*")

    async def resolve(self, url: str) -> tuple[str, list[str]]:
        path = urlsplit(url).path
        directory, _, last = path.rpartition("/")
        directory = directory or "/"
        stem = last.rstrip("*").lower()
        entries = await self.namespace(url).list(directory)
        if not stem:
            return directory, entries
        return directory, [name for name in entries if name.lower().startswith(stem)]


def create_glob(transport: Transport, *, simple: bool = False, **options) -> GlobHandler:
    """Build the handler for *transport*; ``simple=True`` selects prefix matching."""
    handler_cls = SimpleGlobHandler if simple else GlobHandler
    return handler_cls(transport, **options)
