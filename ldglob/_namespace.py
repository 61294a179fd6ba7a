"""List and probe paths of a Linked Data Platform server through a transport."""

from __future__ import annotations

import logging
import re
from urllib.parse import urljoin, urlsplit

from ._exceptions import GlobTraversalError
from ._mime import DEFAULT_ACCEPT, is_rdf
from ._path import last_segment, normalize_path
from ._rdf import RdfCodec
from ._typing import ABSENT, ProbeKind, ProbeResult, Response, Transport

logger = logging.getLogger(__name__)

LDP_NS = "http://www.w3.org/ns/ldp#"
CONTAINER_TYPES = frozenset({LDP_NS + "BasicContainer", LDP_NS + "Container"})

_LINK_RE = re.compile(r'<([^>]*)>((?:\s*;\s*[^;,="\s]+\s*(?:=\s*(?:"[^"]*"|[^;,"\s]*))?)*)')
_LINK_PARAM_RE = re.compile(r';\s*([^;,="\s]+)\s*(?:=\s*("[^"]*"|[^;,"\s]*))?')


def parse_link_header(value: str | None) -> list[tuple[str, dict[str, str]]]:
    """Parse an RFC 8288 ``Link`` header into ``(target, params)`` pairs."""
    if not value:
        return []
    links = []
    for match in _LINK_RE.finditer(value):
        params: dict[str, str] = {}
        for key, raw in _LINK_PARAM_RE.findall(match.group(2)):
            raw = raw.strip()
            if len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"':
                raw = raw[1:-1]
            params[key.lower()] = raw
        links.append((match.group(1).strip(), params))
    return links


def is_container(link_header: str | None) -> bool:
    for target, params in parse_link_header(link_header):
        if "type" in params.get("rel", "").split() and target in CONTAINER_TYPES:
            return True
    return False


class RemoteNamespace:
    """The server behind *base_url*, seen as a tree of paths.

    :meth:`list` and :meth:`probe` are the lister/prober pair consumed by
    :class:`~ldglob.RemoteGlob`.
    """

    def __init__(
        self,
        transport: Transport,
        base_url: str,
        *,
        codec: RdfCodec | None = None,
        accept: str = DEFAULT_ACCEPT,
    ) -> None:
        parts = urlsplit(base_url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"Expected an absolute URL, got {base_url!r}")
        self.origin: str = f"{parts.scheme}://{parts.netloc}"
        self._transport = transport
        self._codec = codec or RdfCodec()
        self.accept: str = accept

    def url_for(self, path: str, container: bool = False) -> str:
        path = normalize_path(path)
        if container and not path.endswith("/"):
            path += "/"
        return self.origin + path

    async def _send(self, method: str, path: str, url: str) -> Response:
        logger.debug("%s %s", method, url)
        try:
            return await self._transport.send(method, url, {"Accept": self.accept})
        except GlobTraversalError:
            raise
        except Exception as exc:
            raise GlobTraversalError(path, reason=str(exc) or type(exc).__name__) from exc

    async def list(self, path: str) -> list[str]:
        url = self.url_for(path, container=True)
        response = await self._send("GET", path, url)

        # 404, 403 and friends all mean "nothing to see here"
        if response.is_client_error:
            logger.debug("listing %s answered %s, treating as empty", url, response.status)
            return []
        if not response.ok:
            raise GlobTraversalError(path, response.status)

        content_type = response.content_type if is_rdf(response.content_type) else self.accept
        graph = self._codec.new_graph()
        try:
            await self._codec.parse(response.text(), graph, url, content_type)
        except Exception as exc:
            raise GlobTraversalError(path, reason=f"unreadable listing: {exc}") from exc

        subjects = [url, url.rstrip("/")]
        if response.url:
            subjects.append(response.url)
        names: dict[str, None] = {}
        for member in self._codec.members(graph, subjects):
            name = last_segment(urlsplit(urljoin(url, member)).path)
            if name:
                names.setdefault(name, None)
        return list(names)

    async def probe(self, path: str) -> ProbeResult:
        url = self.url_for(path)
        response = await self._send("HEAD", path, url)

        if response.is_client_error:
            logger.debug("probe %s answered %s, treating as absent", url, response.status)
            return ABSENT
        if not response.ok:
            raise GlobTraversalError(path, response.status)

        if not is_container(response.header("link")):
            return ProbeResult(ProbeKind.FILE, normalize_path(path))
        return ProbeResult(ProbeKind.DIRECTORY, self._canonical(response, url, path))

    def _canonical(self, response: Response, url: str, path: str) -> str:
        location = response.header("content-location") or response.url
        if not location:
            return normalize_path(path)
        resolved = urlsplit(urljoin(url, location))
        if f"{resolved.scheme}://{resolved.netloc}" != self.origin:
            # served from elsewhere; identify it by its full URL
            return urljoin(url, location).rstrip("/")
        return normalize_path(resolved.path)
