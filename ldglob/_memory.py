"""An in-memory Linked Data Platform namespace that speaks the transport protocol."""

from __future__ import annotations

import asyncio
import json
import posixpath
from collections.abc import Mapping
from urllib.parse import quote, unquote, urlsplit

from ._path import normalize_path
from ._typing import Response

LDP_NS = "http://www.w3.org/ns/ldp#"
_CONTAINER_LINK = f'<{LDP_NS}BasicContainer>; rel="type", <{LDP_NS}Resource>; rel="type"'
_RESOURCE_LINK = f'<{LDP_NS}Resource>; rel="type"'


class MemoryTransport:
    """Containers, resources and aliases held in dictionaries.

    Containers answer with a JSON-LD ``ldp:contains`` listing and a
    ``BasicContainer`` type link; aliases behave like symbolic links to a
    container and report the target in ``Content-Location``. Every request
    is recorded in :attr:`calls`.
    """

    def __init__(self, origin: str = "https://pod.example", *, delay: float = 0.0) -> None:
        parts = urlsplit(origin)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"Invalid origin value: {origin!r}. Expected e.g. 'https://host'.")
        if delay < 0:
            raise ValueError(f"Invalid delay value: {delay!r}. Expected a non-negative number.")
        self.origin: str = f"{parts.scheme}://{parts.netloc}"
        self.delay: float = delay
        self._dirs: set[str] = {"/"}
        self._files: dict[str, tuple[bytes, str]] = {}
        self._aliases: dict[str, str] = {}
        self._failures: dict[str, int] = {}
        self.calls: list[tuple[str, str]] = []

    # -- building the namespace --

    def url(self, path: str) -> str:
        npath = normalize_path(path)
        suffix = "/" if npath in self._dirs and npath != "/" else ""
        return self.origin + quote(npath) + suffix

    def mkdir(self, path: str) -> None:
        npath = normalize_path(path)
        current = ""
        for part in [p for p in npath.split("/") if p]:
            current += "/" + part
            if current in self._files or current in self._aliases:
                raise FileExistsError(f"Not a container: '{current}'")
            self._dirs.add(current)

    def put(self, path: str, body: bytes | str, content_type: str = "text/turtle") -> None:
        npath = normalize_path(path)
        if npath in self._dirs or npath in self._aliases:
            raise IsADirectoryError(f"Is a container: '{path}'")
        self.mkdir(posixpath.dirname(npath))
        data = body.encode("utf-8") if isinstance(body, str) else body
        self._files[npath] = (data, content_type)

    def alias(self, path: str, target: str) -> None:
        """Make *path* a link to the existing container *target*."""
        npath = normalize_path(path)
        ntarget = normalize_path(target)
        if ntarget not in self._dirs:
            raise NotADirectoryError(f"No such container: '{target}'")
        if npath in self._dirs or npath in self._files:
            raise FileExistsError(f"Already exists: '{path}'")
        self.mkdir(posixpath.dirname(npath))
        self._aliases[npath] = ntarget

    def fail(self, path: str, status: int = 500) -> None:
        """Answer every request for *path* with *status*."""
        self._failures[normalize_path(path)] = status

    def listdir(self, path: str) -> list[str]:
        npath = normalize_path(path)
        names = set()
        for entry in (*self._dirs, *self._files, *self._aliases):
            if entry != "/" and posixpath.dirname(entry) == npath:
                names.add(posixpath.basename(entry))
        return sorted(names)

    def count(self, method: str | None = None, path: str | None = None) -> int:
        npath = normalize_path(path) if path is not None else None
        return sum(
            1
            for m, p in self.calls
            if (method is None or m == method.upper()) and (npath is None or p == npath)
        )

    # -- serving --

    def _resolve(self, npath: str) -> str | None:
        current = ""
        for part in [p for p in npath.split("/") if p]:
            if current in self._files:
                return None
            current = current + "/" + part
            if current in self._aliases:
                current = self._aliases[current]
        resolved = current or "/"
        if resolved in self._dirs or resolved in self._files:
            return resolved
        return None

    def _listing(self, container_url: str, resolved: str) -> bytes:
        members = []
        for name in self.listdir(resolved):
            child = resolved.rstrip("/") + "/" + name
            is_dir = child in self._dirs or child in self._aliases
            members.append({"@id": container_url + quote(name) + ("/" if is_dir else "")})
        document = [
            {
                "@id": container_url,
                "@type": [LDP_NS + "BasicContainer", LDP_NS + "Container"],
                LDP_NS + "contains": members,
            }
        ]
        return json.dumps(document).encode("utf-8")

    async def send(
        self, method: str, url: str, headers: Mapping[str, str] | None = None
    ) -> Response:
        method = method.upper()
        raw_path = unquote(urlsplit(url).path)
        npath = normalize_path(raw_path)
        self.calls.append((method, npath))
        await asyncio.sleep(self.delay)

        if npath in self._failures:
            return Response(self._failures[npath], url=url)
        if method not in ("GET", "HEAD"):
            return Response(405, {"Allow": "GET, HEAD"}, url=url)
        resolved = self._resolve(npath)
        if resolved is None or (raw_path.endswith("/") and resolved in self._files):
            return Response(404, url=url)

        response_headers: dict[str, str] = {}
        if resolved != npath:
            response_headers["Content-Location"] = self.url(resolved)
        if resolved in self._dirs:
            container_url = self.origin + quote(npath.rstrip("/")) + "/"
            response_headers["Link"] = _CONTAINER_LINK
            response_headers["Content-Type"] = "application/ld+json"
            body = b"" if method == "HEAD" else self._listing(container_url, resolved)
        else:
            data, content_type = self._files[resolved]
            response_headers["Link"] = _RESOURCE_LINK
            response_headers["Content-Type"] = content_type
            body = b"" if method == "HEAD" else data
        return Response(200, response_headers, body, url=url)
