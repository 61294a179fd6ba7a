from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from urllib.parse import urljoin

from ._exceptions import CombinationError
from ._mime import DEFAULT_ACCEPT, RDF_MIME_TYPES, is_rdf
from ._negotiate import preferred_media_type
from ._rdf import RdfCodec
from ._tasks import gather_all
from ._typing import Transport

logger = logging.getLogger(__name__)


def directory_base(base_uri: str) -> str:
    """Force the path of *base_uri* to end in ``/`` so names resolve beneath it."""
    head, sep, query = base_uri.partition("?")
    head = head.split("#", 1)[0]
    if not head.endswith("/"):
        head += "/"
    return head + sep + query


async def combine(
    names: Iterable[str],
    base_uri: str,
    output_type: str,
    transport: Transport,
    *,
    codec: RdfCodec | None = None,
    accept: str = DEFAULT_ACCEPT,
) -> str:
    """Fetch every name under *base_uri*, merge the parsed documents and
    serialize the result as *output_type*.

    Names answering 4xx are skipped. Any other failure aborts the whole
    combination with :class:`CombinationError`.
    """
    codec = codec or RdfCodec()
    base = directory_base(base_uri)
    fallback_type = preferred_media_type(accept, RDF_MIME_TYPES) or DEFAULT_ACCEPT
    graph = codec.new_graph()
    merge_lock = asyncio.Lock()

    async def fetch(name: str) -> bool:
        url = urljoin(base, name)
        logger.debug("GET %s", url)
        try:
            response = await transport.send("GET", url, {"Accept": accept})
        except CombinationError:
            raise
        except Exception as exc:
            raise CombinationError(url, reason=str(exc) or type(exc).__name__) from exc

        if response.is_client_error:
            logger.debug("skipping %s (status %s)", url, response.status)
            return False
        if not response.ok:
            raise CombinationError(url, response.status)

        content_type = response.content_type if is_rdf(response.content_type) else fallback_type
        async with merge_lock:
            try:
                await codec.parse(response.text(), graph, url, content_type)
            except Exception as exc:
                raise CombinationError(url, reason=f"unparsable body: {exc}") from exc
        return True

    merged = await gather_all(fetch(name) for name in dict.fromkeys(names))
    logger.debug("merged %d of %d resources under %s", sum(merged), len(merged), base)

    try:
        return await codec.serialize(graph, base_uri, output_type)
    except Exception as exc:
        raise CombinationError(base_uri, reason=f"serialization failed: {exc}") from exc
