"""rdflib-backed document codec.

rdflib parses and serializes synchronously, so each call is handed to
:func:`asyncio.to_thread` to keep the event loop free.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from rdflib import Dataset, Graph, Namespace, URIRef

from ._mime import rdf_format

LDP = Namespace("http://www.w3.org/ns/ldp#")


class RdfCodec:
    """Parse RDF bodies into a shared dataset and serialize its union back.

    The dataset keeps every named graph a body declares; serialization
    flattens all of them into one graph.
    """

    def new_graph(self) -> Dataset:
        return Dataset(default_union=True)

    async def parse(self, body: str, graph: Graph, base_uri: str, content_type: str) -> None:
        fmt = rdf_format(content_type)
        await asyncio.to_thread(graph.parse, data=body, format=fmt, publicID=base_uri)

    async def serialize(self, graph: Graph, base_uri: str, content_type: str) -> str:
        fmt = rdf_format(content_type)
        return await asyncio.to_thread(self._serialize, graph, base_uri, fmt)

    @staticmethod
    def _serialize(graph: Graph, base_uri: str, fmt: str) -> str:
        triples = graph.triples((None, None, None))
        if fmt == "nquads":
            # name the merged graph after the request
            dataset = Dataset()
            named = dataset.graph(URIRef(base_uri))
            for triple in triples:
                named.add(triple)
            return dataset.serialize(format=fmt)
        merged = Graph()
        for triple in triples:
            merged.add(triple)
        return merged.serialize(format=fmt, base=base_uri)

    def members(self, graph: Graph, subjects: Iterable[str]) -> list[str]:
        """Objects of ``ldp:contains`` for the first subject that has any."""
        for subject in subjects:
            found = [str(obj) for obj in graph.objects(URIRef(subject), LDP.contains)]
            if found:
                return found
        return []
