from ._exceptions import UnsupportedMediaTypeError

# Offered in this order when negotiating an output format
RDF_MIME_TYPES: tuple[str, ...] = (
    "text/turtle",
    "text/n3",
    "application/n3",
    "application/nquads",
    "application/n-quads",
    "application/rdf+xml",
    "application/ld+json",
    "application/x-turtle",
)

# media type -> rdflib plugin name
RDF_FORMATS: dict[str, str] = {
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "text/n3": "n3",
    "application/n3": "n3",
    "application/nquads": "nquads",
    "application/n-quads": "nquads",
    "application/rdf+xml": "xml",
    "application/ld+json": "json-ld",
}

DEFAULT_ACCEPT = "application/ld+json"


def rdf_format(content_type: str) -> str:
    media_type = content_type.split(";", 1)[0].strip().lower()
    try:
        return RDF_FORMATS[media_type]
    except KeyError:
        raise UnsupportedMediaTypeError(content_type) from None


def is_rdf(content_type: str | None) -> bool:
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() in RDF_FORMATS
