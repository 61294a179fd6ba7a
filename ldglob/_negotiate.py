"""Accept header negotiation (RFC 2616 section 14.1).

Ranks the media types a client will take against the ones we can produce.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from typing import NamedTuple

from ._exceptions import NotAcceptableError

_MEDIA_TYPE_RE = re.compile(r"^\s*([^\s/;]+)/([^;\s]+)\s*(?:;(.*))?$")
_FLOAT_PREFIX_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class MediaType(NamedTuple):
    type: str
    subtype: str
    params: dict[str, str]
    q: float
    index: int

    @property
    def full_type(self) -> str:
        return f"{self.type}/{self.subtype}"


class _Priority(NamedTuple):
    q: float
    specificity: int
    order: int
    index: int


def _parse_quality(value: str | None) -> float:
    # Lenient like a float prefix scan: "0.5x" -> 0.5, "x" -> NaN
    match = _FLOAT_PREFIX_RE.match(value or "")
    if not match:
        return math.nan
    return float(match.group(0))


def _split_quoted(value: str, separator: str) -> list[str]:
    """Split on *separator*, rejoining pieces that end inside double quotes."""
    pieces = value.split(separator)
    merged = [pieces[0]]
    for piece in pieces[1:]:
        if merged[-1].count('"') % 2 == 0:
            merged.append(piece)
        else:
            merged[-1] += separator + piece
    return merged


def parse_media_type(value: str, index: int = 0) -> MediaType | None:
    match = _MEDIA_TYPE_RE.match(value)
    if not match:
        return None

    params: dict[str, str] = {}
    q = 1.0
    if match.group(3):
        for raw in _split_quoted(match.group(3), ";"):
            key, sep, val = raw.strip().partition("=")
            key = key.lower()
            if sep and len(val) >= 2 and val[0] == '"' and val[-1] == '"':
                val = val[1:-1]
            if key == "q":
                # anything after q is an accept-extension
                q = _parse_quality(val if sep else None)
                break
            params[key] = val if sep else ""

    return MediaType(match.group(1), match.group(2), params, q, index)


def parse_accept(accept: str) -> list[MediaType]:
    parsed = (
        parse_media_type(part.strip(), i)
        for i, part in enumerate(_split_quoted(accept, ","))
    )
    return [media_type for media_type in parsed if media_type is not None]


def _specify(candidate: MediaType, spec: MediaType) -> int | None:
    s = 0
    if spec.type.lower() == candidate.type.lower():
        s |= 4
    elif spec.type != "*":
        return None

    if spec.subtype.lower() == candidate.subtype.lower():
        s |= 2
    elif spec.subtype != "*":
        return None

    if spec.params:
        if all(
            value == "*" or value.lower() == candidate.params.get(key, "").lower()
            for key, value in spec.params.items()
        ):
            s |= 1
        else:
            return None
    return s


def _outranks(s: int, spec: MediaType, best: _Priority) -> bool:
    # an unparsable quality never breaks a tie
    if s != best.specificity:
        return s > best.specificity
    if not (math.isnan(spec.q) or math.isnan(best.q)) and spec.q != best.q:
        return spec.q > best.q
    # later entries win exact ties
    return spec.index > best.order


def _priority(value: str, accepted: list[MediaType], index: int) -> _Priority | None:
    candidate = parse_media_type(value, index)
    if candidate is None:
        return None
    best: _Priority | None = None
    for spec in accepted:
        s = _specify(candidate, spec)
        if s is None:
            continue
        if best is None or _outranks(s, spec, best):
            best = _Priority(spec.q, s, spec.index, index)
    return best


def _has_quality(q: float) -> bool:
    # NaN compares false, so unparsable qualities drop out here
    return q > 0


def preferred_media_types(
    accept: str | None = None, provided: Iterable[str] | None = None
) -> list[str]:
    """Return the acceptable media types, most preferred first.

    With *provided*, the result is the acceptable subset of it; without, it
    is the header's own types ranked by quality.
    """
    accepted = parse_accept(accept or "*/*")

    if provided is None:
        ranked = sorted(
            (spec for spec in accepted if _has_quality(spec.q)),
            key=lambda spec: (-spec.q, spec.index),
        )
        return [spec.full_type for spec in ranked]

    candidates = list(provided)
    priorities = [
        priority
        for priority in (_priority(value, accepted, i) for i, value in enumerate(candidates))
        if priority is not None and _has_quality(priority.q)
    ]
    priorities.sort(key=lambda p: (-p.q, -p.specificity, p.order, p.index))
    return [candidates[p.index] for p in priorities]


def preferred_media_type(
    accept: str | None = None, provided: Iterable[str] | None = None
) -> str | None:
    ranked = preferred_media_types(accept, provided)
    return ranked[0] if ranked else None


def negotiate_or_raise(accept: str | None, provided: Iterable[str]) -> str:
    media_type = preferred_media_type(accept, provided)
    if media_type is None:
        raise NotAcceptableError(accept)
    return media_type
