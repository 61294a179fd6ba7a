from __future__ import annotations

import fnmatch
import re

# Characters that make a segment a wildcard rather than a literal name.
_GLOB_CHARS = frozenset("*?[")


class Literal:
    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text: str = text

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Literal) and other.text == self.text

    def __hash__(self) -> int:
        return hash(("literal", self.text))

    def __repr__(self) -> str:
        return f"Literal({self.text!r})"


class Wildcard:
    __slots__ = ("text", "_regex")

    def __init__(self, text: str) -> None:
        self.text: str = text
        self._regex: re.Pattern[str] = re.compile(fnmatch.translate(text))

    def matches(self, name: str, dot: bool = False) -> bool:
        # Hidden names need an explicit leading "." unless dot matching is on
        if name.startswith(".") and not dot and not self.text.startswith("."):
            return False
        return self._regex.match(name) is not None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Wildcard) and other.text == self.text

    def __hash__(self) -> int:
        return hash(("wildcard", self.text))

    def __repr__(self) -> str:
        return f"Wildcard({self.text!r})"


class _GlobStar:
    __slots__ = ()

    def __repr__(self) -> str:
        return "GlobStar"


GlobStar = _GlobStar()

Segment = Literal | Wildcard | _GlobStar


def is_magic(segment: str) -> bool:
    return any(c in segment for c in _GLOB_CHARS)


def has_magic(pattern: str) -> bool:
    """True when any segment of *pattern* contains glob metacharacters."""
    return is_magic(pattern.replace("\\", "/"))


class Pattern:
    """A compiled glob pattern: an immutable tuple of segments.

    ``absolute`` records a leading ``/``; ``dirs_only`` a trailing one.
    """

    __slots__ = ("source", "segments", "absolute", "dirs_only")

    def __init__(self, source: str) -> None:
        converted = source.replace("\\", "/")
        self.source: str = source
        self.absolute: bool = converted.startswith("/")
        self.dirs_only: bool = converted.endswith("/") and converted.strip("/") != ""
        segments: list[Segment] = []
        for part in converted.split("/"):
            if not part or part == ".":
                continue
            if part == "..":
                raise ValueError(f"Parent references are not supported in patterns: '{source}'")
            if part == "**":
                # consecutive globstars are equivalent to one
                if segments and segments[-1] is GlobStar:
                    continue
                segments.append(GlobStar)
            elif is_magic(part):
                segments.append(Wildcard(part))
            else:
                segments.append(Literal(part))
        self.segments: tuple[Segment, ...] = tuple(segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __repr__(self) -> str:
        return f"Pattern({self.source!r})"


def compile_pattern(pattern: str | Pattern) -> Pattern:
    if isinstance(pattern, Pattern):
        return pattern
    return Pattern(pattern)
