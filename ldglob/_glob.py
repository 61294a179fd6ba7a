from __future__ import annotations

import logging

from ._exceptions import GlobTraversalError
from ._path import join_path, normalize_path, relative_to
from ._pattern import GlobStar, Literal, Pattern, Wildcard, compile_pattern
from ._state import LIST, PROBE, TraversalState
from ._tasks import gather_all
from ._typing import Lister, ProbeResult, Prober

logger = logging.getLogger(__name__)


class RemoteGlob:
    """Expand a glob pattern against a namespace reachable only through
    asynchronous ``lister``/``prober`` callables.

    Supports ``*``, ``?``, ``[seq]`` within a segment and ``**`` across
    segments. The object only holds configuration; every :meth:`expand`
    call works on its own :class:`TraversalState`.

    ``follow`` controls alias directories (those whose probe reports a
    canonical location other than their own path): without it they are
    matched but not descended into by ``**``. In both modes a directory whose
    canonical location is already on the current descent is not entered again.
    """

    def __init__(
        self,
        pattern: str | Pattern,
        lister: Lister,
        prober: Prober,
        *,
        root: str = "/",
        follow: bool = False,
        nodir: bool = False,
        dot: bool = False,
    ) -> None:
        self.pattern: Pattern = compile_pattern(pattern)
        self.root: str = normalize_path(root)
        self._lister = lister
        self._prober = prober
        self.follow: bool = follow
        self.nodir: bool = nodir
        self.dot: bool = dot

    async def expand(self) -> list[str]:
        state = TraversalState()
        found: dict[str, None] = {}
        start = "/" if self.pattern.absolute else self.root
        logger.debug("expanding %r from %s", self.pattern.source, start)
        try:
            await self._process(state, found, start, 0, None)
        finally:
            state.close()
        if self.pattern.absolute:
            return list(found)
        # the starting directory itself is not a match of a relative pattern
        return [relative_to(path, self.root) for path in found if path != self.root]

    # -- walking --

    async def _process(
        self,
        state: TraversalState,
        found: dict[str, None],
        path: str,
        idx: int,
        known: ProbeResult | None,
        listed: bool = False,
    ) -> None:
        segments = self.pattern.segments
        if idx == len(segments):
            await self._emit(state, found, path, known, listed)
            return

        segment = segments[idx]
        if segment is GlobStar:
            await self._globstar(state, found, path, idx, 0)
        elif isinstance(segment, Literal):
            child = join_path(path, segment.text)
            if idx + 1 == len(segments):
                probe = await self._probe(state, child)
                if probe.exists:
                    await self._emit(state, found, child, probe, False)
            else:
                # an absent directory simply lists as empty further down
                await self._process(state, found, child, idx + 1, None)
        elif isinstance(segment, Wildcard):
            entries = await self._list(state, path)
            await gather_all(
                self._process(state, found, join_path(path, name), idx + 1, None, True)
                for name in entries
                if segment.matches(name, self.dot)
            )

    async def _globstar(
        self,
        state: TraversalState,
        found: dict[str, None],
        path: str,
        idx: int,
        depth: int,
        ancestors: frozenset[str] = frozenset(),
    ) -> None:
        probe = await self._probe(state, path)
        if not probe.is_dir:
            return

        branches = []
        if depth == 0:
            # zero levels; deeper levels were already continued by the parent
            branches.append(self._process(state, found, path, idx + 1, probe))

        canonical = probe.canonical or path
        alias = canonical != path
        if alias and depth > 0 and not self.follow:
            logger.debug("not following alias %s -> %s", path, canonical)
        elif canonical in ancestors:
            logger.debug("cycle at %s -> %s, not descending", path, canonical)
        elif (idx, path) in state.visited:
            logger.debug("already descended into %s", path)
        else:
            state.visited.add((idx, path))
            below = ancestors | {canonical}
            for name in await self._list(state, path):
                if name.startswith(".") and not self.dot:
                    continue
                child = join_path(path, name)
                branches.append(self._process(state, found, child, idx + 1, None, True))
                branches.append(self._globstar(state, found, child, idx, depth + 1, below))

        await gather_all(branches)

    async def _emit(
        self,
        state: TraversalState,
        found: dict[str, None],
        path: str,
        known: ProbeResult | None,
        listed: bool,
    ) -> None:
        needs_kind = self.pattern.dirs_only or self.nodir
        if known is None and (needs_kind or not listed):
            known = await self._probe(state, path)
        if known is not None:
            if not known.exists:
                return
            if self.pattern.dirs_only and not known.is_dir:
                return
            if self.nodir and known.is_dir:
                return
        found.setdefault(path, None)

    # -- cached I/O --

    async def _list(self, state: TraversalState, path: str) -> list[str]:
        hit, probe = state.cached(PROBE, path)
        if hit and not probe.is_dir:
            return []
        return await state.coalesce(LIST, path, self._read_dir)

    async def _probe(self, state: TraversalState, path: str) -> ProbeResult:
        return await state.coalesce(PROBE, path, self._stat)

    async def _read_dir(self, path: str) -> list[str]:
        try:
            entries = await self._lister(path)
        except GlobTraversalError:
            raise
        except Exception as exc:
            raise GlobTraversalError(path, reason=str(exc) or type(exc).__name__) from exc
        return [name for name in entries if name and "/" not in name]

    async def _stat(self, path: str) -> ProbeResult:
        try:
            probe = await self._prober(path)
        except GlobTraversalError:
            raise
        except Exception as exc:
            raise GlobTraversalError(path, reason=str(exc) or type(exc).__name__) from exc
        if probe.is_dir:
            canonical = probe.canonical or path
            if canonical.startswith("/"):
                canonical = normalize_path(canonical)
            return ProbeResult(probe.kind, canonical)
        return probe


async def expand(
    pattern: str | Pattern,
    root: str,
    lister: Lister,
    prober: Prober,
    follow: bool = False,
    *,
    nodir: bool = False,
    dot: bool = False,
) -> list[str]:
    """Expand *pattern* under *root*; a fresh traversal state per call."""
    glob = RemoteGlob(
        pattern, lister, prober, root=root, follow=follow, nodir=nodir, dot=dot
    )
    return await glob.expand()
