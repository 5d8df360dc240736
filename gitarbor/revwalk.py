# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Lazy, filtered revision walks with one-commit lookahead.
"""

import dataclasses
import logging
import re
from collections.abc import Callable, Iterator

from gitarbor.errors import BadRangeTokenError, NotFoundError
from gitarbor.porcelain import (
    Commit,
    GitError,
    InvalidSpecError,
    Oid,
    Repo,
    Signature,
    SortMode,
    tree_entry_id,
)

logger = logging.getLogger(__name__)

CONTENT_GREP_KINDS = ("grep", "author", "committer")
RANGE_GREP_KIND = "range"


@dataclasses.dataclass(frozen=True)
class LogCommit:
    id: str
    parentIds: tuple[str, ...]
    author: Signature
    commitTime: int
    commitTimeOffset: int
    message: str
    graphParentIds: tuple[str, ...] = ()
    """ Parents that the commit graph connects this commit to. """

    @classmethod
    def fromPygit2(cls, commit: Commit, graphParentIds=None) -> "LogCommit":
        parentIds = tuple(str(p) for p in commit.parent_ids)
        if graphParentIds is None:
            graphParentIds = parentIds
        return cls(
            id=str(commit.id),
            parentIds=parentIds,
            author=commit.author,
            commitTime=commit.commit_time,
            commitTimeOffset=commit.commit_time_offset,
            message=commit.message,
            graphParentIds=tuple(graphParentIds),
        )


@dataclasses.dataclass
class RangeSpec:
    include: list[str] = dataclasses.field(default_factory=list)
    exclude: list[str] = dataclasses.field(default_factory=list)
    symmetric: list[tuple[str, str]] = dataclasses.field(default_factory=list)


def parseRangeToken(token: str, spec: RangeSpec):
    if token.startswith("-"):
        raise BadRangeTokenError(token)

    if "..." in token:
        left, _, right = token.partition("...")
        spec.symmetric.append((left or "HEAD", right or "HEAD"))
    elif ".." in token:
        left, _, right = token.partition("..")
        spec.exclude.append(left or "HEAD")
        spec.include.append(right or "HEAD")
    elif token.startswith("^"):
        spec.exclude.append(token[1:])
    else:
        spec.include.append(token)


def parseRangeTokens(expression: str) -> RangeSpec:
    """
    Split a whitespace-separated range expression into revisions to show and to hide.
    Parsing stops at the first token that looks like an option; the tokens before it are kept.
    """
    spec = RangeSpec()
    for token in expression.split():
        try:
            parseRangeToken(token, spec)
        except BadRangeTokenError as exc:
            logger.warning(str(exc))
            break
    return spec


def compileMatcher(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.warning(f"Invalid search pattern {pattern!r} ({exc}), matching it literally")
        return re.compile(re.escape(pattern), re.IGNORECASE)


def formatPerson(sig: Signature) -> str:
    return f"{sig.name} <{sig.email}>"


class RevisionWalk:
    """
    Forward-only sequence of LogCommits, from a tip or from range tokens,
    optionally filtered by message, author, committer or path.

    Bad revisions raise NotFoundError from the constructor, before anything is rendered.
    """

    def __init__(
            self,
            repo: Repo,
            tip: str = "",
            grep: str = "",
            pattern: str = "",
            path: str = "",
            graph: bool = False,
    ):
        self.repo = repo
        self.path = path.strip("/")

        self.predicate: Callable[[Commit], bool] | None = None
        if pattern and grep in CONTENT_GREP_KINDS:
            self.predicate = self._makePredicate(grep, compileMatcher(pattern))

        isRange = bool(pattern) and grep == RANGE_GREP_KIND
        self.hasContentFilter = self.predicate is not None or bool(self.path)
        self.drawsGraph = graph and not self.hasContentFilter

        self.sortMode = SortMode.TOPOLOGICAL | SortMode.TIME if self.drawsGraph else SortMode.TIME
        self.included: list[Oid] = []
        self.hidden: list[Oid] = []
        self._hiddenAncestry: set[Oid] | None = None

        if isRange:
            self._resolveRange(parseRangeTokens(pattern))
        else:
            tip = tip or "HEAD"
            self.included.append(self._resolve(repo.disambiguate_ref(tip)))

        logger.debug(f"Walk: include {len(self.included)}, hide {len(self.hidden)}, "
                     f"graph={self.drawsGraph}, grep={grep or '-'}, path={self.path or '-'}")

        self._source = self._generate()
        self._peeked: LogCommit | None = None
        self._hasPeeked = False

    def _resolve(self, spec: str) -> Oid:
        if not spec:
            raise NotFoundError("Bad revision: (empty)")
        try:
            return self.repo.resolve_revision(spec)
        except (KeyError, InvalidSpecError, GitError) as exc:
            raise NotFoundError(f"Bad revision: {spec}") from exc

    def _resolveRange(self, rangeSpec: RangeSpec):
        for spec in rangeSpec.include:
            self.included.append(self._resolve(self.repo.disambiguate_ref(spec)))
        for spec in rangeSpec.exclude:
            self.hidden.append(self._resolve(self.repo.disambiguate_ref(spec)))
        for left, right in rangeSpec.symmetric:
            leftId = self._resolve(self.repo.disambiguate_ref(left))
            rightId = self._resolve(self.repo.disambiguate_ref(right))
            self.included += [leftId, rightId]
            base = self.repo.merge_base(leftId, rightId)
            if base is not None:
                self.hidden.append(base)

    @staticmethod
    def _makePredicate(grep: str, matcher: re.Pattern) -> Callable[[Commit], bool]:
        if grep == "author":
            return lambda commit: bool(matcher.search(formatPerson(commit.author)))
        elif grep == "committer":
            return lambda commit: bool(matcher.search(formatPerson(commit.committer)))
        else:
            return lambda commit: bool(matcher.search(commit.message))

    def _touchesPath(self, commit: Commit) -> bool:
        entryId = tree_entry_id(commit.tree, self.path)
        if not commit.parents:
            return entryId is not None
        parentEntryId = tree_entry_id(commit.parents[0].tree, self.path)
        return entryId != parentEntryId

    def _isHidden(self, oid: Oid) -> bool:
        if not self.hidden:
            return False
        if self._hiddenAncestry is None:
            # Everything reachable from the excluded tips, collected on first use
            walker = self.repo.walk(self.hidden[0], SortMode.NONE)
            for hiddenId in self.hidden[1:]:
                walker.push(hiddenId)
            self._hiddenAncestry = {commit.id for commit in walker}
            logger.debug(f"Hidden ancestry: {len(self._hiddenAncestry)} commits")
        return oid in self._hiddenAncestry

    def _graphParents(self, commit: Commit) -> list[str]:
        if not self.drawsGraph:
            return []
        return [str(p) for p in commit.parent_ids if not self._isHidden(p)]

    def _generate(self) -> Iterator[LogCommit]:
        if not self.included:
            return

        walker = self.repo.walk(self.included[0], self.sortMode)
        for oid in self.included[1:]:
            walker.push(oid)
        for oid in self.hidden:
            walker.hide(oid)

        for commit in walker:
            if self.predicate and not self.predicate(commit):
                continue
            if self.path and not self._touchesPath(commit):
                continue
            yield LogCommit.fromPygit2(commit, self._graphParents(commit))

    def peek(self) -> LogCommit | None:
        """ The commit that the next call to next() will return, or None at the end of the walk. """
        if not self._hasPeeked:
            self._peeked = next(self._source, None)
            self._hasPeeked = True
        return self._peeked

    def __iter__(self):
        return self

    def __next__(self) -> LogCommit:
        commit = self.peek()
        self._hasPeeked = False
        self._peeked = None
        if commit is None:
            raise StopIteration
        return commit
