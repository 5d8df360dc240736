# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Count the files and lines a commit changes relative to its first parent.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from typing import Any, Protocol, TYPE_CHECKING

from gitarbor.porcelain import Diff, Repo, path_in_scope

if TYPE_CHECKING:
    from gitarbor.revwalk import LogCommit

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class DiffStat:
    files: int = 0
    added: int = 0
    removed: int = 0

    def countLine(self, line: str):
        if not line:
            return
        if line[0] == "+":
            self.added += 1
        elif line[0] == "-":
            self.removed += 1


@dataclasses.dataclass(frozen=True)
class FilePair:
    oldPath: str
    newPath: str
    handle: Any = None
    """ Engine-specific data needed to produce the pair's diff lines later on. """


class DiffEngine(Protocol):
    def filePairs(self, commit: LogCommit, pathScope: str) -> Iterable[FilePair]:
        """ Files changed between the commit and its first parent, restricted to pathScope. """

    def diffLines(self, pair: FilePair) -> Iterable[str]:
        """ The pair's diff lines, each starting with its origin character ('+', '-', ' ', ...). """


class DiffStatAggregator:
    """
    Accumulates a DiffStat for one commit at a time.
    Each call to inspect() starts from zero, so an aggregator may be reused across commits.
    """

    def __init__(self, engine: DiffEngine, pathScope: str = "", countLines: bool = False):
        self.engine = engine
        self.pathScope = pathScope
        self.countLines = countLines

    def inspect(self, commit: LogCommit) -> DiffStat:
        stat = DiffStat()
        for pair in self.engine.filePairs(commit, self.pathScope):
            stat.files += 1
            if self.countLines:
                for line in self.engine.diffLines(pair):
                    stat.countLine(line)
        return stat


class Pygit2DiffEngine:
    def __init__(self, repo: Repo, ignoreWhitespace: bool = False):
        self.repo = repo
        self.ignoreWhitespace = ignoreWhitespace

    def filePairs(self, commit: LogCommit, pathScope: str) -> Iterable[FilePair]:
        pgCommit = self.repo.peel_commit(commit.id)
        diff: Diff = self.repo.first_parent_diff(pgCommit, self.ignoreWhitespace)

        for index, delta in enumerate(diff.deltas):
            oldPath = delta.old_file.path
            newPath = delta.new_file.path
            if not (path_in_scope(newPath, pathScope) or path_in_scope(oldPath, pathScope)):
                continue
            yield FilePair(oldPath, newPath, (diff, index))

    def diffLines(self, pair: FilePair) -> Iterable[str]:
        diff, index = pair.handle
        patch = diff[index]
        if patch is None:
            return
        for hunk in patch.hunks:
            for line in hunk.lines:
                yield line.origin + line.content
