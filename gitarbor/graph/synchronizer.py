# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Keeps a commit's graph lines aligned with the table rows that describe it.

A commit takes up a primary row (the line with the commit's node), preceded by
zero or more filler rows (connector lines leading up to the node), and followed
by a padding row. The padding row's graph cell receives the remaining connector
lines, and at least as many lines as the message cell next to it.
"""

import enum
import logging
from collections.abc import Sequence
from typing import Protocol

logger = logging.getLogger(__name__)


class GraphLineSource(Protocol):
    def update(self, commit: str, parents: Sequence[str]): ...
    def nextLine(self) -> tuple[str, bool]: ...
    def isCommitFinished(self) -> bool: ...


class SyncState(enum.IntEnum):
    FILLING = 0
    PRIMARY_READY = 1
    PADDING_IN_PROGRESS = 2
    ROW_COMPLETE = 3


class GraphSyncError(RuntimeError):
    pass


class GraphSynchronizer:
    state: SyncState
    primaryLine: str | None

    def __init__(self, engine: GraphLineSource):
        self.engine = engine
        self.reset()

    def reset(self):
        """ Return to a neutral state, e.g. after a commit's rendering was interrupted. """
        self.state = SyncState.ROW_COMPLETE
        self.primaryLine = None

    def _expect(self, *states: SyncState):
        if self.state not in states:
            raise GraphSyncError(f"graph synchronizer in state {self.state.name}, expected {'|'.join(s.name for s in states)}")

    def beginCommit(self, commitId: str, parentIds: Sequence[str]):
        self._expect(SyncState.ROW_COMPLETE)
        self.engine.update(commitId, parentIds)
        self.primaryLine = None
        self.state = SyncState.FILLING

    def skipCommit(self, commitId: str, parentIds: Sequence[str]):
        """ Let the layout engine know about a commit that won't be drawn (e.g. before the page offset). """
        self._expect(SyncState.ROW_COMPLETE)
        self.engine.update(commitId, parentIds)

    def advance(self) -> tuple[str, bool]:
        """
        Pull the next line before the commit's own line.
        Returns (line, isFiller). Once isFiller is False, the line is the primary line.
        """
        self._expect(SyncState.FILLING)
        line, isCommitLine = self.engine.nextLine()
        if isCommitLine:
            self.primaryLine = line
            self.state = SyncState.PRIMARY_READY
            return line, False
        return line, True

    def fillerLines(self) -> list[str]:
        """ Pull all filler lines up to the primary line, which is kept for takePrimary(). """
        fillers = []
        while self.state == SyncState.FILLING:
            line, isFiller = self.advance()
            if isFiller:
                fillers.append(line)
        return fillers

    def takePrimary(self) -> str:
        self._expect(SyncState.PRIMARY_READY)
        line = self.primaryLine
        self.primaryLine = None
        self.state = SyncState.PADDING_IN_PROGRESS
        return line

    def needsPadding(self, messageLines: int = 0) -> bool:
        """ Whether a padding row must be emitted to finish the commit's graph or to sit beside its message. """
        self._expect(SyncState.PADDING_IN_PROGRESS)
        return messageLines > 0 or not self.engine.isCommitFinished()

    def paddingLines(self, messageLines: int) -> list[str]:
        """
        Lines for the padding row's graph cell: keep pulling while the message
        still has lines to match, or while the commit's connectors are unfinished.
        Yields max(remaining connectors, messageLines) lines.
        """
        self._expect(SyncState.PADDING_IN_PROGRESS)
        lines = []
        remaining = messageLines
        while remaining > 0 or not self.engine.isCommitFinished():
            line, _ = self.engine.nextLine()
            lines.append(line)
            remaining -= 1
        self.state = SyncState.ROW_COMPLETE
        return lines

    def finishCommit(self):
        """ Close the commit's rows without a padding row. Only valid if no connector lines are pending. """
        self._expect(SyncState.PADDING_IN_PROGRESS, SyncState.ROW_COMPLETE)
        if self.state == SyncState.PADDING_IN_PROGRESS and not self.engine.isCommitFinished():
            raise GraphSyncError("commit graph has pending lines")
        self.state = SyncState.ROW_COMPLETE
