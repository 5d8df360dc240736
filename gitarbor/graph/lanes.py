# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Line-by-line commit graph layout, drawing the same lanes as `git log --graph`.

Feed commits in walk order with update(), then pull lines with nextLine() until
the commit's own line comes out, and keep pulling until isCommitFinished()
before feeding the next commit.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from collections.abc import Sequence

logger = logging.getLogger(__name__)

HTML_COLUMN_COLORS = [f"<span class='column{i}'>" for i in range(1, 7)]
HTML_COLOR_RESET = "</span>"


class LaneState(enum.IntEnum):
    PADDING = 0
    SKIP = 1
    PRE_COMMIT = 2
    COMMIT = 3
    POST_MERGE = 4
    COLLAPSING = 5


@dataclasses.dataclass
class Column:
    commit: str
    color: int | None


class GraphLanes:
    commit: str
    parents: list[str]
    columns: list[Column]
    newColumns: list[Column]
    mapping: list[int]
    """ Current screen position of each branch line -> index of the column it is heading to, or -1. """

    def __init__(self, columnColors: Sequence[str] = HTML_COLUMN_COLORS, colorReset: str = HTML_COLOR_RESET):
        self.columnColors = list(columnColors)
        self.colorReset = colorReset

        self.commit = ""
        self.parents = []
        self.width = 0
        self.expansionRow = 0
        self.state = LaneState.PADDING
        self.prevState = LaneState.PADDING
        self.commitIndex = 0
        self.prevCommitIndex = 0
        self.columns = []
        self.newColumns = []
        self.mapping = []
        self.mappingSize = 0

        # Start at the last color so the first increment lands on color 0
        self.defaultColumnColor = len(self.columnColors) - 1

        self._buf: list[str] = []

    @property
    def numParents(self):
        return len(self.parents)

    @property
    def numColumns(self):
        return len(self.columns)

    # -------------------------------------------------------------------------
    # Public interface

    def update(self, commit: str, parents: Sequence[str]):
        """ Make `commit` the current commit. `parents` should only list parents that will be drawn. """

        self.commit = commit
        self.parents = list(parents)
        self.prevCommitIndex = self.commitIndex

        self._updateColumns()
        self.expansionRow = 0

        # If the previous commit never got to the PADDING state, part of the graph
        # was left undrawn (e.g. commits skipped by pagination); show an ellipsis.
        # Merges of 3+ parents with branch lines to their right need expansion rows.
        if self.state != LaneState.PADDING:
            self.state = LaneState.SKIP
        elif self.numParents >= 3 and self.commitIndex < self.numColumns - 1:
            self.state = LaneState.PRE_COMMIT
        else:
            self.state = LaneState.COMMIT

    def nextLine(self) -> tuple[str, bool]:
        """ Produce the next line of graph output. The bool is True if it's the current commit's own line. """
        self._buf = []
        isCommitLine = self._outputNextLine()
        line = "".join(self._buf)
        self._buf = []
        return line, isCommitLine

    def isCommitFinished(self) -> bool:
        return self.state == LaneState.PADDING

    # -------------------------------------------------------------------------
    # Column bookkeeping

    def _writeColumn(self, col: Column, char: str):
        if col.color is not None:
            self._buf.append(self.columnColors[col.color])
            self._buf.append(char)
            self._buf.append(self.colorReset)
        else:
            self._buf.append(char)

    def _setState(self, state: LaneState):
        self.prevState = self.state
        self.state = state

    def _currentColumnColor(self) -> int | None:
        if not self.columnColors:
            return None
        return self.defaultColumnColor

    def _incrementColumnColor(self):
        if self.columnColors:
            self.defaultColumnColor = (self.defaultColumnColor + 1) % len(self.columnColors)

    def _findCommitColor(self, commit: str) -> int | None:
        for col in self.columns:
            if col.commit == commit:
                return col.color
        return self._currentColumnColor()

    def _insertIntoNewColumns(self, commit: str, mappingIndex: int) -> int:
        for i, col in enumerate(self.newColumns):
            if col.commit == commit:
                self.mapping[mappingIndex] = i
                return mappingIndex + 2

        self.newColumns.append(Column(commit, self._findCommitColor(commit)))
        self.mapping[mappingIndex] = len(self.newColumns) - 1
        return mappingIndex + 2

    def _updateWidth(self, isCommitInExistingColumns: bool):
        maxCols = self.numColumns + self.numParents

        # Even a parentless commit takes up a column for itself
        if self.numParents < 1:
            maxCols += 1

        # The commit's column was counted twice if it was already in self.columns
        if isCommitInExistingColumns:
            maxCols -= 1

        # Each column takes up 2 spaces
        self.width = maxCols * 2

    def _updateColumns(self):
        # The columns of the previous commit's "after" state become our "before" state.
        self.columns = self.newColumns
        self.newColumns = []

        maxNewColumns = self.numColumns + self.numParents
        self.mapping = [-1] * (2 * maxNewColumns)
        self.mappingSize = len(self.mapping)

        seenThis = False
        mappingIndex = 0
        isCommitInColumns = True
        for i in range(self.numColumns + 1):
            if i == self.numColumns:
                if seenThis:
                    break
                isCommitInColumns = False
                colCommit = self.commit
            else:
                colCommit = self.columns[i].commit

            if colCommit == self.commit:
                oldMappingIndex = mappingIndex
                seenThis = True
                self.commitIndex = i
                for parent in self.parents:
                    # New color for each branch of a merge, or for the start of a childless column
                    if self.numParents > 1 or not isCommitInColumns:
                        self._incrementColumnColor()
                    mappingIndex = self._insertIntoNewColumns(parent, mappingIndex)
                # The current commit always takes up at least 2 spaces
                if mappingIndex == oldMappingIndex:
                    mappingIndex += 2
            else:
                mappingIndex = self._insertIntoNewColumns(colCommit, mappingIndex)

        while self.mappingSize > 1 and self.mapping[self.mappingSize - 1] < 0:
            self.mappingSize -= 1

        self._updateWidth(isCommitInColumns)

    def _isMappingCorrect(self) -> bool:
        """
        The mapping is up to date if each entry is at its target, or is 1 greater than its target.
        (If it is 1 greater, '/' will be printed, so it will look correct on the next row.)
        """
        for i in range(self.mappingSize):
            target = self.mapping[i]
            if target < 0:
                continue
            if target == i // 2:
                continue
            return False
        return True

    def _padHorizontally(self, charsWritten: int):
        # Pad every line of a commit to the same width so the columns to its right stay aligned
        if charsWritten < self.width:
            self._buf.append(" " * (self.width - charsWritten))

    def _findNewColumnByCommit(self, commit: str) -> Column | None:
        for col in self.newColumns:
            if col.commit == commit:
                return col
        return None

    # -------------------------------------------------------------------------
    # Line output

    def _outputPaddingLine(self):
        """ A line that leaves all branch lines unchanged. """
        for col in self.newColumns:
            self._writeColumn(col, "|")
            self._buf.append(" ")
        self._padHorizontally(len(self.newColumns) * 2)

    def _outputSkipLine(self):
        """ An ellipsis, to show that a portion of the graph is missing. """
        self._buf.append("...")
        self._padHorizontally(3)

        if self.numParents >= 3 and self.commitIndex < self.numColumns - 1:
            self._setState(LaneState.PRE_COMMIT)
        else:
            self._setState(LaneState.COMMIT)

    def _outputPreCommitLine(self):
        """ Spread the branch lines apart to make room for an octopus merge. 2 rows per parent over 2. """
        assert self.numParents >= 3, "not enough parents to add expansion row"
        numExpansionRows = (self.numParents - 2) * 2
        assert 0 <= self.expansionRow < numExpansionRows, "wrong number of expansion rows"

        seenThis = False
        charsWritten = 0
        for i, col in enumerate(self.columns):
            if col.commit == self.commit:
                seenThis = True
                self._writeColumn(col, "|")
                self._buf.append(" " * self.expansionRow)
                charsWritten += 1 + self.expansionRow
            elif seenThis and self.expansionRow == 0:
                # Keep drawing "\" if the previous commit was a merge that left these lines slanted
                if self.prevState == LaneState.POST_MERGE and self.prevCommitIndex < i:
                    self._writeColumn(col, "\\")
                else:
                    self._writeColumn(col, "|")
                charsWritten += 1
            elif seenThis and self.expansionRow > 0:
                self._writeColumn(col, "\\")
                charsWritten += 1
            else:
                self._writeColumn(col, "|")
                charsWritten += 1
            self._buf.append(" ")
            charsWritten += 1

        self._padHorizontally(charsWritten)

        self.expansionRow += 1
        if self.expansionRow >= numExpansionRows:
            self._setState(LaneState.COMMIT)

    def _drawOctopusMerge(self) -> int:
        # The first 2 parents fit neatly under the commit, the others need dashes
        dashlessCommits = 2
        numDashes = (self.numParents - dashlessCommits) * 2 - 1
        lastColumn = len(self.newColumns) - 1
        for i in range(numDashes):
            colNum = min(i // 2 + dashlessCommits + self.commitIndex, lastColumn)
            self._writeColumn(self.newColumns[colNum], "-")
        colNum = min(numDashes // 2 + dashlessCommits + self.commitIndex, lastColumn)
        self._writeColumn(self.newColumns[colNum], ".")
        return numDashes + 1

    def _outputCommitLine(self):
        # Go up to and including numColumns: the commit may not be in any existing
        # column if none of its children have been drawn.
        seenThis = False
        charsWritten = 0
        for i in range(self.numColumns + 1):
            if i == self.numColumns:
                if seenThis:
                    break
                col = None
                colCommit = self.commit
            else:
                col = self.columns[i]
                colCommit = col.commit

            if colCommit == self.commit:
                seenThis = True
                self._buf.append("*")
                charsWritten += 1
                if self.numParents > 2:
                    charsWritten += self._drawOctopusMerge()
            elif seenThis and self.numParents > 2:
                self._writeColumn(col, "\\")
                charsWritten += 1
            elif seenThis and self.numParents == 2:
                # 2-way merges have no PRE_COMMIT stage: keep lines coming out of
                # a previous merge slanted
                if self.prevState == LaneState.POST_MERGE and self.prevCommitIndex < i:
                    self._writeColumn(col, "\\")
                else:
                    self._writeColumn(col, "|")
                charsWritten += 1
            else:
                self._writeColumn(col, "|")
                charsWritten += 1
            self._buf.append(" ")
            charsWritten += 1

        self._padHorizontally(charsWritten)

        if self.numParents > 1:
            self._setState(LaneState.POST_MERGE)
        elif self._isMappingCorrect():
            self._setState(LaneState.PADDING)
        else:
            self._setState(LaneState.COLLAPSING)

    def _outputPostMergeLine(self):
        seenThis = False
        charsWritten = 0
        for i in range(self.numColumns + 1):
            if i == self.numColumns:
                if seenThis:
                    break
                col = None
                colCommit = self.commit
            else:
                col = self.columns[i]
                colCommit = col.commit

            if colCommit == self.commit:
                # Draw the edges to each parent's column
                seenThis = True
                parentColumns = [self._findNewColumnByCommit(p) for p in self.parents]
                assert all(parentColumns), "parent column not found"
                self._writeColumn(parentColumns[0], "|")
                charsWritten += 1
                for parentColumn in parentColumns[1:]:
                    self._writeColumn(parentColumn, "\\")
                    self._buf.append(" ")
                charsWritten += (self.numParents - 1) * 2
            elif seenThis:
                self._writeColumn(col, "\\")
                self._buf.append(" ")
                charsWritten += 2
            else:
                self._writeColumn(col, "|")
                self._buf.append(" ")
                charsWritten += 2

        self._padHorizontally(charsWritten)

        if self._isMappingCorrect():
            self._setState(LaneState.PADDING)
        else:
            self._setState(LaneState.COLLAPSING)

    def _outputCollapsingLine(self):
        usedHorizontal = False
        horizontalEdge = -1
        horizontalEdgeTarget = -1

        newMapping = [-1] * len(self.mapping)

        for i in range(self.mappingSize):
            target = self.mapping[i]
            if target < 0:
                continue

            # Branch lines only ever move left, so crossings stay legible
            assert target * 2 <= i, f"position {i} targeting column {target * 2}"

            if target * 2 == i:
                # Already in the correct place
                assert newMapping[i] == -1
                newMapping[i] = target
            elif newMapping[i - 1] < 0:
                # Nothing to the left: move left by one
                newMapping[i - 1] = target
                # Let the first line to move this way draw a horizontal edge
                if horizontalEdge == -1:
                    horizontalEdge = i
                    horizontalEdgeTarget = target
                    # target * 2 + 3 is the screen column of the first horizontal segment
                    for j in range(target * 2 + 3, i - 2, 2):
                        newMapping[j] = target
            elif newMapping[i - 1] == target:
                # The line to our left already heads to our parent: merge into it
                pass
            else:
                # Cross over the line to our left, which must be heading further left
                assert newMapping[i - 1] > target
                assert newMapping[i - 2] < 0
                assert newMapping[i - 3] == target
                newMapping[i - 2] = target
                if horizontalEdge == -1:
                    horizontalEdge = i

        # The new mapping may be 1 smaller than the old one
        if newMapping[self.mappingSize - 1] < 0:
            self.mappingSize -= 1

        for i in range(self.mappingSize):
            target = newMapping[i]
            if target < 0:
                self._buf.append(" ")
            elif target * 2 == i:
                self._writeColumn(self.newColumns[target], "|")
            elif target == horizontalEdgeTarget and i != horizontalEdge - 1:
                # Only the first segment of a horizontal edge carries on to the next line
                if i != target * 2 + 3:
                    newMapping[i] = -1
                usedHorizontal = True
                self._writeColumn(self.newColumns[target], "_")
            else:
                if usedHorizontal and i < horizontalEdge:
                    newMapping[i] = -1
                self._writeColumn(self.newColumns[target], "/")

        self._padHorizontally(self.mappingSize)
        self.mapping = newMapping

        if self._isMappingCorrect():
            self._setState(LaneState.PADDING)

    def _outputNextLine(self) -> bool:
        if self.state == LaneState.PADDING:
            self._outputPaddingLine()
            return False
        elif self.state == LaneState.SKIP:
            self._outputSkipLine()
            return False
        elif self.state == LaneState.PRE_COMMIT:
            self._outputPreCommitLine()
            return False
        elif self.state == LaneState.COMMIT:
            self._outputCommitLine()
            return True
        elif self.state == LaneState.POST_MERGE:
            self._outputPostMergeLine()
            return False
        elif self.state == LaneState.COLLAPSING:
            self._outputCollapsingLine()
            return False
        else:
            raise NotImplementedError(f"unknown lane state {self.state}")
