# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Paginated log table, optionally annotated with the commit graph.

Each commit gets a header row (age, graph, subject and decorations, author,
diff stats). It may be preceded by filler rows carrying nothing but graph lines
leading up to the commit, and followed by a row that carries the rest of the
commit's graph lines beside the commit message.
"""

import dataclasses
import logging
import time
from collections.abc import Callable, Iterator
from typing import TextIO

from gitarbor.decorations import DecorationIndex, writeDecorations
from gitarbor.diffstat import DiffEngine, DiffStatAggregator, Pygit2DiffEngine
from gitarbor.graph import GraphLanes, GraphLineSource, GraphSynchronizer
from gitarbor.htmlwriter import HtmlWriter
from gitarbor.links import LinkBuilder, linksForRepo
from gitarbor.porcelain import Repo
from gitarbor.query import LogQuery
from gitarbor.revwalk import LogCommit, RevisionWalk
from gitarbor.settings import RepoPrefs
from gitarbor.toolbox import (
    Benchmark,
    MAX_RELATIVE_AGE,
    abbreviatePerson,
    countDisplayLines,
    elide,
    formatLongDate,
    formatShortDate,
    indentLines,
    messageSummary,
    relativeAge,
)

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RenderWindow:
    offset: int = 0
    count: int = 50
    hasGraph: bool = False
    hasFilecount: bool = False
    hasLinecount: bool = False
    showMessage: bool = False

    def __post_init__(self):
        # Negative offsets and counts make no sense, treat them as 0
        object.__setattr__(self, "offset", max(0, self.offset))
        object.__setattr__(self, "count", max(0, self.count))

    @property
    def showsLinecount(self) -> bool:
        # Line counts only make sense next to file counts
        return self.hasFilecount and self.hasLinecount

    @property
    def columns(self) -> int:
        return 3 + int(self.hasGraph) + int(self.hasFilecount) + int(self.showsLinecount)

    @property
    def messageSpan(self) -> int:
        """ Number of columns the message cell spans (everything but the age and graph cells). """
        return self.columns - 1 - int(self.hasGraph)


class PaginationController:
    """
    Splits a revision walk into the commits before the page, the commits on
    the page, and whether anything comes after the page.
    """

    def __init__(self, walk: RevisionWalk, offset: int, count: int):
        self.walk = walk
        self.offset = max(0, offset)
        self.count = max(0, count)

    def skipped(self) -> Iterator[LogCommit]:
        for _ in range(self.offset):
            commit = next(self.walk, None)
            if commit is None:
                return
            yield commit

    def page(self) -> Iterator[LogCommit]:
        for _ in range(self.count):
            commit = next(self.walk, None)
            if commit is None:
                return
            yield commit

    def hasMore(self) -> bool:
        return self.walk.peek() is not None

    @property
    def prevOffset(self) -> int:
        return max(0, self.offset - self.count)

    @property
    def nextOffset(self) -> int:
        return self.offset + self.count


def writeAge(writer: HtmlWriter, timestamp: int, offsetMinutes: int, now: float,
             maxRelative: int = MAX_RELATIVE_AGE):
    title = formatLongDate(timestamp, offsetMinutes)
    age = relativeAge(timestamp, now, maxRelative)
    if age is None:
        writer.html(f"<span{writer.attr('title', title)}>")
        writer.txt(formatShortDate(timestamp, offsetMinutes))
    else:
        unit, text = age
        writer.html(f"<span class='age-{unit}'{writer.attr('title', title)}>")
        writer.txt(text)
    writer.html("</span>")


class LogRenderer:
    def __init__(
            self,
            out: TextIO,
            walk: RevisionWalk,
            window: RenderWindow,
            links: LinkBuilder,
            query: LogQuery,
            prefs: RepoPrefs,
            decorations: DecorationIndex,
            diffEngine: DiffEngine | None = None,
            lanes: GraphLineSource | None = None,
            noteLookup: Callable[[str], str] | None = None,
            now: float | None = None,
    ):
        self.writer = HtmlWriter(out)
        self.walk = walk
        self.window = window
        self.links = links
        self.query = query
        self.prefs = prefs
        self.decorations = decorations
        self.noteLookup = noteLookup
        self.now = time.time() if now is None else now

        self.synchronizer = None
        if window.hasGraph:
            self.synchronizer = GraphSynchronizer(lanes or GraphLanes())

        self.diffStats = None
        if window.hasFilecount:
            if diffEngine is None:
                raise ValueError("file counts need a diff engine")
            self.diffStats = DiffStatAggregator(diffEngine, query.path, window.showsLinecount)

    # -------------------------------------------------------------------------

    def render(self, pager: bool = True):
        writer = self.writer
        window = self.window
        pagination = PaginationController(self.walk, window.offset, window.count)

        if pager:
            writer.html("<table class='list nowrap'>")

        self.writeHeader(pager)

        numSkipped = 0
        for commit in pagination.skipped():
            # The graph still needs to know about the commits before the page
            if self.synchronizer:
                self.synchronizer.skipCommit(commit.id, commit.graphParentIds)
            numSkipped += 1
        logger.debug(f"Skipped {numSkipped} commits")

        numRendered = 0
        for commit in pagination.page():
            self.renderCommit(commit)
            numRendered += 1
        logger.debug(f"Rendered {numRendered} commits")

        if pager:
            self.writePager(pagination)
        elif pagination.hasMore():
            self.writeMoreRow()

    def writeHeader(self, pager: bool):
        writer = self.writer
        query = self.query

        writer.html("<tr class='nohover'><th class='left'>Age</th>")
        if self.window.hasGraph:
            writer.html("<th></th>")
        writer.html("<th class='left'>Commit message")
        if pager:
            writer.html(" (")
            toggleUrl = self.links.logUrl(
                head=query.head, rev=query.sha1, path=query.path, ofs=self.window.offset,
                grep=query.grep, pattern=query.search, showmsg=not self.window.showMessage)
            writer.link("Collapse" if self.window.showMessage else "Expand", toggleUrl)
            writer.html(")")
        writer.html("</th><th class='left'>Author</th>")
        if self.window.hasFilecount:
            writer.html("<th class='left'>Files</th>")
            if self.window.showsLinecount:
                writer.html("<th class='left'>Lines</th>")
        writer.html("</tr>\n")

    def writePager(self, pagination: PaginationController):
        writer = self.writer
        query = self.query

        def pageUrl(ofs):
            return self.links.logUrl(
                head=query.head, rev=query.sha1, path=query.path, ofs=ofs,
                grep=query.grep, pattern=query.search, showmsg=self.window.showMessage)

        writer.html("</table><div class='pager'>")
        if pagination.offset > 0:
            writer.link("[prev]", pageUrl(pagination.prevOffset))
            writer.html("&nbsp;")
        if pagination.hasMore():
            writer.link("[next]", pageUrl(pagination.nextOffset))
        writer.html("</div>")

    def writeMoreRow(self):
        url = self.links.logUrl(head=self.query.head, path=self.query.path, showmsg=self.window.showMessage)
        self.writer.html(f"<tr class='nohover'><td colspan='{self.window.columns}'>")
        self.writer.link("[...]", url)
        self.writer.html("</td></tr>\n")

    # -------------------------------------------------------------------------

    def renderCommit(self, commit: LogCommit):
        sync = self.synchronizer
        try:
            primaryLine = ""
            if sync:
                sync.beginCommit(commit.id, commit.graphParentIds)
                for line in sync.fillerLines():
                    self.writeFillerRow(line)
                primaryLine = sync.takePrimary()

            self.writeHeaderRow(commit, primaryLine)
            self.writeMessageRow(commit)
        finally:
            if sync:
                sync.reset()

    def writeFillerRow(self, line: str):
        self.writer.html(f"<tr class='nohover'><td></td><td class='commitgraph'>{line}</td>"
                         f"<td colspan='{self.window.messageSpan}'></td></tr>\n")

    def writeHeaderRow(self, commit: LogCommit, graphLine: str):
        writer = self.writer
        query = self.query
        showmsg = self.window.showMessage
        commitUrl = self.links.commitUrl(commit.id, head=query.head, path=query.path)

        writer.html("<tr class='logheader'><td>" if showmsg else "<tr><td>")
        writer.linkOpen(commitUrl)
        writeAge(writer, commit.commitTime, commit.commitTimeOffset, self.now)
        writer.linkClose()
        writer.html("</td>")

        if self.window.hasGraph:
            writer.html(f"<td class='commitgraph'>{graphLine}</td>")

        writer.html("<td class='logsubject'>" if showmsg else "<td>")
        subject, _ = messageSummary(commit.message)
        elided = elide(subject, self.prefs.maxMessageLength)
        writer.link(elided, commitUrl, title=subject if elided != subject else "")
        writeDecorations(
            writer, self.decorations.decorationsOf(commit.id), commit.id, self.links,
            head=query.head, path=query.path, showmsg=showmsg,
            maxLength=self.prefs.maxDecorationLength)

        writer.html("</td><td>")
        writer.txt(abbreviatePerson(commit.author, self.prefs.authorDisplayStyle))

        if self.diffStats:
            stat = self.diffStats.inspect(commit)
            writer.html(f"</td><td>{stat.files}")
            if self.window.showsLinecount:
                writer.html(f"</td><td>-{stat.removed}/+{stat.added}")

        writer.html("</td></tr>\n")

    def displayMessage(self, commit: LogCommit) -> str:
        """ Message body (without the subject line), followed by the commit's notes if enabled. """
        _, text = messageSummary(commit.message)
        text = text.rstrip("\n")

        if self.prefs.showNotes and self.noteLookup:
            note = self.noteLookup(commit.id).rstrip("\n")
            if note:
                text += "\n\nNotes:\n" + indentLines(note)

        return text.lstrip("\n")

    def writeMessageRow(self, commit: LogCommit):
        writer = self.writer
        sync = self.synchronizer
        showmsg = self.window.showMessage

        message = self.displayMessage(commit) if showmsg else ""
        messageLines = countDisplayLines(message) if showmsg else 0

        if sync and not sync.needsPadding(messageLines):
            sync.finishCommit()
            return
        if not sync and not showmsg:
            return

        writer.html("<tr class='nohover'><td></td>")

        if sync:
            writer.html("<td class='commitgraph'>")
            writer.html("\n".join(sync.paddingLines(messageLines)))
            writer.html("</td>\n")

        logmsg = " class='logmsg'" if showmsg else ""
        writer.html(f"<td colspan='{self.window.messageSpan}'{logmsg}>\n")
        writer.txt(message)
        writer.html("</td></tr>\n")


def printLog(
        out: TextIO,
        repo: Repo,
        prefs: RepoPrefs,
        query: LogQuery,
        tip: str = "",
        count: int | None = None,
        pager: bool = True,
        now: float | None = None,
):
    """
    Render the log table for a repository.
    Bad revisions raise NotFoundError before anything is written to `out`.
    """

    with Benchmark("printLog"):
        walk = RevisionWalk(
            repo,
            tip=tip or query.sha1 or query.head,
            grep=query.grep,
            pattern=query.search,
            path=query.path,
            graph=prefs.enableCommitGraph,
        )

        window = RenderWindow(
            offset=query.ofs,
            count=prefs.maxCommitCount if count is None else count,
            hasGraph=walk.drawsGraph,
            hasFilecount=prefs.enableLogFilecount,
            hasLinecount=prefs.enableLogLinecount,
            showMessage=query.showmsg,
        )

        links = linksForRepo(repo, prefs)

        diffEngine = None
        if window.hasFilecount:
            diffEngine = Pygit2DiffEngine(repo, ignoreWhitespace=query.ignorews)

        renderer = LogRenderer(
            out, walk, window, links, query, prefs,
            decorations=DecorationIndex.fromRepo(repo),
            diffEngine=diffEngine,
            noteLookup=repo.lookup_note_message,
            now=now,
        )
        renderer.render(pager)
