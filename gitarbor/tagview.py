# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Detail view of a single tag.
"""

import dataclasses
import logging
import re
from typing import TextIO

from gitarbor.errors import InternalError, NotFoundError
from gitarbor.htmlwriter import HtmlWriter
from gitarbor.links import LinkBuilder, linksForRepo
from gitarbor.porcelain import GitError, InvalidSpecError, Object, RefPrefix, Repo, Signature, Tag
from gitarbor.settings import RepoPrefs
from gitarbor.toolbox import benchmark, formatIsoDate, shortHash

logger = logging.getLogger(__name__)

VERSION_TAG_PATTERN = re.compile(r"^v(?=\d)")


@dataclasses.dataclass
class TagInfo:
    name: str
    id: str
    targetId: str
    targetType: str
    annotated: bool
    tagger: Signature | None = None
    message: str | None = None


def snapshotVersion(tagName: str) -> str:
    """ "v1.2" -> "1.2"; other names are kept as is. """
    return VERSION_TAG_PATTERN.sub("", tagName, count=1)


def snapshotFilenames(repoName: str, tagName: str, formats: list[str]) -> list[str]:
    version = snapshotVersion(tagName)
    return [f"{repoName}-{version}.{fmt}" for fmt in formats]


def loadTag(repo: Repo, tagName: str) -> TagInfo:
    """
    Gather everything the tag view displays.
    Raise NotFoundError if the tag doesn't exist, InternalError if its objects are missing or unreadable.
    """

    refName = RefPrefix.TAGS + tagName
    try:
        ref = repo.lookup_reference(refName).resolve()
    except (KeyError, InvalidSpecError) as exc:
        raise NotFoundError(f"Bad tag reference: {tagName}") from exc

    obj: Object | None = repo.get(ref.target)
    if obj is None:
        raise InternalError(f"Bad object id: {ref.target}")

    if not isinstance(obj, Tag):
        return TagInfo(tagName, str(obj.id), str(obj.id), obj.type_str, annotated=False)

    try:
        target = repo.get(obj.target)
        if target is None:
            raise InternalError(f"Bad tag object: {tagName}")
        return TagInfo(
            tagName,
            str(obj.id),
            str(target.id),
            target.type_str,
            annotated=True,
            tagger=obj.tagger,
            message=obj.message,
        )
    except GitError as exc:
        raise InternalError(f"Bad tag object: {tagName}") from exc


class TagRenderer:
    def __init__(self, out: TextIO, repo: Repo, prefs: RepoPrefs, links: LinkBuilder, head: str = ""):
        self.writer = HtmlWriter(out)
        self.repo = repo
        self.prefs = prefs
        self.links = links
        self.head = head

    def render(self, info: TagInfo):
        if info.annotated:
            self.writeAnnotated(info)
        else:
            self.writeLightweight(info)

    def writeTaggedObject(self, info: TagInfo, label: str):
        writer = self.writer
        writer.html(f"<tr><td>{label}</td><td class='sha1'>")
        href = self.links.objectUrl(info.targetId, info.targetType, head=self.head)
        writer.link(f"{info.targetType} {info.targetId}", href)
        writer.html("</td></tr>\n")

    def writeDownloads(self, info: TagInfo):
        formats = self.prefs.snapshotFormats()
        if not formats:
            return

        writer = self.writer
        writer.html("<tr><th>download</th><td class='sha1'>")
        for filename in snapshotFilenames(self.repo.repo_name, info.name, formats):
            writer.link(filename, self.links.snapshotUrl(filename, head=self.head))
            writer.html("<br/>")
        writer.html("</td></tr>")

    def writeAnnotated(self, info: TagInfo):
        writer = self.writer
        tagger = info.tagger

        writer.html("<table class='commit-info'>\n")
        writer.html("<tr><td>tag name</td><td>")
        writer.txt(info.name)
        writer.html(f" ({info.id})</td></tr>\n")

        if tagger is not None and tagger.time > 0:
            writer.html("<tr><td>tag date</td><td>")
            writer.txt(formatIsoDate(tagger.time, tagger.offset))
            writer.html("</td></tr>\n")

        if tagger is not None:
            writer.html("<tr><td>tagged by</td><td>")
            writer.txt(tagger.name)
            if tagger.email and not self.prefs.noPlainEmail:
                writer.html(" ")
                writer.txt(f"<{tagger.email}>")
            writer.html("</td></tr>\n")

        self.writeTaggedObject(info, "tagged object")
        self.writeDownloads(info)
        writer.html("</table>\n")

        self.writeMessage(info.message)

    def writeLightweight(self, info: TagInfo):
        writer = self.writer
        writer.html("<table class='commit-info'>\n")
        writer.html("<tr><td>tag name</td><td>")
        writer.txt(info.name)
        writer.html("</td></tr>\n")
        self.writeTaggedObject(info, "Tagged object")
        self.writeDownloads(info)
        writer.html("</table>\n")

    def writeMessage(self, message: str | None):
        if message is None:
            return

        writer = self.writer
        subject, newline, body = message.partition("\n")
        writer.html("<div class='commit-subject'>")
        writer.txt(subject)
        writer.html("</div>")
        if newline:
            writer.html("<div class='commit-msg'>")
            writer.txt(body)
            writer.html("</div>")


@benchmark
def printTag(out: TextIO, repo: Repo, prefs: RepoPrefs, tagName: str, head: str = ""):
    """
    Render the detail view of a tag.
    Without a tag name, the tag named after `head` is shown.
    Errors are raised before anything is written to `out`.
    """
    tagName = tagName or head
    info = loadTag(repo, tagName)
    logger.debug(f"Tag {tagName}: {'annotated' if info.annotated else 'lightweight'}, {info.targetType} {shortHash(info.targetId)}")

    links = linksForRepo(repo, prefs)
    TagRenderer(out, repo, prefs, links, head).render(info)
