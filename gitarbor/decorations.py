# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Classify the ref names attached to a commit and turn them into linked badges.
"""

import dataclasses
import enum
from collections.abc import Iterable

from gitarbor.htmlwriter import HtmlWriter
from gitarbor.links import LinkBuilder
from gitarbor.porcelain import Repo, RefPrefix, TAG_DECORATION_PREFIX
from gitarbor.toolbox import elide


class DecorationKind(enum.Enum):
    BRANCH = "branch"
    ANNOTATED_TAG = "annotated-tag"
    LIGHTWEIGHT_TAG = "lightweight-tag"
    REMOTE = "remote"
    OTHER = "other"


# Most specific prefix first: "tag: refs/tags/" must win over anything looser.
DECORATION_PREFIXES = [
    (RefPrefix.HEADS, DecorationKind.BRANCH),
    (TAG_DECORATION_PREFIX + RefPrefix.TAGS, DecorationKind.ANNOTATED_TAG),
    (RefPrefix.TAGS, DecorationKind.LIGHTWEIGHT_TAG),
    (RefPrefix.REMOTES, DecorationKind.REMOTE),
]

BADGE_CLASSES = {
    DecorationKind.BRANCH: "branch-deco",
    DecorationKind.ANNOTATED_TAG: "tag-deco",
    DecorationKind.LIGHTWEIGHT_TAG: "tag-deco",
    DecorationKind.REMOTE: "remote-deco",
    DecorationKind.OTHER: "deco",
}


@dataclasses.dataclass(frozen=True)
class Decoration:
    name: str
    kind: DecorationKind
    label: str

    @property
    def isTag(self):
        return self.kind in (DecorationKind.ANNOTATED_TAG, DecorationKind.LIGHTWEIGHT_TAG)


def classifyDecoration(name: str) -> Decoration:
    for prefix, kind in DECORATION_PREFIXES:
        if name.startswith(prefix):
            return Decoration(name, kind, name[len(prefix):])
    return Decoration(name, DecorationKind.OTHER, name)


def resolveDecorations(names: Iterable[str]) -> list[Decoration]:
    return [classifyDecoration(name) for name in names]


def decorationTarget(deco: Decoration, commitId: str, links: LinkBuilder,
                     head: str = "", path: str = "", showmsg: bool = False) -> str:
    """ URL of the page a decoration badge leads to. """
    if deco.kind == DecorationKind.BRANCH:
        return links.logUrl(head=deco.label, path=path, showmsg=showmsg)
    elif deco.isTag:
        return links.tagUrl(deco.label, head=head)
    elif deco.kind == DecorationKind.REMOTE:
        return links.logUrl(rev=commitId, path=path, showmsg=showmsg)
    else:
        return links.commitUrl(commitId, head=head, path=path)


def writeDecorations(
        writer: HtmlWriter,
        decorations: Iterable[Decoration],
        commitId: str,
        links: LinkBuilder,
        head: str = "",
        path: str = "",
        showmsg: bool = False,
        maxLength: int = 0,
):
    for deco in decorations:
        href = decorationTarget(deco, commitId, links, head, path, showmsg)
        writer.link(elide(deco.label, maxLength), href, BADGE_CLASSES[deco.kind])


class DecorationIndex:
    """
    Maps commit ids to the names of the refs that point at them.
    """

    def __init__(self, refMap: dict[str, list[str]] | None = None):
        self.refMap = refMap or {}

    @classmethod
    def fromRepo(cls, repo: Repo) -> "DecorationIndex":
        return cls(repo.map_commit_decorations())

    def refsPointingAt(self, commitId: str) -> list[str]:
        return self.refMap.get(commitId, [])

    def decorationsOf(self, commitId: str) -> list[Decoration]:
        return resolveDecorations(self.refsPointingAt(commitId))
