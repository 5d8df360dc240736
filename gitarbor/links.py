# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import urllib.parse

from gitarbor.porcelain import Repo
from gitarbor.settings import RepoPrefs


@dataclasses.dataclass
class LinkBuilder:
    """
    Builds URLs to the pages of one repository.

    URLs look like `{virtualRoot}{repoUrl}/{page}/{path}?{params}`.
    The `h` parameter is omitted when it names the default branch.
    """

    virtualRoot: str = "/"
    repoUrl: str = ""
    defaultBranch: str = ""

    def pageUrl(self, page: str, path: str = "", params: list[tuple[str, str]] = ()) -> str:
        root = self.virtualRoot
        if not root.endswith("/"):
            root += "/"

        url = root
        if self.repoUrl:
            url += urllib.parse.quote(self.repoUrl.strip("/"), safe="/") + "/"
        url += page + "/"
        if path:
            url += urllib.parse.quote(path.strip("/"), safe="/")

        if params:
            url += "?" + urllib.parse.urlencode(params)
        return url

    def _headParam(self, head: str | None) -> list[tuple[str, str]]:
        if head and head != self.defaultBranch:
            return [("h", head)]
        return []

    def logUrl(
            self,
            head: str | None = None,
            rev: str | None = None,
            path: str = "",
            ofs: int = 0,
            grep: str = "",
            pattern: str = "",
            showmsg: bool = False,
    ) -> str:
        params = self._headParam(head)
        if rev:
            params.append(("id", rev))
        if ofs > 0:
            params.append(("ofs", str(ofs)))
        if grep and pattern:
            params.append(("qt", grep))
            params.append(("q", pattern))
        if showmsg:
            params.append(("showmsg", "1"))
        return self.pageUrl("log", path, params)

    def commitUrl(self, rev: str, head: str | None = None, path: str = "") -> str:
        params = self._headParam(head)
        params.append(("id", rev))
        return self.pageUrl("commit", path, params)

    def tagUrl(self, tagName: str, head: str | None = None) -> str:
        params = self._headParam(head)
        params.append(("id", tagName))
        return self.pageUrl("tag", "", params)

    def objectUrl(self, oid: str, typeName: str, head: str | None = None) -> str:
        """ Link to the page showing an object of the given type ("commit", "tree", "blob" or "tag"). """
        params = self._headParam(head)
        params.append(("id", oid))
        return self.pageUrl(typeName, "", params)

    def snapshotUrl(self, filename: str, head: str | None = None) -> str:
        return self.pageUrl("snapshot", filename, self._headParam(head))


def linksForRepo(repo: Repo, prefs: RepoPrefs) -> LinkBuilder:
    defaultBranch = ""
    if not repo.head_is_unborn and not repo.head_is_detached:
        defaultBranch = repo.head_branch_shorthand

    return LinkBuilder(
        virtualRoot=prefs.virtualRoot,
        repoUrl=prefs.repoUrl or repo.repo_name,
        defaultBranch=defaultBranch,
    )
