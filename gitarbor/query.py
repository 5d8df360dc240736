# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import logging
import urllib.parse

logger = logging.getLogger(__name__)

GREP_KINDS = ("grep", "author", "committer", "range")


@dataclasses.dataclass
class LogQuery:
    """
    Parameters of a single page request.
    The short names in the comments are the URL query keys.
    """

    head: str = ""          # h
    sha1: str = ""          # id
    path: str = ""
    ofs: int = 0            # ofs
    grep: str = ""          # qt
    search: str = ""        # q
    showmsg: bool = False   # showmsg
    ignorews: bool = False  # ignorews

    @classmethod
    def fromQueryString(cls, queryString: str, path: str = "") -> "LogQuery":
        params = urllib.parse.parse_qs(queryString.lstrip("?"), keep_blank_values=True)

        def get(key: str) -> str:
            values = params.get(key)
            return values[-1] if values else ""

        def getInt(key: str) -> int:
            raw = get(key)
            if not raw:
                return 0
            try:
                return int(raw)
            except ValueError:
                logger.warning(f"Ignoring non-numeric query value {key}={raw!r}")
                return 0

        grep = get("qt")
        if grep and grep not in GREP_KINDS:
            logger.warning(f"Ignoring unknown search kind {grep!r}")
            grep = ""

        return cls(
            head=get("h"),
            sha1=get("id"),
            path=path.strip("/"),
            ofs=getInt("ofs"),
            grep=grep,
            search=get("q"),
            showmsg=getInt("showmsg") != 0,
            ignorews=getInt("ignorews") != 0,
        )
