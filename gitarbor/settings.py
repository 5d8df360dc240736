# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Per-repository settings, stored in the repository's git dir as gitarbor.json.
"""

import dataclasses
import logging
import sys
from dataclasses import field

from gitarbor.prefsfile import PrefsFile
from gitarbor.toolbox.gitutils import AuthorDisplayStyle

logger = logging.getLogger(__name__)

APP_SYSTEM_NAME = "gitarbor"

TEST_MODE = "pytest" in sys.modules
"""
Unit testing mode (don't pick up prefs lying around in the repositories under test).
"""

SNAPSHOT_FORMATS = ["tar", "tar.gz", "tar.bz2", "tar.xz", "zip"]
""" Archive formats that may be offered as download links, in display order. """


@dataclasses.dataclass
class RepoPrefs(PrefsFile):
    _filename = f"{APP_SYSTEM_NAME}.json"
    _allowMakeDirs = False

    _category_log               : int                   = 0
    enableCommitGraph           : bool                  = False
    enableLogFilecount          : bool                  = False
    enableLogLinecount          : bool                  = False
    maxCommitCount              : int                   = 50
    maxMessageLength            : int                   = 80
    maxDecorationLength         : int                   = 0
    authorDisplayStyle          : AuthorDisplayStyle    = AuthorDisplayStyle.FULL_NAME
    showNotes                   : bool                  = True

    _category_tag               : int                   = 0
    noPlainEmail                : bool                  = False
    snapshots                   : set                   = field(default_factory=set)

    _category_links             : int                   = 0
    virtualRoot                 : str                   = "/"
    repoUrl                     : str                   = ""

    @classmethod
    def forRepo(cls, gitDir: str, load: bool = not TEST_MODE) -> "RepoPrefs":
        prefs = cls()
        prefs._parentDir = gitDir
        if load:
            prefs.load()
        return prefs

    def snapshotFormats(self) -> list[str]:
        unknown = self.snapshots.difference(SNAPSHOT_FORMATS)
        if unknown:
            logger.warning(f"Ignoring unknown snapshot formats: {', '.join(sorted(unknown))}")
        return [fmt for fmt in SNAPSHOT_FORMATS if fmt in self.snapshots]
