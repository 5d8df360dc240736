import tempfile

import pygit2
import pytest

from .util import RepoBuilder


def setUpGitConfigSearchPaths(prefix=""):
    # Don't let unit tests access host system's git config
    levels = [
        pygit2.enums.ConfigLevel.GLOBAL,
        pygit2.enums.ConfigLevel.XDG,
        pygit2.enums.ConfigLevel.SYSTEM,
        pygit2.enums.ConfigLevel.PROGRAMDATA,
    ]
    for level in levels:
        if prefix:
            path = f"{prefix}_{level.name}"
        else:
            path = ""
        pygit2.settings.search_path[level] = path


@pytest.fixture(scope='session', autouse=True)
def maskHostGitConfig():
    setUpGitConfigSearchPaths("")


@pytest.fixture
def tempDir() -> tempfile.TemporaryDirectory:
    td = tempfile.TemporaryDirectory(prefix="gitarbortest-")
    yield td
    td.cleanup()


@pytest.fixture
def builder(tempDir) -> RepoBuilder:
    rb = RepoBuilder(f"{tempDir.name}/TestRepo")
    yield rb
    rb.close()
