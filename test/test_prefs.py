import json
import logging
import os

from gitarbor.settings import RepoPrefs
from gitarbor.toolbox import AuthorDisplayStyle


def testDefaultsDontWriteAFile(tempDir):
    prefs = RepoPrefs.forRepo(tempDir.name, load=False)
    assert prefs.write() == ""
    assert not os.listdir(tempDir.name)


def testWriteAndLoad(tempDir):
    prefs = RepoPrefs.forRepo(tempDir.name, load=False)
    prefs.enableCommitGraph = True
    prefs.maxCommitCount = 20
    prefs.authorDisplayStyle = AuthorDisplayStyle.INITIALS
    prefs.snapshots = {"zip", "tar.gz"}
    path = prefs.write()

    assert path == os.path.join(tempDir.name, "gitarbor.json")
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    assert data == {
        "enableCommitGraph": True,
        "maxCommitCount": 20,
        "authorDisplayStyle": AuthorDisplayStyle.INITIALS.value,
        "snapshots": ["tar.gz", "zip"],
    }

    loaded = RepoPrefs.forRepo(tempDir.name, load=True)
    assert loaded == prefs


def testLoadDropsBadValues(tempDir, caplog):
    path = os.path.join(tempDir.name, "custom.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump({
            "maxCommitCount": True,
            "enableLogFilecount": "yes",
            "_category_log": 5,
            "noSuchKey": 1,
            "virtualRoot": "/git/",
            "repoUrl": None,
        }, f)

    prefs = RepoPrefs()
    with caplog.at_level(logging.WARNING):
        assert prefs.loadFrom(path)

    assert prefs.maxCommitCount == 50
    assert prefs.enableLogFilecount is False
    assert prefs.virtualRoot == "/git/"
    assert prefs.repoUrl == ""
    assert "dropping key: noSuchKey" in caplog.text
    assert "dropping key: _category_log" in caplog.text


def testLoadRejectsNonObject(tempDir, caplog):
    path = os.path.join(tempDir.name, "list.json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("[1, 2]")
    with caplog.at_level(logging.WARNING):
        assert not RepoPrefs().loadFrom(path)
    assert "isn't an object" in caplog.text


def testLoadRejectsBrokenJson(tempDir):
    path = os.path.join(tempDir.name, "broken.json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("{")
    assert not RepoPrefs().loadFrom(path)


def testWritingDefaultsDeletesFile(tempDir):
    prefs = RepoPrefs.forRepo(tempDir.name, load=False)
    prefs.noPlainEmail = True
    path = prefs.write()
    assert os.path.isfile(path)

    prefs.reset()
    assert prefs.write() == ""
    assert not os.path.exists(path)


def testSnapshotFormatsOrder():
    prefs = RepoPrefs(snapshots={"zip", "tar", "nope"})
    assert prefs.snapshotFormats() == ["tar", "zip"]
