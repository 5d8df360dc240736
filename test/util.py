import io
import os
import re

import pygit2
from pygit2.enums import FileMode, ObjectType

from gitarbor.porcelain import Oid, Repo, Signature

TEST_SIGNATURE = Signature("Test Person", "toto@example.com", 1672600000, 0)

NOW = 1672600000 + 3600 * 24 * 365
""" Fixed "current time" for rendering, well past the test commits so that ages print as dates. """

COMMIT_ROW_PATTERN = re.compile(r"<tr(?: class='logheader')?><td><a href='[^']*?id=([0-9a-f]{40})'")


def writeFile(path, text):
    # Prevent accidental littering of current working directory
    assert os.path.isabs(path), "pass me an absolute path"

    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(text.encode("utf-8"))


def renderedCommitIds(html: str) -> list[str]:
    return COMMIT_ROW_PATTERN.findall(html)


class RepoBuilder:
    """
    Builds commit histories without touching a working directory.
    Commits are named; each commit's tree is its first parent's tree plus the given files
    (a None value deletes a file).
    """

    def __init__(self, path: str):
        pygit2.init_repository(path)
        self.repo = Repo(path)
        self.ids: dict[str, Oid] = {}
        self.files: dict[str, dict[str, str]] = {}
        self.clock = TEST_SIGNATURE.time

    def close(self):
        self.repo.free()

    def hex(self, name: str) -> str:
        return str(self.ids[name])

    def signature(self, name="Test Person", email="toto@example.com") -> Signature:
        self.clock += 60
        return Signature(name, email, self.clock, 0)

    def makeTree(self, files: dict[str, str]) -> Oid:
        treeBuilder = self.repo.TreeBuilder()
        subdirs = {}
        for path, text in files.items():
            head, sep, rest = path.partition("/")
            if sep:
                subdirs.setdefault(head, {})[rest] = text
            else:
                blobId = self.repo.create_blob(text.encode("utf-8"))
                treeBuilder.insert(head, blobId, FileMode.BLOB)
        for name, subfiles in subdirs.items():
            treeBuilder.insert(name, self.makeTree(subfiles), FileMode.TREE)
        return treeBuilder.write()

    def commit(self, name: str, parents=(), files=None, message="", author=None, branch="master") -> Oid:
        parents = list(parents)
        contents = dict(self.files[parents[0]]) if parents else {}
        if files is None:
            files = {f"{name}.txt": f"{name}\n"}
        for path, text in files.items():
            if text is None:
                contents.pop(path, None)
            else:
                contents[path] = text

        sig = author or self.signature()
        oid = self.repo.create_commit(
            None, sig, sig, message or f"{name}\n", self.makeTree(contents),
            [self.ids[p] for p in parents])

        self.ids[name] = oid
        self.files[name] = contents
        if branch:
            self.repo.references.create(f"refs/heads/{branch}", oid, force=True)
        return oid

    def chain(self, *names: str, base: str = "", branch="master"):
        """ Linear history; each commit is the parent of the next one. """
        parent = base
        for name in names:
            self.commit(name, [parent] if parent else [], branch=branch)
            parent = name

    def branch(self, name: str, commit: str):
        self.repo.references.create(f"refs/heads/{name}", self.ids[commit], force=True)

    def lightweightTag(self, name: str, commit: str):
        self.repo.references.create(f"refs/tags/{name}", self.ids[commit])

    def annotatedTag(self, name: str, commit: str, message: str, tagger: Signature = TEST_SIGNATURE) -> Oid:
        return self.repo.create_tag(name, self.ids[commit], ObjectType.COMMIT, tagger, message)

    def note(self, commit: str, message: str):
        self.repo.create_note(message, TEST_SIGNATURE, TEST_SIGNATURE, self.hex(commit))


def renderToString(func, *args, **kwargs) -> str:
    out = io.StringIO()
    func(out, *args, **kwargs)
    return out.getvalue()
