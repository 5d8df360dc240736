from __future__ import annotations as _annotations

import collections as _collections
import logging as _logging
from os.path import (
    basename as _basename,
    normpath as _normpath,
)
from pathlib import Path as _Path

from pygit2 import (
    Commit,
    Diff,
    GitError,
    InvalidSpecError,
    Object,
    Oid,
    Repository as _VanillaRepository,
    Signature,
    Tag,
    Tree,
)

from pygit2.enums import (
    DiffOption,
    ReferenceType,
    RepositoryOpenFlag,
    SortMode,
)


_logger = _logging.getLogger(__name__)

NOTES_REF = "refs/notes/commits"
TAG_DECORATION_PREFIX = "tag: "


class RefPrefix:
    HEADS = "refs/heads/"
    REMOTES = "refs/remotes/"
    TAGS = "refs/tags/"


def path_in_scope(path: str, scope: str) -> bool:
    """True if `path` is `scope` itself or lies somewhere below it. An empty scope matches everything."""
    scope = scope.strip("/")
    if not scope:
        return True
    return path == scope or path.startswith(scope + "/")


def tree_entry_id(tree: Tree, path: str) -> Oid | None:
    try:
        return tree[path].id
    except KeyError:
        return None


class Repo(_VanillaRepository):
    """
    Drop-in replacement for pygit2.Repository with the lookups needed to render history pages.
    """

    def __del__(self):
        _logger.debug("__del__ Repo")
        self.free()

    @property
    def head_branch_shorthand(self) -> str:
        return self.head.shorthand

    @property
    def repo_name(self) -> str:
        path = self.workdir or self.path
        name = _basename(_normpath(path))
        if not self.workdir:
            name = name.removesuffix(".git")
        return name

    def peel_commit(self, commit_id: Oid | str) -> Commit:
        return self[commit_id].peel(Commit)

    def disambiguate_ref(self, ref: str) -> str:
        """
        Prefer a local branch over any other object going by the same short name.
        """
        longref = RefPrefix.HEADS + ref
        try:
            if longref in self.references:
                return longref
        except InvalidSpecError:
            # Not a valid ref name, e.g. "HEAD~1" or "master^{tree}": leave it to revparse
            pass
        return ref

    def resolve_revision(self, spec: str) -> Oid:
        """
        Resolve a revision expression to a commit id.
        Raise KeyError if nothing matches, InvalidSpecError if the expression is malformed
        or doesn't lead to a commit.
        """
        obj = self.revparse_single(spec)
        return obj.peel(Commit).id

    def map_commit_decorations(self) -> dict[str, list[str]]:
        """
        Return the names of all refs pointing at each commit, keyed by commit hex.

        Names are spelled the way `git log --decorate=full` spells them:
        refs to annotated tags get a "tag: " prefix, the others keep their full name,
        and a detached HEAD shows up as "HEAD". Each list is sorted.
        """

        decorations: dict[str, list[str]] = _collections.defaultdict(list)

        for ref in self.references.objects:
            if ref.type != ReferenceType.DIRECT:  # Skip symbolic references
                continue

            name = ref.name
            if name.startswith(RefPrefix.TAGS) and isinstance(self.get(ref.target), Tag):
                name = TAG_DECORATION_PREFIX + name

            try:
                commit: Commit = ref.peel(Commit)
            except InvalidSpecError as e:
                # Some refs might not be committish, e.g. in linux's source repo
                _logger.info(f"{e} - Skipping ref '{ref.name}'")
                continue

            decorations[str(commit.id)].append(name)

        # Detached HEAD isn't in repo.references
        if self.head_is_detached:
            decorations[str(self.head.target)].append("HEAD")

        for names in decorations.values():
            names.sort()

        return dict(decorations)

    def first_parent_diff(self, commit: Commit, ignore_whitespace: bool = False) -> Diff:
        """
        Diff a commit against its first parent, pairing up renamed files.
        Parentless commits are diffed against the empty tree.
        """
        flags = DiffOption.NORMAL
        if ignore_whitespace:
            flags |= DiffOption.IGNORE_WHITESPACE

        if commit.parents:
            diff = self.diff(commit.parents[0], commit, flags=flags)
        else:
            # No tree passed to diff_to_tree == force diff against empty tree
            diff = commit.tree.diff_to_tree(swap=True, flags=flags)

        diff.find_similar()
        return diff

    def lookup_note_message(self, commit_id: Oid | str, notes_ref: str = NOTES_REF) -> str:
        try:
            note = self.lookup_note(str(commit_id), notes_ref)
        except (KeyError, GitError):
            return ""
        return note.message


class RepoContext:
    def __init__(self, path: str | _Path, flags: RepositoryOpenFlag = 0):
        self.repo = Repo(str(path), flags)

    def __enter__(self) -> Repo:
        return self.repo

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.repo.free()
        del self.repo
        self.repo = None
