import io

import pytest

from gitarbor.errors import InternalError, NotFoundError
from gitarbor.porcelain import Signature
from gitarbor.settings import RepoPrefs
from gitarbor.tagview import *
from .util import TEST_SIGNATURE


def renderTag(repo, name, prefs=None, head="") -> str:
    out = io.StringIO()
    printTag(out, repo, prefs or RepoPrefs(), name, head=head)
    return out.getvalue()


def testUnknownTagWritesNothing(builder):
    builder.chain("c1")
    out = io.StringIO()
    with pytest.raises(NotFoundError) as excInfo:
        printTag(out, builder.repo, RepoPrefs(), "nope")
    assert excInfo.value.message == "Bad tag reference: nope"
    assert excInfo.value.status == 404
    assert out.getvalue() == ""


def testAnnotatedTag(builder):
    builder.chain("c1")
    tagId = builder.annotatedTag("v1.0", "c1", "Release <1.0>\nSecond & last line\n")
    html = renderTag(builder.repo, "v1.0")
    c1 = builder.hex("c1")

    assert html.startswith("<table class='commit-info'>\n")
    assert f"<tr><td>tag name</td><td>v1.0 ({tagId})</td></tr>\n" in html
    assert "<tr><td>tag date</td><td>2023-01-01 19:06:40 +0000</td></tr>\n" in html
    assert "<tr><td>tagged by</td><td>Test Person &lt;toto@example.com&gt;</td></tr>\n" in html
    assert (f"<tr><td>tagged object</td><td class='sha1'>"
            f"<a href='/TestRepo/commit/?id={c1}'>commit {c1}</a></td></tr>\n") in html
    assert "download" not in html
    assert html.endswith("</table>\n"
                         "<div class='commit-subject'>Release &lt;1.0&gt;</div>"
                         "<div class='commit-msg'>Second &amp; last line\n</div>")


def testAnnotatedTagSingleLineMessage(builder):
    builder.chain("c1")
    builder.annotatedTag("v1", "c1", "Just a subject")
    html = renderTag(builder.repo, "v1")
    assert html.endswith("<div class='commit-subject'>Just a subject</div>")
    assert "commit-msg" not in html


def testTaggerEmailCanBeHidden(builder):
    builder.chain("c1")
    builder.annotatedTag("v1", "c1", "msg\n")
    html = renderTag(builder.repo, "v1", RepoPrefs(noPlainEmail=True))
    assert "<tr><td>tagged by</td><td>Test Person</td></tr>" in html
    assert "toto@example.com" not in html


def testTagDateOmittedWhenZero(builder):
    builder.chain("c1")
    builder.annotatedTag("v1", "c1", "msg\n", tagger=Signature("Nobody", "no@example.com", 0, 0))
    html = renderTag(builder.repo, "v1")
    assert "tag date" not in html
    assert "Nobody" in html


def testLightweightTag(builder):
    builder.chain("c1")
    builder.lightweightTag("light", "c1")
    c1 = builder.hex("c1")
    html = renderTag(builder.repo, "light")
    assert html == ("<table class='commit-info'>\n"
                    "<tr><td>tag name</td><td>light</td></tr>\n"
                    f"<tr><td>Tagged object</td><td class='sha1'><a href='/TestRepo/commit/?id={c1}'>commit {c1}</a></td></tr>\n"
                    "</table>\n")


def testLightweightTagOnTree(builder):
    builder.chain("c1")
    treeId = builder.repo.peel_commit(builder.ids["c1"]).tree.id
    builder.repo.references.create("refs/tags/atree", treeId)
    html = renderTag(builder.repo, "atree")
    assert f"<a href='/TestRepo/tree/?id={treeId}'>tree {treeId}</a>" in html


def testDownloadLinks(builder):
    builder.chain("c1")
    builder.annotatedTag("v2.1", "c1", "msg\n")
    prefs = RepoPrefs(snapshots={"zip", "tar.gz", "bogus"})
    html = renderTag(builder.repo, "v2.1", prefs, head="dev")
    assert ("<tr><th>download</th><td class='sha1'>"
            "<a href='/TestRepo/snapshot/TestRepo-2.1.tar.gz?h=dev'>TestRepo-2.1.tar.gz</a><br/>"
            "<a href='/TestRepo/snapshot/TestRepo-2.1.zip?h=dev'>TestRepo-2.1.zip</a><br/>"
            "</td></tr>") in html


@pytest.mark.parametrize("tagName,version", [
    ("v1.0", "1.0"),
    ("v10", "10"),
    ("version", "version"),
    ("1.0", "1.0"),
    ("vv1", "vv1"),
])
def testSnapshotVersion(tagName, version):
    assert snapshotVersion(tagName) == version


def testLoadTagMissingObject(builder, monkeypatch):
    builder.chain("c1")
    builder.lightweightTag("t", "c1")
    monkeypatch.setattr(type(builder.repo), "get", lambda self, oid, default=None: None)
    with pytest.raises(InternalError) as excInfo:
        loadTag(builder.repo, "t")
    assert excInfo.value.status == 500
    assert excInfo.value.message.startswith("Bad object id: ")


def testLoadTagInfo(builder):
    builder.chain("c1")
    tagId = builder.annotatedTag("v1", "c1", "msg\n", tagger=TEST_SIGNATURE)
    info = loadTag(builder.repo, "v1")
    assert info.annotated
    assert info.id == str(tagId)
    assert info.targetId == builder.hex("c1")
    assert info.targetType == "commit"
    assert info.tagger.name == TEST_SIGNATURE.name
    assert info.message == "msg\n"


def testTagNameDefaultsToHead(builder):
    builder.chain("c1")
    builder.annotatedTag("v2", "c1", "Second release\n")
    html = renderTag(builder.repo, "", head="v2")
    assert "<tr><td>tag name</td><td>v2 (" in html
    assert "<div class='commit-subject'>Second release</div>" in html
