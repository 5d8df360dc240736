import logging

import pytest

from gitarbor.query import LogQuery


def testFromQueryString():
    query = LogQuery.fromQueryString("?h=dev&id=abc123&ofs=50&qt=author&q=Jane+Doe&showmsg=1&ignorews=1", path="/docs/")
    assert query == LogQuery(head="dev", sha1="abc123", path="docs", ofs=50, grep="author",
                             search="Jane Doe", showmsg=True, ignorews=True)


def testFromEmptyQueryString():
    assert LogQuery.fromQueryString("") == LogQuery()


@pytest.mark.parametrize("qs,ofs", [("ofs=abc", 0), ("ofs=", 0), ("ofs=-10", -10), ("ofs=1&ofs=2", 2)])
def testOffsetParsing(qs, ofs):
    assert LogQuery.fromQueryString(qs).ofs == ofs


def testUnknownSearchKindIsDropped(caplog):
    with caplog.at_level(logging.WARNING):
        query = LogQuery.fromQueryString("qt=bogus&q=x")
    assert query.grep == ""
    assert query.search == "x"
    assert "bogus" in caplog.text
