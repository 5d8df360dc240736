import pytest

from gitarbor.graph import GraphDiagram, GraphLanes, HTML_COLUMN_COLORS, HTML_COLOR_RESET


def drawCommit(lanes, commit, parents):
    lanes.update(commit, parents)
    lines = []
    drawn = False
    while not (drawn and lanes.isCommitFinished()):
        line, isCommitLine = lanes.nextLine()
        drawn |= isCommitLine
        lines.append((line.rstrip(), isCommitLine))
    return lines


def diagram(definition, **kwargs):
    sequence, parentMap, heads = GraphDiagram.parseDefinition(definition)
    return GraphDiagram.diagram(sequence, parentMap, **kwargs)


def testParseDefinition():
    sequence, parentMap, heads = GraphDiagram.parseDefinition("a1-a2:a3,b b:a3 a3")
    assert sequence == ["a1", "a2", "b", "a3"]
    assert parentMap == {"a1": ["a2"], "a2": ["a3", "b"], "b": ["a3"], "a3": []}
    assert heads == {"a1"}


def testLinear():
    assert diagram("a-b-c") == "a *\nb *\nc *"


def testForkCollapses():
    assert diagram("a:c b:c c") == (
        "a *\n"
        "b | *\n"
        "  |/\n"
        "c *")


def testMergeSpreadsThenCollapses():
    assert diagram("m:a,b a:c b:c c") == (
        "m *\n"
        "  |\\\n"
        "a * |\n"
        "b | *\n"
        "  |/\n"
        "c *")


def testHiddenCommitsAreLeftOut():
    assert diagram("a:c b:c c", hiddenCommits={"b"}) == "a *\nc *"


def testMaxRows():
    assert diagram("a-b-c-d", maxRows=2) == "a *\nb *"


def testCommitLineIsReportedOnce():
    lanes = GraphLanes(columnColors=[])
    for commit, parents in [("m", ["a", "b"]), ("a", ["c"]), ("b", ["c"]), ("c", [])]:
        lines = drawCommit(lanes, commit, parents)
        assert sum(isCommitLine for _, isCommitLine in lines) == 1
        assert lanes.isCommitFinished()


def testUndrawnCommitLeavesEllipsis():
    lanes = GraphLanes(columnColors=[])
    drawCommit(lanes, "a", ["b"])
    lanes.update("b", ["c"])  # never drawn
    lines = drawCommit(lanes, "c", [])
    assert lines[0] == ("...", False)
    assert lines[1] == ("*", True)


def testOctopusMerge():
    lanes = GraphLanes(columnColors=[])
    lines = drawCommit(lanes, "o", ["a", "b", "c"])
    commitLines = [line for line, isCommitLine in lines if isCommitLine]
    assert commitLines == ["*-."]
    assert lines[-1][0] == "|\\ \\"


def testHtmlColors():
    lanes = GraphLanes()
    drawCommit(lanes, "m", ["a", "b"])
    lines = drawCommit(lanes, "a", ["c"])
    line, isCommitLine = lines[0]
    assert isCommitLine
    assert line.startswith("*")
    assert any(color in line for color in HTML_COLUMN_COLORS)
    assert HTML_COLOR_RESET in line
    assert "<span class='column" in line


@pytest.mark.parametrize("numColors", [1, 6])
def testColorCycling(numColors):
    colors = [f"<{i}>" for i in range(numColors)]
    lanes = GraphLanes(columnColors=colors, colorReset="</>")
    drawCommit(lanes, "m", ["a", "b"])
    assert lanes.newColumns[0].color == 0
    assert lanes.newColumns[1].color == 1 % numColors
