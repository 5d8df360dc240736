import pytest

from gitarbor.graph import GraphSynchronizer, GraphSyncError, SyncState


class ScriptedEngine:
    """
    Layout engine stand-in: for each commit, emits `fillers` lines before the
    commit line, then `finishing` lines before the commit is finished.
    Past that, it emits padding lines.
    """

    def __init__(self, fillers=0, finishing=0):
        self.fillers = fillers
        self.finishing = finishing
        self.queue = []
        self.pulled = 0

    def update(self, commit, parents):
        self.queue = ([(f"filler{i}", False) for i in range(self.fillers)]
                      + [(f"* {commit}", True)]
                      + [(f"finishing{i}", False) for i in range(self.finishing)])

    def nextLine(self):
        self.pulled += 1
        if self.queue:
            return self.queue.pop(0)
        return "|", False

    def isCommitFinished(self):
        return not self.queue


@pytest.mark.parametrize("finishing", [0, 1, 2, 5])
@pytest.mark.parametrize("messageLines", [0, 1, 3, 6])
def testPaddingIsMaxOfPendingAndMessageLines(finishing, messageLines):
    engine = ScriptedEngine(fillers=1, finishing=finishing)
    sync = GraphSynchronizer(engine)

    sync.beginCommit("abc", [])
    assert sync.fillerLines() == ["filler0"]
    assert sync.takePrimary() == "* abc"

    if sync.needsPadding(messageLines):
        lines = sync.paddingLines(messageLines)
        assert len(lines) == max(finishing, messageLines)
        assert lines[:finishing] == [f"finishing{i}" for i in range(finishing)]
        assert all(line == "|" for line in lines[finishing:])
    else:
        assert finishing == 0 and messageLines == 0
        sync.finishCommit()

    assert sync.state == SyncState.ROW_COMPLETE


def testAdvanceReportsFillers():
    sync = GraphSynchronizer(ScriptedEngine(fillers=2))
    sync.beginCommit("abc", [])
    assert sync.state == SyncState.FILLING
    assert sync.advance() == ("filler0", True)
    assert sync.advance() == ("filler1", True)
    assert sync.advance() == ("* abc", False)
    assert sync.state == SyncState.PRIMARY_READY
    assert sync.takePrimary() == "* abc"
    assert sync.state == SyncState.PADDING_IN_PROGRESS


def testNoPaddingRowWhenFinishedAndNoMessage():
    sync = GraphSynchronizer(ScriptedEngine())
    sync.beginCommit("abc", [])
    assert sync.fillerLines() == []
    sync.takePrimary()
    assert not sync.needsPadding(0)
    sync.finishCommit()
    assert sync.state == SyncState.ROW_COMPLETE


def testCantFinishWithPendingLines():
    sync = GraphSynchronizer(ScriptedEngine(finishing=1))
    sync.beginCommit("abc", [])
    sync.fillerLines()
    sync.takePrimary()
    with pytest.raises(GraphSyncError):
        sync.finishCommit()


def testOutOfOrderCallsAreRejected():
    sync = GraphSynchronizer(ScriptedEngine())
    with pytest.raises(GraphSyncError):
        sync.takePrimary()
    with pytest.raises(GraphSyncError):
        sync.advance()

    sync.beginCommit("abc", [])
    with pytest.raises(GraphSyncError):
        sync.beginCommit("def", [])
    with pytest.raises(GraphSyncError):
        sync.paddingLines(1)


def testResetAfterInterruptedCommit():
    engine = ScriptedEngine(fillers=3)
    sync = GraphSynchronizer(engine)
    sync.beginCommit("abc", [])
    sync.advance()
    sync.reset()
    assert sync.state == SyncState.ROW_COMPLETE
    assert sync.primaryLine is None

    sync.beginCommit("def", [])
    assert len(sync.fillerLines()) == 3
    assert sync.takePrimary() == "* def"


def testSkipCommitDoesNotPullLines():
    engine = ScriptedEngine(fillers=2, finishing=2)
    sync = GraphSynchronizer(engine)
    sync.skipCommit("abc", [])
    assert engine.pulled == 0
    assert sync.state == SyncState.ROW_COMPLETE
