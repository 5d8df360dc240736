import re
from itertools import zip_longest

from gitarbor.graph.lanes import GraphLanes


class GraphDiagram:
    """
    Plain-text rendition of a commit graph, one margin per column of text on the left.
    Handy for eyeballing the lane layout without a repository.
    """

    @staticmethod
    def parseDefinition(text: str):
        """
        Parse a graph definition such as "a1-a2:a3,b b:a3 a3".
        Each word is a chain of commits, each commit being the parent of the
        previous one; the optional part after ":" lists the parents of the
        chain's last commit.
        """
        sequence = []
        parentMap = {}
        seen = set()
        heads = set()

        lines = re.split(r"\s+", text)

        for line in lines:
            line = line.strip()
            if not line:
                continue

            split = line.strip().split(":")
            assert 1 <= len(split) <= 2

            chainStr = split[0]
            assert chainStr
            assert "," not in chainStr

            try:
                assert "-" not in split[1]
                rootParents = [p for p in split[1].split(",") if p]
            except IndexError:
                rootParents = []

            chain = chainStr.split("-")
            parents = [[c] for c in chain[1:]] + [rootParents]

            for commit, commitParents in zip(chain, parents):
                assert commit not in parentMap, f"Commit hash appears twice in sequence! {commit}"
                sequence.append(commit)
                parentMap[commit] = commitParents
                if commit not in seen:
                    heads.add(commit)
                seen.update(parentMap[commit])

        return sequence, parentMap, heads

    @staticmethod
    def diagram(sequence: list[str], parentMap: dict[str, list[str]], maxRows=20, hiddenCommits=None, verbose=False):
        if not hiddenCommits:
            hiddenCommits = set()

        lanes = GraphLanes(columnColors=[], colorReset="")
        diagram = GraphDiagram()

        for commit in sequence:
            if commit in hiddenCommits:
                continue
            if maxRows <= 0:
                break
            maxRows -= 1

            parents = [p for p in parentMap.get(commit, []) if p not in hiddenCommits]
            lanes.update(commit, parents)

            drawn = False
            while not (drawn and lanes.isCommitFinished()):
                line, isCommitLine = lanes.nextLine()
                drawn |= isCommitLine
                margins = [commit] if isCommitLine else [""]
                if verbose:
                    margins.append(str(len(parents)) if isCommitLine else "")
                diagram.addLine(line, margins)

        return diagram.bake()

    # -----------------------------------------------------------------

    def __init__(self):
        self.scanlines = []
        self.margins = []

    def addLine(self, line: str, margins: list[str]):
        self.scanlines.append(line)
        self.margins.append(margins)

    def bake(self):
        if self.margins:
            numMargins = max(len(rowMargins) for rowMargins in self.margins)
        else:
            numMargins = 0
        marginWidths = [0] * numMargins
        for margins in self.margins:
            for i, mText in enumerate(margins):
                marginWidths[i] = max(marginWidths[i], len(mText))

        text = ""
        for margins, scanline in zip(self.margins, self.scanlines):
            for mWidth, mText in zip_longest(reversed(marginWidths), reversed(margins), fillvalue=""):
                text += mText.rjust(mWidth) + " "
            text += scanline
            text = text.rstrip(" ")
            text += "\n"
        text = text.removesuffix("\n")
        return text
