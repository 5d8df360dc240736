import logging
import sys
from argparse import ArgumentParser

from gitarbor.errors import PageError, excStrings, renderErrorPage
from gitarbor.htmlwriter import HtmlWriter
from gitarbor.logview import printLog
from gitarbor.porcelain import GitError, RepoContext
from gitarbor.query import GREP_KINDS, LogQuery
from gitarbor.settings import RepoPrefs
from gitarbor.tagview import printTag

logger = logging.getLogger(__name__)


def makeParser():
    parser = ArgumentParser(prog="gitarbor", description="Render git history as HTML")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def addCommon(sub):
        sub.add_argument("repo", help="path to the repository")
        sub.add_argument("-o", "--output", help="write HTML to this file instead of stdout")
        sub.add_argument("--head", default="", help="branch the page is about")
        sub.add_argument("--prefs", help="load settings from this file instead of the repository's")

    logParser = subparsers.add_parser("log", help="paginated commit log")
    addCommon(logParser)
    logParser.add_argument("--id", default="", help="start from this revision")
    logParser.add_argument("--ofs", type=int, default=0, help="number of commits to skip")
    logParser.add_argument("--count", type=int, help="number of commits per page")
    logParser.add_argument("--grep", choices=GREP_KINDS, default="", help="search kind")
    logParser.add_argument("--search", default="", help="search pattern, or range expression with --grep=range")
    logParser.add_argument("--path", default="", help="only show commits touching this path")
    logParser.add_argument("--showmsg", action="store_true", help="show full commit messages")
    logParser.add_argument("--ignorews", action="store_true", help="ignore whitespace in diff stats")
    logParser.add_argument("--no-pager", action="store_true", help="omit the table and the pager links")
    logParser.add_argument("--graph", action="store_true", help="draw the commit graph")
    logParser.add_argument("--filecount", action="store_true", help="show changed file counts")
    logParser.add_argument("--linecount", action="store_true", help="show changed line counts")

    tagParser = subparsers.add_parser("tag", help="single tag details")
    addCommon(tagParser)
    tagParser.add_argument("name", nargs="?", default="", help="tag name (defaults to --head)")

    return parser


def loadPrefs(args, gitDir: str) -> RepoPrefs:
    prefs = RepoPrefs.forRepo(gitDir, load=not args.prefs)
    if args.prefs:
        prefs.loadFrom(args.prefs)

    if args.command == "log":
        prefs.enableCommitGraph |= args.graph
        prefs.enableLogFilecount |= args.filecount
        prefs.enableLogLinecount |= args.linecount

    return prefs


def render(args, out) -> int:
    try:
        context = RepoContext(args.repo)
    except GitError as exc:
        logger.error(f"Can't open repository {args.repo}: {exc}")
        return 2

    with context as repo:
        prefs = loadPrefs(args, repo.path)
        try:
            if args.command == "log":
                query = LogQuery(
                    head=args.head,
                    sha1=args.id,
                    path=args.path.strip("/"),
                    ofs=args.ofs,
                    grep=args.grep,
                    search=args.search,
                    showmsg=args.showmsg,
                    ignorews=args.ignorews,
                )
                printLog(out, repo, prefs, query, count=args.count, pager=not args.no_pager)
            else:
                printTag(out, repo, prefs, args.name, head=args.head)
        except PageError as exc:
            summary, details = excStrings(exc)
            logger.warning(summary)
            logger.debug(details)
            renderErrorPage(HtmlWriter(out), exc)
            return 1

    return 0


def main(argv=None):
    args = makeParser().parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname).1s %(asctime)s %(filename)-16s | %(message)s',
        datefmt="%H:%M:%S")

    if args.output:
        with open(args.output, "w", encoding="utf-8") as out:
            status = render(args, out)
    else:
        status = render(args, sys.stdout)

    sys.exit(status)


if __name__ == "__main__":
    main()
