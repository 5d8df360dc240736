# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import os
import re
import traceback

from gitarbor.htmlwriter import HtmlWriter


class PageError(Exception):
    """
    A request can't be served. Raised before anything is written to the page,
    so the caller can show an error page instead.
    """

    status = 500
    title = "Internal server error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PageError):
    status = 404
    title = "Not found"


class InternalError(PageError):
    status = 500
    title = "Internal server error"


class BadRangeTokenError(ValueError):
    def __init__(self, token: str):
        super().__init__(f"Bad range expr: {token}")
        self.token = token


def renderErrorPage(writer: HtmlWriter, error: PageError):
    writer.html(f"<div class='error'><h2>{error.status} ")
    writer.txt(error.title)
    writer.html("</h2><p>")
    writer.txt(error.message)
    writer.html("</p></div>\n")


def shortenTracebackPath(line):
    return re.sub(r'^\s*File "([^"]+)", line (\d+)',
                  lambda m: F'{os.path.basename(m.group(1))}:{m.group(2)}',
                  line, count=1)


def excStrings(exc):
    summary = traceback.format_exception_only(exc.__class__, exc)
    summary = ''.join(summary).strip()

    details = traceback.format_exception(exc.__class__, exc, exc.__traceback__)
    details = ''.join(shortenTracebackPath(line) for line in details).strip()

    return summary, details
