# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import html
from html import escape as escape

ELLIPSIS = "..."


def escapeText(text: str) -> str:
    """ Escape text for use between tags. Quotes are left alone. """
    return html.escape(text, quote=False)


def messageSummary(message: str) -> tuple[str, str]:
    """
    Split a commit message into its subject line and the rest of the message.
    Blank lines separating the subject from the body are dropped.
    """
    message = message.lstrip("\n")
    subject, _, body = message.partition("\n")
    return subject, body.lstrip("\n")


def elide(text: str, maxLength: int, ellipsis: str = ELLIPSIS) -> str:
    """
    Shorten text to at most maxLength characters, ending with an ellipsis if anything was cut.
    A maxLength of 0 or less disables elision.
    """
    if maxLength <= 0 or len(text) <= maxLength:
        return text
    if maxLength <= len(ellipsis):
        return text[:maxLength]
    return text[:maxLength - len(ellipsis)] + ellipsis


def countDisplayLines(text: str) -> int:
    """ Number of lines a block of preformatted text takes up. Empty text still takes up one line. """
    return max(1, len(text.splitlines()))


def indentLines(text: str, indent: str = "    ") -> str:
    return "\n".join(indent + line if line else line for line in text.splitlines())
