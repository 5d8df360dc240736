# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from typing import TextIO

from gitarbor.toolbox import escape, escapeText


class HtmlWriter:
    """
    Thin wrapper around a text stream that markup is written to as it is produced.
    Nothing is buffered here; callers may stream straight to a socket or a file.
    """

    def __init__(self, out: TextIO):
        self.out = out

    def html(self, markup: str):
        """ Write trusted markup verbatim. """
        self.out.write(markup)

    def txt(self, text: str):
        """ Write untrusted text, escaped. """
        self.out.write(escapeText(text))

    def attr(self, name: str, value: str) -> str:
        return f" {name}='{escape(value)}'"

    def linkOpen(self, href: str, cssClass: str = "", title: str = ""):
        markup = "<a"
        if title:
            markup += self.attr("title", title)
        if cssClass:
            markup += self.attr("class", cssClass)
        markup += self.attr("href", href)
        markup += ">"
        self.out.write(markup)

    def linkClose(self):
        self.out.write("</a>")

    def link(self, text: str, href: str, cssClass: str = "", title: str = ""):
        self.linkOpen(href, cssClass, title)
        self.txt(text)
        self.linkClose()
