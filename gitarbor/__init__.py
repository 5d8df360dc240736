# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Render the history of a git repository as HTML: a paginated log table
with an optional commit graph, and a tag detail view.
"""

__version__ = "0.1"
