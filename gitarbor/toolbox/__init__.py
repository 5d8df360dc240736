# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Library of utilities that aren't specifically tied to gitarbor's page rendering.
"""

from .benchmark import Benchmark, benchmark, BENCHMARK_LOGGING_LEVEL
from .gitutils import (
    AuthorDisplayStyle, abbreviatePerson,
    shortHash,
    formatIsoDate, formatLongDate, formatShortDate,
    relativeAge,
    MAX_RELATIVE_AGE,
)
from .textutils import (
    escape, escapeText,
    messageSummary,
    elide,
    countDisplayLines,
    indentLines,
)
