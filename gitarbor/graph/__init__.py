# -----------------------------------------------------------------------------
# Copyright (C) 2024 Iliyas Jorio.
# This file is part of gitarbor, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from gitarbor.graph.lanes import (
    Column,
    GraphLanes,
    HTML_COLOR_RESET,
    HTML_COLUMN_COLORS,
    LaneState,
)
from gitarbor.graph.synchronizer import (
    GraphLineSource,
    GraphSyncError,
    GraphSynchronizer,
    SyncState,
)
from gitarbor.graph.graphdiagram import GraphDiagram
