# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Force-directed layout of diagram graphs."""

from importlib import metadata

try:
    __version__ = metadata.version("forcelayout")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+unknown"
del metadata

from ._json_enc import *
from .exceptions import *
from .graph import Edge, EdgeData, Graph, Node, NodeData
from .layout import (
    LayoutConfig,
    LayoutTarget,
    apply_layout,
    build_graph,
    compute_layout,
)
from .physics import ForceDirected, ForceDirected2D, Point, Spring
from .renderer import AbstractRenderer, NullRenderer
from .vector import AbstractVector, Vector2D
