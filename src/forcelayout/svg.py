# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Snapshot the current state of a layout as SVG."""

from __future__ import annotations

__all__ = ["SVGRenderer"]

import logging
import os

from svgwrite import drawing

from forcelayout import graph, physics, renderer, vector

LOGGER = logging.getLogger(__name__)

FONT_FAMILY = "'Open Sans','Segoe UI',Arial,sans-serif"
NODE_COLOR = "#fcd96b"
EDGE_COLOR = "#5a5a5a"


class SVGRenderer(renderer.AbstractRenderer[vector.Vector2D]):
    """A renderer that keeps the latest frame for export as SVG.

    Only the most recent position of every node and edge is kept, so
    drawing many frames does not grow the resulting image.
    """

    engine: physics.ForceDirected2D

    def __init__(
        self,
        engine: physics.ForceDirected2D,
        *,
        node_radius: float | None = None,
        labels: bool = True,
    ) -> None:
        super().__init__(engine)
        self.node_radius = node_radius
        self.labels = labels
        self._edges: dict[str, tuple[vector.Vector2D, vector.Vector2D]] = {}
        self._nodes: dict[str, tuple[str, vector.Vector2D]] = {}

    def clear(self) -> None:
        self._edges.clear()
        self._nodes.clear()

    def on_edge_drawn(
        self, edge: graph.Edge, pos1: vector.Vector2D, pos2: vector.Vector2D
    ) -> None:
        self._edges[edge.id] = (pos1, pos2)

    def on_node_drawn(self, node: graph.Node, pos: vector.Vector2D) -> None:
        self._nodes[node.id] = (node.data.label or node.id, pos)

    def _build(self) -> drawing.Drawing:
        topleft, bottomright = self.engine.bounding_box()
        size = bottomright - topleft
        radius = self.node_radius or max(size.x, size.y) / 50
        font_size = radius * 1.2

        dwg = drawing.Drawing(
            size=("100%", "100%"),
            viewBox=f"{topleft.x} {topleft.y} {size.x} {size.y}",
        )
        dwg.add(dwg.rect(insert=topleft, size=size, fill="#fff"))

        edges = dwg.g(
            class_="Edges", stroke=EDGE_COLOR, stroke_width=radius / 5
        )
        for start, end in self._edges.values():
            edges.add(dwg.line(start=start, end=end))
        dwg.add(edges)

        nodes = dwg.g(
            class_="Nodes",
            fill=NODE_COLOR,
            stroke=EDGE_COLOR,
            stroke_width=radius / 10,
        )
        for _, pos in self._nodes.values():
            nodes.add(dwg.circle(center=pos, r=radius))
        dwg.add(nodes)

        if self.labels:
            texts = dwg.g(
                class_="Labels",
                font_family=FONT_FAMILY,
                font_size=font_size,
                text_anchor="middle",
            )
            for label, pos in self._nodes.values():
                insert = pos + (0, radius + font_size)
                texts.add(dwg.text(label, insert=insert))
            dwg.add(texts)

        return dwg

    def to_string(self) -> str:
        """Return the current frame as SVG source."""
        return self._build().tostring()

    def save_as(self, filename: str | os.PathLike[str]) -> None:
        """Write the current frame to an SVG file."""
        LOGGER.debug("Writing %d nodes to %s", len(self._nodes), filename)
        self._build().saveas(os.fspath(filename))
