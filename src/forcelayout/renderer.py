# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Renderers drive the simulation and observe its results."""

from __future__ import annotations

__all__ = ["AbstractRenderer", "NullRenderer"]

import abc
import collections.abc as cabc
import typing as t

from forcelayout import exceptions, graph, physics, vector

_V = t.TypeVar("_V", bound=vector.AbstractVector)


class AbstractRenderer(abc.ABC, t.Generic[_V]):
    """Base class for everything that consumes simulation results.

    Every call to :meth:`draw` advances the engine by exactly one step
    and then reports the resulting positions through the two hooks
    :meth:`on_edge_drawn` and :meth:`on_node_drawn`.
    """

    def __init__(self, engine: physics.ForceDirected[_V]) -> None:
        self.engine = engine

    def draw(self, timestep: float) -> None:
        self.engine.apply_force(timestep)
        self.refresh()

    def refresh(self) -> None:
        """Report the current positions without advancing the engine."""
        for edge, spring in self.engine.iter_edges():
            self.on_edge_drawn(
                edge, spring.point1.position, spring.point2.position
            )
        for node, point in self.engine.iter_nodes():
            self.on_node_drawn(node, point.position)

    @abc.abstractmethod
    def clear(self) -> None:
        """Reset renderer-local state.

        The engine's points are not affected.
        """

    @abc.abstractmethod
    def on_edge_drawn(self, edge: graph.Edge, pos1: _V, pos2: _V) -> None:
        pass

    @abc.abstractmethod
    def on_node_drawn(self, node: graph.Node, pos: _V) -> None:
        pass


class NullRenderer(AbstractRenderer[_V]):
    """A renderer that only records the latest position of each node."""

    def __init__(self, engine: physics.ForceDirected[_V]) -> None:
        super().__init__(engine)
        self._positions: dict[str, _V] = {}

    @property
    def positions(self) -> cabc.Mapping[str, _V]:
        return dict(self._positions)

    def position_by_id(self, node_id: str) -> _V:
        """Return the position a node had when it was last drawn.

        Raises
        ------
        UnknownNodeError
            If no node with this ID was drawn yet.
        """
        try:
            return self._positions[node_id]
        except KeyError:
            raise exceptions.UnknownNodeError(node_id) from None

    def clear(self) -> None:
        pass

    def on_edge_drawn(self, edge: graph.Edge, pos1: _V, pos2: _V) -> None:
        pass

    def on_node_drawn(self, node: graph.Node, pos: _V) -> None:
        self._positions[node.id] = pos
