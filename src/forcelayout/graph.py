# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""The abstract graph that is being laid out.

Nodes and edges are identified by string keys. The graph keeps an
incidence index, so that every edge's endpoints are guaranteed to be
part of the node set at all times.
"""

from __future__ import annotations

__all__ = [
    "Edge",
    "EdgeData",
    "Graph",
    "GraphListener",
    "Node",
    "NodeData",
]

import collections.abc as cabc
import dataclasses
import logging
import math
import typing as t

from forcelayout import exceptions, vector

LOGGER = logging.getLogger(__name__)

GraphListener = t.Callable[["Graph"], None]


@dataclasses.dataclass
class NodeData:
    """Per-node simulation inputs and free-form metadata."""

    label: str = ""
    mass: float = 1.0
    initial_position: vector.AbstractVector | None = None
    pinned: bool = False
    payload: dict[str, t.Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        if not (
            isinstance(self.mass, (int, float))
            and math.isfinite(self.mass)
            and self.mass > 0
        ):
            raise exceptions.InvalidParameterError(
                f"Node mass must be positive and finite, got {self.mass!r}"
            )

        position = self.initial_position
        if type(position) in (tuple, list):
            position = t.cast(t.Sequence[t.Any], position)
            if len(position) != 2 or not all(
                isinstance(i, (int, float)) for i in position
            ):
                raise exceptions.InvalidParameterError(
                    f"Initial position must be two numbers, got {position!r}"
                )
            position = self.initial_position = vector.Vector2D(*position)
        if position is not None and not math.isfinite(position.length):
            raise exceptions.InvalidParameterError(
                f"Initial position must be finite, got {position!r}"
            )


@dataclasses.dataclass
class EdgeData:
    """Per-edge spring parameters and free-form metadata."""

    length: float = 1.0
    """Rest length of the spring along this edge."""
    label: str = ""
    payload: dict[str, t.Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        if not (
            isinstance(self.length, (int, float))
            and math.isfinite(self.length)
            and self.length >= 0
        ):
            raise exceptions.InvalidParameterError(
                f"Edge length must be non-negative, got {self.length!r}"
            )


@dataclasses.dataclass(frozen=True)
class Node:
    id: str
    data: NodeData = dataclasses.field(
        default_factory=NodeData, compare=False
    )


@dataclasses.dataclass(frozen=True)
class Edge:
    id: str
    source: str = dataclasses.field(compare=False)
    target: str = dataclasses.field(compare=False)
    directed: bool = dataclasses.field(default=False, compare=False)
    data: EdgeData = dataclasses.field(
        default_factory=EdgeData, compare=False
    )

    @staticmethod
    def default_id(source: str, target: str) -> str:
        return f"{source}->{target}"


class Graph:
    """A mutable collection of nodes and edges."""

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}
        self._edges: dict[str, Edge] = {}
        self._incident: dict[str, dict[str, Edge]] = {}
        self._listeners: list[GraphListener] = []

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> cabc.Iterator[Node]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} with {len(self._nodes)} nodes"
            f" and {len(self._edges)} edges>"
        )

    @property
    def nodes(self) -> cabc.Sequence[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> cabc.Sequence[Edge]:
        return list(self._edges.values())

    def add_listener(self, listener: GraphListener) -> None:
        """Register a callback that is notified after every change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: GraphListener) -> None:
        """Unregister a callback added with :meth:`add_listener`.

        Raises
        ------
        ValueError
            If the callback was not registered.
        """
        self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)

    def add_node(self, node_id: str, data: NodeData | None = None) -> Node:
        """Add a node to the graph.

        Adding a node with an id that already exists returns the
        existing node unchanged, and ``data`` is ignored.
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            pass

        node = Node(node_id, data if data is not None else NodeData())
        self._nodes[node_id] = node
        self._incident[node_id] = {}
        self._notify()
        return node

    def get_node(self, node_id: str) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise exceptions.UnknownNodeError(node_id) from None

    def add_edge(
        self,
        source: str,
        target: str,
        *,
        id: str | None = None,
        data: EdgeData | None = None,
        directed: bool = False,
        create_missing: bool = False,
    ) -> Edge:
        """Connect two nodes.

        Parameters
        ----------
        source
            ID of the source node.
        target
            ID of the target node.
        id
            The edge's ID. Defaults to an ID derived from the ordered
            pair of endpoints, which means that adding a second edge
            between the same pair is a no-op unless a distinct ID is
            given.
        data
            Rest length and metadata of the edge.
        directed
            Only informational, the forces along an edge are symmetric.
        create_missing
            Create endpoints that are not yet part of the graph instead
            of raising an error.

        Raises
        ------
        UnknownNodeError
            If either endpoint is not part of the graph and
            ``create_missing`` is False.
        ValueError
            If an edge with the same ID but different endpoints exists.
        """
        if id is None:
            id = Edge.default_id(source, target)

        if existing := self._edges.get(id):
            if (existing.source, existing.target) != (source, target):
                raise ValueError(
                    f"Edge {id!r} already connects {existing.source!r}"
                    f" and {existing.target!r}"
                )
            return existing

        for endpoint in (source, target):
            if endpoint in self._nodes:
                continue
            if not create_missing:
                raise exceptions.UnknownNodeError(endpoint)
            LOGGER.debug("Creating missing endpoint %r", endpoint)
            self.add_node(endpoint)

        edge = Edge(
            id,
            source,
            target,
            directed=directed,
            data=data if data is not None else EdgeData(),
        )
        self._edges[id] = edge
        self._incident[source][id] = edge
        self._incident[target][id] = edge
        self._notify()
        return edge

    def get_edge(self, edge_id: str) -> Edge:
        return self._edges[edge_id]

    def get_edges(self, node_id: str) -> cabc.Iterator[Edge]:
        """Iterate over all edges incident to a node.

        Both incoming and outgoing edges are reported, self-loops only
        once. Unknown IDs yield nothing.
        """
        yield from self._incident.get(node_id, {}).values()

    def get_edges_between(self, source: str, target: str) -> list[Edge]:
        return [
            i
            for i in self.get_edges(source)
            if i.source == source and i.target == target
        ]

    def remove_edge(self, edge_id: str) -> None:
        edge = self._edges.pop(edge_id)
        self._incident[edge.source].pop(edge_id, None)
        self._incident[edge.target].pop(edge_id, None)
        self._notify()

    def detach_node(self, node_id: str) -> None:
        """Remove all edges incident to a node, but keep the node."""
        if node_id not in self._nodes:
            raise exceptions.UnknownNodeError(node_id)
        for edge_id in list(self._incident[node_id]):
            self.remove_edge(edge_id)

    def remove_node(self, node_id: str) -> None:
        """Remove a node and all edges incident to it."""
        self.detach_node(node_id)
        del self._nodes[node_id]
        del self._incident[node_id]
        self._notify()

    def clear(self) -> None:
        self._nodes.clear()
        self._edges.clear()
        self._incident.clear()
        self._notify()

    def merge(self, other: Graph) -> None:
        """Copy all nodes and edges of ``other`` into this graph.

        Nodes and edges whose IDs already exist are left untouched.
        """
        for node in other:
            self.add_node(node.id, node.data)
        for edge in other.edges:
            self.add_edge(
                edge.source,
                edge.target,
                id=edge.id,
                data=edge.data,
                directed=edge.directed,
            )

    def filter_nodes(self, predicate: cabc.Callable[[Node], bool]) -> None:
        """Remove every node for which ``predicate`` returns False."""
        for node in self.nodes:
            if not predicate(node):
                self.remove_node(node.id)

    def filter_edges(self, predicate: cabc.Callable[[Edge], bool]) -> None:
        """Remove every edge for which ``predicate`` returns False."""
        for edge in self.edges:
            if not predicate(edge):
                self.remove_edge(edge.id)
