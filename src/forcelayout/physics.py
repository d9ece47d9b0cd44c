# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""The physical model behind the force-directed layout.

Every node of the graph is represented by a :class:`Point` with a
position, velocity and accumulated force. Edges act as springs
following Hooke's law, while all pairs of nodes repel each other
following an inverse-square law. A damped, explicit time step then
moves the points a little closer to an equilibrium.

The engine never decides on its own when it is done. Callers advance
it by calling :meth:`ForceDirected.apply_force` as often as their
iteration budget allows.
"""

from __future__ import annotations

__all__ = [
    "MIN_DISTANCE",
    "ForceDirected",
    "ForceDirected2D",
    "Point",
    "Spring",
]

import collections.abc as cabc
import dataclasses
import logging
import math
import random
import typing as t

import typing_extensions as te

from forcelayout import exceptions
from forcelayout import graph as _graph
from forcelayout import vector

LOGGER = logging.getLogger(__name__)

MIN_DISTANCE = 0.1
"""Lower bound for distances in the repulsion pass."""

_V = t.TypeVar("_V", bound=vector.AbstractVector)


@dataclasses.dataclass
class Point(t.Generic[_V]):
    """Simulation state of a single node."""

    position: _V
    velocity: _V
    force: _V
    mass: float = 1.0
    pinned: bool = False
    """Pinned points still receive forces, but never move."""

    def __post_init__(self) -> None:
        if not (math.isfinite(self.mass) and self.mass > 0):
            raise exceptions.InvalidParameterError(
                f"Point mass must be positive and finite, got {self.mass!r}"
            )

    def apply_force(self, force: _V) -> None:
        self.force = self.force + force

    @property
    def kinetic_energy(self) -> float:
        return 0.5 * self.mass * self.velocity.length**2


@dataclasses.dataclass
class Spring(t.Generic[_V]):
    point1: Point[_V]
    point2: Point[_V]
    length: float
    stiffness: float


class ForceDirected(t.Generic[_V]):
    """Force-directed layout of a :class:`~forcelayout.graph.Graph`.

    Parameters
    ----------
    graph
        The graph to lay out. Nodes and edges may be added or removed
        between two steps.
    stiffness
        Spring constant of the edges.
    repulsion
        Strength of the repulsion between any two nodes.
    damping
        Factor in the range [0, 1] that the velocity of every point is
        multiplied with after each step.
    vector_type
        The vector class used for positions. Subclasses may set it as
        a class attribute instead.
    centre_attraction
        Strength of an additional pull of every node towards the
        origin. Disabled by default.
    threshold
        Total kinetic energy below which :attr:`within_threshold` is
        set after a step. Purely informational.
    seed
        Seed for the random number generator, which places nodes
        without initial position and separates coincident nodes.
    spawn_bounds
        Lower and upper bound of every coordinate of randomly placed
        nodes.

    Raises
    ------
    InvalidParameterError
        If any of the tuning parameters is out of range.
    """

    vector_type: type[_V]

    def __init__(
        self,
        graph: _graph.Graph,
        stiffness: float,
        repulsion: float,
        damping: float,
        *,
        vector_type: type[_V] | None = None,
        centre_attraction: float = 0.0,
        threshold: float = 0.01,
        seed: int | None = None,
        spawn_bounds: tuple[float, float] = (-5.0, 5.0),
    ) -> None:
        if vector_type is not None:
            self.vector_type = vector_type
        elif not hasattr(self, "vector_type"):
            raise TypeError("No vector_type given")

        _check_non_negative("stiffness", stiffness)
        _check_non_negative("repulsion", repulsion)
        _check_non_negative("centre_attraction", centre_attraction)
        _check_non_negative("threshold", threshold)
        if not (_is_real(damping) and 0 <= damping <= 1):
            raise exceptions.InvalidParameterError(
                f"damping must be in [0, 1], got {damping!r}"
            )
        lower, upper = spawn_bounds
        if not all(_is_real(i) and math.isfinite(i) for i in spawn_bounds) or (
            lower > upper
        ):
            raise exceptions.InvalidParameterError(
                f"Invalid spawn bounds: {spawn_bounds!r}"
            )

        self.graph = graph
        self.stiffness = stiffness
        self.repulsion = repulsion
        self.damping = damping
        self.centre_attraction = centre_attraction
        self.threshold = threshold
        self.spawn_bounds = (lower, upper)
        self.within_threshold = False

        self._rng = random.Random(seed)
        self._points: list[Point[_V]] = []
        self._handles: dict[str, int] = {}
        self._free: list[int] = []
        self._springs: dict[str, Spring[_V]] = {}

        graph.add_listener(self._on_graph_changed)
        LOGGER.debug(
            "Created %s for %r (stiffness=%s, repulsion=%s, damping=%s)",
            type(self).__name__,
            graph,
            stiffness,
            repulsion,
            damping,
        )

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} stiffness={self.stiffness}"
            f" repulsion={self.repulsion} damping={self.damping}"
            f" points={len(self._handles)}>"
        )

    def __enter__(self) -> te.Self:
        return self

    def __exit__(self, *_: t.Any) -> None:
        self.close()

    def close(self) -> None:
        """Detach the engine from its graph.

        Afterwards the engine no longer notices removed nodes and
        edges, so it should only be used to read the final positions.
        """
        self.graph.remove_listener(self._on_graph_changed)

    def _on_graph_changed(self, graph: _graph.Graph) -> None:
        for node_id in [i for i in self._handles if i not in graph]:
            self._free.append(self._handles.pop(node_id))
        edge_ids = {i.id for i in graph.edges}
        for edge_id in [i for i in self._springs if i not in edge_ids]:
            del self._springs[edge_id]

    def handle_of(self, node: _graph.Node | str) -> int:
        """Return the arena index of a node's point.

        The index stays the same as long as the node is part of the
        graph. Indices of removed nodes are handed out again.
        """
        node_id = node if isinstance(node, str) else node.id
        if node_id not in self._handles:
            self.point_for(node_id)
        return self._handles[node_id]

    def point_for(self, node: _graph.Node | str) -> Point[_V]:
        """Return the point of a node, creating it on first access.

        New points are placed at the node's initial position, or at a
        random position within :attr:`spawn_bounds` if it has none.

        Raises
        ------
        UnknownNodeError
            If ``node`` is an ID that is not part of the graph.
        """
        if isinstance(node, str):
            node = self.graph.get_node(node)

        try:
            return self._points[self._handles[node.id]]
        except KeyError:
            pass

        position = node.data.initial_position
        if position is None:
            position = self.vector_type.random(*self.spawn_bounds, self._rng)
        point = Point(
            position=t.cast(_V, position),
            velocity=self.vector_type.zero(),
            force=self.vector_type.zero(),
            mass=node.data.mass,
            pinned=node.data.pinned,
        )
        if self._free:
            handle = self._free.pop()
            self._points[handle] = point
        else:
            handle = len(self._points)
            self._points.append(point)
        self._handles[node.id] = handle
        return point

    def spring_for(self, edge: _graph.Edge) -> Spring[_V]:
        """Return the spring along an edge, creating it on first access."""
        try:
            return self._springs[edge.id]
        except KeyError:
            pass

        spring = Spring(
            self.point_for(edge.source),
            self.point_for(edge.target),
            length=edge.data.length,
            stiffness=self.stiffness,
        )
        self._springs[edge.id] = spring
        return spring

    def iter_nodes(self) -> cabc.Iterator[tuple[_graph.Node, Point[_V]]]:
        for node in self.graph:
            yield node, self.point_for(node)

    def iter_edges(self) -> cabc.Iterator[tuple[_graph.Edge, Spring[_V]]]:
        for edge in self.graph.edges:
            yield edge, self.spring_for(edge)

    def _active_points(self) -> list[Point[_V]]:
        return [self.point_for(i) for i in self.graph]

    def _direction(self, delta: _V) -> _V:
        try:
            return delta.normalized
        except exceptions.DegenerateVectorError:
            return self.vector_type.random_direction(self._rng)

    def reset_forces(self) -> None:
        for point in self._active_points():
            point.force = self.vector_type.zero()

    def apply_hookes_law(self) -> None:
        """Pull the endpoints of every edge towards its rest length."""
        for _, spring in self.iter_edges():
            delta = spring.point2.position - spring.point1.position
            direction = self._direction(delta)
            force = direction * (
                spring.stiffness * (delta.length - spring.length)
            )
            spring.point1.apply_force(force)
            spring.point2.apply_force(force * -1)

    def apply_coulombs_law(self) -> None:
        """Push every pair of distinct nodes apart."""
        points = self._active_points()
        for i, point1 in enumerate(points):
            for point2 in points[i + 1 :]:
                delta = point2.position - point1.position
                distance = max(delta.length, MIN_DISTANCE)
                direction = self._direction(delta)
                force = direction * (-self.repulsion / distance**2)
                point1.apply_force(force)
                point2.apply_force(force * -1)

    def attract_to_centre(self) -> None:
        for point in self._active_points():
            point.apply_force(point.position * -self.centre_attraction)

    def update_velocity(self, timestep: float) -> None:
        for point in self._active_points():
            if point.pinned:
                continue
            acceleration = point.force / point.mass
            point.velocity = (
                point.velocity + acceleration * timestep
            ) * self.damping

    def update_position(self, timestep: float) -> None:
        for point in self._active_points():
            if point.pinned:
                continue
            point.position = point.position + point.velocity * timestep

    def apply_force(self, timestep: float) -> None:
        """Advance the simulation by one time step.

        Raises
        ------
        InvalidParameterError
            If ``timestep`` is not a positive number.
        """
        if not (
            _is_real(timestep) and math.isfinite(timestep) and timestep > 0
        ):
            raise exceptions.InvalidParameterError(
                f"timestep must be positive, got {timestep!r}"
            )

        self.reset_forces()
        self.apply_hookes_law()
        self.apply_coulombs_law()
        if self.centre_attraction:
            self.attract_to_centre()
        self.update_velocity(timestep)
        self.update_position(timestep)
        energy = self.total_energy()
        self.within_threshold = energy < self.threshold
        LOGGER.debug(
            "Step of %s finished, total energy %.4g", timestep, energy
        )

    def total_energy(self) -> float:
        """Calculate the total kinetic energy of all points."""
        return sum(i.kinetic_energy for i in self._active_points())

    def nearest(
        self, position: _V
    ) -> tuple[_graph.Node, Point[_V]] | None:
        """Find the node closest to ``position``."""
        return min(
            self.iter_nodes(),
            key=lambda i: (i[1].position - position).length,
            default=None,
        )


class ForceDirected2D(ForceDirected[vector.Vector2D]):
    """Force-directed layout in two dimensions."""

    vector_type = vector.Vector2D

    def bounding_box(
        self, padding: float = 0.07
    ) -> tuple[vector.Vector2D, vector.Vector2D]:
        """Calculate the box enclosing all points.

        The box always encloses the area from (-2, -2) to (2, 2) and is
        grown by ``padding`` times its size on every side.

        Returns
        -------
        tuple[Vector2D, Vector2D]
            The top left and bottom right corners.
        """
        topleft = vector.Vector2D(-2.0, -2.0)
        bottomright = vector.Vector2D(2.0, 2.0)
        for _, point in self.iter_nodes():
            x, y = point.position
            topleft = vector.Vector2D(min(topleft.x, x), min(topleft.y, y))
            bottomright = vector.Vector2D(
                max(bottomright.x, x), max(bottomright.y, y)
            )
        margin = (bottomright - topleft) * padding
        return topleft - margin, bottomright + margin


def _is_real(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_non_negative(name: str, value: float) -> None:
    if not (_is_real(value) and math.isfinite(value) and value >= 0):
        raise exceptions.InvalidParameterError(
            f"{name} must be a non-negative number, got {value!r}"
        )
