# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""High level functions to lay out a diagram.

A typical layout pass mirrors the diagram's shapes and connections in a
:class:`~forcelayout.graph.Graph`, runs the simulation for a fixed
number of iterations and writes the resulting positions back onto the
shapes:

.. code-block:: python

   graph = build_graph([s.uuid for s in shapes], connections)
   positions = compute_layout(graph, LayoutConfig(seed=0))
   apply_layout(shapes, positions, margin=10)
"""

from __future__ import annotations

__all__ = [
    "LayoutConfig",
    "LayoutTarget",
    "apply_layout",
    "build_graph",
    "compute_layout",
    "run",
]

import collections.abc as cabc
import dataclasses
import logging
import math
import os
import sys
import time
import typing as t

from forcelayout import exceptions, graph, physics, renderer, vector

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class LayoutConfig:
    """Tuning constants and iteration budget of a layout pass."""

    stiffness: float = 81.76
    repulsion: float = 40000.0
    damping: float = 0.5
    iterations: int = 10000
    timestep: float = 0.05
    seed: int | None = None
    centre_attraction: float = 0.0
    energy_threshold: float | None = None
    """Stop early once the total kinetic energy falls below this value."""
    max_seconds: float | None = None
    """Wall-clock cap for a single layout pass."""

    def __post_init__(self) -> None:
        for name in ("stiffness", "repulsion", "centre_attraction"):
            value = getattr(self, name)
            if not (_is_real(value) and math.isfinite(value) and value >= 0):
                raise exceptions.InvalidParameterError(
                    f"{name} must be a non-negative number, got {value!r}"
                )
        if not (_is_real(self.damping) and 0 <= self.damping <= 1):
            raise exceptions.InvalidParameterError(
                f"damping must be in [0, 1], got {self.damping!r}"
            )
        if not (
            _is_real(self.timestep)
            and math.isfinite(self.timestep)
            and self.timestep > 0
        ):
            raise exceptions.InvalidParameterError(
                f"timestep must be positive, got {self.timestep!r}"
            )
        if not (_is_int(self.iterations) and self.iterations >= 0):
            raise exceptions.InvalidParameterError(
                "iterations must be a non-negative integer,"
                f" got {self.iterations!r}"
            )
        if self.seed is not None and not _is_int(self.seed):
            raise exceptions.InvalidParameterError(
                f"seed must be an integer, got {self.seed!r}"
            )
        for name in ("energy_threshold", "max_seconds"):
            value = getattr(self, name)
            if value is not None and not (_is_real(value) and value > 0):
                raise exceptions.InvalidParameterError(
                    f"{name} must be positive, got {value!r}"
                )

    @classmethod
    def from_mapping(cls, data: cabc.Mapping[str, t.Any]) -> LayoutConfig:
        """Create a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in dataclasses.fields(cls)}
        if unknown := set(data) - known:
            raise exceptions.InvalidParameterError(
                f"Unknown layout options: {', '.join(sorted(unknown))}"
            )
        return cls(**data)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str]) -> LayoutConfig:
        """Load a config from a TOML file.

        The options may either be at the top level of the file, or in a
        ``[forcelayout]`` table.
        """
        with open(path, "rb") as f:
            data = tomllib.load(f)
        data = data.get("forcelayout", data)
        if not isinstance(data, dict):
            raise exceptions.InvalidParameterError(
                "The [forcelayout] entry must be a table"
            )
        return cls.from_mapping(data)

    def replace(self, **changes: t.Any) -> LayoutConfig:
        """Return a copy with ``changes`` applied, ignoring None values."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return dataclasses.replace(self, **changes)


class LayoutTarget(t.Protocol):
    """A shape whose position can be updated from a layout result."""

    uuid: str
    pos: t.Any


def build_graph(
    shapes: cabc.Iterable[str] | cabc.Mapping[str, vector.Vec2ish | None],
    connections: cabc.Iterable[tuple[str, str]] = (),
    *,
    create_missing: bool = False,
) -> graph.Graph:
    """Build a graph mirroring a diagram.

    Parameters
    ----------
    shapes
        The identifiers of the diagram's shapes. If a mapping is given,
        its values are used as initial positions.
    connections
        Ordered pairs of shape identifiers. Each pair becomes an edge,
        identified by the pair itself.
    create_missing
        Create nodes for connection endpoints that are not among
        ``shapes``. By default these raise an error.

    Raises
    ------
    UnknownNodeError
        If a connection references an unknown shape and
        ``create_missing`` is False.
    """
    g = graph.Graph()
    if isinstance(shapes, cabc.Mapping):
        for shape_id, position in shapes.items():
            g.add_node(shape_id, graph.NodeData(initial_position=position))
    else:
        for shape_id in shapes:
            g.add_node(shape_id)

    for source, target in connections:
        g.add_edge(source, target, create_missing=create_missing)
    return g


def compute_layout(
    g: graph.Graph, config: LayoutConfig | None = None
) -> dict[str, vector.Vector2D]:
    """Run a layout pass and return the final position of every node.

    The simulation runs for ``config.iterations`` steps, unless the
    optional energy threshold or wall-clock cap end it earlier.
    """
    if config is None:
        config = LayoutConfig()

    with physics.ForceDirected2D(
        g,
        config.stiffness,
        config.repulsion,
        config.damping,
        centre_attraction=config.centre_attraction,
        seed=config.seed,
    ) as engine:
        null_renderer = renderer.NullRenderer(engine)
        run(null_renderer, config)
    return dict(null_renderer.positions)


def run(
    r: renderer.AbstractRenderer[t.Any], config: LayoutConfig
) -> int:
    """Draw ``r`` repeatedly as configured and return the step count.

    With a budget of zero iterations, the initial positions are
    reported to ``r`` once without advancing the engine.
    """
    deadline = None
    if config.max_seconds is not None:
        deadline = time.monotonic() + config.max_seconds

    steps = 0
    for steps in range(1, config.iterations + 1):
        r.draw(config.timestep)
        if (
            config.energy_threshold is not None
            and r.engine.total_energy() < config.energy_threshold
        ):
            LOGGER.debug("Energy threshold reached after %d steps", steps)
            break
        if deadline is not None and time.monotonic() > deadline:
            LOGGER.warning(
                "Layout stopped after %d of %d iterations (%.1fs limit)",
                steps,
                config.iterations,
                config.max_seconds,
            )
            break
    if not steps:
        r.refresh()

    LOGGER.info(
        "Laid out %d nodes in %d steps, remaining energy %.4g",
        len(r.engine.graph),
        steps,
        r.engine.total_energy(),
    )
    return steps


def apply_layout(
    targets: cabc.Iterable[LayoutTarget],
    positions: cabc.Mapping[str, vector.Vector2D],
    *,
    margin: float | None = None,
) -> None:
    """Move shapes to their computed positions.

    Positions are rounded to integer coordinates. Targets without a
    computed position are left untouched.

    Parameters
    ----------
    targets
        Shapes with a ``uuid`` and a writable ``pos``.
    positions
        The result of :func:`compute_layout`.
    margin
        If given, translate all positions so that the top left corner
        of the layout lies at ``(margin, margin)``.
    """
    offset = vector.Vector2D(0, 0)
    if margin is not None and positions:
        minx = min(p.x for p in positions.values())
        miny = min(p.y for p in positions.values())
        offset = vector.Vector2D(margin - minx, margin - miny)

    for target in targets:
        try:
            pos = positions[target.uuid]
        except KeyError:
            LOGGER.debug("No position computed for %r", target.uuid)
            continue
        pos = pos + offset
        target.pos = vector.Vector2D(int(pos.x), int(pos.y))


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
