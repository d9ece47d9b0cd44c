# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pathlib

import pytest

from forcelayout import exceptions, physics, renderer, svg
from forcelayout.graph import Edge, Graph, Node
from forcelayout.vector import Vector2D

TIMESTEP = 0.05


class RecordingRenderer(renderer.AbstractRenderer[Vector2D]):
    def __init__(self, engine):
        super().__init__(engine)
        self.edges: list[tuple[str, Vector2D, Vector2D]] = []
        self.nodes: list[tuple[str, Vector2D]] = []

    def clear(self):
        self.edges.clear()
        self.nodes.clear()

    def on_edge_drawn(self, edge: Edge, pos1: Vector2D, pos2: Vector2D):
        self.edges.append((edge.id, pos1, pos2))

    def on_node_drawn(self, node: Node, pos: Vector2D):
        self.nodes.append((node.id, pos))


@pytest.fixture
def engine(chain: Graph) -> physics.ForceDirected2D:
    return physics.ForceDirected2D(chain, 81.76, 40000.0, 0.5, seed=0)


def test_AbstractRenderer_cannot_be_instantiated(engine):
    with pytest.raises(TypeError):
        renderer.AbstractRenderer(engine)  # type: ignore[abstract]


def test_draw_reports_every_edge_and_node_once_per_step(engine):
    r = RecordingRenderer(engine)

    r.draw(TIMESTEP)
    r.draw(TIMESTEP)

    assert [e[0] for e in r.edges] == ["A->B", "B->C"] * 2
    assert [n[0] for n in r.nodes] == ["A", "B", "C"] * 2


def test_draw_reports_positions_after_the_step(engine):
    r = RecordingRenderer(engine)
    before = {n.id: engine.point_for(n).position for n in engine.graph}

    r.draw(TIMESTEP)

    for node_id, pos in r.nodes:
        assert pos == engine.point_for(node_id).position
        assert pos != before[node_id]


def test_edge_hooks_receive_the_endpoint_positions(engine):
    r = RecordingRenderer(engine)

    r.draw(TIMESTEP)

    edge_id, pos1, pos2 = r.edges[0]
    assert edge_id == "A->B"
    assert pos1 == engine.point_for("A").position
    assert pos2 == engine.point_for("B").position


def test_refresh_reports_positions_without_a_step(engine):
    r = RecordingRenderer(engine)
    before = [p.position for _, p in engine.iter_nodes()]

    r.refresh()

    assert [pos for _, pos in r.nodes] == before
    assert [e[0] for e in r.edges] == ["A->B", "B->C"]
    assert [p.position for _, p in engine.iter_nodes()] == before


def test_clear_does_not_touch_the_engine(engine):
    r = RecordingRenderer(engine)
    r.draw(TIMESTEP)
    positions = [p.position for _, p in engine.iter_nodes()]

    r.clear()

    assert not r.nodes
    assert [p.position for _, p in engine.iter_nodes()] == positions


def test_NullRenderer_records_the_latest_positions(engine):
    r = renderer.NullRenderer(engine)

    for _ in range(3):
        r.draw(TIMESTEP)

    assert set(r.positions) == {"A", "B", "C"}
    for node_id, pos in r.positions.items():
        assert pos == engine.point_for(node_id).position
        assert r.position_by_id(node_id) == pos


def test_NullRenderer_positions_is_a_snapshot(engine):
    r = renderer.NullRenderer(engine)
    r.draw(TIMESTEP)

    snapshot = r.positions
    r.draw(TIMESTEP)

    assert snapshot["A"] != r.positions["A"]


def test_NullRenderer_raises_UnknownNodeError_before_drawing(engine):
    r = renderer.NullRenderer(engine)

    with pytest.raises(exceptions.UnknownNodeError):
        r.position_by_id("A")


def test_SVGRenderer_draws_one_shape_per_node_and_edge(engine):
    r = svg.SVGRenderer(engine)
    for _ in range(10):
        r.draw(TIMESTEP)

    source = r.to_string()

    assert source.count("<circle") == 3
    assert source.count("<line") == 2
    assert source.count("<text") == 3
    assert "viewBox" in source


def test_SVGRenderer_uses_node_labels():
    g = Graph()
    g.add_node("A")
    g.add_edge("A", "B", create_missing=True)
    g.get_node("B").data.label = "Beta"
    engine = physics.ForceDirected2D(g, 81.76, 40000.0, 0.5, seed=0)
    r = svg.SVGRenderer(engine)

    r.draw(TIMESTEP)

    source = r.to_string()
    assert ">Beta<" in source
    assert ">A<" in source


def test_SVGRenderer_can_omit_labels(engine):
    r = svg.SVGRenderer(engine, labels=False)
    r.draw(TIMESTEP)

    assert "<text" not in r.to_string()


def test_SVGRenderer_clear_empties_the_frame(engine):
    r = svg.SVGRenderer(engine)
    r.draw(TIMESTEP)

    r.clear()

    source = r.to_string()
    assert "<circle" not in source
    assert "<line" not in source


def test_SVGRenderer_save_as_writes_a_file(
    engine, tmp_path: pathlib.Path
):
    r = svg.SVGRenderer(engine)
    r.draw(TIMESTEP)
    path = tmp_path / "layout.svg"

    r.save_as(path)

    content = path.read_text(encoding="utf-8")
    assert content.startswith("<?xml")
    assert content.count("<circle") == 3
