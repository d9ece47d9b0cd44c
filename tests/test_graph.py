# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import collections.abc as cabc

import pytest

import forcelayout
from forcelayout import exceptions
from forcelayout.graph import EdgeData, Graph, NodeData


def test_adding_an_existing_node_returns_it_unchanged():
    g = Graph()
    first = g.add_node("A", NodeData(mass=2.0))

    second = g.add_node("A", NodeData(mass=5.0))

    assert second is first
    assert second.data.mass == 2.0
    assert len(g) == 1


def test_nodes_are_identified_by_their_id():
    g = Graph()
    node = g.add_node("A", NodeData(label="Alpha"))

    assert node == forcelayout.Node("A")
    assert "A" in g
    assert "B" not in g
    assert g.get_node("A") is node


def test_get_node_raises_UnknownNodeError_for_missing_ids():
    with pytest.raises(exceptions.UnknownNodeError):
        Graph().get_node("nope")


@pytest.mark.parametrize(
    ["source", "target"],
    [
        pytest.param("A", "Z", id="unknown target"),
        pytest.param("Z", "A", id="unknown source"),
        pytest.param("Y", "Z", id="both unknown"),
    ],
)
def test_add_edge_raises_UnknownNodeError_for_missing_endpoints(
    source: str, target: str
):
    g = Graph()
    g.add_node("A")

    with pytest.raises(exceptions.UnknownNodeError):
        g.add_edge(source, target)

    assert not g.edges
    assert len(g) == 1


def test_UnknownNodeError_is_a_KeyError():
    g = Graph()

    with pytest.raises(KeyError):
        g.add_edge("A", "B")


def test_add_edge_creates_missing_endpoints_on_request():
    g = Graph()
    g.add_node("A")

    edge = g.add_edge("A", "B", create_missing=True)

    assert "B" in g
    assert edge.source == "A"
    assert edge.target == "B"


def test_edges_between_the_same_pair_collapse_without_explicit_ids(
    chain: Graph,
):
    edge = chain.add_edge("A", "B")

    assert edge is chain.get_edge("A->B")
    assert len(chain.edges) == 2


def test_edges_with_distinct_ids_between_the_same_pair_coexist(
    chain: Graph,
):
    chain.add_edge("A", "B", id="second")

    assert len(chain.get_edges_between("A", "B")) == 2
    assert chain.get_edges_between("B", "A") == []


def test_reusing_an_edge_id_for_other_endpoints_raises_ValueError(
    chain: Graph,
):
    with pytest.raises(ValueError, match="already connects"):
        chain.add_edge("A", "C", id="A->B")


def test_get_edges_reports_incoming_and_outgoing_edges(chain: Graph):
    edges = chain.get_edges("B")

    assert isinstance(edges, cabc.Iterator)
    assert sorted(e.id for e in edges) == ["A->B", "B->C"]
    assert [e.id for e in chain.get_edges("A")] == ["A->B"]


def test_get_edges_reports_self_loops_once():
    g = Graph()
    g.add_node("A")
    g.add_edge("A", "A")

    assert len(list(g.get_edges("A"))) == 1


def test_get_edges_for_unknown_ids_is_empty(chain: Graph):
    assert list(chain.get_edges("nope")) == []


def test_removing_a_node_removes_all_incident_edges(chain: Graph):
    chain.remove_node("B")

    assert "B" not in chain
    assert list(chain.get_edges("B")) == []
    assert list(chain.get_edges("A")) == []
    assert list(chain.get_edges("C")) == []
    assert not chain.edges


def test_every_edge_endpoint_stays_in_the_node_set(chain: Graph):
    chain.add_node("D")
    chain.add_edge("D", "A")
    chain.add_edge("C", "D")

    chain.remove_node("A")

    for edge in chain.edges:
        assert edge.source in chain
        assert edge.target in chain


def test_remove_node_raises_UnknownNodeError_for_missing_ids(chain: Graph):
    with pytest.raises(exceptions.UnknownNodeError):
        chain.remove_node("nope")


def test_detach_node_keeps_the_node(chain: Graph):
    chain.detach_node("B")

    assert "B" in chain
    assert not chain.edges


def test_remove_edge_keeps_the_endpoints(chain: Graph):
    chain.remove_edge("A->B")

    assert len(chain) == 3
    assert [e.id for e in chain.edges] == ["B->C"]


def test_merge_copies_nodes_and_edges(chain: Graph):
    other = Graph()
    other.add_node("C")
    other.add_node("D")
    other.add_edge("C", "D", data=EdgeData(length=3.0))

    chain.merge(other)

    assert [n.id for n in chain] == ["A", "B", "C", "D"]
    assert chain.get_edge("C->D").data.length == 3.0


def test_filter_nodes_cascades_to_edges(chain: Graph):
    chain.filter_nodes(lambda n: n.id != "C")

    assert [n.id for n in chain] == ["A", "B"]
    assert [e.id for e in chain.edges] == ["A->B"]


def test_filter_edges_keeps_all_nodes(chain: Graph):
    chain.filter_edges(lambda e: e.source == "A")

    assert len(chain) == 3
    assert [e.id for e in chain.edges] == ["A->B"]


def test_clear_removes_everything(chain: Graph):
    chain.clear()

    assert len(chain) == 0
    assert not chain.edges


def test_listeners_are_notified_about_changes():
    g = Graph()
    calls: list[Graph] = []
    g.add_listener(calls.append)

    g.add_node("A")
    g.add_node("A")
    g.add_node("B")
    g.add_edge("A", "B")
    g.remove_node("B")

    assert calls == [g] * 5


def test_cycles_and_disconnected_components_are_allowed():
    g = forcelayout.build_graph(
        ["A", "B", "C", "D"], [("A", "B"), ("B", "C"), ("C", "A")]
    )

    assert len(g.edges) == 3
    assert list(g.get_edges("D")) == []


@pytest.mark.parametrize("mass", [0, -1.0, float("nan"), float("inf")])
def test_invalid_node_mass_raises_InvalidParameterError(mass: float):
    with pytest.raises(exceptions.InvalidParameterError):
        NodeData(mass=mass)


def test_negative_edge_length_raises_InvalidParameterError():
    with pytest.raises(exceptions.InvalidParameterError):
        EdgeData(length=-1)


def test_initial_positions_are_converted_to_vectors():
    data = NodeData(initial_position=(1, 2))

    assert isinstance(data.initial_position, forcelayout.Vector2D)
    assert data.initial_position == (1, 2)


@pytest.mark.parametrize(
    "position",
    [
        pytest.param((float("nan"), 0), id="nan x"),
        pytest.param((0, float("inf")), id="infinite y"),
        pytest.param(forcelayout.Vector2D(float("nan"), 1), id="nan vector"),
    ],
)
def test_non_finite_initial_positions_raise_InvalidParameterError(position):
    with pytest.raises(exceptions.InvalidParameterError, match="finite"):
        NodeData(initial_position=position)


@pytest.mark.parametrize(
    "position",
    [
        pytest.param((5,), id="one component"),
        pytest.param([1, 2, 3], id="three components"),
        pytest.param(("1", "2"), id="strings"),
    ],
)
def test_malformed_initial_positions_raise_InvalidParameterError(position):
    with pytest.raises(exceptions.InvalidParameterError, match="two numbers"):
        NodeData(initial_position=position)


def test_failed_edge_id_collision_does_not_create_endpoints(chain: Graph):
    with pytest.raises(ValueError, match="already connects"):
        chain.add_edge("X", "Y", id="A->B", create_missing=True)

    assert [n.id for n in chain] == ["A", "B", "C"]


def test_removed_listeners_are_no_longer_notified():
    g = Graph()
    calls: list[Graph] = []
    g.add_listener(calls.append)

    g.add_node("A")
    g.remove_listener(calls.append)
    g.add_node("B")

    assert calls == [g]


def test_removing_an_unknown_listener_raises_ValueError():
    with pytest.raises(ValueError):
        Graph().remove_listener(print)
