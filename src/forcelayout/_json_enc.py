# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Conversion between graphs, layout results and JSON."""

from __future__ import annotations

__all__ = ["LayoutJSONEncoder", "graph_from_dict", "load_graph"]

import collections.abc as cabc
import json
import os
import typing as t

from forcelayout import graph, vector


class LayoutJSONEncoder(json.JSONEncoder):
    """JSON encoder that knows how to handle graphs and vectors."""

    def default(self, o: object) -> object:
        if isinstance(o, graph.Graph):
            return self.__encode_graph(o)
        if isinstance(o, graph.Node):
            return self.__encode_node(o)
        if isinstance(o, graph.Edge):
            return self.__encode_edge(o)
        if isinstance(o, cabc.Sequence):
            return list(o)
        return super().default(o)

    def encode(self, o: object) -> str:
        # Vectors are tuples and would never reach default()
        return super().encode(_convert_vectors(o))

    def iterencode(self, o: object, _one_shot: bool = False) -> t.Any:
        return super().iterencode(_convert_vectors(o), _one_shot)

    @staticmethod
    def __encode_graph(o: graph.Graph) -> object:
        return {"nodes": list(o), "edges": list(o.edges)}

    @staticmethod
    def __encode_node(o: graph.Node) -> object:
        jsonobj: dict[str, object] = {"id": o.id}
        if o.data.label:
            jsonobj["label"] = o.data.label
        if o.data.mass != 1.0:
            jsonobj["mass"] = o.data.mass
        if o.data.initial_position is not None:
            jsonobj["position"] = list(
                t.cast(vector.Vector2D, o.data.initial_position)
            )
        if o.data.pinned:
            jsonobj["pinned"] = True
        return jsonobj

    @staticmethod
    def __encode_edge(o: graph.Edge) -> object:
        jsonobj: dict[str, object] = {
            "id": o.id,
            "source": o.source,
            "target": o.target,
        }
        if o.directed:
            jsonobj["directed"] = True
        if o.data.length != 1.0:
            jsonobj["length"] = o.data.length
        if o.data.label:
            jsonobj["label"] = o.data.label
        return jsonobj


def _convert_vectors(o: object) -> object:
    if isinstance(o, vector.Vector2D):
        return [o.x, o.y]
    if isinstance(o, dict):
        return {k: _convert_vectors(v) for k, v in o.items()}
    if isinstance(o, (list, tuple)):
        return [_convert_vectors(i) for i in o]
    return o


def graph_from_dict(data: cabc.Mapping[str, t.Any]) -> graph.Graph:
    """Create a graph from its JSON representation.

    Raises
    ------
    ValueError
        If the data is not a valid graph description.
    UnknownNodeError
        If an edge references a node that is not declared.
    """
    if not isinstance(data, cabc.Mapping):
        raise ValueError("Graph description must be a JSON object")

    g = graph.Graph()
    for i, node in enumerate(data.get("nodes", [])):
        if isinstance(node, str):
            g.add_node(node)
            continue
        try:
            position = node.get("position")
            if position is not None and not isinstance(position, list):
                raise ValueError(f"Position must be a list: {position!r}")
            nodedata = graph.NodeData(
                label=node.get("label", ""),
                mass=_number(node, "mass", 1.0),
                initial_position=position,
                pinned=_flag(node, "pinned"),
            )
            g.add_node(str(node["id"]), nodedata)
        except (AttributeError, KeyError, TypeError, ValueError) as err:
            raise ValueError(f"Invalid node at index {i}: {err}") from err

    for i, edge in enumerate(data.get("edges", [])):
        try:
            edgedata = graph.EdgeData(
                length=_number(edge, "length", 1.0),
                label=edge.get("label", ""),
            )
            source = str(edge["source"])
            target = str(edge["target"])
            edge_id = edge.get("id")
            directed = _flag(edge, "directed")
        except (AttributeError, KeyError, TypeError, ValueError) as err:
            raise ValueError(f"Invalid edge at index {i}: {err}") from err
        g.add_edge(
            source,
            target,
            id=str(edge_id) if edge_id is not None else None,
            data=edgedata,
            directed=directed,
        )
    return g


def _number(obj: cabc.Mapping[str, t.Any], key: str, default: float) -> float:
    value = obj.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key!r} must be a number, got {value!r}")
    return float(value)


def _flag(obj: cabc.Mapping[str, t.Any], key: str) -> bool:
    value = obj.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"{key!r} must be true or false, got {value!r}")
    return value


def load_graph(path: str | os.PathLike[str]) -> graph.Graph:
    """Load a graph description from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return graph_from_dict(json.load(f))
