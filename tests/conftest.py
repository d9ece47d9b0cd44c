# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Global fixtures for pytest."""

import json
import pathlib

import pytest

import forcelayout


@pytest.fixture
def chain() -> forcelayout.Graph:
    """Three nodes A, B and C, connected as A - B - C."""
    return forcelayout.build_graph(["A", "B", "C"], [("A", "B"), ("B", "C")])


@pytest.fixture
def graph_file(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "graph.json"
    path.write_text(
        json.dumps(
            {
                "nodes": [
                    "A",
                    {"id": "B", "label": "Middle", "position": [0, 0]},
                    "C",
                ],
                "edges": [
                    {"source": "A", "target": "B"},
                    {"source": "B", "target": "C", "length": 2.5},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path
