# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0

import json
import logging
import pathlib
import typing as t

import click

import forcelayout

from . import _common

logger = logging.getLogger(__name__)


@click.command()
@_common.layout_options
@click.option(
    "-o",
    "--output",
    type=click.File("w", encoding="utf-8", atomic=True),
    default="-",
    help="File to write the positions to",
    show_default=True,
)
@click.option(
    "--round/--no-round",
    "round_",
    default=False,
    help="Round positions to integer coordinates",
    show_default=True,
)
def main(
    graph_file: pathlib.Path,
    config_file: pathlib.Path | None,
    output: t.IO[str],
    round_: bool,
    **overrides: t.Any,
) -> None:
    """Compute a force-directed layout for a graph.

    GRAPH_FILE is a JSON document with "nodes" and "edges" lists. The
    result is a JSON object mapping every node ID to its position.
    """
    graph, config = _common.load(graph_file, config_file, **overrides)
    if not graph:
        logger.info("The graph has no nodes, nothing to lay out")

    positions = forcelayout.compute_layout(graph, config)
    if round_:
        positions = {
            k: forcelayout.Vector2D(round(v.x), round(v.y))
            for k, v in positions.items()
        }

    json.dump(
        {"positions": positions},
        output,
        cls=forcelayout.LayoutJSONEncoder,
        indent=2,
    )
    output.write("\n")
