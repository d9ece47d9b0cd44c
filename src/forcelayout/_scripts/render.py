# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0

import logging
import pathlib
import typing as t

import click

import forcelayout
from forcelayout import layout, svg

from . import _common

logger = logging.getLogger(__name__)


@click.command()
@_common.layout_options
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=pathlib.Path),
    required=True,
    help="SVG file to write",
)
@click.option(
    "--labels/--no-labels",
    default=True,
    help="Draw node labels",
    show_default=True,
)
def main(
    graph_file: pathlib.Path,
    config_file: pathlib.Path | None,
    output: pathlib.Path,
    labels: bool,
    **overrides: t.Any,
) -> None:
    """Lay out a graph and render the result as SVG."""
    graph, config = _common.load(graph_file, config_file, **overrides)

    with forcelayout.ForceDirected2D(
        graph,
        config.stiffness,
        config.repulsion,
        config.damping,
        centre_attraction=config.centre_attraction,
        seed=config.seed,
    ) as engine:
        renderer = svg.SVGRenderer(engine, labels=labels)
        layout.run(renderer, config)
        try:
            renderer.save_as(output)
        except OSError as err:
            logger.error("Cannot write %s: %s", output, err)
            raise SystemExit(1) from None
