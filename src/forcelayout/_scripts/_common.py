# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Options and helpers shared by the CLI commands."""

from __future__ import annotations

import json
import pathlib
import typing as t

import click

import forcelayout

_F = t.TypeVar("_F", bound=t.Callable[..., t.Any])


def layout_options(func: _F) -> _F:
    """Add the options controlling a layout pass to a command."""
    options = [
        click.argument(
            "graph_file",
            type=click.Path(
                exists=True, dir_okay=False, path_type=pathlib.Path
            ),
        ),
        click.option(
            "-c",
            "--config",
            "config_file",
            type=click.Path(
                exists=True, dir_okay=False, path_type=pathlib.Path
            ),
            help="TOML file with layout options",
        ),
        click.option(
            "-n",
            "--iterations",
            type=click.IntRange(min=0),
            help="Number of simulation steps",
        ),
        click.option("--timestep", type=float, help="Length of a step"),
        click.option("--seed", type=int, help="Seed for random placement"),
        click.option(
            "--energy-threshold",
            type=float,
            help="Stop early once the total energy is below this value",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def load(
    graph_file: pathlib.Path,
    config_file: pathlib.Path | None,
    **overrides: t.Any,
) -> tuple[forcelayout.Graph, forcelayout.LayoutConfig]:
    """Load the graph and config, turning errors into usage errors."""
    try:
        g = forcelayout.load_graph(graph_file)
    except json.JSONDecodeError as err:
        raise click.BadParameter(str(err), param_hint="GRAPH_FILE") from None
    except (ValueError, forcelayout.LayoutError) as err:
        raise click.UsageError(f"Invalid graph: {err}") from None

    try:
        if config_file is not None:
            config = forcelayout.LayoutConfig.from_toml(config_file)
        else:
            config = forcelayout.LayoutConfig()
        config = config.replace(**overrides)
    except (ValueError, forcelayout.LayoutError) as err:
        raise click.UsageError(f"Invalid configuration: {err}") from None
    return g, config

