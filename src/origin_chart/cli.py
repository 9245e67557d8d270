"""CLI for origin-chart."""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path

import click

from origin_chart import __version__
from origin_chart.layout import (
    calculate_chart_dimensions,
    compute_full_chart,
    count_complete_paths,
    randomize_selections,
)
from origin_chart.layout.engine import group_by_step
from origin_chart.layout.positions import get_positions
from origin_chart.parser import (
    STEP_ORDER,
    Direction,
    OriginNode,
    StepKey,
    load_catalog,
    parse_selections,
    validate_catalog,
)

_catalog_arg = click.argument(
    "catalog", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
_select_opt = click.option(
    "-s", "--select", "select", multiple=True, metavar="STEP=ID",
    help="Confirmed selection, e.g. homeWorld=death-world. Repeatable.",
)
_direction_opt = click.option(
    "--direction", type=click.Choice([d.value for d in Direction]), default="forward",
    help="Which neighbouring selection gates a step (default: forward)",
)
_free_opt = click.option(
    "--free", is_flag=True, default=False,
    help="Free mode: ignore adjacency and requirements",
)


def _load(catalog: Path) -> list[OriginNode]:
    try:
        return load_catalog(catalog)
    except ValueError as e:
        click.echo(f"Parse error: {e}", err=True)
        raise SystemExit(1)


def _selections(pairs: tuple[str, ...], origins: list[OriginNode]):
    try:
        return parse_selections(pairs, origins)
    except ValueError as e:
        click.echo(f"Selection error: {e}", err=True)
        raise SystemExit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v, -vv)")
def cli(verbose: int) -> None:
    """origin-chart: Lay out step-based character origin path charts."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@_catalog_arg
@_select_opt
@_direction_opt
@_free_opt
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON file path. Defaults to stdout")
def layout(
    catalog: Path,
    select: tuple[str, ...],
    direction: str,
    free: bool,
    output: Path | None,
) -> None:
    """Compute the chart layout for a catalog and write it as JSON."""
    origins = _load(catalog)
    selections = _selections(select, origins)

    chart = compute_full_chart(
        origins, selections, guided_mode=not free, direction=Direction(direction)
    )
    data = chart.to_dict()
    data["dimensions"] = calculate_chart_dimensions(
        chart.max_columns, len(chart.steps)
    ).to_dict()
    text = json.dumps(data, indent=2) + "\n"

    if output is None:
        click.echo(text, nl=False)
        return

    output.write_text(text)
    n_cards = sum(len(s.cards) for s in chart.steps)
    click.echo(f"Laid out {n_cards} origins, "
               f"{len(chart.connections)} connections "
               f"({len(chart.active_connections())} active), "
               f"{chart.max_columns} columns -> {output}")


@cli.command()
@_catalog_arg
def validate(catalog: Path) -> None:
    """Validate an origin catalog."""
    origins = _load(catalog)
    errors = validate_catalog(origins)

    if errors:
        click.echo("Validation errors:", err=True)
        for err in errors:
            click.echo(f"  - {err}", err=True)
        raise SystemExit(1)

    steps = {o.step for o in origins}
    click.echo(f"Valid: {len(origins)} origins, {len(steps)} steps")


@cli.command()
@_catalog_arg
def info(catalog: Path) -> None:
    """Show information about an origin catalog."""
    origins = _load(catalog)
    groups = group_by_step(origins)
    chart = compute_full_chart(origins, {})
    dims = calculate_chart_dimensions(chart.max_columns, len(chart.steps))

    click.echo(f"Origins: {len(origins)}")
    for step_key in STEP_ORDER:
        nodes = groups.get(step_key, [])
        multi = sum(1 for n in nodes if len(get_positions(n)) > 1)
        click.echo(f"  [{step_key.index + 1}] {step_key.value}: {len(nodes)} origins"
                   + (f" ({multi} multi-position)" if multi else ""))
    dropped = len(origins) - sum(len(v) for v in groups.values())
    if dropped:
        click.echo(f"Without step: {dropped}")
    click.echo(f"Columns: {chart.max_columns}")
    click.echo(f"Chart size: {dims.width}x{dims.height}")
    click.echo(f"Complete paths: {count_complete_paths(origins)}")


@cli.command()
@_catalog_arg
@click.argument("step", type=click.Choice([s.value for s in STEP_ORDER]))
@_select_opt
@_direction_opt
@_free_opt
def options(
    catalog: Path,
    step: str,
    select: tuple[str, ...],
    direction: str,
    free: bool,
) -> None:
    """List which origins of STEP are selectable given the selections."""
    origins = _load(catalog)
    selections = _selections(select, origins)

    chart = compute_full_chart(
        origins, selections, guided_mode=not free, direction=Direction(direction)
    )
    step_layout = chart.step(StepKey(step))
    selected = step_layout.selected_card
    click.echo(f"{step_layout.step_label}: "
               f"{selected.id if selected else '(no selection)'}")
    for card in step_layout.cards:
        mark = "*" if card.is_selected else ("+" if card.is_selectable else "-")
        slots = ",".join(str(p) for p in card.all_positions)
        line = f"  {mark} {card.id} [{slots}] {card.name}"
        requirements = card.node.requirements
        if not requirements.is_empty:
            line += f" ({requirements.text or 'has requirements'})"
        click.echo(line)


@cli.command()
@_catalog_arg
@_free_opt
@click.option("--seed", type=int, default=None, help="Random seed for a repeatable path")
def randomize(catalog: Path, free: bool, seed: int | None) -> None:
    """Pick a random origin path through the chart.

    Guided by default: each pick must connect to the one before it.
    Pass --free to pick any origin on every step.
    """
    origins = _load(catalog)
    selections = randomize_selections(origins, guided_mode=not free, rng=random.Random(seed))

    for step_key in STEP_ORDER:
        selection = selections.get(step_key)
        click.echo(f"{step_key.value}: {selection.id if selection else '(none)'}")
