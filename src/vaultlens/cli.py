"""CLI entry point for vaultlens."""

import logging
from pathlib import PurePosixPath

import click
from rich.console import Console
from rich.table import Table

from .config import load_config

console = Console()


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Log cache and rebuild decisions")
@click.pass_context
def cli(ctx, config_path, verbose):
    """vaultlens - Time-based views over the properties of your notes."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if verbose:
        from rich.logging import RichHandler
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _get_config(ctx) -> dict:
    try:
        return load_config(ctx.obj.get("config_path"))
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        ctx.exit(1)


def _fmt(value) -> str:
    if value is None:
        return "[dim]–[/]"
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _note(path: str) -> str:
    return PurePosixPath(path).stem


def print_aggregate(result) -> None:
    """Print any aggregate as a rich table."""
    from .models import (
        BubbleChartData,
        ChartData,
        HeatmapData,
        PieChartData,
        ScatterChartData,
        TagCloudData,
        TimelineData,
    )
    from .anchors.patterns import format_title_with_weekday
    from .timekeys import format_bucket_label

    table = Table(title=result.display_name)

    if isinstance(result, HeatmapData):
        table.add_column("Period", style="cyan")
        table.add_column("Value", justify="right", style="green")
        table.add_column("Notes", justify="right")
        for cell in result.cells:
            table.add_row(format_bucket_label(cell.date, result.granularity), _fmt(cell.value), str(cell.count))
        table.caption = f"range {_fmt(result.min_value)} – {_fmt(result.max_value)}"

    elif isinstance(result, ChartData):
        table.add_column("Period", style="cyan")
        for dataset in result.datasets:
            table.add_column(dataset.label, justify="right", style="green")
        for i, label in enumerate(result.labels):
            table.add_row(label, *(_fmt(d.data[i]) for d in result.datasets))

    elif isinstance(result, PieChartData):
        total = sum(result.values) or 1
        table.add_column("Value", style="cyan")
        table.add_column("Count", justify="right", style="green")
        table.add_column("Share", justify="right")
        for label, count in zip(result.labels, result.values):
            table.add_row(label, str(count), f"{count / total:.0%}")

    elif isinstance(result, ScatterChartData):
        table.add_column("Position", justify="right", style="cyan")
        table.add_column("Value", justify="right", style="green")
        table.add_column("Note")
        for point, path in zip(result.points, result.file_paths):
            table.add_row(_fmt(point.x), _fmt(point.y), _note(path))

    elif isinstance(result, BubbleChartData):
        table.add_column("Position", justify="right", style="cyan")
        table.add_column("Mean", justify="right", style="green")
        table.add_column("Radius", justify="right")
        table.add_column("Notes", justify="right")
        for point, paths in zip(result.points, result.file_paths):
            table.add_row(_fmt(point.x), _fmt(point.y), _fmt(point.r), str(len(paths)))

    elif isinstance(result, TagCloudData):
        table.add_column("Tag", style="cyan")
        table.add_column("Frequency", justify="right", style="green")
        table.add_column("Notes", justify="right")
        for item in result.tags:
            table.add_row(item.tag, str(item.frequency), str(len(item.file_paths)))

    elif isinstance(result, TimelineData):
        table.add_column("Date", style="cyan")
        table.add_column("Note")
        table.add_column("Value", style="green")
        for point in result.points:
            table.add_row(
                point.date.strftime("%Y-%m-%d %H:%M"),
                format_title_with_weekday(_note(point.file_paths[0])) if point.file_paths else "",
                point.label,
            )

    if table.row_count == 0:
        console.print(f"[yellow]{result.display_name}: no data.[/]")
        return
    console.print(table)


@cli.command()
@click.pass_context
def properties(ctx):
    """List frontmatter properties found in the vault."""
    from .anchors import find_date_properties
    from .vault.reader import VaultReader, collect_property_ids

    config = _get_config(ctx)
    entries = VaultReader(config["vault_path"]).read()
    if not entries:
        console.print(f"[yellow]No notes found in {config['vault_path']}[/]")
        return

    counts = collect_property_ids(entries)
    dates = set(find_date_properties(entries, counts))

    table = Table(title=f"Properties ({len(entries)} notes)")
    table.add_column("Property", style="cyan")
    table.add_column("Notes", justify="right", style="green")
    table.add_column("Date", justify="center")
    for prop, count in counts.items():
        table.add_row(prop, str(count), "✓" if prop in dates else "")
    console.print(table)


@cli.command()
@click.argument("property_id")
@click.option("--type", "-t", "viz_type", default="heatmap", help="Visualization type (heatmap, line-chart, pie-chart, ...)")
@click.option("--granularity", "-g", default=None, help="daily, weekly, monthly, quarterly or yearly")
@click.option("--anchor-property", default=None, help="Property that holds each note's date")
@click.option("--empty/--no-empty", default=None, help="Include notes where the property is empty")
@click.option("--time-frame", default=None, help="e.g. last-30-days, this-month, all-time")
@click.pass_context
def show(ctx, property_id, viz_type, granularity, anchor_property, empty, time_frame):
    """Aggregate one property and print it."""
    from .aggregation import parse_visualization_type
    from .models import PropertyView, VisualizationConfig
    from .render.session import RenderSession
    from .timeframe import TIME_FRAME_LABELS, TimeFrame
    from .vault.reader import VaultReader

    config = _get_config(ctx)
    overrides = {
        "granularity": granularity,
        "date_anchor_property": anchor_property,
        "show_empty_values": empty,
        "time_frame": time_frame,
    }
    config.update({k: v for k, v in overrides.items() if v is not None})

    try:
        view = PropertyView(
            property_id=property_id,
            display_name=property_id,
            visualizations=(VisualizationConfig(id="show", type=parse_visualization_type(viz_type)),),
        )
        session = RenderSession(config, views=[view])
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        ctx.exit(1)

    entries = VaultReader(config["vault_path"]).read()
    result = session.refresh(entries)
    print_aggregate(result.aggregates[(property_id, "show")])
    if session.time_frame is not TimeFrame.ALL_TIME:
        console.print(f"[dim]{TIME_FRAME_LABELS[session.time_frame]}[/]")


@cli.command()
@click.pass_context
def render(ctx):
    """Render every configured view once."""
    from .render.session import RenderSession
    from .vault.reader import VaultReader

    config = _get_config(ctx)
    session = RenderSession(config)
    if not session.views:
        console.print("[yellow]No views configured. Add a 'views' section to your config.[/]")
        return

    entries = VaultReader(config["vault_path"]).read()
    result = session.refresh(entries)
    for aggregate in result.aggregates.values():
        print_aggregate(aggregate)
    console.print(f"[green]✓ Rendered {len(result.aggregates)} view(s) from {len(entries)} note(s)[/]")


@cli.command()
@click.option("--debounce", default=1.0, help="Seconds to wait after last change before re-rendering")
@click.pass_context
def watch(ctx, debounce):
    """Watch the vault and re-render configured views on change."""
    from .watcher import VaultWatcher

    config = _get_config(ctx)
    watcher = VaultWatcher(config, debounce=debounce)
    watcher.run()


@cli.command()
@click.argument("property_id")
@click.argument("value")
@click.option("--note", "-n", default=None, help="Note to write into (default: today's daily note)")
@click.pass_context
def capture(ctx, property_id, value, note):
    """Record a property value in a note."""
    from .vault.writer import FrontmatterWriter, parse_value

    config = _get_config(ctx)
    writer = FrontmatterWriter(config["vault_path"])
    try:
        path = writer.capture(property_id, parse_value(value), note=note)
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        ctx.exit(1)
    console.print(f"[green]✓ {property_id} = {value}[/] → {path}")


if __name__ == "__main__":
    cli()
