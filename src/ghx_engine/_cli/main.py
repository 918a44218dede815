import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ghx_engine._components import ComponentRegistry
from ghx_engine._engine import Engine, geometry_items
from ghx_engine._errors import GhxError
from ghx_engine._io import export_result
from ghx_engine._value import describe

from .config import ConfigError, ExportFormat, GhxConfig, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Evaluate parametric node-graph documents."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
        force=True,
    )


def _config() -> GhxConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


def _fail(error: GhxError) -> typer.Exit:
    err_console.print(f"[red]✗ {type(error).__name__}:[/red] {escape(str(error))}")
    return typer.Exit(code=1)


def _resolve_document(document: Path | None, config: GhxConfig) -> Path:
    if document is not None:
        return document
    if config.document is not None:
        return config.document
    err_console.print("[red]No document given and no [tool.ghx_engine].document configured[/red]")
    raise typer.Exit(code=1)


def _load(document: Path) -> Engine:
    if not document.is_file():
        err_console.print(f"[red]Document not found:[/red] {document}")
        raise typer.Exit(code=1)
    engine = Engine()
    err_console.print(f"[cyan]Loading document:[/cyan] {document}")
    try:
        engine.load_file(document)
    except GhxError as e:
        raise _fail(e) from e
    return engine


def parse_slider_assignment(text: str) -> tuple[str, float]:
    """Split a ``NAME=VALUE`` slider override.

    Raises:
        typer.BadParameter: If there is no ``=`` or the value is not a number.

    """
    name, sep, raw = text.partition("=")
    if not sep or not name.strip():
        msg = f"Expected NAME=VALUE, got {text!r}"
        raise typer.BadParameter(msg)
    try:
        return name.strip(), float(raw)
    except ValueError:
        msg = f"Slider value {raw!r} is not a number"
        raise typer.BadParameter(msg) from None


DocumentArgument = Annotated[
    Path | None,
    typer.Argument(help="Path to the document. Defaults to [tool.ghx_engine].document"),
]


@app.command("eval")
def eval_command(
    document: DocumentArgument = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Export the node outputs to this file"),
    ] = None,
    fmt: Annotated[
        ExportFormat | None,
        typer.Option("--format", help="Export format (default: toml)"),
    ] = None,
    slider: Annotated[
        list[str] | None,
        typer.Option("--slider", help="Slider override NAME=VALUE (repeatable)"),
    ] = None,
) -> None:
    """Evaluate a document and print its node outputs."""
    config = _config()
    engine = _load(_resolve_document(document, config))

    for assignment in slider or []:
        name, value = parse_slider_assignment(assignment)
        try:
            stored = engine.set_slider_value(name, value)
        except GhxError as e:
            raise _fail(e) from e
        err_console.print(f"[cyan]Slider[/cyan] {escape(name)} = {stored:g}")

    err_console.print("[cyan]Evaluating...[/cyan]")
    try:
        result = engine.evaluate()
    except GhxError as e:
        raise _fail(e) from e

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Node", justify="right")
    table.add_column("Name")
    table.add_column("Pin")
    table.add_column("Value")
    for node_id, outputs in result.items():
        node = engine.graph.node(node_id)
        label = node.label if node is not None else str(node_id)
        for pin, value in outputs.items():
            table.add_row(str(node_id), escape(label), escape(pin), escape(describe(value)))
    out_console.print(Panel(table, title="[bold]Node Outputs[/bold]", border_style="cyan"))

    counts: dict[str, int] = {}
    for item in geometry_items(result):
        counts[item.kind] = counts.get(item.kind, 0) + 1
    summary = ", ".join(f"{kind}: {count}" for kind, count in sorted(counts.items())) or "none"
    out_console.print(f"Geometry: {summary}")

    output = output or config.output
    if output is not None:
        export_format = fmt or config.format or ExportFormat.TOML
        err_console.print(f"[cyan]Exporting results to:[/cyan] {output}")
        export_result(result, output, graph=engine.graph, fmt=export_format)

    err_console.print("[green]✓ Evaluation complete[/green]")


@app.command()
def topology(document: DocumentArgument = None) -> None:
    """Print the evaluation order of a document."""
    engine = _load(_resolve_document(document, _config()))
    out_console.print(engine.topology_map())
    out_console.print(f"{len(engine.graph.nodes)} nodes, {len(engine.graph.wires)} wires")


@app.command()
def sliders(document: DocumentArgument = None) -> None:
    """List the sliders of a document."""
    engine = _load(_resolve_document(document, _config()))
    try:
        found = engine.sliders()
    except GhxError as e:
        raise _fail(e) from e
    if not found:
        out_console.print("No sliders")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Node", justify="right")
    table.add_column("Name")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Step", justify="right")
    table.add_column("Value", justify="right")
    for info in found:
        step = "-" if info.step is None else f"{info.step:g}"
        table.add_row(str(info.node_id), escape(info.name), f"{info.min:g}", f"{info.max:g}", step, f"{info.value:g}")
    out_console.print(table)


@app.command()
def node(
    document: Annotated[Path, typer.Argument(help="Path to the document")],
    node_id: Annotated[int, typer.Argument(help="Node id")],
    *,
    evaluated: Annotated[
        bool,
        typer.Option("--evaluate/--no-evaluate", help="Show evaluated outputs instead of stored ones"),
    ] = True,
) -> None:
    """Show one node: its outputs and the nodes it feeds."""
    engine = _load(document)
    try:
        result = engine.evaluate() if evaluated else None
        info = engine.node_info(node_id, result)
    except GhxError as e:
        raise _fail(e) from e

    lines = [f"[bold]Connected to:[/bold] {', '.join(map(str, info.connected_to)) or '-'}"]
    lines.extend(f"{escape(pin)} = {escape(text)}" for pin, text in info.outputs.items())
    out_console.print(
        Panel("\n".join(lines), title=f"[bold]Node {info.node_id}: {escape(info.name)}[/bold]", border_style="cyan"),
    )


@app.command()
def components(
    search: Annotated[
        str | None,
        typer.Option("--search", "-s", help="Only show kinds whose name, category or id contains this text"),
    ] = None,
) -> None:
    """List the registered component kinds."""
    registry = ComponentRegistry.default()
    kinds = registry.search(search) if search else registry.kinds()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Category")
    table.add_column("Name")
    table.add_column("Inputs")
    table.add_column("Outputs")
    for kind in kinds:
        table.add_row(kind.category, escape(kind.name), ", ".join(kind.inputs), ", ".join(kind.outputs))
    out_console.print(table)
    out_console.print(f"{len(kinds)} of {len(registry)} component kinds")


if __name__ == "__main__":
    app()
