"""CLI entry point for assetgraph."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from assetgraph.config import AssetGraphConfig, ConfigError, load_config
from assetgraph.config.loader import DEFAULT_CONFIG_TEMPLATE
from assetgraph.freshness import ChangeWatcher
from assetgraph.graph import (
    DEFAULT_GROUP_KEY,
    AssetGroups,
    AssetReference,
    AssetReferenceStreamManager,
    ChangeBatch,
    ConnectionData,
    NodeData,
    NodeError,
)
from assetgraph.index import AssetDatabase
from assetgraph.loader import DEFAULT_TARGET, LoaderNode

app = typer.Typer(
    name="assetgraph",
    help="Load From Directory — feed a folder of assets into a build graph.",
)

config_app = typer.Typer(help="Manage assetgraph configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: AssetGraphConfig | None = None

STATE_FILE = "loader.json"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps({
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        })


def _configure_logging(cfg: AssetGraphConfig) -> None:
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(_LEVELS[cfg.log_level])


def _get_config() -> AssetGraphConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to assetgraph.yaml")
    ] = None,
    root: Annotated[
        str | None, typer.Option("--root", "-r", help="Project root (overrides config)")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        cfg = load_config(config)
    except ConfigError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    if root is not None:
        cfg = cfg.model_copy(update={"project": cfg.project.model_copy(update={"root": root})})
    _config = cfg
    _configure_logging(cfg)


# ---------------------------------------------------------------------------
# State persistence
# ---------------------------------------------------------------------------


def _state_path(cfg: AssetGraphConfig) -> Path:
    return Path(cfg.project.root).resolve() / cfg.project.state_dir / STATE_FILE


def _save_state(
    cfg: AssetGraphConfig,
    node: LoaderNode,
    node_data: NodeData,
    streams: AssetReferenceStreamManager,
) -> Path:
    path = _state_path(cfg)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "node": node.to_dict(),
        "node_data": node_data.model_dump(),
        "streams": streams.to_dict(),
    }
    path.write_text(json.dumps(data, indent=2))
    return path


def _load_state(
    cfg: AssetGraphConfig, db: AssetDatabase
) -> tuple[LoaderNode, NodeData, AssetReferenceStreamManager] | None:
    path = _state_path(cfg)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text())
        node = LoaderNode.from_dict(
            data["node"],
            db,
            db.data_path,
            assets_dir=cfg.project.assets_dir,
            config=cfg.loader,
        )
        node_data = NodeData(**data["node_data"])
        streams = AssetReferenceStreamManager.from_dict(data.get("streams", {}))
    except (json.JSONDecodeError, OSError, KeyError, TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid loader state in {path}: {e!r}") from e
    return node, node_data, streams


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def _evaluate(
    node: LoaderNode,
    node_data: NodeData,
    streams: AssetReferenceStreamManager,
    target: str,
) -> list[AssetReference]:
    """Run a full load for *target* and record its output in *streams*."""
    point = node_data.add_default_output_point()
    emitted: list[AssetReference] = []

    def output(destination: ConnectionData | None, groups: AssetGroups) -> None:
        streams.assign(point, groups)
        emitted.extend(groups.get(DEFAULT_GROUP_KEY, []))

    node.prepare(target, node_data, incoming=None, connections_to_output=[], output=output)
    return emitted


def _display_references(refs: list[AssetReference], title: str) -> None:
    table = Table(title=f"{title} ({len(refs)})")
    table.add_column("Path", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("GUID", style="dim")
    for ref in sorted(refs, key=lambda r: r.import_from):
        table.add_row(ref.import_from, ref.asset_type, ref.guid)
    rprint(table)


def _display_batch(batch: ChangeBatch) -> None:
    table = Table(title="Changes")
    table.add_column("Change", style="yellow")
    table.add_column("Path", style="cyan")
    for kind in ("created", "deleted", "moved_to", "moved_from"):
        for path in sorted(getattr(batch, kind)):
            table.add_row(kind, path)
    rprint(table)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def index() -> None:
    """Refresh the asset index and show what changed."""
    cfg = _get_config()
    db = AssetDatabase.from_config(cfg)
    if not db.data_path.is_dir():
        rprint(f"[red]Error:[/red] asset root not found: {db.data_path}")
        raise typer.Exit(1)
    batch = db.refresh()
    if batch.is_empty:
        rprint("[green]Index up to date.[/green]")
        return
    _display_batch(batch)


@app.command()
def move(
    old: Annotated[str, typer.Argument(help="Asset path to move, e.g. Assets/Textures")],
    new: Annotated[str, typer.Argument(help="New asset path")],
) -> None:
    """Rename or move an asset, keeping its GUID."""
    cfg = _get_config()
    db = AssetDatabase.from_config(cfg)
    db.refresh()
    try:
        db.move_asset(old, new)
    except (KeyError, FileExistsError, OSError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    rprint(f"[green]Moved[/green] {old} -> {new}")


@app.command()
def load(
    path: Annotated[
        str | None, typer.Argument(help="Folder to load, relative to the asset root")
    ] = None,
    target: Annotated[str, typer.Option("--target", "-t", help="Build target")] = DEFAULT_TARGET,
) -> None:
    """Bind the loader to a folder, load it, and save the result."""
    cfg = _get_config()
    db = AssetDatabase.from_config(cfg)
    db.refresh()

    node = LoaderNode.from_config(cfg, db)
    if path is not None:
        node.set_load_path(target, path)
    node_data = NodeData(name="Load From Directory")
    node.initialize(node_data)
    streams = AssetReferenceStreamManager()

    try:
        refs = _evaluate(node, node_data, streams, target)
    except NodeError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _display_references(refs, node.get_load_path(target))
    state_path = _save_state(cfg, node, node_data, streams)
    rprint(f"\n[green]Saved:[/green] {state_path}")


@app.command()
def check(
    target: Annotated[str, typer.Option("--target", "-t", help="Build target")] = DEFAULT_TARGET,
    ci: Annotated[bool, typer.Option("--ci", help="Machine-readable output")] = False,
) -> None:
    """Decide whether the saved loader output is stale, and reload it if so."""
    cfg = _get_config()
    db = AssetDatabase.from_config(cfg)
    try:
        state = _load_state(cfg, db)
    except ConfigError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    if state is None:
        rprint("[red]No loader state found.[/red] Run 'assetgraph load' first.")
        raise typer.Exit(1)

    node, node_data, streams = state
    batch = db.refresh()
    revisit = node.should_revisit(node_data, streams, target, batch)

    if not revisit:
        # Reconciliation may have followed a rename; keep it.
        _save_state(cfg, node, node_data, streams)
        if ci:
            typer.echo("OK")
        else:
            rprint("[green]Loader output is up to date.[/green]")
        return

    try:
        refs = _evaluate(node, node_data, streams, target)
    except NodeError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _save_state(cfg, node, node_data, streams)

    if ci:
        typer.echo(f"REVISIT {len(refs)}")
        for ref in sorted(refs, key=lambda r: r.import_from):
            typer.echo(ref.import_from)
    else:
        _display_batch(batch)
        _display_references(refs, node.get_load_path(target))


@app.command()
def watch(
    target: Annotated[str, typer.Option("--target", "-t", help="Build target")] = DEFAULT_TARGET,
) -> None:
    """Watch the asset root and reload whenever the loader output goes stale."""
    cfg = _get_config()
    db = AssetDatabase.from_config(cfg)
    try:
        state = _load_state(cfg, db)
    except ConfigError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    if state is None:
        rprint("[red]No loader state found.[/red] Run 'assetgraph load' first.")
        raise typer.Exit(1)
    node, node_data, streams = state

    watcher = ChangeWatcher(
        db.project_root,
        assets_dir=cfg.project.assets_dir,
        debounce_seconds=cfg.watch.debounce_seconds,
        ignore_patterns=cfg.index.ignore_patterns,
    )
    watcher.start()
    rprint(f"[bold]Watching[/bold] {db.data_path} (Ctrl+C to stop)")
    try:
        while True:
            time.sleep(cfg.watch.poll_interval)
            batch = watcher.drain()
            if batch.is_empty:
                continue
            batch = batch.merge(db.refresh())
            if not node.should_revisit(node_data, streams, target, batch):
                continue
            try:
                refs = _evaluate(node, node_data, streams, target)
            except NodeError as e:
                rprint(f"[red]Error:[/red] {escape(str(e))}")
                continue
            _save_state(cfg, node, node_data, streams)
            rprint(f"[yellow]Reloaded[/yellow] {node.get_load_path(target)}: {len(refs)} assets")
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default assetgraph.yaml in current directory."""
    target = Path("assetgraph.yaml")
    if target.exists() and not force:
        rprint("[yellow]assetgraph.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
