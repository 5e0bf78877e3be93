"""visual-query CLI: inspect socket types and node definitions, using Click."""

from __future__ import annotations

import logging
from typing import Optional

import click
import colorama
import yaml
from termcolor import colored

from visual_query.config import LOG_LEVELS, EditorConfig
from visual_query.errors import VisualQueryError
from visual_query.node_graph import NodeGraph
from visual_query.registry import SocketTypeRegistry


def _load_config(path: Optional[str]) -> EditorConfig:
    if path is None:
        return EditorConfig()
    try:
        return EditorConfig.from_yaml(path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise click.ClickException(f"Can not load configuration {path}: {exc}")


def _build_graph(config: EditorConfig) -> NodeGraph:
    try:
        return NodeGraph.from_config(config)
    except VisualQueryError as exc:
        raise click.ClickException(str(exc))


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with extra socket types, promotions and backend names.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]) -> None:
    """visual-query CLI."""
    config = _load_config(config_path)
    logging.basicConfig(level=(log_level or config.log_level).upper())
    ctx.obj = config


@cli.command()
@click.pass_obj
def sockets(config: EditorConfig) -> None:
    """List the registered socket types."""
    try:
        registry = SocketTypeRegistry.from_config(config)
    except VisualQueryError as exc:
        raise click.ClickException(str(exc))
    for socket_type in registry:
        click.echo(f"{colored(socket_type.name, 'cyan')}  {socket_type.description}")
    for from_name, to_name in sorted(registry.promotions):
        click.echo(f"{from_name} -> {to_name}")


@cli.command()
@click.pass_obj
def nodes(config: EditorConfig) -> None:
    """List the node definitions grouped by category."""
    graph = _build_graph(config)
    for category, names in graph.definitions.categories().items():
        click.echo(colored(category, "yellow", attrs=["bold"]))
        for name in names:
            click.echo(f"  {name}")


@cli.command()
@click.argument("name")
@click.pass_obj
def inspect(config: EditorConfig, name: str) -> None:
    """Build the node NAME and print its sockets and controls."""
    graph = _build_graph(config)
    try:
        node = graph.add_node(name)
    except VisualQueryError as exc:
        raise click.ClickException(str(exc))
    click.echo(colored(f"{node.name} ({node.category})", "green", attrs=["bold"]))
    for title, collection in (("inputs", node.inputs), ("outputs", node.outputs)):
        click.echo(f"{title}:")
        for socket in collection:
            click.echo(f"  {socket.id} [{colored(socket.type.name, 'cyan')}] {socket.label}")
    if len(node.controls):
        click.echo("controls:")
        for control in node.controls:
            click.echo(f"  {control.key}: {control.to_dict()}")


@cli.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
def check(config_file: str) -> None:
    """Check CONFIG_FILE against the built-in node definitions."""
    config = _load_config(config_file)
    graph = _build_graph(config)
    click.echo(f"{len(graph.socket_types)} socket types registered.")
    if not config.backend_names:
        click.echo("No backend names configured, skipping the naming check.")
        return
    missing = [name for name in graph.definitions.names() if name not in config.backend_names]
    for name in missing:
        click.echo(colored(f"Node definition {name!r} is unknown to the backend.", "red"))
    if missing:
        raise click.ClickException(f"{len(missing)} node definition(s) can not be executed.")
    click.echo(colored("All node definitions are known to the backend.", "green"))


def main(argv: list[str] | None = None) -> int:
    """Console script entry point."""
    colorama.just_fix_windows_console()
    try:
        cli.main(args=argv, prog_name="visual-query", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
