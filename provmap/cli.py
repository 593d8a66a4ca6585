"""provmap CLI — inspect provider snapshots through a provider map."""

import io
import logging
import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from provmap import __version__
from provmap.config import ConfigError, RegistryConfig, load_config
from provmap.registry.models import ComponentName
from provmap.registry.provider_map import ProviderMap
from provmap.registry.snapshot import SnapshotError, load_snapshot, populate
from provmap.utils.logging import configure_logging

console = Console()
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=None, help="Registry config YAML")
@click.option("--verbose", "-v", is_flag=True, help="Log registry mutations")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool):
    """provmap: content provider registry by authority and class.

    Load a snapshot of published providers into a provider map, then
    dump it, look providers up, or check the two indices agree.
    """
    try:
        config = load_config(config_path) if config_path else RegistryConfig()
    except (OSError, ConfigError) as e:
        console.print(f"[red]Config error:[/] {e}")
        sys.exit(2)

    configure_logging(logging.DEBUG if verbose else config.log_level)
    ctx.obj = config


def _build_map(config: RegistryConfig, snapshot_path: str) -> ProviderMap:
    identity = config.identity()
    try:
        records = load_snapshot(snapshot_path, identity)
    except (OSError, SnapshotError) as e:
        console.print(f"[red]Failed to load snapshot:[/] {e}")
        sys.exit(1)

    provider_map = ProviderMap(identity)
    populate(provider_map, records)
    logger.info("published %d provider(s) from %s", len(records), snapshot_path)
    return provider_map


# ── Dump ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("snapshot_path")
@click.option("--details", "-a", is_flag=True, help="Include record details and authorities")
@click.pass_obj
def dump(config: RegistryConfig, snapshot_path: str, details: bool):
    """Print the published providers in SNAPSHOT_PATH."""
    provider_map = _build_map(config, snapshot_path)

    buf = io.StringIO()
    provider_map.dump(buf, dump_all=details)
    click.echo(f"CONTENT PROVIDERS ({snapshot_path})")
    click.echo(buf.getvalue(), nl=False)


# ── Lookup ───────────────────────────────────────────────────────────


@main.command()
@click.argument("snapshot_path")
@click.option("--authority", "-n", default=None, help="Authority name to resolve")
@click.option("--component", "-k", default=None, help="Component as package/class")
@click.option("--user", "-u", "user_id", type=int, default=None, help="User id (default: calling user)")
@click.pass_obj
def lookup(
    config: RegistryConfig,
    snapshot_path: str,
    authority: str | None,
    component: str | None,
    user_id: int | None,
):
    """Resolve a provider by authority or by component class."""
    if (authority is None) == (component is None):
        raise click.UsageError("Pass exactly one of --authority or --component")

    provider_map = _build_map(config, snapshot_path)

    if authority is not None:
        key = authority
        record = provider_map.get_provider_by_name(authority, user_id)
    else:
        try:
            name = ComponentName.unflatten(component)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--component") from e
        key = name.flatten()
        record = provider_map.get_provider_by_class(name, user_id)

    resolved = provider_map.identity.resolve_user(user_id)
    if record is None:
        console.print(f"[yellow]Not found:[/] {key} (user {resolved})")
        sys.exit(1)

    table = Table(title=f"{key} (user {resolved})")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    scope = (
        "global"
        if provider_map.identity.is_system(record.uid)
        else f"user {provider_map.identity.user_id_of(record.uid)}"
    )
    table.add_row("component", record.name.short_string())
    table.add_row("uid", str(record.uid))
    table.add_row("scope", scope)
    table.add_row("authority", record.authority)
    table.add_row("process", record.process_name)
    console.print(table)


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("snapshot_path")
@click.pass_obj
def check(config: RegistryConfig, snapshot_path: str):
    """Check that the authority and class indices agree."""
    from provmap.registry.integrity import check_integrity

    provider_map = _build_map(config, snapshot_path)
    report = check_integrity(provider_map)
    by_name, by_class = provider_map.size()

    status = "[green]OK[/]" if report.is_consistent else "[red]DIVERGED[/]"
    console.print(
        Panel(
            f"{status} {report.summary()}\n"
            f"{by_name} authority binding(s), {by_class} class binding(s)",
            title="Index Integrity",
        )
    )
    for detail in report.details:
        console.print(f"  [yellow]![/] {detail}")

    if not report.is_consistent:
        sys.exit(1)


if __name__ == "__main__":
    main()
