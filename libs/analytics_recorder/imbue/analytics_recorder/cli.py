from pathlib import Path

import click

from imbue.analytics_recorder.config import RecorderConfig
from imbue.analytics_recorder.errors import BaseAnalyticsError
from imbue.analytics_recorder.errors import InvalidEventNameError
from imbue.analytics_recorder.event_store import read_recorded_events
from imbue.analytics_recorder.logging import setup_logging
from imbue.analytics_recorder.primitives import LogLevel
from imbue.analytics_recorder.recorder import EventRecorder

_namespace_option = click.option(
    "--namespace",
    default=None,
    help="Sub-directory of the analytics cache to use",
)
_cache_dir_option = click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Analytics cache directory [default: $ANALYTICS_CACHE_DIR or ~/.hab/cache/analytics]",
)


def _resolve_config(ctx: click.Context, namespace: str | None, cache_dir: Path | None) -> RecorderConfig:
    try:
        return RecorderConfig.from_env(namespace=namespace, cache_dir=cache_dir, log_level=ctx.obj["log_level"])
    except BaseAnalyticsError as e:
        raise click.BadParameter(str(e), param_hint="'--namespace'") from e


@click.group()
@click.option(
    "--log-level",
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    default=LogLevel.WARNING.value,
    show_default=True,
    help="Log verbosity",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """Record analytics events to the local cache for later upload."""
    level = LogLevel(log_level.upper())
    setup_logging(level)
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = level


@cli.command()
@click.argument("event_name")
@_namespace_option
@_cache_dir_option
@click.pass_context
def record(ctx: click.Context, event_name: str, namespace: str | None, cache_dir: Path | None) -> None:
    """Record one occurrence of EVENT_NAME and print the file written."""
    config = _resolve_config(ctx, namespace, cache_dir)
    try:
        event_path = EventRecorder(cache_dir=config.cache_dir).record(event_name)
    except InvalidEventNameError as e:
        raise click.BadParameter(str(e), param_hint="'EVENT_NAME'") from e
    except BaseAnalyticsError as e:
        raise click.ClickException(str(e)) from e
    click.echo(str(event_path))


@cli.command(name="list")
@_namespace_option
@_cache_dir_option
@click.pass_context
def list_command(ctx: click.Context, namespace: str | None, cache_dir: Path | None) -> None:
    """List recorded events that are waiting to be uploaded, oldest first."""
    config = _resolve_config(ctx, namespace, cache_dir)
    for event in read_recorded_events(config.cache_dir):
        click.echo(f"{event.timestamp} {event.name} {event.client_id}")
