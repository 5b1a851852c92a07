"""Command-line interface for the Livestatus API gateway."""

import json
import sys
import click
import logging
from typing import Optional, Tuple

from .config import AppConfig, load_config
from .errors import GatewayError
from .gateway import RESOURCES, ResourceGateway
from .livestatus_client import LivestatusClient
from .logging_utils import setup_logging


@click.group()
@click.option('--log-level', default=None, help='Logging level (DEBUG, INFO, WARNING, ERROR)')
@click.option('--config', '--config-file', help='Path to configuration file (YAML or JSON)')
@click.pass_context
def cli(ctx, log_level: Optional[str], config: Optional[str]):
    """Livestatus API - read-only REST gateway for the Livestatus socket."""
    ctx.ensure_object(dict)

    try:
        app_config = load_config(config_file=config)
        if log_level:
            app_config = app_config.model_copy(update={"log_level": log_level.upper()})
        setup_logging(app_config.log_level)
    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    ctx.obj['config'] = app_config


def _gateway(ctx) -> ResourceGateway:
    app_config = ctx.obj['config']
    return ResourceGateway(LivestatusClient(app_config.livestatus))


@cli.command()
@click.option('--listen-address', default=None, help='Address to listen on, e.g. ":7654"')
@click.option('--socket-path', default=None, help='Livestatus socket (path, unix:PATH or tcp:HOST:PORT)')
@click.option('--timeout', default=None, help='Livestatus timeout, seconds or a duration like "5s"')
@click.pass_context
def serve(ctx, listen_address: Optional[str], socket_path: Optional[str], timeout: Optional[str]):
    """Serve the REST API over HTTP."""
    import uvicorn
    from .server import create_app

    app_config = ctx.obj['config']
    logger = logging.getLogger(__name__)

    try:
        livestatus_updates = {}
        if socket_path:
            livestatus_updates['socket_path'] = socket_path
        if timeout:
            livestatus_updates['timeout'] = timeout
        server_updates = {}
        if listen_address:
            server_updates['listen_address'] = listen_address

        # CLI flags go through the same validators as file and env values
        app_config = AppConfig.model_validate({
            **app_config.model_dump(),
            'livestatus': {**app_config.livestatus.model_dump(), **livestatus_updates},
            'server': {**app_config.server.model_dump(), **server_updates},
        })
    except Exception as e:
        click.echo(f"❌ Invalid option: {e}", err=True)
        sys.exit(1)

    logger.info(
        f"Serving on {app_config.server.listen_address}, "
        f"livestatus at {app_config.livestatus.socket_path} "
        f"(timeout {app_config.livestatus.timeout:g}s)"
    )
    uvicorn.run(
        create_app(app_config),
        host=app_config.server.host,
        port=app_config.server.port,
        log_level=app_config.log_level.lower(),
        log_config=None,
    )


@cli.command()
@click.pass_context
def test(ctx):
    """Test connection to the Livestatus socket."""
    app_config = ctx.obj['config']

    try:
        status = _gateway(ctx).check_connection()
    except GatewayError as e:
        click.echo(f"❌ Connection test failed: {e}", err=True)
        sys.exit(1)

    if status is None:
        click.echo("❌ Livestatus returned no status row", err=True)
        sys.exit(1)

    click.echo(f"✅ Successfully connected to Livestatus at {app_config.livestatus.socket_path}")
    click.echo(f"   Core version: {status.program_version}")
    click.echo(f"   Livestatus version: {status.livestatus_version}")


@cli.command()
@click.argument('resource', type=click.Choice(sorted(RESOURCES)))
@click.argument('key', nargs=-1)
@click.pass_context
def get(ctx, resource: str, key: Tuple[str, ...]):
    """Print a resource collection, or one item when KEY is given, as JSON.

    Services are looked up by HOST_NAME and DESCRIPTION.
    """
    descriptor = RESOURCES[resource]
    gateway = _gateway(ctx)

    try:
        if not key:
            records = gateway.list(resource)
            output = [record.model_dump() for record in records]
        else:
            names = [part.path_param for part in descriptor.key]
            if len(key) != len(names):
                raise click.UsageError(
                    f"{resource} needs {len(names)} key part(s): {' '.join(n.upper() for n in names)}"
                )
            output = gateway.get(resource, dict(zip(names, key))).model_dump()
    except GatewayError as e:
        click.echo(json.dumps({"code": e.status_code, "message": e.public_message}), err=True)
        sys.exit(1)

    click.echo(json.dumps(output, indent=2))


if __name__ == '__main__':
    cli()
