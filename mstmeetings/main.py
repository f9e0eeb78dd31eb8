"""
MS Teams Meetings - CLI Entry Point

Command-line interface for running and managing the /mstmeetings service.
"""

import sys

import click

from .commands.parser import CommandInvocation, get_command_definition
from .core.config import get_config
from .core.exceptions import ConfigurationError, PlatformAPIError
from .core.logging_config import setup_logging
from .mattermost.client import MattermostClient
from .plugin import create_plugin


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--log-file", type=str, help="Log file path")
@click.pass_context
def cli(ctx, verbose, log_file):
    """MS Teams Meetings slash command for Mattermost."""
    ctx.ensure_object(dict)

    config = get_config()
    log_level = "DEBUG" if verbose else config.app.log_level
    setup_logging(
        log_level=log_level,
        log_file=log_file or config.app.log_file,
        log_format="detailed" if verbose else config.app.log_format,
    )

    ctx.obj["verbose"] = verbose
    ctx.obj["log_file"] = log_file


@cli.command()
@click.argument("command_line")
@click.option("--user-id", required=True, help="Mattermost user ID of the caller")
@click.option("--channel-id", required=True, help="Channel the command runs in")
def execute(command_line, user_id, channel_id):
    """Run one slash command against the configured server.

    Example:
        mstmeetings execute "/mstmeetings start" --user-id <id> --channel-id <id>
    """
    try:
        plugin = create_plugin(get_config())
    except (ConfigurationError, PlatformAPIError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    invocation = CommandInvocation(raw_text=command_line, user_id=user_id, channel_id=channel_id)
    result = plugin.dispatcher.execute(invocation)

    if result.text:
        click.echo(result.text)
    if result.post is not None:
        click.echo(f"✓ Posted meeting card {result.post.id or ''} in channel {channel_id}")
    if result.error is not None:
        click.echo(f"❌ {result.error}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--host", default=None, help="Web server host")
@click.option("--port", default=None, type=int, help="Web server port")
def serve(host, port):
    """Start the slash command web endpoint.

    Example:
        mstmeetings serve --port 8080
    """
    import uvicorn
    from .web.app import create_app

    config = get_config()
    host = host or config.app.web_host
    port = port or config.app.web_port

    try:
        app = create_app()
    except (ConfigurationError, PlatformAPIError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"🌐 Serving /{config.plugin.trigger} on {host}:{port}")
    uvicorn.run(app, host=host, port=port)


@cli.command()
@click.option("--team-id", required=True, help="Team to register the command in")
@click.option("--url", required=True, help="Public URL of the /command endpoint")
def register(team_id, url):
    """Register the slash command with Mattermost."""
    config = get_config()
    client = MattermostClient(config.mattermost)

    try:
        command = client.register_command(get_command_definition(config.plugin.trigger), team_id, url)
    except PlatformAPIError as e:
        click.echo(f"❌ Registration failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"✅ Registered /{config.plugin.trigger} (id: {command.get('id')})")
    click.echo(f"Set command_token in config.yaml to: {command.get('token')}")


@cli.command("check-config")
@click.option("--connect", is_flag=True, help="Also test the Mattermost connection")
def check_config(connect):
    """Validate configuration."""
    config = get_config()
    errors = config.validate()

    if errors:
        click.echo("❌ Configuration errors:")
        for error in errors:
            click.echo(f"  - {error}")
        sys.exit(1)

    click.echo("✅ Configuration valid")

    if connect:
        try:
            MattermostClient(config.mattermost).test_connection()
        except PlatformAPIError as e:
            click.echo(f"❌ Mattermost connection failed: {e}", err=True)
            sys.exit(1)
        click.echo("✅ Mattermost connection OK")


if __name__ == "__main__":
    cli()
