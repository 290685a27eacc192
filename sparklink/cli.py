"""CLI commands for SparkLink."""

import base64
import re
import secrets
import sys
from pathlib import Path

import click


@click.group()
@click.version_option(package_name="sparklink")
def cli():
    """SparkLink - portfolio builder API."""


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option("--workers", default=1, type=int, help="Number of worker processes")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging level",
)
def serve(host, port, reload, workers, log_level):
    """Run the API server with hypercorn."""
    import asyncio
    import signal

    from hypercorn.asyncio import serve as hypercorn_serve
    from hypercorn.config import Config

    config = Config()
    config.application_path = "sparklink.asgi:app"
    config.bind = [f"{host}:{port}"]
    config.workers = 1 if reload else workers
    config.loglevel = log_level.upper()
    config.include_server_header = False

    if reload:
        config.use_reloader = True
        from hypercorn.run import run

        run(config)
        return

    from sparklink.asgi import app

    shutdown_event = asyncio.Event()
    loop = asyncio.new_event_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_event.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_event.set)
    try:
        loop.run_until_complete(hypercorn_serve(app, config, shutdown_trigger=shutdown_event.wait))
    finally:
        loop.close()


def generate_secret(fmt: str, length: int) -> str:
    if fmt == "hex":
        return secrets.token_hex(length)
    if fmt == "base64":
        return base64.b64encode(secrets.token_bytes(length)).decode("ascii")
    return secrets.token_urlsafe(length)


def write_env_secret(env_path: Path, key: str) -> None:
    """Set SECRET_KEY in a .env file, replacing any existing value."""
    content = env_path.read_text() if env_path.exists() else ""
    line = f"SECRET_KEY={key}"
    pattern = re.compile(r"^SECRET_KEY=.*$", re.MULTILINE)

    if pattern.search(content):
        content = pattern.sub(line, content)
    else:
        if content and not content.endswith("\n"):
            content += "\n"
        content += line + "\n"
    env_path.write_text(content)


@cli.command()
@click.option("--write", type=click.Path(), default=None, help="Write SECRET_KEY to a .env file")
@click.option(
    "--format",
    "fmt",
    default="urlsafe",
    type=click.Choice(["urlsafe", "hex", "base64"]),
    help="Output format for the secret key",
)
@click.option("--length", default=32, type=int, help="Number of random bytes")
def secret(write, fmt, length):
    """Generate a token signing secret."""
    key = generate_secret(fmt, length)
    if write:
        write_env_secret(Path(write), key)
        click.echo(f"SECRET_KEY written to {write}")
    else:
        click.echo(key)


async def _set_tier(db_url: str, username: str, tier: str) -> str:
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    from sparklink.db.services import user_service

    engine = create_async_engine(db_url)
    try:
        async_session = async_sessionmaker(engine, expire_on_commit=False)
        async with async_session() as session:
            user = await user_service.get_user_by_username(session, username)
            if user is None:
                raise click.ClickException(f"No user named {username!r}")
            user = await user_service.set_subscription(session, user, tier)
            return user.subscription
    finally:
        await engine.dispose()


@cli.command("set-tier")
@click.argument("username")
@click.argument("tier", type=click.Choice(["STARTER", "RISE", "BLAZE"], case_sensitive=False))
def set_tier(username, tier):
    """Change a user's subscription tier (existing content is kept)."""
    import asyncio

    from sparklink.config import get_settings

    new_tier = asyncio.run(_set_tier(get_settings().db.url, username, tier))
    click.echo(f"{username} is now on {new_tier}")


@cli.command(
    context_settings=dict(ignore_unknown_options=True, allow_extra_args=True),
)
@click.pass_context
def db(ctx):
    """Run alembic against the bundled migrations (e.g. ``sparklink db upgrade head``)."""
    from alembic.config import CommandLine, Config

    alembic_ini = Path(__file__).parent / "alembic.ini"
    if not alembic_ini.exists():
        click.echo("Error: Could not find alembic.ini", err=True)
        sys.exit(1)

    command_line = CommandLine()
    options = command_line.parser.parse_args(ctx.args or ["current"])
    if not hasattr(options, "cmd"):
        command_line.parser.error("too few arguments")

    config = Config(str(alembic_ini))
    config.cmd_opts = options
    fn, positional, kwarg = options.cmd
    fn(
        config,
        *[getattr(options, k, None) for k in positional],
        **{k: getattr(options, k, None) for k in kwarg},
    )


if __name__ == "__main__":
    cli()
