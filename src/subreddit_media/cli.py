"""CLI interface for subreddit-media.

Commands:
    fetch   - Fetch image links from a subreddit's hot posts
    hosts   - Show the hostnames allowed in output
    setup   - Write the (non-secret) config file
    status  - Show credential and config status
"""

import json
import sys
from dataclasses import asdict
from pathlib import Path

import click

from .config import (
    CLIENT_ID_ENV,
    CLIENT_SECRET_ENV,
    CONFIG_FILE,
    MAX_LIMIT,
    AppConfig,
    config_exists,
    load_config,
    load_credentials,
    save_config,
)
from .logging_config import setup_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", type=click.Path(), default=None, help="Config file path")
@click.pass_context
def main(ctx, verbose, config):
    """Subreddit Media — Fetch direct image links from hot subreddit posts."""
    setup_logging(debug=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else CONFIG_FILE


def _load_config_or_exit(config_path: Path) -> AppConfig:
    try:
        return load_config(config_path)
    except ValueError as e:
        click.echo(f"Error: Invalid config {config_path}: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("subreddit_url")
@click.option(
    "-n",
    "--limit",
    type=click.IntRange(1, MAX_LIMIT),
    default=None,
    help="Number of hot posts to inspect (1-100)",
)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def fetch(ctx, subreddit_url, limit, as_json):
    """Fetch image links from a subreddit's hot posts.

    SUBREDDIT_URL looks like https://www.reddit.com/r/pics/
    """
    # Lazy imports so --help stays fast
    from .errors import RedditMediaError
    from .scraper import Scraper

    config = _load_config_or_exit(ctx.obj["config_path"])
    effective_limit = limit if limit is not None else config.limit

    try:
        result = Scraper(config).scrape(subreddit_url, effective_limit)
    except RedditMediaError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        rows = [
            {**asdict(post), "media_type": post.media_type.value}
            for post in result.media
        ]
        # stdout stays valid JSON
        click.echo(result.message, err=True)
        click.echo(json.dumps(rows, indent=2, ensure_ascii=False))
        return

    click.echo(result.message)
    for post in result.media:
        click.echo(f"\n{post.title}")
        click.echo(f"  {post.media_url}")
        click.echo(f"  {post.source_url}")


@main.command()
@click.pass_context
def hosts(ctx):
    """Show the hostnames image links may come from."""
    from .sanitizer import build_allowed_hostnames

    config = _load_config_or_exit(ctx.obj["config_path"])
    for hostname in sorted(build_allowed_hostnames(config.remote_hostnames)):
        click.echo(hostname)


@main.command()
@click.pass_context
def setup(ctx):
    """Write fetch settings and extra image hostnames to the config file."""
    config_path = ctx.obj["config_path"]
    current = _load_config_or_exit(config_path)

    click.echo("Subreddit Media — Setup")
    click.echo("=" * 40)
    click.echo()
    click.echo("API credentials are read from the environment:")
    click.echo(f"  {CLIENT_ID_ENV} and {CLIENT_SECRET_ENV}")
    click.echo("Create a 'script' app at https://www.reddit.com/prefs/apps to get them.")
    click.echo()

    hostnames = click.prompt(
        "Extra image hostnames (comma separated)",
        default=", ".join(current.remote_hostnames),
        show_default=False,
    )
    limit = click.prompt(
        "Default post limit", type=click.IntRange(1, MAX_LIMIT), default=current.limit
    )
    timeout = click.prompt(
        "Request timeout (seconds)",
        type=click.FloatRange(min=0, min_open=True),
        default=current.timeout,
    )

    config = AppConfig(
        remote_hostnames=[h.strip() for h in hostnames.split(",") if h.strip()],
        limit=limit,
        timeout=timeout,
        user_agent=current.user_agent,
    )
    save_config(config, config_path)
    click.echo(f"\nConfig saved to {config_path}")


@main.command()
@click.pass_context
def status(ctx):
    """Show credential and config status."""
    config_path = ctx.obj["config_path"]
    credentials = load_credentials()

    click.echo("Subreddit Media — Status")
    click.echo("=" * 40)
    click.echo(
        f"Credentials: {'Found' if credentials.complete else 'Missing'} "
        f"({CLIENT_ID_ENV}, {CLIENT_SECRET_ENV})"
    )
    click.echo(
        f"Config: {'Found' if config_exists(config_path) else 'Defaults'} ({config_path})"
    )

    config = _load_config_or_exit(config_path)
    click.echo(f"Default limit: {config.limit}")
    click.echo(f"Timeout: {config.timeout:g}s")
    if config.remote_hostnames:
        click.echo(f"Extra image hostnames: {', '.join(config.remote_hostnames)}")
