"""
GitHub Pulse Overview CLI - Weekly pull-request activity of GitHub repositories.

Examples:
    github-pulse-overview -r westh/telemaster,octokit/octokit.js
    github-pulse-overview -f repos.json -t $GITHUB_TOKEN
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path

import click
from dotenv import load_dotenv

# Load .env file from current directory
load_dotenv()
load_dotenv(Path.cwd() / ".env")

from . import __version__
from .classify import classify
from .config import ConfigError, PulseConfig, load_repo_file, parse_repo_list
from .github import GitHubClient, fetch_all_pulls
from .render import (
    render_activity,
    render_error,
    render_repo_header,
    resolve_hyperlinks,
)


logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr, at DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def validate_options(file: str | None, repos: str | None) -> None:
    """Exactly one of -f and -r must be given."""
    if file and repos:
        click.echo("Cannot specify both -f and -r, see --help")
        sys.exit(1)

    if not file and not repos:
        click.echo("Some repositories need to be specified, see --help")
        sys.exit(1)


def run(config: PulseConfig, now: datetime | None = None) -> int:
    """
    Fetch, classify and print the activity of every configured repository.

    Returns:
        Number of repositories whose pull requests could not be fetched
    """
    client = GitHubClient(
        token=config.token,
        base_url=config.api_base_url,
        timeout=config.timeout,
    )
    results = fetch_all_pulls(client, config.repos, max_workers=config.max_workers)

    hyperlinks = resolve_hyperlinks(config.hyperlinks, click.get_text_stream("stdout"))
    window = timedelta(days=config.window_days)
    failed = 0

    for index, result in enumerate(results):
        click.echo(render_repo_header(result.repo))

        if result.ok:
            activity = classify(result.pulls, now=now, window=window)
            lines = render_activity(activity, hyperlinks=hyperlinks, window_days=config.window_days)
        else:
            failed += 1
            lines = render_error(result.error)

        for line in lines:
            click.echo(line)

        if index < len(results) - 1:
            click.echo("")

    return failed


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="github-pulse-overview")
@click.option("-t", "--token", default=None,
              help="The GitHub token to use for authentication, only needed for private repositories")
@click.option("-f", "--file", "file", default=None,
              help="The file containing the repositories to get an overview of, must be JSON formatted, cannot be combined with -r")
@click.option("-r", "--repos", default=None,
              help="Comma separated list of repositories to get an overview of, e.g. westh/telemaster,octokit/octokit.js, cannot be combined with -f")
@click.option("--hyperlinks/--no-hyperlinks", default=None,
              help="Force clickable links on or off (default: detect terminal support)")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
def main(token: str | None, file: str | None, repos: str | None, hyperlinks: bool | None, verbose: bool):
    """CLI to easily get an overview of the pulse of one or multiple repositories on GitHub."""
    configure_logging(verbose)
    validate_options(file, repos)

    try:
        config = PulseConfig.load()
        config.repos = load_repo_file(file) if file else parse_repo_list(repos)
    except ConfigError as e:
        click.echo(str(e))
        sys.exit(1)

    if not config.repos:
        click.echo("Some repositories need to be specified, see --help")
        sys.exit(1)

    # CLI options override config
    if token:
        config.token = token
    if hyperlinks is not None:
        config.hyperlinks = "true" if hyperlinks else "false"

    logger.debug("Checking %d repositories: %s", len(config.repos), ", ".join(config.repos))
    failed = run(config)
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
