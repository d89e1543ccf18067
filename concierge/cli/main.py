# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Concierge CLI - Main entry point

Usage:
    concierge stale                  - Bump stale pull requests in every configured repository
    concierge opened EVENT_JSON      - Annotate an opened pull request from a webhook payload
    concierge config                 - Show the parsed configuration
"""

import json
from pathlib import Path
from typing import List, Optional

import bittensor as bt
import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from concierge import __version__
from concierge.classes import CommentPostIntent
from concierge.constants import DEFAULT_CONFIG_PATH
from concierge.errors import ConciergeError
from concierge.policy.opened_pull_request import opened_pull_request_handler
from concierge.policy.stale_pull_request import stale_pull_request_job
from concierge.settings import Settings, load_repositories_settings
from concierge.utils.github_api_tools import post_comment
from concierge.utils.logging import setup_events_logger
from concierge.utils.utils import mask_secret

console = Console()

config_option = click.option(
    '--config',
    'config_path',
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    type=click.Path(dir_okay=False),
    help='Path to the repository settings file',
)
dry_run_option = click.option('--dry-run', is_flag=True, help='Decide comments without posting them')
events_dir_option = click.option(
    '--events-dir', type=click.Path(file_okay=False), default=None, help='Directory for the posted-comments log'
)
debug_option = click.option('--debug', is_flag=True, help='Enable debug logging')


def _load_settings(config_path: str) -> Settings:
    load_dotenv()
    try:
        return load_repositories_settings(config_path)
    except ConciergeError as e:
        raise click.ClickException(str(e))


def _print_intents(intents: List[CommentPostIntent], posted: bool) -> None:
    if not intents:
        console.print('[dim]No comments to post.[/dim]')
        return

    table = Table(show_header=True, header_style='bold magenta')
    table.add_column('Target', style='cyan')
    table.add_column('Comment', style='green')
    for intent in intents:
        first_line = intent.body.splitlines()[0] if intent.body else ''
        table.add_row(intent.target_url, first_line)

    console.print(table)
    verb = 'Posted' if posted else 'Would post'
    console.print(f'\n[bold]{verb} {len(intents)} comment(s)[/bold]')


@click.group()
@click.version_option(version=__version__, prog_name='concierge')
def cli():
    """Concierge CLI - Pull request policy bot"""
    pass


@cli.command('stale')
@config_option
@dry_run_option
@events_dir_option
@debug_option
def stale(config_path: str, dry_run: bool, events_dir: Optional[str], debug: bool):
    """Bump stale pull requests for all configured repositories.

    \b
    Examples:
        concierge stale
        concierge stale --config ./config.json --dry-run
    """
    if debug:
        bt.logging.set_debug(True)
    settings = _load_settings(config_path)
    events_logger = setup_events_logger(events_dir) if events_dir else None

    try:
        intents = stale_pull_request_job(
            settings.repositories,
            bot_login=settings.bot_login,
            dry_run=dry_run,
            events_logger=events_logger,
        )
    except ConciergeError as e:
        raise click.ClickException(str(e))

    _print_intents(intents, posted=not dry_run)


@cli.command('opened')
@click.argument('event_json', type=click.Path(exists=True, dir_okay=False))
@click.option('--repository', default=None, help='Repository (owner/name); defaults to the one in the payload')
@config_option
@dry_run_option
@events_dir_option
@debug_option
def opened(
    event_json: str,
    repository: Optional[str],
    config_path: str,
    dry_run: bool,
    events_dir: Optional[str],
    debug: bool,
):
    """Comment on a newly opened pull request.

    \b
    Arguments:
        EVENT_JSON: Path to a `pull_request` webhook payload

    \b
    Examples:
        concierge opened event.json
        concierge opened event.json --repository CesiumGS/cesium --dry-run
    """
    if debug:
        bt.logging.set_debug(True)
    settings = _load_settings(config_path)

    try:
        event = json.loads(Path(event_json).read_text())
    except json.JSONDecodeError as e:
        raise click.ClickException(f'Invalid JSON in {event_json}: {e}')

    if repository is None and isinstance(event, dict) and isinstance(event.get('repository'), dict):
        repository = event['repository'].get('full_name')
    repository_settings = settings.repositories.get(repository) if repository else None
    if repository_settings is None:
        raise click.ClickException(f'Repository {repository} is not configured')

    events_logger = setup_events_logger(events_dir) if events_dir else None

    try:
        intents = opened_pull_request_handler(
            event,
            repository_settings.headers,
            repository_settings.third_party_folders,
            repository_settings.check_changes_md,
        )
        if not dry_run:
            for intent in intents:
                post_comment(intent, repository_settings.headers)
                if events_logger is not None:
                    events_logger.event(f'opened pull request reminder posted to {intent.target_url}')
    except ConciergeError as e:
        raise click.ClickException(str(e))

    _print_intents(intents, posted=not dry_run)


@cli.command('config')
@config_option
def show_config(config_path: str):
    """Show the parsed repository settings."""
    settings = _load_settings(config_path)

    console.print('\n[bold cyan]Concierge Configuration[/bold cyan]\n')
    console.print(f'[cyan]Bot login:[/cyan] {settings.bot_login}\n')

    table = Table(show_header=True, header_style='bold magenta')
    table.add_column('Repository', style='cyan')
    table.add_column('Token', style='dim')
    table.add_column('Max days', justify='right')
    table.add_column('Branch')
    table.add_column('Third-party folders')
    table.add_column('CHANGES.md')
    table.add_column('Stale template')

    for name, repository_settings in sorted(settings.repositories.items()):
        token = repository_settings.headers.get('Authorization', '').replace('token ', '', 1)
        table.add_row(
            name,
            mask_secret(token),
            str(repository_settings.max_days_since_update),
            repository_settings.default_branch,
            ', '.join(repository_settings.third_party_folders) or '-',
            'yes' if repository_settings.check_changes_md else 'no',
            'yes' if repository_settings.stale_pull_request_template else 'no',
        )

    console.print(table)
    console.print(f'\n[dim]Config file: {settings.path}[/dim]')


def main():
    """Main entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
