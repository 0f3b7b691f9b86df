"""Main CLI entry point for the GitLab to GitHub migration tool."""

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..config.config import Config
from ..errors import ConfigError
from ..migration.engine import MigrationEngine
from ..models.outcome import MigrationSummary, OutcomeStatus, StepOutcome
from ..utils.logging import setup_logging

console = Console()

ENVIRONMENT_HELP = """\b
Environment variables (read from the environment or .env):
  GITLAB_TOKEN       GitLab access token (migrate, direct)
  GITHUB_TOKEN       GitHub access token
  GITHUB_ORG         GitHub organization name
  CSV_FILE           Path to the progress CSV file (migrate, delete)
  TMP_FILE           Staging file for CSV updates (optional)
  REPOS_DIR          Directory to clone repos into (migrate, direct)
  GIT_REWRITE_AUTHORS, GIT_AUTHOR_NAME, GIT_AUTHOR_EMAIL
                     Replace commit authorship before pushing
  LOG_LEVEL          Log level (default INFO)
  LOG_FILE, LOG_DIR  Log file, or directory for log/migration_<timestamp>.log
  LOG_TO_FILE        Set to false to log to stderr only
"""


class MigrateGroup(click.Group):
    """Command group that reports unknown commands with exit status 1."""

    def resolve_command(self, ctx: click.Context, args):
        cmd_name = args[0] if args else None
        if (
            cmd_name
            and not cmd_name.startswith('-')
            and self.get_command(ctx, cmd_name) is None
        ):
            click.echo(f'Unknown command: {cmd_name}', err=True)
            click.echo(ctx.get_help(), err=True)
            ctx.exit(1)
        return super().resolve_command(ctx, args)


@click.group(cls=MigrateGroup, invoke_without_command=True, epilog=ENVIRONMENT_HELP)
@click.version_option(version=__version__, prog_name='gitlab-to-github')
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=True),
    help='Path to configuration file',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging',
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """GitLab to GitHub Migration Tool - Resumable repository migration."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    # Setup basic logging first (will be enhanced later with config)
    setup_logging('DEBUG' if verbose else 'INFO')

    if ctx.invoked_subcommand is None:
        ctx.invoke(migrate)


@cli.command('help')
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show this help message."""
    click.echo(ctx.parent.get_help())


@cli.command()
@click.pass_context
def migrate(ctx: click.Context) -> None:
    """Run the migration process using the CSV file (default)."""
    console.print(
        Panel.fit(
            '[bold blue]GitLab to GitHub Migration[/bold blue]\n'
            'Starting migration process...',
            border_style='blue',
        )
    )

    config = _prepare(ctx, 'migrate')
    try:
        engine = MigrationEngine(config)
        try:
            summary = engine.migrate()
        finally:
            engine.close()
    except Exception as e:
        _fail(ctx, f'Migration failed: {e}')

    _display_summary(summary, 'Migration Summary')
    if summary.failed:
        sys.exit(1)


@cli.command('migrate-single')
@click.argument('source_url')
@click.argument('slug')
@click.pass_context
def migrate_single(ctx: click.Context, source_url: str, slug: str) -> None:
    """Migrate a single repository directly.

    SOURCE_URL is the GitLab repository URL; SLUG is the directory name for
    the local clone and the GitHub repository name.
    """
    config = _prepare(ctx, 'direct')
    try:
        engine = MigrationEngine(config)
        try:
            outcome = engine.migrate_single(source_url, slug)
        finally:
            engine.close()
    except Exception as e:
        _fail(ctx, f'Migration failed: {e}')

    _display_outcome(outcome)
    if outcome.status != OutcomeStatus.COMPLETED:
        sys.exit(1)


cli.add_command(migrate_single, name='direct')


@cli.command()
@click.pass_context
def delete(ctx: click.Context) -> None:
    """Delete every repository listed in the CSV file from GitHub."""
    config = _prepare(ctx, 'delete')
    try:
        engine = MigrationEngine(config)
        try:
            summary = engine.delete_all()
        finally:
            engine.close()
    except Exception as e:
        _fail(ctx, f'Deletion failed: {e}')

    _display_summary(summary, 'Deletion Summary')
    if summary.failed:
        sys.exit(1)


@cli.command('delete-single')
@click.argument('slug')
@click.pass_context
def delete_single(ctx: click.Context, slug: str) -> None:
    """Delete a single GitHub repository (name without organization)."""
    config = _prepare(ctx, 'delete-single')
    try:
        engine = MigrationEngine(config)
        try:
            deleted = engine.delete_single(slug)
        finally:
            engine.close()
    except Exception as e:
        _fail(ctx, f'Deletion failed: {e}')

    if not deleted:
        console.print(f'[red]✗[/red] Failed to delete {slug}')
        sys.exit(1)
    console.print(f'[green]✓[/green] Deleted {slug}')


def _fail(ctx: click.Context, message: str) -> NoReturn:
    console.print(f'[red]✗[/red] {message}')
    if ctx.obj.get('verbose'):
        console.print_exception()
    sys.exit(1)


def _prepare(ctx: click.Context, command: str) -> Config:
    """Load configuration, check it for ``command`` and configure logging."""
    try:
        config = _load_config(ctx).require(command)
    except (ConfigError, FileNotFoundError) as e:
        _fail(ctx, str(e))

    _setup_logging_with_config(ctx, config, command)
    return config


def _load_config(ctx: click.Context) -> Config:
    """Load configuration from file or environment."""
    config_path = ctx.obj.get('config_path')

    try:
        if config_path:
            return Config.from_file(config_path)

        default_paths = ['gitlab-to-github.yaml', '.gitlab-to-github.yaml']
        for path in default_paths:
            if Path(path).exists():
                return Config.from_file(path)

        return Config.from_env()
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigError(f'Invalid configuration: {e}')


def _setup_logging_with_config(
    ctx: click.Context, config: Config, command: str
) -> None:
    """Setup logging with configuration settings."""
    verbose = ctx.obj.get('verbose', False)

    # Allow verbose flag to override level
    log_level = 'DEBUG' if verbose else config.logging.level
    prefix = 'delete_repos' if command.startswith('delete') else 'migration'
    setup_logging(level=log_level, log_file=config.logging.resolve_file(prefix))


def _display_summary(summary: MigrationSummary, title: str) -> None:
    """Display run summary results."""
    table = Table(title=title)
    table.add_column('Total', style='blue')
    table.add_column('Completed', style='green')
    table.add_column('Failed', style='red')
    table.add_column('Skipped', style='yellow')

    counts = summary.counts()
    table.add_row(
        str(counts['total']),
        str(counts['completed']),
        str(counts['failed']),
        str(counts['skipped']),
    )
    console.print(table)

    if summary.completed_at:
        duration = summary.completed_at - summary.started_at
        console.print(f'\n[blue]Duration:[/blue] {duration}')

    failures = summary.failures
    if failures:
        console.print(f'\n[red]Errors ({len(failures)}):[/red]')
        for outcome in failures[:5]:
            console.print(f'  • {outcome.slug} ({outcome.step}): {outcome.cause}')
        if len(failures) > 5:
            console.print(f'  ... and {len(failures) - 5} more errors')


def _display_outcome(outcome: StepOutcome) -> None:
    if outcome.status == OutcomeStatus.COMPLETED:
        console.print(f'[green]✓[/green] Migrated {outcome.slug}')
    elif outcome.status == OutcomeStatus.SKIPPED:
        console.print(f'[yellow]![/yellow] Skipped: {outcome.reason}')
    else:
        console.print(
            f'[red]✗[/red] {outcome.slug} failed at {outcome.step}: {outcome.cause}'
        )


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(1)
    except Exception as e:
        console.print(f'[red]Error: {e}[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
