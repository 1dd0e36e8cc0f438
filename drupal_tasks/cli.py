from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .commands import DrupalCommands
from .errors import ConfigurationError
from .settings import Settings


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(__version__, prog_name="drupal-tasks")
@click.option("--root", "root_path", type=click.Path(file_okay=False), help="Drupal project root (default: cwd).")
@click.option("--drush", "drush_binary", help="Path to the drush binary.")
@click.option("--composer", "composer_binary", help="Path to the composer binary.")
@click.option("--exec-prefix", help="Command prefix to run binaries in an environment, e.g. 'ddev exec'.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, root_path, drush_binary, composer_binary, exec_prefix, verbose) -> None:
    """Automate Drupal site operations with drush and composer."""
    _configure_logging(verbose)
    try:
        settings = Settings.from_env().with_overrides(
            root_path=root_path,
            drush_binary=drush_binary,
            composer_binary=composer_binary,
            exec_prefix=exec_prefix,
        )
    except ConfigurationError as e:
        raise click.ClickException(str(e))
    ctx.obj = DrupalCommands(settings)


@cli.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
@click.argument("drush_command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_obj
def drush(commands: DrupalCommands, drush_command) -> None:
    """Execute an arbitrary drush command."""
    sys.exit(commands.drush(list(drush_command)))


@cli.command("create-account")
@click.argument("username")
@click.option("--role", default="administrator", show_default=True, help="The account user role name.")
@click.option("--email", default="admin@example.com", show_default=True, help="The account user email address.")
@click.option("--password", default="admin", show_default=True, help="The account user password.")
@click.pass_obj
def create_account(commands: DrupalCommands, username, role, email, password) -> None:
    """Create a Drupal account with a role."""
    sys.exit(commands.create_account(username, role=role, email=email, password=password))


@cli.command()
@click.option("--lookup-value", default="1", show_default=True, help="The user lookup value.")
@click.option(
    "--lookup-type",
    default="id",
    show_default=True,
    help="The user lookup type: id, name or mail.",
)
@click.option("--no-browser", is_flag=True, help="Print the login link instead of opening it.")
@click.pass_obj
def login(commands: DrupalCommands, lookup_value, lookup_type, no_browser) -> None:
    """Log in to the Drupal application with a one-time link."""
    sys.exit(commands.login(lookup_value=lookup_value, lookup_type=lookup_type, no_browser=no_browser))


@cli.command()
@click.pass_obj
def patch(commands: DrupalCommands) -> None:
    """Add Drupal.org issue patches to the composer patch configuration."""
    sys.exit(commands.patch())


@cli.command()
@click.pass_obj
def install(commands: DrupalCommands) -> None:
    """Install a Drupal site (database settings + drush site:install)."""
    sys.exit(commands.install())


def main() -> None:
    cli(prog_name="drupal-tasks")


if __name__ == "__main__":
    main()
