"""Drupal site installation: database settings and drush site:install."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import (
    DATABASE_SETTINGS_TEMPLATE,
    DEFAULT_SITE_DIRECTORY,
    DRUPAL_PROFILES,
    SETTINGS_DATABASES_PATTERN,
    SETTINGS_LOCAL_FILE,
)
from .errors import InstallError
from .executables import Drush
from .models import DatabaseConfig, InstallOptions
from .process import CommandRunner
from .prompts import Prompter

logger = logging.getLogger(__name__)


def render_database_settings(database: DatabaseConfig) -> str:
    return DATABASE_SETTINGS_TEMPLATE.format(
        database=database.database,
        username=database.username,
        password=database.password,
        host=database.host,
        port=database.port,
        driver=database.driver,
    )


def append_database_settings(settings_file: Path, database: DatabaseConfig) -> bool:
    """Append the connection snippet unless one is already defined.

    Returns True when the file was modified.
    """
    if not settings_file.exists():
        raise InstallError(f"Unable to locate the Drupal {SETTINGS_LOCAL_FILE} file.")
    try:
        contents = settings_file.read_text(encoding="utf-8")
        if SETTINGS_DATABASES_PATTERN.search(contents):
            return False
        with open(settings_file, "a", encoding="utf-8", newline="") as f:
            f.write("\r\n" + render_database_settings(database))
    except OSError as e:
        raise InstallError(
            f"Error occurred when saving database connection to the Drupal {SETTINGS_LOCAL_FILE}: {e}"
        )
    return True


class DrupalInstaller:
    def __init__(
        self,
        runner: CommandRunner,
        prompter: Prompter,
        root_path: Path,
        database: DatabaseConfig | None = None,
        drush_binary: str | None = None,
        defaults: InstallOptions | None = None,
    ) -> None:
        self.runner = runner
        self.prompter = prompter
        self.root_path = root_path
        self.database = database
        self.drush_binary = drush_binary
        self.defaults = defaults or InstallOptions()

    def pre_install(self) -> bool:
        """Write the database connection into settings.local.php.

        Skipped when no database is configured.
        """
        if self.database is None:
            logger.info("No database configured; skipping %s setup", SETTINGS_LOCAL_FILE)
            return False
        site_dir = self.prompter.ask(
            "Input the Drupal site directory path.",
            default=DEFAULT_SITE_DIRECTORY,
        )
        settings_file = self.root_path / site_dir / SETTINGS_LOCAL_FILE
        changed = append_database_settings(settings_file, self.database)
        if not changed:
            logger.info("%s already defines $databases", settings_file)
        return changed

    def ask_options(self) -> InstallOptions:
        d = self.defaults
        profile_default = d.profile if d.profile in DRUPAL_PROFILES else DRUPAL_PROFILES[0]
        return InstallOptions(
            profile=self.prompter.choice("Select the Drupal profile?", list(DRUPAL_PROFILES), profile_default),
            site_name=self.prompter.ask("Input the Drupal site name?", default=d.site_name),
            site_mail=self.prompter.ask("Input the Drupal site email?", default=d.site_mail),
            account_name=self.prompter.ask("Input the Drupal account username?", default=d.account_name),
            account_pass=self.prompter.ask("Input the Drupal account password?", default=d.account_pass),
            account_mail=self.prompter.ask("Input the Drupal account email?", default=d.account_mail),
        )

    def site_install_command(self, options: InstallOptions) -> list[str]:
        return (
            Drush(self.drush_binary)
            .set_command("site:install")
            .set_argument(options.profile)
            .set_options(options.to_drush_options())
            .build()
        )

    def main_install(self) -> InstallOptions:
        options = self.ask_options()
        result = self.runner.run(self.site_install_command(options))
        if not result.successful:
            raise InstallError(f"drush site:install failed (exit={result.returncode}).")
        return options
