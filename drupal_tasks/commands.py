"""Drupal commands: drush passthrough, accounts, login links and patching."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

import click
from rich.console import Console
from rich.markup import escape

from . import display
from .composer import ComposerProject, writer_for
from .config import (
    DEFAULT_ACCOUNT_EMAIL,
    DEFAULT_ACCOUNT_PASSWORD,
    DEFAULT_ACCOUNT_ROLE,
    USER_LOOKUP_TYPES,
)
from .drupal_api import DrupalApiClient
from .errors import CommandError, DrupalTasksError, InvalidInputError
from .executables import Executable, create_executable
from .installer import DrupalInstaller
from .issues import IssueResolver, select_patch
from .models import CommandResult, PatchSelection
from .process import CommandRunner
from .prompts import Prompter, normalize_issue_id
from .settings import Settings

logger = logging.getLogger(__name__)


class DrupalCommands:
    """Operator-facing Drupal commands.

    Each public command returns a process exit code. ``DrupalTasksError``
    is reported on the console and never escapes a command.
    """

    def __init__(
        self,
        settings: Settings,
        runner: Optional[CommandRunner] = None,
        api: Optional[DrupalApiClient] = None,
        prompter: Optional[Prompter] = None,
        console: Optional[Console] = None,
        launch: Callable[[str], Any] = click.launch,
    ) -> None:
        self.settings = settings
        self.console = console or display.console
        self.runner = runner or CommandRunner(
            settings.root_path, settings.exec_prefix
        )
        self.api = api or DrupalApiClient(timeout_s=settings.timeout_s)
        self.prompter = prompter or Prompter(self.console)
        self.launch = launch

    # ── Helpers ─────────────────────────────────────────────────

    def _drush(self) -> Executable:
        return create_executable("drush", self.settings.drush_binary)

    def drush_exec(
        self,
        command: str,
        arguments: Optional[list[Any]] = None,
        options: Optional[dict[str, Any]] = None,
        silent: bool = False,
    ) -> CommandResult:
        argv = (
            self._drush()
            .set_command(command)
            .set_arguments(arguments or [])
            .set_options(options or {})
            .build()
        )
        return self.runner.run(argv, capture=silent)

    def drush_user_information(self, usernames: str | list[str], options: Optional[dict[str, Any]] = None) -> Any:
        if isinstance(usernames, str):
            usernames = [usernames]
        options = {**(options or {}), "format": "json"}
        result = self.drush_exec("user:information", [",".join(usernames)], options, silent=True)
        if not result.successful or not result.message:
            return {}
        try:
            return json.loads(result.message)
        except json.JSONDecodeError as e:
            raise CommandError(f"Unable to parse drush user information: {e}")

    def _fail(self, error: Exception) -> int:
        logger.debug("Command failed", exc_info=error)
        display.error(str(error), self.console)
        return 1

    # ── Commands ────────────────────────────────────────────────

    def drush(self, drush_command: list[str]) -> int:
        """Execute an arbitrary drush command."""
        try:
            argv = self._drush().set_arguments(list(drush_command)).build()
            result = self.runner.run(argv)
        except DrupalTasksError as e:
            return self._fail(e)
        return 0 if result.successful else result.returncode

    def create_account(
        self,
        username: str,
        role: str = DEFAULT_ACCOUNT_ROLE,
        email: str = DEFAULT_ACCOUNT_EMAIL,
        password: str = DEFAULT_ACCOUNT_PASSWORD,
    ) -> int:
        """Create a Drupal account (unless it exists) and grant it a role."""
        try:
            user_info = self.drush_user_information(username, {"mail": email})
            steps = []
            if not user_info:
                steps.append(("user:create", [username], {"mail": email, "password": password}))
            steps.append(("user:role:add", [role, username], {"mail": email}))

            for command, arguments, options in steps:
                if not self.drush_exec(command, arguments, options).successful:
                    raise CommandError("Error was thrown when running command.")
        except DrupalTasksError as e:
            return self._fail(e)

        display.success(f"Account '{username}' has the '{role}' role.", self.console)
        return 0

    def login(self, lookup_value: str = "1", lookup_type: str = "id", no_browser: bool = False) -> int:
        """Generate a one-time login link and open it in the browser."""
        try:
            if lookup_type not in USER_LOOKUP_TYPES:
                raise InvalidInputError(f"The {lookup_type} user lookup type is invalid.")
            result = self.drush_exec(
                "user:login",
                options={USER_LOOKUP_TYPES[lookup_type]: lookup_value},
                silent=True,
            )
            if not result.successful:
                raise CommandError(
                    result.stderr.strip() or "Unable to generate a Drupal login link."
                )
        except DrupalTasksError as e:
            return self._fail(e)

        if no_browser:
            self.console.print(escape(result.message))
        else:
            self.launch(result.message)
        return 0

    def patch(self) -> int:
        """Resolve Drupal.org issue patches and add them to composer."""
        try:
            project = ComposerProject.load(self.settings.root_path)
        except DrupalTasksError as e:
            return self._fail(e)

        resolver = IssueResolver(self.api)
        writer = writer_for(project, self.runner, self.settings.composer_binary)
        applied = 0

        while True:
            issue_id = self.prompter.ask(
                "Input the Drupal issue URL or ID",
                validator=normalize_issue_id,
            )
            try:
                selection = self._select_issue_patch(resolver, project, issue_id)
                writer.apply(selection)
                if selection:
                    applied += 1
                    display.display_selection(selection, self.console)
                else:
                    self.console.print(f"[yellow]No patches to apply for issue #{issue_id}.[/yellow]")
            except DrupalTasksError as e:
                self._fail(e)
            if not self.prompter.confirm("Patch another Drupal package?"):
                break

        if not applied:
            return 0
        composer_update = create_executable("composer", self.settings.composer_binary)
        result = self.runner.run(composer_update.set_command("update").set_option("lock").build())
        if not result.successful:
            return self._fail(CommandError("composer update --lock failed."))
        display.success("Drupal patches have been applied.", self.console)
        return 0

    def _select_issue_patch(
        self,
        resolver: IssueResolver,
        project: ComposerProject,
        issue_id: int,
    ) -> PatchSelection:
        definition = resolver.resolve(issue_id)
        display.display_issue_definition(definition, self.console)
        packages = project.drupal_packages()
        if not packages:
            raise InvalidInputError("No Drupal packages are required in composer.json.")
        return select_patch(definition, packages, self.prompter.choice)

    def install(self) -> int:
        """Install Drupal: write database settings, then run site:install."""
        installer = DrupalInstaller(
            self.runner,
            self.prompter,
            self.settings.root_path,
            database=self.settings.database,
            drush_binary=self.settings.drush_binary,
        )
        try:
            if installer.pre_install():
                display.success(
                    "Successfully set up the database connection in the Drupal settings.local.php",
                    self.console,
                )
            installer.main_install()
        except DrupalTasksError as e:
            return self._fail(e)

        display.success("The Drupal installation has been successfully completed!", self.console)
        return 0
