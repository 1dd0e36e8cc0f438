from __future__ import annotations

from dataclasses import dataclass, field

from .config import (
    DEFAULT_ACCOUNT_EMAIL,
    DEFAULT_ACCOUNT_PASSWORD,
    DEFAULT_DB_DRIVER,
    DEFAULT_DB_HOST,
    DEFAULT_DB_PORT,
    DRUPAL_PROFILES,
)

# package name -> {"#<issue>: <title>": patch url}
PatchSelection = dict[str, dict[str, str]]


@dataclass
class IssueDefinition:
    issue_id: int | None
    title: str | None = None
    patches: list[str] | None = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"#{self.issue_id}: {self.title}"

    @property
    def is_selectable(self) -> bool:
        return bool(self.issue_id is not None and self.title is not None and self.patches)


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def successful(self) -> bool:
        return self.returncode == 0

    @property
    def message(self) -> str:
        return self.stdout.strip()


@dataclass(frozen=True)
class DatabaseConfig:
    database: str
    username: str
    password: str = ""
    host: str = DEFAULT_DB_HOST
    port: int = DEFAULT_DB_PORT
    driver: str = DEFAULT_DB_DRIVER


@dataclass(frozen=True)
class InstallOptions:
    profile: str = DRUPAL_PROFILES[0]
    site_name: str = "Drupal Demo"
    site_mail: str = "site@example.com"
    account_name: str = "admin"
    account_pass: str = DEFAULT_ACCOUNT_PASSWORD
    account_mail: str = DEFAULT_ACCOUNT_EMAIL

    def to_drush_options(self) -> dict[str, str]:
        return {
            "site-name": self.site_name,
            "site-mail": self.site_mail,
            "account-name": self.account_name,
            "account-pass": self.account_pass,
            "account-mail": self.account_mail,
        }
