"""Runtime settings resolved from the environment."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field, replace
from pathlib import Path

from .config import DEFAULT_DB_DRIVER, DEFAULT_DB_HOST, DEFAULT_DB_PORT, DRUPAL_API_TIMEOUT
from .errors import ConfigurationError
from .models import DatabaseConfig

ENV_PREFIX = "DRUPAL_TASKS_"


LOCAL_DRUSH = "vendor/bin/drush"


def _default_drush(root: Path) -> str:
    # Relative to the project root so it also resolves behind an exec prefix.
    return LOCAL_DRUSH if (root / LOCAL_DRUSH).exists() else "drush"


def _database_from_env(env: dict[str, str]) -> DatabaseConfig | None:
    name = env.get("DRUPAL_DB_NAME")
    if not name:
        return None
    port = env.get("DRUPAL_DB_PORT") or str(DEFAULT_DB_PORT)
    if not port.isdigit():
        raise ConfigurationError(f"DRUPAL_DB_PORT must be numeric, got '{port}'.")
    return DatabaseConfig(
        database=name,
        username=env.get("DRUPAL_DB_USER", name),
        password=env.get("DRUPAL_DB_PASSWORD", ""),
        host=env.get("DRUPAL_DB_HOST", DEFAULT_DB_HOST),
        port=int(port),
        driver=env.get("DRUPAL_DB_DRIVER", DEFAULT_DB_DRIVER),
    )


@dataclass(frozen=True)
class Settings:
    root_path: Path
    drush_binary: str = "drush"
    composer_binary: str = "composer"
    exec_prefix: tuple[str, ...] = field(default_factory=tuple)
    timeout_s: float = DRUPAL_API_TIMEOUT
    database: DatabaseConfig | None = None
    drush_configured: bool = False

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> "Settings":
        env = dict(os.environ if env is None else env)
        root = Path(env.get(f"{ENV_PREFIX}ROOT") or os.getcwd()).resolve()
        timeout = env.get(f"{ENV_PREFIX}TIMEOUT") or str(DRUPAL_API_TIMEOUT)
        try:
            timeout_s = float(timeout)
        except ValueError:
            raise ConfigurationError(f"{ENV_PREFIX}TIMEOUT must be a number, got '{timeout}'.")
        return cls(
            root_path=root,
            drush_binary=env.get(f"{ENV_PREFIX}DRUSH") or _default_drush(root),
            composer_binary=env.get(f"{ENV_PREFIX}COMPOSER") or "composer",
            exec_prefix=tuple(shlex.split(env.get(f"{ENV_PREFIX}EXEC_PREFIX", ""))),
            timeout_s=timeout_s,
            database=_database_from_env(env),
            drush_configured=bool(env.get(f"{ENV_PREFIX}DRUSH")),
        )

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if "drush_binary" in values:
            values["drush_configured"] = True
        if "root_path" in values:
            values["root_path"] = Path(values["root_path"]).resolve()
            if "drush_binary" not in values and not self.drush_configured:
                values["drush_binary"] = _default_drush(values["root_path"])
        if "exec_prefix" in values and isinstance(values["exec_prefix"], str):
            values["exec_prefix"] = tuple(shlex.split(values["exec_prefix"]))
        return replace(self, **values)
