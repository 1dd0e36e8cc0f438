"""Composer manifest access and patch configuration writers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from .config import (
    COMPOSER_MANIFEST,
    DRUPAL_CORE_PACKAGE,
    DRUPAL_CORE_RECOMMENDED_PACKAGE,
    DRUPAL_VENDOR_PREFIX,
)
from .datastore import JsonDatastore
from .errors import ConfigurationError, WriteError
from .executables import Composer
from .models import PatchSelection
from .process import CommandRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComposerProject:
    root_path: Path
    manifest: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, root_path: Path) -> "ComposerProject":
        path = Path(root_path) / COMPOSER_MANIFEST
        if not path.exists():
            raise ConfigurationError(f"Unable to locate {path}.")
        try:
            manifest = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Malformed {COMPOSER_MANIFEST}: {e}")
        return cls(root_path=Path(root_path), manifest=manifest)

    @property
    def patches_file(self) -> Path | None:
        name = (self.manifest.get("extra") or {}).get("patches-file")
        return self.root_path / name if name else None

    def drupal_packages(self) -> list[str]:
        """Drupal-namespaced packages, with ``drupal/core`` standing in for core-recommended."""
        names = [
            *(self.manifest.get("require") or {}),
            *(self.manifest.get("require-dev") or {}),
        ]
        packages = list(dict.fromkeys(n for n in names if n.startswith(DRUPAL_VENDOR_PREFIX)))
        if DRUPAL_CORE_RECOMMENDED_PACKAGE in packages and DRUPAL_CORE_PACKAGE not in packages:
            packages.append(DRUPAL_CORE_PACKAGE)
        return packages


class ConfigurationWriter(Protocol):
    def apply(self, selection: PatchSelection) -> None: ...


class PatchesFileWriter:
    """Merges selections into a dedicated patches JSON file."""

    def __init__(self, path: Path) -> None:
        self.store = JsonDatastore(path)

    def apply(self, selection: PatchSelection) -> None:
        if not selection:
            return
        try:
            self.store.merge({"patches": selection})
        except (OSError, ValueError) as e:
            raise WriteError(f"Unable to update patches file {self.store.path}: {e}")
        logger.info("Updated %s", self.store.path)


class ComposerConfigWriter:
    """Merges selections into composer.json through ``composer config``."""

    def __init__(self, runner: CommandRunner, binary: str | None = None) -> None:
        self.runner = runner
        self.binary = binary

    def command(self, package: str, patches: dict[str, str]) -> list[str]:
        return (
            Composer(self.binary)
            .set_command("config")
            .set_option("json")
            .set_option("merge")
            .set_arguments([f"extra.patches.{package}", json.dumps(patches)])
            .build()
        )

    def apply(self, selection: PatchSelection) -> None:
        for package, patches in selection.items():
            if not isinstance(patches, dict):
                continue
            result = self.runner.run(self.command(package, patches))
            if not result.successful:
                raise WriteError(
                    f"composer config failed for {package} (exit={result.returncode})."
                )


def writer_for(project: ComposerProject, runner: CommandRunner, composer_binary: str | None = None) -> ConfigurationWriter:
    if project.patches_file is not None:
        return PatchesFileWriter(project.patches_file)
    return ComposerConfigWriter(runner, composer_binary)
