from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
import requests
from rich.console import Console

from drupal_tasks.drupal_api import DrupalApiClient
from drupal_tasks.models import CommandResult
from drupal_tasks.settings import Settings

API = "https://www.drupal.org/api-d7"


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Serves canned bodies by exact URL; unknown URLs are 404s."""

    def __init__(self, routes: dict | None = None):
        self.headers: dict[str, str] = {}
        self.routes: dict[str, object] = {}
        self.requested: list[str] = []
        for url, body in (routes or {}).items():
            self.add(url, body)

    def add(self, url: str, body):
        self.routes[url] = body if isinstance(body, (str, Exception)) else json.dumps(body)

    def get(self, url, timeout=None):
        self.requested.append(url)
        body = self.routes.get(url)
        if body is None:
            return FakeResponse("", 404)
        if isinstance(body, Exception):
            raise body
        return FakeResponse(body)


class FakeRunner:
    """Records argv lists and replies with queued results (default: success)."""

    def __init__(self):
        self.calls: list[tuple[list[str], bool]] = []
        self.results: list[CommandResult] = []

    def queue(self, returncode: int = 0, stdout: str = "", stderr: str = ""):
        self.results.append(CommandResult(args=(), returncode=returncode, stdout=stdout, stderr=stderr))

    def run(self, args, *, capture=False):
        self.calls.append((list(args), capture))
        if self.results:
            return self.results.pop(0)
        return CommandResult(args=tuple(args), returncode=0)


class ScriptedPrompter:
    """Answers prompts from a script; ``ask`` answers run through the validator."""

    def __init__(self, asks=(), choices=(), confirms=()):
        self.asks = list(asks)
        self.choices = list(choices)
        self.confirms = list(confirms)
        self.questions: list[str] = []

    def ask(self, question, default=None, validator=None):
        self.questions.append(question)
        answer = self.asks.pop(0) if self.asks else default
        if validator is None:
            return answer
        result = validator(answer)
        assert result.ok, result.error
        return result.value

    def choice(self, question, choices, default=None):
        self.questions.append(question)
        if not self.choices:
            return default if default is not None else choices[0]
        picked = self.choices.pop(0)
        return choices[picked] if isinstance(picked, int) else picked

    def confirm(self, question, default=False):
        self.questions.append(question)
        return self.confirms.pop(0) if self.confirms else False


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def api(session):
    return DrupalApiClient(session=session)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def make_prompter():
    return ScriptedPrompter


@pytest.fixture
def quiet_console():
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    manifest = {
        "require": {
            "drupal/core-recommended": "^10",
            "drupal/token": "^1.11",
            "drush/drush": "^12",
        },
        "require-dev": {"drupal/devel": "^5"},
    }
    (tmp_path / "composer.json").write_text(json.dumps(manifest))
    return tmp_path


@pytest.fixture
def settings(project_root: Path) -> Settings:
    return Settings(root_path=project_root, drush_binary="drush", composer_binary="composer")
