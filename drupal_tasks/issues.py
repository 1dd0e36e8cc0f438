"""Drupal.org issue patch resolution."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Any, Callable, Iterable, Optional
from urllib.parse import urlparse

from .config import PATCH_EXTENSION, PATCH_LOOKUP_LIMIT
from .drupal_api import DrupalApiClient
from .errors import DecodeError, FetchError, NoPatchesError, NotFoundError
from .models import IssueDefinition, PatchSelection

logger = logging.getLogger(__name__)

Chooser = Callable[[str, list[str], Optional[str]], str]


def is_displayed(file: dict[str, Any]) -> bool:
    try:
        return int(file.get("display", 0)) == 1
    except (TypeError, ValueError):
        return False


def _has_patch_extension(name: str) -> bool:
    basename = name.rsplit("/", 1)[-1]
    return "." in basename and basename.rsplit(".", 1)[1] == PATCH_EXTENSION


class IssueResolver:
    def __init__(self, client: DrupalApiClient, limit: int = PATCH_LOOKUP_LIMIT) -> None:
        self.client = client
        self.limit = limit

    def resolve(self, issue_id: int) -> IssueDefinition:
        issues_data = self.client.fetch("node", {"nid": issue_id, "type": "project_issue"})
        if not issues_data:
            raise FetchError(f"Unable to fetch the Drupal issue for {issue_id}!")

        issues = (issues_data.get("list") if isinstance(issues_data, dict) else None) or []
        if not issues:
            raise NotFoundError(f"Drupal issue {issue_id} was not found!")
        issue = issues[0]

        if issue.get("field_issue_files") is None:
            raise NoPatchesError(f"Drupal issue {issue_id} does not contain any patches!")

        files = [f for f in issue["field_issue_files"] if is_displayed(f)]
        definition = IssueDefinition(
            issue_id=issue_id,
            title=issue.get("title"),
            patches=self.parse_issue_patches(files),
        )
        for url in self.related_merge_requests(issue_id):
            definition.patches.insert(0, f"{url}.patch")

        logger.info("Resolved %d patch(es) for issue #%d", len(definition.patches), issue_id)
        return definition

    def parse_issue_patches(self, files: Iterable[dict[str, Any]]) -> list[str]:
        """Resolve file attachments to patch URLs, newest first.

        Attachments that cannot be fetched or are not ``.patch`` files
        are skipped.
        """
        patches: list[str] = []
        for file in list(reversed(list(files)))[: self.limit]:
            uri = (file.get("file") or {}).get("uri")
            if not uri:
                continue
            try:
                content = self.client.get_json(f"{uri}.json", failure_level=logging.DEBUG)
            except DecodeError as e:
                logger.debug("Skipping attachment %s: %s", uri, e)
                continue
            if not isinstance(content, dict):
                continue
            name, url = content.get("name"), content.get("url")
            if name is None or url is None or not _has_patch_extension(name):
                continue
            patches.append(url)
        return patches

    def related_merge_requests(self, issue_id: int) -> list[str]:
        node = self.client.fetch(f"node/{issue_id}", {"related_mrs": True})
        if not isinstance(node, dict):
            return []
        return list(node.get("related_mrs") or [])


def select_patch(
    definition: IssueDefinition,
    packages: list[str],
    choose: Chooser,
) -> PatchSelection:
    """Ask which package the issue applies to and which patch to use."""
    if not definition.is_selectable:
        return {}

    package = choose("Select Drupal Package", packages, None)
    patch = choose("Select Drupal Patch", definition.patches, definition.patches[0])
    return {package: {definition.label: patch}}


def patch_file_name(url: str) -> str:
    return PurePosixPath(urlparse(url).path).name or url
