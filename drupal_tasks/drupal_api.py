"""Drupal.org legacy REST API client."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional
from urllib.parse import urlencode

import requests

from .config import DRUPAL_API_BASE_URL, DRUPAL_API_TIMEOUT, USER_AGENT
from .errors import DecodeError

logger = logging.getLogger(__name__)


def _encode_query(query: dict[str, Any]) -> str:
    params = {}
    for key, value in query.items():
        if isinstance(value, bool):
            value = int(value)
        params[key] = value
    return urlencode(params)


class DrupalApiClient:
    """Fetches JSON resources from the Drupal.org api-d7 endpoints.

    Transport failures and empty bodies come back as ``None``; callers
    decide whether that is fatal. A body that is not JSON raises
    ``DecodeError``.
    """

    BASE_URL = DRUPAL_API_BASE_URL

    def __init__(self, session: Optional[requests.Session] = None, timeout_s: float = DRUPAL_API_TIMEOUT):
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        })
        self.timeout_s = timeout_s

    def resource_url(self, resource: str, query: Optional[dict[str, Any]] = None) -> str:
        return f"{self.BASE_URL}/{resource}.json?{_encode_query(query or {})}"

    def fetch(self, resource: str, query: Optional[dict[str, Any]] = None) -> Any:
        return self.get_json(self.resource_url(resource, query))

    def get_json(self, url: str, failure_level: int = logging.WARNING) -> Any:
        try:
            response = self.session.get(url, timeout=self.timeout_s)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.log(failure_level, "Request to %s failed: %s", url, e)
            return None

        body = response.text
        if not body or not body.strip():
            logger.debug("Empty response body from %s", url)
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Malformed JSON returned by {url}: {e}")
