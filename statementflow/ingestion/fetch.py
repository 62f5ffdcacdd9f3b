"""Raw document retrieval from an HTTP(S) URL or a local JSON file."""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

import requests

from statementflow.exceptions import FetchError

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    def __call__(self, location: str) -> Any: ...


def fetch_json(
    location: str,
    *,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> Any:
    """Fetch and decode a JSON document. Raises FetchError on any failure."""
    if not location:
        raise FetchError("<unset>", "no source location configured")

    if location.startswith(("http://", "https://")):
        return _fetch_url(location, session or requests.Session(), timeout)
    return _read_file(Path(location).expanduser())


def _fetch_url(url: str, session: requests.Session, timeout: float | None) -> Any:
    logger.info("Fetching %s", url)
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(url, str(exc)) from exc
    try:
        return response.json()
    except ValueError as exc:
        raise FetchError(url, f"response is not valid JSON: {exc}") from exc


def _read_file(path: Path) -> Any:
    logger.info("Reading %s", path)
    if not path.exists():
        raise FetchError(str(path), "file not found")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise FetchError(str(path), str(exc)) from exc
