"""
Change set loader for autocommit.

A change set is the list of :class:`~autocommit.models.UpdateFile` a
pipeline wants committed. It is read from a JSON document that is either
a file on disk or served over HTTP(S), for example by the code generator
that produced it. The document is a JSON array of file entries, or an
object with a ``files`` array::

    [
        {"path": "src/app.py", "content": "print('hi')\\n"},
        {"path": "README.md", "content": "...", "skipIfExists": true},
        {"path": "old.txt", "deleted": true}
    ]

Any problem reading or validating the document raises
:class:`ChangeSetError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import requests

from autocommit.models import UpdateFile


logger = logging.getLogger(__name__)
# A null handler keeps library use silent; records still propagate to the
# handlers the CLI installs with basicConfig.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class ChangeSetError(Exception):
    """Raised when a change set cannot be loaded or is malformed."""

    pass


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _fetch(url: str, timeout: float) -> Any:
    logger.debug("Downloading change set from %s", url)
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        logger.error("Failed to download change set: %s", exc)
        raise ChangeSetError(f"Failed to download change set from {url}: {exc}") from exc
    if response.status_code != 200:
        logger.error(
            "Change set server returned status %s: %s", response.status_code, response.text
        )
        raise ChangeSetError(f"Change set request returned status {response.status_code}")
    try:
        return response.json()
    except ValueError as exc:
        logger.error("Failed to parse change set response: %s", exc)
        raise ChangeSetError(f"Invalid JSON in change set from {url}") from exc


def _read(path: Path) -> Any:
    if not path.exists():
        raise ChangeSetError(f"Change set file does not exist: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse change set %s: %s", path, exc)
        raise ChangeSetError(f"Invalid JSON in {path.name}: {exc}") from exc


def _flag(entry: Dict[str, Any], *keys: str) -> bool:
    for key in keys:
        if key in entry:
            value = entry[key]
            if not isinstance(value, bool):
                raise ChangeSetError(f"'{key}' must be a boolean")
            return value
    return False


def parse_changes(data: Any) -> List[UpdateFile]:
    """Validate a decoded change set document and build the file list.

    Raises
    ------
    ChangeSetError
        If the document or any of its entries has the wrong shape.
    """
    if isinstance(data, dict):
        if "files" not in data:
            raise ChangeSetError("Change set object must contain a 'files' list")
        data = data["files"]
    if not isinstance(data, list):
        raise ChangeSetError("Change set must be a list of files")

    files: List[UpdateFile] = []
    for position, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ChangeSetError(f"Entry {position} must be an object")
        path = entry.get("path")
        if not isinstance(path, str) or not path:
            raise ChangeSetError(f"Entry {position}: 'path' must be a non-empty string")
        content = entry.get("content", "")
        if content is None:
            content = ""
        if not isinstance(content, str):
            raise ChangeSetError(f"Entry {position}: 'content' must be a string")
        files.append(
            UpdateFile(
                path=path,
                content=content,
                deleted=_flag(entry, "deleted"),
                skip_if_exists=_flag(entry, "skipIfExists", "skip_if_exists"),
            )
        )
    return files


def load_changes(source: Union[str, Path], timeout: float = 60.0) -> List[UpdateFile]:
    """Load a change set from a JSON file or an HTTP(S) URL.

    Parameters
    ----------
    source : str or Path
        Path of a JSON file, or a ``http://``/``https://`` URL.
    timeout : float, optional
        Timeout in seconds for HTTP downloads.

    Returns
    -------
    List[UpdateFile]
        The file changes in document order.
    """
    text = str(source)
    data = _fetch(text, timeout) if _is_url(text) else _read(Path(text))
    files = parse_changes(data)
    logger.debug("Loaded %d file change(s) from %s", len(files), text)
    return files
