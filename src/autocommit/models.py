"""
Data models shared by the repository client and its collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


# Returned by ``RepositoryClient.commit`` when nothing was staged.
NO_CHANGES = ""


@dataclass(frozen=True)
class RepositoryConfig:
    """Location of the remote and of the local working tree.

    Attributes
    ----------
    origin_url : str
        URL of the ``origin`` remote.
    repository_dir : Path
        Directory holding the working tree.
    """

    origin_url: str
    repository_dir: Path

    def __post_init__(self) -> None:
        # Accept plain strings from config files and CLI options.
        if not isinstance(self.repository_dir, Path):
            object.__setattr__(self, "repository_dir", Path(self.repository_dir))


@dataclass
class UpdateFile:
    """A single file change to apply to the working tree.

    When ``deleted`` is True the file is removed and ``content`` is
    ignored. When ``skip_if_exists`` is True an existing file is left
    untouched.
    """

    path: str
    content: str = ""
    deleted: bool = False
    skip_if_exists: bool = False
