"""
Capability surface over the Git operations used by the repository client.

The client only depends on :class:`VCSProvider`; the concrete
:class:`~autocommit.vcs.git_provider.GitCliProvider` drives the ``git``
executable, while tests substitute mocks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol, Sequence, runtime_checkable


@dataclass
class BranchSummary:
    """Branches known after a fetch.

    Attributes
    ----------
    all : List[str]
        Local branch names and remote branches qualified as
        ``origin/<name>``.
    """

    all: List[str] = field(default_factory=list)


@dataclass
class StatusEntry:
    """A single line of ``git status --porcelain`` output."""

    path: str
    index: str
    working_dir: str


@dataclass
class StatusSummary:
    """Working tree status split into the sets the client cares about."""

    staged: List[str] = field(default_factory=list)
    renamed: List[str] = field(default_factory=list)
    files: List[StatusEntry] = field(default_factory=list)


@dataclass
class CommitSummary:
    """Outcome of a commit."""

    commit: str


@runtime_checkable
class VCSProvider(Protocol):
    """Remote and local version control operations."""

    def fetch(self) -> None:
        """Fetch remote state. Raises ``FetchError`` on failure."""
        ...

    def list_branches(self) -> BranchSummary:
        """Return local and remote-tracking branches."""
        ...

    def checkout_local_branch(self, name: str) -> None:
        """Create and switch to a new local branch ``name``."""
        ...

    def checkout(self, name: str) -> None:
        """Switch to the existing branch ``name``."""
        ...

    def status(self) -> StatusSummary:
        """Return the working tree status."""
        ...

    def add(self, paths: Sequence[str]) -> None:
        """Stage every pending change under ``paths``."""
        ...

    def commit(self, message: str) -> CommitSummary:
        """Commit the index with ``message``."""
        ...

    def push(self) -> None:
        """Push the current branch to the configured remote."""
        ...

    def clone(self) -> None:
        """Clone the remote into the working directory."""
        ...

    def reset_hard(self) -> None:
        """Discard changes to tracked files."""
        ...

    def clean(self) -> None:
        """Remove untracked files and directories."""
        ...
