"""
Git provider implementation for autocommit.

This module implements :class:`~autocommit.vcs.provider.VCSProvider` on
top of the ``git`` command line. Every command runs in the configured
repository directory through :meth:`GitCliProvider._run` so that unit
tests can mock a single seam. Failures are raised as the
:mod:`autocommit.vcs.errors` subclass matching the operation.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Type

from autocommit.models import RepositoryConfig
from autocommit.vcs.errors import (
    CheckoutError,
    CloneError,
    CommitError,
    FetchError,
    GitError,
    PushError,
)
from autocommit.vcs.provider import (
    BranchSummary,
    CommitSummary,
    StatusEntry,
    StatusSummary,
)


logger = logging.getLogger(__name__)
# A null handler keeps library use silent; records still propagate to the
# handlers the CLI installs with basicConfig.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


REMOTE = "origin"

# Index status letters that count as a staged change.
_STAGED_CODES = frozenset("MADTC")


class GitCliProvider:
    """Version control provider backed by the ``git`` executable."""

    def __init__(self, config: RepositoryConfig) -> None:
        self.config = config
        self.repo_root = config.repository_dir

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_repo(path: Path) -> bool:
        """Return True if ``path`` is the root of a Git working tree."""
        return (path / ".git").exists()

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(
        self,
        args: List[str],
        check: bool = True,
        error: Type[GitError] = GitError,
        cwd: Optional[Path] = None,
    ) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            Or the subclass given as ``error``, if the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=cwd or self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error("Unable to execute git: %s", e)
            raise error(f"Failed to execute git: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise error(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------
    def clone(self) -> None:
        """Clone ``origin_url`` into the repository directory.

        The parent directory is created if needed; the clone itself runs
        from there because the target does not exist yet.
        """
        target = self.repo_root
        target.parent.mkdir(parents=True, exist_ok=True)
        self._run(
            ["clone", self.config.origin_url, str(target)],
            error=CloneError,
            cwd=target.parent,
        )

    def fetch(self) -> None:
        """Fetch and prune remote-tracking branches from ``origin``."""
        self._run(["fetch", "--prune", REMOTE], error=FetchError)

    def push(self) -> None:
        """Push the current branch to ``origin`` and set it as upstream.

        Pushing ``HEAD`` works both for branches that already track a
        remote branch and for ones created locally by
        :meth:`checkout_local_branch`.
        """
        self._run(["push", "--set-upstream", REMOTE, "HEAD"], error=PushError)

    # ------------------------------------------------------------------
    # Branch operations
    # ------------------------------------------------------------------
    def list_branches(self) -> BranchSummary:
        """List local and remote-tracking branches.

        Remote branches are reported as ``origin/<name>``. The symbolic
        ``origin/HEAD`` alias is left out.
        """
        result = self._run(["branch", "--all", "--format=%(refname:short)"])
        names = []
        for line in result.stdout.splitlines():
            name = line.strip()
            if not name or name.startswith("("):
                # "(HEAD detached at ...)" entries
                continue
            if name in (REMOTE, f"{REMOTE}/HEAD"):
                continue
            names.append(name)
        return BranchSummary(all=names)

    def checkout_local_branch(self, name: str) -> None:
        """Create and switch to a new local branch without an upstream."""
        self._run(["checkout", "-b", name], error=CheckoutError)

    def checkout(self, name: str) -> None:
        """Switch to an existing branch.

        A branch that only exists as ``origin/<name>`` is checked out as a
        new local branch tracking it.
        """
        self._run(["checkout", name], error=CheckoutError)

    # ------------------------------------------------------------------
    # Status and staging
    # ------------------------------------------------------------------
    def status(self) -> StatusSummary:
        """Parse ``git status --porcelain -z`` into staged and renamed paths.

        Only the index column is considered: untracked files and changes
        present solely in the working tree are not staged.
        """
        result = self._run(["status", "--porcelain", "-z"])
        summary = StatusSummary()

        # NUL separated "XY path" entries; a rename or copy is followed by
        # an extra entry holding the original path.
        entries = iter(result.stdout.split("\0"))
        for entry in entries:
            if len(entry) < 4:
                continue
            index, working_dir = entry[0], entry[1]
            path = entry[3:]
            if index in "RC" or working_dir in "RC":
                next(entries, None)
            if index == "?":
                continue

            if index == "R":
                summary.renamed.append(path)
            elif index in _STAGED_CODES:
                summary.staged.append(path)
            summary.files.append(StatusEntry(path=path, index=index, working_dir=working_dir))

        return summary

    def add(self, paths: Sequence[str]) -> None:
        """Stage additions, modifications and deletions under ``paths``."""
        self._run(["add", "--all", "--"] + list(paths))

    # ------------------------------------------------------------------
    # Committing
    # ------------------------------------------------------------------
    def commit(self, message: str) -> CommitSummary:
        """Commit the index and return the new revision id.

        Multi-line commit messages are supported.
        """
        self._run(["commit", "-m", message], error=CommitError)
        sha = self._run(["rev-parse", "HEAD"], error=CommitError).stdout.strip()
        return CommitSummary(commit=sha)

    def reset_hard(self) -> None:
        """Discard staged and unstaged changes to tracked files."""
        self._run(["reset", "--hard"])

    def clean(self) -> None:
        """Remove untracked files and directories."""
        self._run(["clean", "-fd"])
