"""
Repository client for autocommit.

The client positions a working tree on a branch and publishes a set of
generated file changes as one commit. It talks to Git only through a
:class:`~autocommit.vcs.provider.VCSProvider` and to the filesystem only
through a :class:`~autocommit.files.writer.FileWriter`, both injected at
construction so that tests can substitute mocks.

A client is bound to one working directory and is not safe for concurrent
use: callers must serialize ``checkout`` and ``commit`` per repository.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from autocommit.files.writer import FileWriter, LocalFileWriter
from autocommit.models import NO_CHANGES, RepositoryConfig, UpdateFile
from autocommit.vcs.git_provider import REMOTE, GitCliProvider
from autocommit.vcs.provider import VCSProvider


logger = logging.getLogger(__name__)
# A null handler keeps library use silent; records still propagate to the
# handlers the CLI installs with basicConfig.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class RepositoryClient:
    """Check out branches and commit generated changes to a repository.

    Parameters
    ----------
    config : RepositoryConfig
        Remote URL and working tree location.
    provider : VCSProvider, optional
        Git operations. Defaults to a :class:`GitCliProvider` bound to
        ``config``.
    writer : FileWriter, optional
        Working tree file access. Defaults to a :class:`LocalFileWriter`
        rooted at ``config.repository_dir``.
    logger : logging.Logger, optional
        Diagnostics sink. Defaults to this module's logger; any object
        with ``debug``, ``info`` and ``warning`` methods works.
    """

    def __init__(
        self,
        config: RepositoryConfig,
        provider: Optional[VCSProvider] = None,
        writer: Optional[FileWriter] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.git = provider if provider is not None else GitCliProvider(config)
        self.files = writer if writer is not None else LocalFileWriter(config.repository_dir)
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Branch handling
    # ------------------------------------------------------------------
    def checkout(self, branch_name: str) -> None:
        """Switch the working tree to ``branch_name``, creating it if needed.

        Remote state is always fetched first. When ``origin/<branch_name>``
        exists the branch is checked out from it, otherwise a new local
        branch is created without an upstream.

        Raises
        ------
        ValueError
            If ``branch_name`` is empty.
        FetchError, CheckoutError
            Propagated unchanged from the provider.
        """
        if not branch_name:
            raise ValueError("Branch name must not be empty")

        self.git.fetch()
        branches = self.git.list_branches()

        if f"{REMOTE}/{branch_name}" in branches.all:
            self.logger.info("Checking out remote branch %s", branch_name)
            self.git.checkout(branch_name)
        else:
            self.logger.info("Creating local branch %s", branch_name)
            self.git.checkout_local_branch(branch_name)

    # ------------------------------------------------------------------
    # Committing
    # ------------------------------------------------------------------
    def commit(self, branch_name: str, message: str, files: Iterable[UpdateFile]) -> str:
        """Apply ``files`` on ``branch_name``, commit and push them.

        The branch must already exist locally or on the remote; run
        :meth:`checkout` first for branches that may be new.

        Parameters
        ----------
        branch_name : str
            Branch to commit on.
        message : str
            Commit message.
        files : Iterable[UpdateFile]
            Changes applied in order; the last change to a path wins.

        Returns
        -------
        str
            The revision id of the new commit, or :data:`NO_CHANGES` (an
            empty string) when nothing was staged. In that case no commit
            or push happens.
        """
        self.git.checkout(branch_name)

        for file in files:
            self._apply(file)

        self.git.add(["."])

        status = self.git.status()
        changed = set(status.staged) | set(status.renamed)
        if not changed:
            self.logger.warning(
                "No changes to commit on branch %s; skipping commit and push",
                branch_name,
            )
            return NO_CHANGES

        self.logger.info("Committing %d changed file(s) to %s", len(changed), branch_name)
        result = self.git.commit(message)
        self.git.push()
        self.logger.info("Pushed commit %s to %s", result.commit, branch_name)
        return result.commit

    def _apply(self, file: UpdateFile) -> None:
        """Materialize a single change in the working tree."""
        if file.deleted:
            self.logger.debug("Deleting %s", file.path)
            self.files.delete(file.path)
        elif file.skip_if_exists and self.files.exists(file.path):
            self.logger.debug("Skipping existing file %s", file.path)
        else:
            self.logger.debug("Writing %s", file.path)
            self.files.write(file.path, file.content)

    # ------------------------------------------------------------------
    # Working tree maintenance
    # ------------------------------------------------------------------
    def clone(self) -> None:
        """Clone the origin into the repository directory."""
        self.logger.info("Cloning %s into %s", self.config.origin_url, self.config.repository_dir)
        self.git.clone()

    def reset_state(self) -> None:
        """Discard every local modification, tracked or untracked.

        ``commit`` never rolls back on failure; callers use this to return
        the working tree to the last commit before retrying.
        """
        self.logger.info("Resetting working tree at %s", self.config.repository_dir)
        self.git.reset_hard()
        self.git.clean()
