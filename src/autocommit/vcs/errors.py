"""
Exceptions raised by the version control layer.

Every failed ``git`` invocation surfaces as a :class:`GitError`. The
operations the repository client depends on raise a dedicated subclass so
callers can tell a failed fetch from a rejected push without parsing the
message. None of these are retried.
"""


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class FetchError(GitError):
    """Raised when fetching from the remote fails."""

    pass


class CheckoutError(GitError):
    """Raised when switching to or creating a branch fails."""

    pass


class CommitError(GitError):
    """Raised when creating a commit fails."""

    pass


class PushError(GitError):
    """Raised when pushing to the remote fails."""

    pass


class CloneError(GitError):
    """Raised when cloning the remote repository fails."""

    pass
