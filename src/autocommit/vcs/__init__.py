"""
Version control system (VCS) integration.

This package contains the provider capability consumed by the repository
client, the error taxonomy for failed Git operations, and a concrete
provider driving the ``git`` command line.
"""

from .errors import (  # noqa: F401
    CheckoutError,
    CloneError,
    CommitError,
    FetchError,
    GitError,
    PushError,
)
from .git_provider import GitCliProvider  # noqa: F401
from .provider import BranchSummary, CommitSummary, StatusSummary, VCSProvider  # noqa: F401
