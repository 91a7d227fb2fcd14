"""
Checkout and commit orchestration.

See :mod:`autocommit.repository.client` for implementation details.
"""

from .client import RepositoryClient  # noqa: F401
