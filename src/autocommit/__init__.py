"""
Top-level package for autocommit.

autocommit applies a generated set of file changes to a branch of a
remote Git repository and publishes them as a single commit. The main
entry point for library users is
:class:`autocommit.repository.client.RepositoryClient`; the command
line front end lives in :mod:`autocommit.cli`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
