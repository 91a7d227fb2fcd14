"""
Working tree file access.

Provides the :class:`FileWriter` capability and its local filesystem
implementation.
"""

from .writer import FileWriteError, FileWriter, LocalFileWriter  # noqa: F401
