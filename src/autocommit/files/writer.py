"""
File writer used to materialize a change set in the working tree.

:class:`FileWriter` is the capability the repository client consumes.
:class:`LocalFileWriter` implements it on the local filesystem, resolving
every path relative to the repository directory and refusing paths that
would escape it.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Protocol, runtime_checkable


logger = logging.getLogger(__name__)
# A null handler keeps library use silent; records still propagate to the
# handlers the CLI installs with basicConfig.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class FileWriteError(Exception):
    """Raised when a file cannot be written or deleted."""

    pass


@runtime_checkable
class FileWriter(Protocol):
    """Write, delete and test files in the working directory."""

    def write(self, path: str, content: str) -> None:
        ...

    def delete(self, path: str) -> None:
        ...

    def exists(self, path: str) -> bool:
        ...


class LocalFileWriter:
    """File writer operating on a directory of the local filesystem."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def _resolve(self, path: str) -> Path:
        """Return the location of ``path`` inside ``base_dir``.

        The path is normalized but its last component is not resolved, so
        a symlink is returned as the link itself. Its parent directory is
        resolved to keep links from leading out of the base directory.

        Raises
        ------
        FileWriteError
            If ``path`` is empty or points outside the base directory.
        """
        if not path:
            raise FileWriteError("File path must not be empty")
        root = self.base_dir.resolve()
        target = Path(os.path.normpath(root / path))
        if target == root or root not in target.parents:
            raise FileWriteError(f"Path '{path}' is outside of {root}")
        parent = target.parent.resolve()
        if parent != root and root not in parent.parents:
            raise FileWriteError(f"Path '{path}' is outside of {root}")
        return target

    def write(self, path: str, content: str) -> None:
        """Write ``content`` to ``path``, creating parent directories.

        A symlink at ``path`` is replaced by a regular file.
        """
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if target.is_symlink():
                target.unlink()
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write %s: %s", target, exc)
            raise FileWriteError(f"Failed to write {path}: {exc}") from exc

    def delete(self, path: str) -> None:
        """Remove the file, link or directory at ``path``. Missing paths are ignored.

        A symlink is removed itself; whatever it points to is left alone.
        """
        target = self._resolve(path)
        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Failed to delete %s: %s", target, exc)
            raise FileWriteError(f"Failed to delete {path}: {exc}") from exc

    def exists(self, path: str) -> bool:
        """Return True if anything, a dangling symlink included, is at ``path``."""
        return os.path.lexists(self._resolve(path))
