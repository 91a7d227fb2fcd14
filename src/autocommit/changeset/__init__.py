"""
Loading of change sets (lists of file updates) from files or URLs.
"""

from .loader import ChangeSetError, load_changes, parse_changes  # noqa: F401
