"""
Configuration loading for autocommit.

Provides a simple loader for the JSON configuration file naming the
remote and the working tree. See :mod:`autocommit.config.loader` for
implementation details.
"""

from .loader import ConfigError, load_config, to_repository_config  # noqa: F401
