"""
Command line interface for autocommit.

This module defines the ``main`` click group used as the entry point of
the ``autocommit`` command. Each subcommand loads the configuration,
builds a :class:`~autocommit.repository.client.RepositoryClient` and runs
one operation on it. Failures are reported on stderr and mapped to the
exit codes below so that calling pipelines can react to them.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import click

from autocommit import __version__
from autocommit.changeset.loader import ChangeSetError, load_changes
from autocommit.config.loader import ConfigError, load_config, to_repository_config
from autocommit.files.writer import FileWriteError
from autocommit.models import NO_CHANGES
from autocommit.repository.client import RepositoryClient
from autocommit.vcs.errors import GitError
from autocommit.vcs.git_provider import GitCliProvider

# Create a module-level logger. Attach a null handler and disable
# propagation to avoid logging errors when the root logger's stream is
# closed (such as during unit tests).
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
# 2 is left to click for usage errors.
EXIT_NO_REPO = 3
EXIT_NO_CHANGES = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_CHANGESET_ERROR = 7


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=False)


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=False)


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}", err=False)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

@contextmanager
def handle_errors() -> Iterator[None]:
    """Translate exceptions raised by a subcommand into exit codes."""
    try:
        yield
    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    except ChangeSetError as exc:
        print_error(f"Change set error: {exc}")
        raise click.exceptions.Exit(EXIT_CHANGESET_ERROR)
    except (GitError, FileWriteError) as exc:
        print_error(f"Git error: {exc}")
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)


def build_client(options: Dict[str, Any], require_repo: bool = True) -> RepositoryClient:
    """Load the configuration and create a repository client.

    Parameters
    ----------
    options : Dict[str, Any]
        Global CLI options stored on the click context.
    require_repo : bool
        If True, the repository directory must already hold a Git working
        tree; otherwise the command exits with ``EXIT_NO_REPO``.
    """
    config = load_config(
        options.get("config_path"),
        overrides={
            "origin_url": options.get("origin_url"),
            "repository_dir": options.get("repository_dir"),
        },
    )
    options["request_timeout"] = float(config.get("request_timeout", 60))
    repo_config = to_repository_config(config)
    logger.debug("Using repository %s at %s", repo_config.origin_url, repo_config.repository_dir)

    if require_repo and not GitCliProvider.is_repo(repo_config.repository_dir):
        print_error(
            f"No Git working tree at {repo_config.repository_dir}. "
            "Run 'autocommit clone' first."
        )
        raise click.exceptions.Exit(EXIT_NO_REPO)

    return RepositoryClient(repo_config, logger=logging.getLogger("autocommit"))


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (default: ~/.autocommit/config.json).",
)
@click.option("--origin-url", help="URL of the origin remote; overrides the configuration.")
@click.option(
    "--repo-dir",
    "repository_dir",
    help="Working tree directory; overrides the configuration.",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="autocommit")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Optional[Path],
    origin_url: Optional[str],
    repository_dir: Optional[str],
    verbose: bool,
) -> None:
    """Apply generated file changes to a Git branch and push them."""
    # Configure logging. Use force=True to ensure handlers are reconfigured
    # on subsequent invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    ctx.ensure_object(dict)
    ctx.obj.update(
        config_path=config_path,
        origin_url=origin_url,
        repository_dir=repository_dir,
    )


@main.command()
@click.pass_obj
def clone(options: Dict[str, Any]) -> None:
    """Clone the origin into the repository directory."""
    with handle_errors():
        client = build_client(options, require_repo=False)
        client.clone()
        print_success(f"Cloned {client.config.origin_url} into {client.config.repository_dir}")


@main.command()
@click.argument("branch")
@click.pass_obj
def checkout(options: Dict[str, Any], branch: str) -> None:
    """Check out BRANCH, creating it locally if the remote lacks it."""
    with handle_errors():
        client = build_client(options)
        client.checkout(branch)
        print_success(f"Checked out branch: {branch}")


@main.command()
@click.argument("branch")
@click.option("-m", "--message", required=True, help="Commit message.")
@click.option(
    "--changes",
    "source",
    required=True,
    help="Change set: path of a JSON file or an http(s) URL.",
)
@click.pass_obj
def commit(options: Dict[str, Any], branch: str, message: str, source: str) -> None:
    """Apply a change set to BRANCH, commit it and push.

    The branch is checked out first (and created if needed). Exits with
    code 4 when the change set leaves nothing to commit.
    """
    with handle_errors():
        client = build_client(options)
        files = load_changes(source, timeout=options["request_timeout"])
        print_info(f"Loaded {len(files)} file change{'s' if len(files) != 1 else ''}")

        client.checkout(branch)
        sha = client.commit(branch, message, files)

        if sha == NO_CHANGES:
            print_warning("No changes to commit; nothing was pushed.")
            raise click.exceptions.Exit(EXIT_NO_CHANGES)
        print_success(f"Committed {sha} to {branch}")


@main.command()
@click.pass_obj
def reset(options: Dict[str, Any]) -> None:
    """Discard all local modifications in the working tree."""
    with handle_errors():
        client = build_client(options)
        client.reset_state()
        print_success(f"Reset working tree at {client.config.repository_dir}")
