"""End-to-end checkout and commit against a local bare repository."""

import shutil
import subprocess
from pathlib import Path
from unittest.mock import Mock

import pytest

from autocommit.models import RepositoryConfig, UpdateFile
from autocommit.repository.client import RepositoryClient
from autocommit.vcs.errors import CheckoutError


pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True
    )
    return result.stdout.strip()


@pytest.fixture(autouse=True)
def git_identity(monkeypatch, tmp_path: Path):
    # Keep the user's global git configuration out of the way.
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for key in ("GIT_AUTHOR_NAME", "GIT_COMMITTER_NAME"):
        monkeypatch.setenv(key, "autocommit tests")
    for key in ("GIT_AUTHOR_EMAIL", "GIT_COMMITTER_EMAIL"):
        monkeypatch.setenv(key, "tests@example.com")


@pytest.fixture
def origin(tmp_path: Path) -> Path:
    seed = tmp_path / "seed"
    seed.mkdir()
    git(seed, "init")
    (seed / "README.md").write_text("seed\n")
    git(seed, "add", "README.md")
    git(seed, "commit", "-m", "Initial commit")
    bare = tmp_path / "origin.git"
    git(tmp_path, "clone", "--bare", str(seed), str(bare))
    return bare


def make_client(origin: Path, workdir: Path) -> RepositoryClient:
    config = RepositoryConfig(origin_url=str(origin), repository_dir=workdir)
    client = RepositoryClient(config, logger=Mock())
    client.clone()
    return client


def test_new_branch_is_created_committed_and_pushed(origin: Path, tmp_path: Path):
    client = make_client(origin, tmp_path / "work")

    client.checkout("generated")
    sha = client.commit(
        "generated",
        "Add generated files",
        [
            UpdateFile(path="src/app.py", content="print('hello')\n"),
            UpdateFile(path="README.md", content="overwritten?", skip_if_exists=True),
        ],
    )

    assert len(sha) == 40
    assert git(origin, "rev-parse", "refs/heads/generated") == sha
    assert git(origin, "show", f"{sha}:src/app.py") == "print('hello')"
    assert git(origin, "show", f"{sha}:README.md") == "seed"


def test_repeated_commit_without_diff_returns_empty_string(origin: Path, tmp_path: Path):
    client = make_client(origin, tmp_path / "work")
    files = [UpdateFile(path="a.txt", content="a\n")]

    client.checkout("generated")
    first = client.commit("generated", "First", files)
    second = client.commit("generated", "Second", files)

    assert first
    assert second == ""
    assert git(origin, "rev-parse", "refs/heads/generated") == first
    client.logger.warning.assert_called_once()


def test_existing_remote_branch_is_checked_out_and_updated(origin: Path, tmp_path: Path):
    first = make_client(origin, tmp_path / "first")
    first.checkout("generated")
    first.commit("generated", "Add files", [UpdateFile(path="a.txt", content="a\n"), UpdateFile(path="b.txt", content="b\n")])

    second = make_client(origin, tmp_path / "second")
    second.checkout("generated")
    assert (tmp_path / "second" / "a.txt").read_text() == "a\n"

    sha = second.commit("generated", "Remove a", [UpdateFile(path="a.txt", deleted=True)])

    assert git(origin, "rev-parse", "refs/heads/generated") == sha
    tree = git(origin, "ls-tree", "--name-only", sha).splitlines()
    assert "a.txt" not in tree
    assert "b.txt" in tree


def test_commit_on_unknown_branch_fails(origin: Path, tmp_path: Path):
    client = make_client(origin, tmp_path / "work")

    with pytest.raises(CheckoutError):
        client.commit("never-created", "msg", [UpdateFile(path="a.txt", content="a")])


def test_reset_state_discards_local_changes(origin: Path, tmp_path: Path):
    workdir = tmp_path / "work"
    client = make_client(origin, workdir)
    (workdir / "README.md").write_text("dirty\n")
    (workdir / "untracked.txt").write_text("x")

    client.reset_state()

    assert (workdir / "README.md").read_text() == "seed\n"
    assert not (workdir / "untracked.txt").exists()


def test_rerunning_checkout_for_unpushed_local_branch_fails(origin: Path, tmp_path: Path):
    client = make_client(origin, tmp_path / "work")
    client.checkout("generated")
    assert client.commit("generated", "Nothing new", []) == ""

    # The branch exists locally but was never pushed, so it is still absent
    # from origin and checkout tries to create it again.
    with pytest.raises(CheckoutError):
        client.checkout("generated")

    sha = client.commit("generated", "Add a", [UpdateFile(path="a.txt", content="a\n")])
    assert git(origin, "rev-parse", "refs/heads/generated") == sha
