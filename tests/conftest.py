"""Pytest configuration and shared fixtures for reprodoc tests.

Provides:
- Document builders writing literate sources into tmp_path
- An in-memory repository implementing the RepoContext protocol
- A real temporary git repository (skipped when git is unavailable)
- Isolation from REPRODOC_* environment variables
"""

from datetime import datetime, timedelta, timezone
import hashlib
import logging
import os
from pathlib import Path
import shutil
import subprocess
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from reprodoc.domain import CommitVersion, RepoAccessError

# ============================================================================
# Environment Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def clean_reprodoc_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove REPRODOC_* variables so that the host environment never leaks in."""
    for key in list(os.environ):
        if key.startswith("REPRODOC_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo handlers and level set by configure_logging (e.g. through the CLI)."""
    package_logger = logging.getLogger("reprodoc")
    handlers, level = list(package_logger.handlers), package_logger.level
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)


# ============================================================================
# Documents
# ============================================================================

DEFAULT_HEADER = ['title: "Analysis"', "output: reprodoc::wflow_html"]
CODE_BODY = ["", "Some prose.", "", "```{r plot}", "plot(1:10)", "```", "", "More prose."]
PROSE_BODY = ["", "Only prose here.", "", "No code at all."]


@pytest.fixture
def write_document() -> Callable[..., Path]:
    """Factory writing a literate document with a YAML header.

    Usage:
        path = write_document(tmp_path / "index.Rmd", header=[...], body=[...])
    """

    def _write(path: Path, header: Optional[Sequence[str]] = None, body: Optional[Sequence[str]] = None) -> Path:
        header = DEFAULT_HEADER if header is None else header
        body = CODE_BODY if body is None else body
        lines = ["---", *header, "---", *body]
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def code_document(tmp_path: Path, write_document: Callable[..., Path]) -> Path:
    """Document with one code chunk in analysis/index.Rmd."""
    return write_document(tmp_path / "analysis" / "index.Rmd")


@pytest.fixture
def prose_document(tmp_path: Path, write_document: Callable[..., Path]) -> Path:
    """Document without code chunks in analysis/about.Rmd."""
    return write_document(tmp_path / "analysis" / "about.Rmd", body=PROSE_BODY)


# ============================================================================
# In-memory Repository
# ============================================================================


def make_commit(index: int, author: str = "Jane Doe", message: str = "") -> CommitVersion:
    """Deterministic commit; higher index means newer."""
    return CommitVersion(
        commit=hashlib.sha1(f"commit-{index}".encode()).hexdigest(),
        author=author,
        date=datetime(2026, 1, 1, tzinfo=timezone.utc) + timedelta(days=index),
        message=message or f"commit {index}",
    )


class FakeRepo:
    """RepoContext backed by dictionaries.

    Attributes:
        root: Working tree root
        histories: Relative path -> versions, newest first
        head_commit: Commit returned by head(); None makes head() fail
        dirty: Relative paths reported as modified
        remote: Remote URL
        fail_history: When True, history() raises RepoAccessError
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.histories: Dict[str, List[CommitVersion]] = {}
        self.head_commit: Optional[CommitVersion] = make_commit(99)
        self.dirty: set = set()
        self.remote: Optional[str] = None
        self.fail_history = False
        self.history_calls: List[str] = []

    def history(self, relpath: str) -> List[CommitVersion]:
        self.history_calls.append(relpath)
        if self.fail_history:
            raise RepoAccessError("history unavailable", self.root)
        return list(self.histories.get(relpath, []))

    def head(self) -> CommitVersion:
        if self.head_commit is None:
            raise RepoAccessError("HEAD does not point to a commit", self.root)
        return self.head_commit

    def is_dirty(self, relpath: str) -> bool:
        return relpath in self.dirty

    def remote_url(self) -> Optional[str]:
        return self.remote


@pytest.fixture
def fake_repo(tmp_path: Path) -> FakeRepo:
    """In-memory repository rooted at tmp_path."""
    return FakeRepo(tmp_path)


# ============================================================================
# Real git Repository
# ============================================================================

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


def run_git(root: Path, *args: str) -> str:
    env = {
        **os.environ,
        "GIT_AUTHOR_NAME": "Jane Doe",
        "GIT_AUTHOR_EMAIL": "jane@example.org",
        "GIT_COMMITTER_NAME": "Jane Doe",
        "GIT_COMMITTER_EMAIL": "jane@example.org",
    }
    result = subprocess.run(["git", *args], cwd=root, env=env, capture_output=True, text=True, check=True)
    return result.stdout


def commit_all(root: Path, message: str) -> str:
    """Stage everything, commit, and return the new commit hash."""
    run_git(root, "add", "-A")
    run_git(root, "commit", "-q", "-m", message)
    return run_git(root, "rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Empty git repository in tmp_path/project."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    root = tmp_path / "project"
    root.mkdir()
    run_git(root, "init", "-q")
    run_git(root, "config", "user.name", "Jane Doe")
    run_git(root, "config", "user.email", "jane@example.org")
    run_git(root, "config", "commit.gpgsign", "false")
    return root
