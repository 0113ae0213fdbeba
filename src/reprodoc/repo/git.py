"""Git adapter for the RepoContext protocol.

Runs the ``git`` executable through subprocess and parses its output. Every
failure (missing executable, non-zero exit, timeout, unborn HEAD) surfaces as
RepoAccessError so that callers can treat it as "no provenance available".
"""

from datetime import datetime
import logging
from pathlib import Path
import re
import subprocess
from typing import List, Optional, Union

from reprodoc.domain import CommitVersion, RepoAccessError

from .protocols import RepoContext

logger = logging.getLogger(__name__)

GIT_TIMEOUT_S = 30

# Unit separator between fields, record separator between commits
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = f"%H{_FIELD_SEP}%an{_FIELD_SEP}%aI{_FIELD_SEP}%s{_RECORD_SEP}"

_GITHUB_PATTERNS = (
    re.compile(r"^git@github\.com:(?P<slug>[^/]+/[^/]+?)(?:\.git)?/?$"),
    re.compile(r"^ssh://git@github\.com/(?P<slug>[^/]+/[^/]+?)(?:\.git)?/?$"),
    re.compile(r"^https?://(?:[^@/]+@)?github\.com/(?P<slug>[^/]+/[^/]+?)(?:\.git)?/?$"),
)


def _run_git(args: List[str], cwd: Path) -> str:
    """Run a git command and return its stdout.

    Raises:
        RepoAccessError: If git is missing, times out or exits non-zero
    """
    command = ["git", *args]
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_S,
            check=True,
        )
    except FileNotFoundError as e:
        raise RepoAccessError("git executable not found", cwd) from e
    except subprocess.TimeoutExpired as e:
        raise RepoAccessError(f"git {args[0]} timed out after {GIT_TIMEOUT_S}s", cwd) from e
    except subprocess.CalledProcessError as e:
        stderr_msg = e.stderr.strip() if e.stderr else "No error message"
        raise RepoAccessError(f"git {args[0]} failed: {stderr_msg}", cwd) from e
    except OSError as e:
        raise RepoAccessError(f"Cannot run git: {e}", cwd) from e

    return result.stdout


def _parse_log(output: str) -> List[CommitVersion]:
    versions = []
    for record in output.split(_RECORD_SEP):
        record = record.strip()
        if not record:
            continue
        fields = record.split(_FIELD_SEP)
        if len(fields) != 4:
            raise RepoAccessError(f"Unexpected git log record: {record!r}")
        commit, author, date, message = fields
        versions.append(CommitVersion(commit=commit, author=author, date=datetime.fromisoformat(date), message=message))
    return versions


class GitRepoContext:
    """RepoContext backed by the git command line.

    Holds nothing but the working tree root, so one instance can be shared by
    all renders of a batch. No method writes to the repository.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"GitRepoContext(root={str(self.root)!r})"

    def history(self, relpath: str) -> List[CommitVersion]:
        output = _run_git(["log", f"--format={_LOG_FORMAT}", "--", relpath], self.root)
        return _parse_log(output)

    def head(self) -> CommitVersion:
        output = _run_git(["log", "-1", f"--format={_LOG_FORMAT}", "HEAD"], self.root)
        versions = _parse_log(output)
        if not versions:
            raise RepoAccessError("HEAD does not point to a commit", self.root)
        return versions[0]

    def is_dirty(self, relpath: str) -> bool:
        output = _run_git(["status", "--porcelain", "--", relpath], self.root)
        return bool(output.strip())

    def remote_url(self) -> Optional[str]:
        remotes = _run_git(["remote"], self.root).split()
        if not remotes:
            return None
        name = "origin" if "origin" in remotes else remotes[0]
        return _run_git(["remote", "get-url", name], self.root).strip() or None


def discover_repository(path: Union[str, Path]) -> Optional[GitRepoContext]:
    """Find the git working tree containing ``path``.

    Args:
        path: File or directory; missing paths are looked up from their
            nearest existing ancestor

    Returns:
        GitRepoContext for the enclosing working tree, or None when ``path``
        is not inside a repository or git is unavailable
    """
    start = Path(path).absolute()
    while not start.exists() and start != start.parent:
        start = start.parent
    if start.is_file():
        start = start.parent

    try:
        toplevel = _run_git(["rev-parse", "--show-toplevel"], start).strip()
    except RepoAccessError as e:
        logger.debug(f"No repository found for {path}: {e}")
        return None

    if not toplevel:
        return None
    return GitRepoContext(Path(toplevel))


def github_from_remote(url: Optional[str]) -> Optional[str]:
    """Convert a GitHub remote URL to the repository web URL.

    Args:
        url: Remote URL in https, scp-like or ssh form

    Returns:
        ``https://github.com/<user>/<repo>``, or None for other hosts
    """
    if not url:
        return None
    url = url.strip()
    for pattern in _GITHUB_PATTERNS:
        match = pattern.match(url)
        if match:
            return f"https://github.com/{match.group('slug')}"
    return None


def get_github_from_repo(repo: Optional[RepoContext]) -> Optional[str]:
    """Web URL derived from the repository's remote, None on any failure."""
    if repo is None:
        return None
    try:
        return github_from_remote(repo.remote_url())
    except RepoAccessError as e:
        logger.debug(f"Cannot read remote of {repo.root}: {e}")
        return None
