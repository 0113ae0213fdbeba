"""Repository access for reprodoc.

Public API:
-----------
    from reprodoc.repo import (
        RepoContext,
        GitRepoContext,
        discover_repository,
        github_from_remote,
        get_github_from_repo,
    )
"""

from .git import GitRepoContext, discover_repository, get_github_from_repo, github_from_remote
from .protocols import RepoContext

__all__ = [
    "RepoContext",
    "GitRepoContext",
    "discover_repository",
    "github_from_remote",
    "get_github_from_repo",
]
