"""Protocol definitions for repository access.

The provenance and report layers depend on this protocol rather than on the
git adapter, so tests can supply an in-memory repository and other version
control backends can be plugged in.
"""

from pathlib import Path
from typing import List, Optional, Protocol

from reprodoc.domain import CommitVersion


class RepoContext(Protocol):
    """Read-only view of a version-controlled repository.

    Paths passed to the query methods are posix paths relative to ``root``.
    Implementations raise RepoAccessError when the repository cannot be read.

    Attributes:
        root: Absolute path of the working tree root
    """

    root: Path

    def history(self, relpath: str) -> List[CommitVersion]:
        """Commits that changed ``relpath``, newest first."""
        ...

    def head(self) -> CommitVersion:
        """Currently checked-out commit."""
        ...

    def is_dirty(self, relpath: str) -> bool:
        """True when ``relpath`` differs from the checked-out commit."""
        ...

    def remote_url(self) -> Optional[str]:
        """URL of the preferred remote, None when no remote is configured."""
        ...
