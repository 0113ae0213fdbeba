"""Provenance domain models.

Model Hierarchy:
---------------
- CommitVersion: One commit that touched a tracked path
- ProvenanceReport: Ordered versions of a path plus their markdown rendering

Both models are immutable so that a report computed during one figure hook
call can be compared with the next one for the same repository state.

Example:
--------
>>> from datetime import datetime, timezone
>>> v = CommitVersion(
...     commit="0123456789abcdef0123456789abcdef01234567",
...     author="Jane Doe",
...     date=datetime(2026, 1, 2, tzinfo=timezone.utc),
... )
>>> v.short_id
'0123456'
"""

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, Field

SHORT_ID_LENGTH = 7


class CommitVersion(BaseModel):
    """Historical record of one commit for a tracked path.

    Attributes:
        commit: Full commit hash
        author: Author name
        date: Author date (timezone aware)
        message: Commit subject line
        url: Hosting URL showing the file at this commit (optional)
    """

    model_config = {"frozen": True, "extra": "forbid"}

    commit: str = Field(..., min_length=SHORT_ID_LENGTH, description="Full commit hash")
    author: str = Field(default="", description="Commit author name")
    date: datetime = Field(..., description="Author date of the commit")
    message: str = Field(default="", description="Commit subject line")
    url: Optional[str] = Field(default=None, description="Hosting URL of the file at this commit")

    @property
    def short_id(self) -> str:
        return self.commit[:SHORT_ID_LENGTH]


class ProvenanceReport(BaseModel):
    """Rendered history of a document or artifact.

    An empty report (no versions, empty markdown) is the normal result for
    untracked paths and for renders outside a repository.

    Attributes:
        path: Repository-relative posix path, None when unresolved
        versions: Versions in the order returned by the history query
        markdown: Markdown fragment listing the versions
    """

    model_config = {"frozen": True, "extra": "forbid"}

    path: Optional[str] = None
    versions: Tuple[CommitVersion, ...] = ()
    markdown: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.versions
