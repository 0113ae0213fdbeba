"""Domain models for reprodoc.

Pydantic models shared by the configuration, augmentation and provenance
layers, re-exported here for convenience.

Package Structure:
-----------------
- exceptions: Exception hierarchy (ReprodocError and subclasses)
- config: WorkflowConfig and configuration defaults
- document: SourceDocument
- provenance: CommitVersion, ProvenanceReport

Import Patterns:
---------------
# Direct module imports
from reprodoc.domain.config import WorkflowConfig
from reprodoc.domain.exceptions import ConfigParseError

# Package root imports
from reprodoc.domain import WorkflowConfig, CommitVersion, ReprodocError
"""

from reprodoc.domain.config import CONFIG_KEYS, DEFAULT_SEED, DEFAULT_SESSIONINFO, WorkflowConfig
from reprodoc.domain.document import SourceDocument
from reprodoc.domain.exceptions import ConfigParseError, MalformedDocumentError, RepoAccessError, ReprodocError
from reprodoc.domain.provenance import CommitVersion, ProvenanceReport

__all__ = [
    # Config
    "CONFIG_KEYS",
    "DEFAULT_SEED",
    "DEFAULT_SESSIONINFO",
    "WorkflowConfig",
    # Document
    "SourceDocument",
    # Provenance
    "CommitVersion",
    "ProvenanceReport",
    # Exceptions
    "ReprodocError",
    "ConfigParseError",
    "MalformedDocumentError",
    "RepoAccessError",
]
