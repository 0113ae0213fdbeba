"""Exception hierarchy for reprodoc.

Fatal errors (ConfigParseError, MalformedDocumentError) propagate to the
caller and abort the render of a single document. RepoAccessError is raised
by repository adapters and absorbed by the provenance layer, where a missing
history is a valid result.
"""

from pathlib import Path
from typing import Optional, Union


class ReprodocError(Exception):
    """Base exception for reprodoc errors.

    Attributes:
        message: Human-readable description
        path: File the error refers to (optional)
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.message = message
        self.path = Path(path) if path is not None else None
        super().__init__(f"{message} ({self.path})" if self.path is not None else message)


class ConfigParseError(ReprodocError):
    """Configuration file or header group cannot be parsed."""

    pass


class MalformedDocumentError(ReprodocError):
    """Document lacks a locatable metadata block."""

    pass


class RepoAccessError(ReprodocError):
    """Repository state could not be read."""

    pass
