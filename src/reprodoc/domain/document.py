"""Source document model.

A SourceDocument is the literate source split at its metadata block. The
header boundaries are the indices of the first two delimiter lines; the
header includes both delimiters and the body is everything after the second.
"""

from pathlib import Path
from typing import Tuple

from pydantic import BaseModel, Field, model_validator


class SourceDocument(BaseModel):
    """Literate document as an ordered sequence of lines.

    Attributes:
        path: Location of the source file
        lines: Document lines without line terminators
        header_start: Index of the opening delimiter line
        header_end: Index of the closing delimiter line
    """

    model_config = {"frozen": True, "extra": "forbid"}

    path: Path
    lines: Tuple[str, ...]
    header_start: int = Field(..., ge=0)
    header_end: int = Field(..., ge=1)

    @model_validator(mode="after")
    def validate_boundaries(self) -> "SourceDocument":
        if not self.header_start < self.header_end < len(self.lines):
            raise ValueError(f"Invalid header boundaries {self.header_start}..{self.header_end} for {len(self.lines)} lines")
        return self

    @property
    def header_lines(self) -> Tuple[str, ...]:
        """Lines up to and including the closing delimiter."""
        return self.lines[: self.header_end + 1]

    @property
    def front_matter(self) -> str:
        """Raw YAML between the two delimiters."""
        return "\n".join(self.lines[self.header_start + 1 : self.header_end])

    @property
    def body_lines(self) -> Tuple[str, ...]:
        return self.lines[self.header_end + 1 :]
