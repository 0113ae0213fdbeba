"""Configuration domain models for reprodoc.

WorkflowConfig is the effective configuration of a single render, the result
of merging built-in defaults, the project file (_reprodoc.yml), environment
overrides and the document's own ``reprodoc:`` header group.

Key Features:
-------------
- **Immutable**: frozen=True, constructed once per render
- **Strict Schema**: extra="forbid" rejects unknown fields
- **Absolute root**: knit_root_dir must be absolute once resolved

Usage:
------
>>> from reprodoc.config import resolve_config
>>> config = resolve_config("analysis/index.Rmd")
>>> config.seed
12345
"""

import math
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_SEED = 12345
DEFAULT_SESSIONINFO = "sessionInfo()"

# Keys recognised in _reprodoc.yml, REPRODOC_* variables and the header group
CONFIG_KEYS = ("knit_root_dir", "seed", "github", "sessioninfo")


class WorkflowConfig(BaseModel):
    """Effective configuration for one document render.

    Attributes:
        knit_root_dir: Absolute working directory for code execution
        seed: Random seed; only a single numeric value produces a seed chunk
        github: Web URL of the hosting repository (optional)
        sessioninfo: Expression that reports the execution environment,
            empty string disables the session information chunk
    """

    model_config = {"frozen": True, "extra": "forbid"}

    knit_root_dir: Path = Field(..., description="Absolute working directory used while executing code chunks")
    seed: Any = Field(default=DEFAULT_SEED, description="Value passed to set.seed() before the first chunk")
    github: Optional[str] = Field(default=None, description="Repository web URL used to link past versions")
    sessioninfo: str = Field(default=DEFAULT_SESSIONINFO, description="Expression evaluated in the session information chunk")

    @field_validator("knit_root_dir")
    @classmethod
    def validate_absolute(cls, v: Path) -> Path:
        """Reject relative roots; resolution must happen before construction."""
        if not v.is_absolute():
            raise ValueError(f"knit_root_dir must be absolute, got '{v}'")
        return v

    @property
    def has_numeric_seed(self) -> bool:
        """True when seed is a single finite number (booleans excluded)."""
        if isinstance(self.seed, bool) or not isinstance(self.seed, (int, float)):
            return False
        return math.isfinite(self.seed)
