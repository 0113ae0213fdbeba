"""Document augmentation with seed, provenance and session information.

Public API:
-----------
    from reprodoc.augment import (
        augment,
        augment_document,
        AugmentResult,
        seed_chunk,
        session_info_chunk,
        SEED_CHUNK_LABEL,
        SESSION_INFO_CHUNK_LABEL,
    )
"""

from .core import (
    LAST_UPDATED_LINE,
    SEED_CHUNK_LABEL,
    SEPARATOR_LINE,
    SESSION_INFO_CHUNK_LABEL,
    AugmentResult,
    augment,
    augment_document,
    seed_chunk,
    session_info_chunk,
)

__all__ = [
    # Block markers
    "SEED_CHUNK_LABEL",
    "SESSION_INFO_CHUNK_LABEL",
    "LAST_UPDATED_LINE",
    "SEPARATOR_LINE",
    # Core functions
    "augment",
    "augment_document",
    "AugmentResult",
    "seed_chunk",
    "session_info_chunk",
]
