"""Provenance tracking for documents and generated artifacts.

Public API:
-----------
    from reprodoc.provenance import (
        file_versions,
        versions_for,
        render_versions,
        repo_relative_path,
        version_url,
    )

See core module for detailed documentation.
"""

from .core import file_versions, render_versions, repo_relative_path, version_url, versions_for

__all__ = [
    "file_versions",
    "versions_for",
    "render_versions",
    "repo_relative_path",
    "version_url",
]
