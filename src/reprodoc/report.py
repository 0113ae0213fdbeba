"""Provenance summary block for the document itself.

The block records the commit the document is rendered from, the last commit
that published its HTML output, a warning when the source has uncommitted
changes and the past versions of the source file. Outside a repository the
block is empty.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from reprodoc.domain import RepoAccessError, WorkflowConfig
from reprodoc.provenance import file_versions, repo_relative_path
from reprodoc.repo import RepoContext

logger = logging.getLogger(__name__)


def rendered_output_path(document_path: Union[str, Path], output_dir: Optional[Union[str, Path]] = None) -> Path:
    """Location of the HTML file rendered from ``document_path``."""
    document_path = Path(document_path)
    directory = Path(output_dir) if output_dir is not None else document_path.parent
    return directory / f"{document_path.stem}.html"


def build_report(
    document_path: Union[str, Path],
    output_dir: Optional[Union[str, Path]],
    has_code: bool,
    config: WorkflowConfig,
    repo: Optional[RepoContext],
) -> List[str]:
    """Build the provenance summary lines for a document.

    Args:
        document_path: Path to the literate source
        output_dir: Directory the HTML is published to (None: next to the source)
        has_code: Whether the document contains code chunks
        config: Effective configuration of the render
        repo: Repository context, None outside a repository

    Returns:
        Markdown lines, each paragraph preceded by a blank line; empty when
        repository state is unavailable
    """
    if repo is None:
        return []

    try:
        head = repo.head()
    except RepoAccessError as e:
        logger.debug(f"Cannot read HEAD of {repo.root}: {e}")
        return []

    github = config.github.rstrip("/") if config.github else None
    code_version = f"[{head.short_id}]({github}/tree/{head.commit})" if github else f"`{head.short_id}`"
    lines = ["", f"**Code version:** {code_version}"]

    # Last commit that published the rendered HTML
    published = file_versions(rendered_output_path(document_path, output_dir), repo, github)
    if not published.is_empty:
        latest = published.versions[0]
        label = f"[{latest.short_id}]({latest.url})" if latest.url else f"`{latest.short_id}`"
        lines.extend(["", f"**Last published:** {label} ({latest.date.date().isoformat()}, {latest.author})"])

    source_relpath = repo_relative_path(document_path, repo)
    if source_relpath is not None:
        try:
            dirty = repo.is_dirty(source_relpath)
        except RepoAccessError as e:
            logger.debug(f"Cannot read status of {source_relpath}: {e}")
            dirty = False
        if dirty:
            lines.extend(
                [
                    "",
                    f"> **Warning:** `{source_relpath}` has uncommitted changes, "
                    f"so the results below may not match commit `{head.short_id}`.",
                ]
            )

    if has_code and config.has_numeric_seed:
        lines.extend(["", f"**Random seed:** `set.seed({int(config.seed)})` was run before any code in this document."])

    history = file_versions(document_path, repo, github)
    if not history.is_empty:
        lines.extend(["", *history.markdown.split("\n")])

    return lines
