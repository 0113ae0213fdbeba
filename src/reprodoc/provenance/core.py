"""Past versions of files and generated artifacts.

Maps a path on disk to its location inside the repository, queries the
commits that changed it and renders them as a collapsible markdown table.
Repository failures never propagate: a path without history, an untracked
path and a render outside any repository all give an empty report.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

from reprodoc.domain import CommitVersion, ProvenanceReport, RepoAccessError
from reprodoc.repo import RepoContext

logger = logging.getLogger(__name__)


def repo_relative_path(path: Union[str, Path], repo: RepoContext) -> Optional[str]:
    """Posix path of ``path`` relative to the repository root.

    Symlinks are resolved on both sides, since git reports the physical
    location of the working tree.

    Returns:
        Relative path, or None when ``path`` lies outside the repository
    """
    real_path = Path(os.path.realpath(path))
    real_root = Path(os.path.realpath(repo.root))
    try:
        return real_path.relative_to(real_root).as_posix()
    except ValueError:
        return None


def version_url(github: Optional[str], commit: str, relpath: str) -> Optional[str]:
    """Hosting URL of ``relpath`` as of ``commit``."""
    if not github:
        return None
    return f"{github.rstrip('/')}/blob/{commit}/{relpath}"


def render_versions(name: str, versions: Sequence[CommitVersion]) -> str:
    """Render versions as a collapsible markdown table.

    Args:
        name: File name shown in the summary line
        versions: Versions in display order

    Returns:
        Markdown fragment, empty string when there are no versions
    """
    if not versions:
        return ""

    lines = [
        "<details>",
        f"<summary><em>Expand here to see past versions of {name}:</em></summary>",
        "",
        "| Version | Author | Date |",
        "|:--|:--|:--|",
    ]
    for version in versions:
        label = f"[{version.short_id}]({version.url})" if version.url else version.short_id
        lines.append(f"| {label} | {_escape_cell(version.author)} | {version.date.date().isoformat()} |")
    lines.extend(["", "</details>"])
    return "\n".join(lines)


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def file_versions(
    path: Union[str, Path],
    repo: Optional[RepoContext],
    github: Optional[str] = None,
) -> ProvenanceReport:
    """Past committed versions of a file.

    Args:
        path: Absolute (or current-directory relative) path of the file
        repo: Repository context, None outside a repository
        github: Repository web URL used to link each version (optional)

    Returns:
        ProvenanceReport, empty when no history is available
    """
    if repo is None:
        return ProvenanceReport()

    relpath = repo_relative_path(path, repo)
    if relpath is None:
        logger.debug(f"{path} is outside repository {repo.root}")
        return ProvenanceReport()

    try:
        history: List[CommitVersion] = repo.history(relpath)
    except RepoAccessError as e:
        logger.debug(f"No history for {relpath}: {e}")
        return ProvenanceReport(path=relpath)

    if not history:
        return ProvenanceReport(path=relpath)

    versions = tuple(v.model_copy(update={"url": version_url(github, v.commit, relpath)}) for v in history)
    return ProvenanceReport(path=relpath, versions=versions, markdown=render_versions(Path(relpath).name, versions))


def versions_for(
    artifact_path: Union[str, Path],
    repo: Optional[RepoContext],
    github: Optional[str] = None,
    knit_dir: Optional[Union[str, Path]] = None,
    output_dir: Optional[Union[str, Path]] = None,
) -> ProvenanceReport:
    """Past versions of an artifact written during rendering.

    The engine reports artifacts relative to the directory it renders in.
    When the site is published to a separate output directory, the committed
    copy lives there instead, so the lookup switches to ``output_dir``.

    Args:
        artifact_path: Artifact path as emitted by the engine
        repo: Repository context, None outside a repository
        github: Repository web URL (optional)
        knit_dir: Directory the engine rendered in (default: current directory)
        output_dir: Published output directory (optional)

    Returns:
        ProvenanceReport, empty when no history is available
    """
    if repo is None:
        return ProvenanceReport()

    base = Path(output_dir) if output_dir is not None else Path(knit_dir) if knit_dir is not None else Path.cwd()
    return file_versions(base / artifact_path, repo, github)
