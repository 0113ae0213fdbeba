"""Document augmentation.

Copies a literate document to an ephemeral location with reproducibility
content spliced around the original lines:

    header (unchanged)
    **Last updated:** line
    provenance report
    ---
    seed chunk            (only with code and a numeric seed)
    body (unchanged)
    session information   (only with code and a non-empty expression)

The source file is never modified, and its lines appear contiguous and in
their original order in the output.
"""

import logging
from pathlib import Path
import tempfile
from typing import List, Optional, Tuple, TypedDict, Union

from reprodoc.config import absolute_path, find_project_root, resolve_config
from reprodoc.document import detect_code, parse_front_matter, read_document
from reprodoc.domain import WorkflowConfig
from reprodoc.repo import RepoContext, discover_repository
from reprodoc.report import build_report
from reprodoc.site import get_output_dir

logger = logging.getLogger(__name__)

SEED_CHUNK_LABEL = "seed-set-by-reprodoc"
SESSION_INFO_CHUNK_LABEL = "session-info-chunk-inserted-by-reprodoc"
LAST_UPDATED_LINE = "**Last updated:** `r Sys.Date()`"
SEPARATOR_LINE = "---"


def seed_chunk(config: WorkflowConfig, has_code: bool) -> List[str]:
    """Chunk that sets the random seed, empty when not applicable."""
    if not has_code or not config.has_numeric_seed:
        return []
    return [
        "",
        f"```{{r {SEED_CHUNK_LABEL}, echo = FALSE}}",
        f"set.seed({int(config.seed)})",
        "```",
        "",
    ]


def session_info_chunk(config: WorkflowConfig, has_code: bool) -> List[str]:
    """Session information section, empty when not applicable."""
    if not has_code or config.sessioninfo == "":
        return []
    return [
        "",
        "## Session information",
        "",
        f"```{{r {SESSION_INFO_CHUNK_LABEL}}}",
        config.sessioninfo,
        "```",
        "",
    ]


class AugmentResult(TypedDict):
    """Outcome of augmenting one document.

    Attributes:
        path: Augmented copy handed to the rendering engine
        config: Effective configuration of the render
        output_dir: Published output directory, None when not a website
        repo: Repository context used for the report, None outside a repository
    """

    path: Path
    config: WorkflowConfig
    output_dir: Optional[Path]
    repo: Optional[RepoContext]


def augment_document(
    source_path: Union[str, Path],
    knit_root_dir: Optional[Union[str, Path]] = None,
    destination: Optional[Union[str, Path]] = None,
    repo: Optional[RepoContext] = None,
) -> AugmentResult:
    """Write an augmented copy of a literate document.

    Same as ``augment`` but also returns the output directory and repository
    it looked up, so that callers preparing a render do not repeat them.

    Args:
        source_path: Path to the literate source
        knit_root_dir: Working directory requested by the engine; wins over
            every configuration layer and is recorded in the returned config
        destination: Directory for the augmented copy (default: a new
            temporary directory)
        repo: Repository context; discovered from the source when None

    Returns:
        AugmentResult with the augmented path and its render context

    Raises:
        FileNotFoundError: If the source does not exist
        MalformedDocumentError: If the metadata block cannot be located
        ConfigParseError: If the project file or header group is invalid
        ValueError: If the destination would overwrite the source
    """
    source_path = absolute_path(source_path)
    document = read_document(source_path)
    front_matter = parse_front_matter(document)

    if repo is None:
        repo = discover_repository(source_path.parent)

    config = resolve_config(
        source_path,
        project_root=find_project_root(source_path.parent),
        repo=repo,
        discover_repo=False,
        knit_root_dir=knit_root_dir,
        front_matter=front_matter,
    )

    body = list(document.body_lines)
    has_code = detect_code(body)
    output_dir = get_output_dir(source_path.parent)
    report = build_report(source_path, output_dir, has_code, config, repo)

    lines_out = [
        *document.header_lines,
        LAST_UPDATED_LINE,
        *report,
        "",
        SEPARATOR_LINE,
        *seed_chunk(config, has_code),
        *body,
        *session_info_chunk(config, has_code),
    ]

    target_dir = absolute_path(destination) if destination is not None else Path(tempfile.mkdtemp(prefix="reprodoc-"))
    target = target_dir / source_path.name
    if target == source_path:
        raise ValueError(f"Augmented document would overwrite its source: {source_path}")

    target_dir.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        f.write("\n".join(lines_out) + "\n")

    logger.info(f"Augmented {source_path.name} -> {target} (code={has_code}, knit_root_dir={config.knit_root_dir})")
    return AugmentResult(path=target, config=config, output_dir=output_dir, repo=repo)


def augment(
    source_path: Union[str, Path],
    knit_root_dir: Optional[Union[str, Path]] = None,
    destination: Optional[Union[str, Path]] = None,
    repo: Optional[RepoContext] = None,
) -> Tuple[Path, WorkflowConfig]:
    """Write an augmented copy of a literate document.

    Args:
        source_path: Path to the literate source
        knit_root_dir: Working directory requested by the engine; wins over
            every configuration layer and is recorded in the returned config
        destination: Directory for the augmented copy (default: a new
            temporary directory)
        repo: Repository context; discovered from the source when None

    Returns:
        Tuple of (augmented document path, effective configuration)

    Raises:
        FileNotFoundError: If the source does not exist
        MalformedDocumentError: If the metadata block cannot be located
        ConfigParseError: If the project file or header group is invalid
        ValueError: If the destination would overwrite the source
    """
    result = augment_document(source_path, knit_root_dir=knit_root_dir, destination=destination, repo=repo)
    return result["path"], result["config"]
