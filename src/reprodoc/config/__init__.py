"""Configuration module for reprodoc.

Resolves the effective WorkflowConfig of a document from four layers, each
overlaying the previous one key by key:

1. Built-in defaults (seed 12345, sessionInfo(), GitHub URL from the remote)
2. Project file ``_reprodoc.yml`` found in an ancestor of the document
3. Environment variables ``REPRODOC_<KEY>``
4. The ``reprodoc:`` group of the document's YAML front matter

A relative ``knit_root_dir`` is interpreted against the directory of the layer
that declared it: the project root for the project file, the document
directory for the front matter.

Example:
--------
>>> from reprodoc.config import resolve_config
>>> config = resolve_config("analysis/index.Rmd")
>>> config.knit_root_dir  # absolute
PosixPath('/home/me/project/analysis')
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError
import yaml

from reprodoc.document import parse_front_matter, read_document
from reprodoc.domain import CONFIG_KEYS, DEFAULT_SEED, DEFAULT_SESSIONINFO, ConfigParseError, WorkflowConfig
from reprodoc.repo import RepoContext, discover_repository, get_github_from_repo

__all__ = [
    "PROJECT_CONFIG_FILE",
    "HEADER_KEY",
    "ENV_PREFIX",
    "find_project_root",
    "load_project_config",
    "header_options",
    "absolute_path",
    "resolve_config",
]

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "_reprodoc.yml"
HEADER_KEY = "reprodoc"
ENV_PREFIX = "REPRODOC_"


# ============================================================================
# Layer Loading
# ============================================================================


def find_project_root(start: Path | str) -> Optional[Path]:
    """Search ``start`` and its ancestors for the project configuration file.

    Args:
        start: Directory where the search begins

    Returns:
        Directory containing ``_reprodoc.yml``, or None when no ancestor has one
    """
    current = absolute_path(start)
    for directory in (current, *current.parents):
        if (directory / PROJECT_CONFIG_FILE).is_file():
            return directory
    return None


def load_project_config(path: Path | str) -> dict[str, Any]:
    """Load and check the project configuration file.

    Args:
        path: Path to ``_reprodoc.yml``

    Returns:
        Mapping of configuration keys (empty for an empty file)

    Raises:
        ConfigParseError: If the file is not valid YAML or not a mapping
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Cannot parse project configuration: {e}", path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(f"Project configuration must be a mapping, got {type(data).__name__}", path)
    return _known_options(data, path)


def header_options(front_matter: Mapping[str, Any], document_path: Path | str) -> dict[str, Any]:
    """Extract the ``reprodoc:`` group from parsed front matter.

    Raises:
        ConfigParseError: If the group is present but not a mapping
    """
    group = front_matter.get(HEADER_KEY)
    if group is None:
        return {}
    if not isinstance(group, dict):
        raise ConfigParseError(f"'{HEADER_KEY}' in the document header must be a mapping, got {type(group).__name__}", document_path)
    return _known_options(group, document_path)


def _known_options(options: Mapping[str, Any], source: Path | str) -> dict[str, Any]:
    known = {}
    for key, value in options.items():
        if key in CONFIG_KEYS:
            known[key] = value
        else:
            logger.warning(f"Ignoring unknown option '{key}' in {source}")
    return known


def _env_options(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``REPRODOC_<KEY>`` overrides for the recognised keys.

    REPRODOC_SEED=42
    REPRODOC_SESSIONINFO=devtools::session_info()
    """
    options: dict[str, Any] = {}
    for key in CONFIG_KEYS:
        env_key = f"{ENV_PREFIX}{key.upper()}"
        if env_key in environ:
            # Only the seed is typed; paths, URLs and expressions stay strings
            options[key] = _parse_env_value(environ[env_key]) if key == "seed" else environ[env_key]
    return options


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type.

    Returns:
        Parsed value (int, float, bool, or str)
    """
    # Numeric first so that "1" stays a seed rather than a boolean
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass

    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    return value


# ============================================================================
# Resolution
# ============================================================================


def absolute_path(path: Path | str, base: Path | str | None = None) -> Path:
    """Make ``path`` absolute against ``base`` (default: current directory).

    Expands ``~`` and environment variables. Absolute input is returned
    normalised but otherwise unchanged.
    """
    expanded = os.path.expandvars(os.path.expanduser(str(path)))
    if base is not None and not os.path.isabs(expanded):
        expanded = os.path.join(str(base), expanded)
    return Path(os.path.abspath(expanded))


def _resolve_root(value: Any, base: Path, source: Path | str) -> Path:
    if not isinstance(value, (str, os.PathLike)):
        raise ConfigParseError(f"knit_root_dir must be a path, got {type(value).__name__}", source)
    return absolute_path(value, base)


def resolve_config(
    document_path: Path | str,
    project_root: Path | str | None = None,
    repo: Optional[RepoContext] = None,
    knit_root_dir: Path | str | None = None,
    environ: Optional[Mapping[str, str]] = None,
    front_matter: Optional[Mapping[str, Any]] = None,
    discover_repo: bool = True,
) -> WorkflowConfig:
    """Resolve the effective configuration for one document.

    Args:
        document_path: Path to the literate source
        project_root: Directory holding ``_reprodoc.yml``; discovered from the
            document's ancestors when None
        repo: Repository used to derive the default ``github`` URL; discovered
            from the document directory when None and ``discover_repo`` is set
        knit_root_dir: Explicit override that wins over every layer
        environ: Environment mapping (default: os.environ)
        front_matter: Parsed document header; read from the file when None
        discover_repo: Look up the repository when ``repo`` is None; False
            means the caller already knows there is none

    Returns:
        Validated, immutable WorkflowConfig

    Raises:
        ConfigParseError: If the project file or the header group is invalid
        MalformedDocumentError: If the document header cannot be located or parsed
    """
    document_path = absolute_path(document_path)
    document_dir = document_path.parent

    if repo is None and discover_repo:
        repo = discover_repository(document_dir)

    options: dict[str, Any] = {
        "knit_root_dir": None,
        "seed": DEFAULT_SEED,
        "github": get_github_from_repo(repo),
        "sessioninfo": DEFAULT_SESSIONINFO,
    }
    config_source: Path | str = document_path

    # Project layer
    root = absolute_path(project_root) if project_root is not None else find_project_root(document_dir)
    if root is not None and (root / PROJECT_CONFIG_FILE).is_file():
        config_source = root / PROJECT_CONFIG_FILE
        project_options = load_project_config(config_source)
        options.update(project_options)
        if project_options.get("knit_root_dir") is not None:
            options["knit_root_dir"] = _resolve_root(project_options["knit_root_dir"], root, config_source)
        logger.debug(f"Applied project configuration {config_source}")
    else:
        logger.debug(f"No {PROJECT_CONFIG_FILE} found for {document_path}")

    # Environment layer
    env_options = _env_options(os.environ if environ is None else environ)
    options.update(env_options)
    if env_options.get("knit_root_dir") is not None:
        options["knit_root_dir"] = _resolve_root(env_options["knit_root_dir"], root or document_dir, f"{ENV_PREFIX}KNIT_ROOT_DIR")

    # Document layer
    if front_matter is None:
        front_matter = parse_front_matter(read_document(document_path))
    document_options = header_options(front_matter, document_path)
    options.update(document_options)
    if document_options.get("knit_root_dir") is not None:
        options["knit_root_dir"] = _resolve_root(document_options["knit_root_dir"], document_dir, document_path)
        config_source = document_path

    # null disables the session information chunk like an empty string
    if options["sessioninfo"] is None:
        options["sessioninfo"] = ""

    if options["knit_root_dir"] is None:
        options["knit_root_dir"] = document_dir

    if knit_root_dir is not None:
        options["knit_root_dir"] = absolute_path(knit_root_dir)

    try:
        return WorkflowConfig(**options)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid configuration: {e}", config_source) from e
