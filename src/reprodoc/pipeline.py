"""Render preparation for the rendering engine.

This module is the single place where the pre-render steps are chained:
open the repository once, augment the document, and locate the published
output directory. The resulting RenderPlan carries everything the per-figure
hook needs, so the engine can call ``render_figure`` for each figure without
reopening the repository.

Example:
--------
>>> from reprodoc.pipeline import prepare_render, render_figure
>>> plan = prepare_render("analysis/index.Rmd")
>>> # engine renders plan["augmented_path"] in plan["config"].knit_root_dir
>>> markdown = render_figure(plan, "figure/index.Rmd/plot-1.png")
"""

import logging
from pathlib import Path
from typing import Optional, TypedDict, Union

from reprodoc.augment import augment_document
from reprodoc.config import absolute_path
from reprodoc.domain import WorkflowConfig
from reprodoc.hooks import plot_hook
from reprodoc.repo import RepoContext

logger = logging.getLogger(__name__)


class RenderPlan(TypedDict):
    """Context of one document render.

    Attributes:
        source: Absolute path of the original document
        augmented_path: Ephemeral augmented copy to hand to the engine
        config: Effective configuration (knit_root_dir is the engine's cwd)
        output_dir: Published output directory, None when not a website
        repo: Repository context, None outside a repository
    """

    source: Path
    augmented_path: Path
    config: WorkflowConfig
    output_dir: Optional[Path]
    repo: Optional[RepoContext]


def prepare_render(
    source: Union[str, Path],
    knit_root_dir: Optional[Union[str, Path]] = None,
    destination: Optional[Union[str, Path]] = None,
    repo: Optional[RepoContext] = None,
) -> RenderPlan:
    """Run the pre-render steps for one document.

    Args:
        source: Path to the literate source
        knit_root_dir: Explicit working directory requested by the caller
        destination: Directory for the augmented copy (default: temporary)
        repo: Open repository to reuse across a batch (default: discovered)

    Returns:
        RenderPlan for the engine and the figure hook

    Raises:
        MalformedDocumentError: If the document has no metadata block
        ConfigParseError: If any configuration file is invalid
    """
    source = absolute_path(source)
    result = augment_document(source, knit_root_dir=knit_root_dir, destination=destination, repo=repo)

    logger.debug(f"Prepared render of {source} (repo={result['repo']}, output_dir={result['output_dir']})")
    return RenderPlan(
        source=source,
        augmented_path=result["path"],
        config=result["config"],
        output_dir=result["output_dir"],
        repo=result["repo"],
    )


def render_figure(plan: RenderPlan, x: str) -> str:
    """Plot hook bound to the context of ``plan``.

    Figures are written relative to the directory of the original document,
    which is where the engine places the ``figure/`` folder.
    """
    return plot_hook(
        x,
        plan["repo"],
        knit_dir=plan["source"].parent,
        output_dir=plan["output_dir"],
        github=plan["config"].github,
    )
