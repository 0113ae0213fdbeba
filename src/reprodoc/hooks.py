"""Hooks called by the rendering engine.

Every hook is a plain function receiving all of its context as arguments,
so the same repository handle and output directory can be passed to each
figure of a render without any shared mutable state.

Key Functions:
--------------
- figure_path: Option hook placing figures under figure/<document>/
- plot_hook: Image reference followed by the figure's past versions
- footer_lines, write_footer, pandoc_args: Footer naming reprodoc
"""

from pathlib import Path
import tempfile
from typing import List, Optional, Union

from reprodoc import __version__
from reprodoc.provenance import versions_for
from reprodoc.repo import RepoContext

FIGURE_DIR = "figure"


def figure_path(input_name: str) -> str:
    """Figure path prefix for a document, e.g. ``figure/index.Rmd/``."""
    return f"{FIGURE_DIR}/{Path(input_name).name}/"


def plot_hook(
    x: str,
    repo: Optional[RepoContext],
    knit_dir: Union[str, Path],
    output_dir: Optional[Union[str, Path]] = None,
    github: Optional[str] = None,
) -> str:
    """Markdown emitted for a figure written by the engine.

    Args:
        x: Figure path relative to the knit directory
        repo: Repository context, None outside a repository
        knit_dir: Directory the engine rendered in
        output_dir: Published output directory (optional)
        github: Repository web URL (optional)

    Returns:
        ``![](x)``, followed by the past versions table when the figure has
        committed history
    """
    image = f"![]({x})"
    report = versions_for(x, repo, github=github, knit_dir=knit_dir, output_dir=output_dir)
    if report.is_empty:
        return image
    return "\n".join([f"{image}\n", report.markdown])


def footer_lines(version: str = __version__) -> List[str]:
    return [
        "<hr>",
        "<p>",
        'This reproducible <a href="http://rmarkdown.rstudio.com">R Markdown</a> '
        'analysis was created with reprodoc ',
        version,
        "</p>",
        "<hr>",
    ]


def write_footer(directory: Optional[Union[str, Path]] = None, version: str = __version__) -> Path:
    """Write the HTML footer to ``directory`` (default: a temporary directory)."""
    directory = Path(directory) if directory is not None else Path(tempfile.mkdtemp(prefix="reprodoc-footer-"))
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "footer.html"
    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(footer_lines(version)) + "\n")
    return path


def pandoc_args(directory: Optional[Union[str, Path]] = None) -> List[str]:
    """Extra pandoc arguments that append the footer to the page body."""
    return ["--include-after-body", str(write_footer(directory))]
