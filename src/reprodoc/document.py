"""Reading and inspecting literate documents.

A document starts with a YAML metadata block enclosed by two delimiter lines
(``---`` or ``...`` at column one). Everything after the second delimiter is
the body, where code chunks are fenced as ```` ```{r label, options} ````.
"""

import logging
from pathlib import Path
import re
from typing import Any, Dict, Iterable, List, Sequence, Union

import yaml

from reprodoc.domain import MalformedDocumentError, SourceDocument

logger = logging.getLogger(__name__)

HEADER_DELIMITER = re.compile(r"^(-{3}|\.{3})\s*$")
CHUNK_FENCE = re.compile(r"^\s*```+\s*\{\s*[A-Za-z][^}]*\}\s*$")
INLINE_CODE = re.compile(r"`r\s+[^`]*`")

# Tags that R Markdown evaluates as R code in parameterized reports
R_CODE_TAGS = ("!r", "!expr")


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps ``!r`` and ``!expr`` values as their source text."""


def _construct_r_code(loader: yaml.SafeLoader, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    raise yaml.constructor.ConstructorError(None, None, f"expected a scalar after {node.tag}", node.start_mark)


for _tag in R_CODE_TAGS:
    FrontMatterLoader.add_constructor(_tag, _construct_r_code)


def find_header_delimiters(lines: Sequence[str]) -> List[int]:
    """Indices of all lines that look like header delimiters."""
    return [i for i, line in enumerate(lines) if HEADER_DELIMITER.match(line)]


def parse_document(lines: Iterable[str], path: Union[str, Path]) -> SourceDocument:
    """Split document lines at the metadata block.

    Args:
        lines: Document lines without terminators
        path: Source location, used in error messages

    Returns:
        SourceDocument with header boundaries set

    Raises:
        MalformedDocumentError: If fewer than two delimiter lines exist
    """
    lines = tuple(lines)
    delimiters = find_header_delimiters(lines)
    if len(delimiters) < 2:
        raise MalformedDocumentError(f"Expected two header delimiter lines ('---' or '...'), found {len(delimiters)}", path)

    return SourceDocument(path=Path(path), lines=lines, header_start=delimiters[0], header_end=delimiters[1])


def read_document(path: Union[str, Path]) -> SourceDocument:
    """Read a literate document from disk.

    Raises:
        FileNotFoundError: If the document does not exist
        MalformedDocumentError: If the metadata block cannot be located
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")

    # Lines break only at \n; form feeds and Unicode separators stay inside a line
    with open(path, "r", encoding="utf-8") as f:
        lines = f.read().split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    return parse_document(lines, path)


def parse_front_matter(document: SourceDocument) -> Dict[str, Any]:
    """Parse the YAML metadata block of a document.

    Returns:
        Header mapping (empty for an empty block)

    Raises:
        MalformedDocumentError: If the block is not valid YAML or not a mapping
    """
    try:
        data = yaml.load(document.front_matter, Loader=FrontMatterLoader)
    except yaml.YAMLError as e:
        raise MalformedDocumentError(f"Cannot parse document header: {e}", document.path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedDocumentError(f"Document header must be a mapping, got {type(data).__name__}", document.path)
    return data


def detect_code(lines: Iterable[str]) -> bool:
    """Check whether any line opens a code chunk or holds inline code."""
    for line in lines:
        if CHUNK_FENCE.match(line) or INLINE_CODE.search(line):
            return True
    return False
