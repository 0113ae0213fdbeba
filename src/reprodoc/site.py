"""Website configuration lookups.

A directory rendered as a website may declare ``output_dir`` in its
``_site.yml``; rendered pages and their figures are then committed under that
directory instead of next to the sources.
"""

import os
from pathlib import Path
from typing import Optional, Union

import yaml

from reprodoc.domain import ConfigParseError

SITE_CONFIG_FILE = "_site.yml"


def get_output_dir(directory: Union[str, Path], site_file: str = SITE_CONFIG_FILE) -> Optional[Path]:
    """Output directory declared by the website configuration.

    Args:
        directory: Directory containing the document sources
        site_file: Name of the website configuration file

    Returns:
        None when there is no website configuration, ``directory`` itself when
        it declares no ``output_dir``, otherwise the absolute output directory

    Raises:
        ConfigParseError: If the website configuration is not a valid mapping
    """
    directory = Path(directory).absolute()
    site_path = directory / site_file
    if not site_path.is_file():
        return None

    try:
        with open(site_path, "r", encoding="utf-8") as f:
            site = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Cannot parse website configuration: {e}", site_path) from e

    if not isinstance(site, dict):
        raise ConfigParseError("Website configuration must be a mapping", site_path)

    output_dir = site.get("output_dir")
    if output_dir is None:
        return directory
    return Path(os.path.abspath(directory / str(output_dir)))
