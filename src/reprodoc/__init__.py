"""reprodoc: reproducibility metadata for literate documents.

Augments R Markdown sources with a random seed, a provenance report and
session information before rendering, and annotates generated figures with
links to their past versions in git.
"""

__version__ = "0.1.0"
