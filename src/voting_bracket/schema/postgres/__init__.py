from . import voting
from ._metadata import metadata

__all__ = [
    "metadata",
    "voting",
]
