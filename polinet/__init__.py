"""polinet package initialization."""

from importlib.metadata import version, PackageNotFoundError

from .api import run_pipeline
from .config import PipelineConfig

__all__ = ["__version__", "PipelineConfig", "run_pipeline"]

try:
    __version__ = version("polinet")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"
