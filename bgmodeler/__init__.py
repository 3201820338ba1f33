"""Motion-aware background estimation from video sequences."""
from .constants import (
    DEFAULT_S_PARAM,
    DEFAULT_N_PARAM,
    DEFAULT_THRESHOLD,
    DEFAULT_GRANULARITY,
)
from .errors import BackgroundModelerError, ConfigurationError, DimensionMismatch, EmptyHistory
from .difference import FrameDifference
from .motion import MotionProbabilityFilter, kernel_size
from .regions import Regions, block_regions, make_partition, pixel_regions
from .history import Candidate, PatchesHistory
from .modeler import BackgroundModeler, ModelerState
from .estimate import estimate_background
from .version import __version__, get_version_string, get_build_meta

__all__ = [
    "DEFAULT_S_PARAM",
    "DEFAULT_N_PARAM",
    "DEFAULT_THRESHOLD",
    "DEFAULT_GRANULARITY",
    "BackgroundModelerError",
    "ConfigurationError",
    "DimensionMismatch",
    "EmptyHistory",
    "FrameDifference",
    "MotionProbabilityFilter",
    "kernel_size",
    "Regions",
    "block_regions",
    "make_partition",
    "pixel_regions",
    "Candidate",
    "PatchesHistory",
    "BackgroundModeler",
    "ModelerState",
    "estimate_background",
    "get_version_string",
    "get_build_meta",
    "__version__",
]
