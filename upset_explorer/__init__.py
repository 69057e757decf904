"""upset_explorer: interactive upset plots of code co-occurrence patterns."""

from .filtering import FilterResult, complete_marginals, filter_set_size, initial_min_size
from .io import (
    load_marginals,
    load_patterns,
    marginals_from_frame,
    marginals_from_patterns,
    patterns_from_frame,
)
from .models import Margin, MarginalCode, Pattern, UpsetOptions, has_risk_data
from .utils import codes_equal, make_id_string
from .explorer import UpsetExplorer, ViewState

__all__ = [
    # models
    "Pattern",
    "MarginalCode",
    "Margin",
    "UpsetOptions",
    "has_risk_data",
    # filtering
    "FilterResult",
    "filter_set_size",
    "initial_min_size",
    "complete_marginals",
    # io
    "load_patterns",
    "load_marginals",
    "patterns_from_frame",
    "marginals_from_frame",
    "marginals_from_patterns",
    # utils
    "make_id_string",
    "codes_equal",
    # explorer
    "UpsetExplorer",
    "ViewState",
]
