"""Interactive upset chart: orchestrator, view state and highlight."""

from .highlight import HighlightMachine, HostNotifier
from .orchestrator import UpsetExplorer
from .state import ViewState

__all__ = ["UpsetExplorer", "ViewState", "HighlightMachine", "HostNotifier"]
