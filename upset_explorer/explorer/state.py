"""Mutable view state separated from rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ViewState:
    """Per-chart state that survives re-renders and resizes.

    Only three things change it: releasing the threshold slider, clicking
    the singleton toggle, and clicking a pattern or code.
    """

    current_min_size: float
    filtering_singletons: bool = False
    highlighted_id: Optional[str] = None

    @property
    def is_highlighted(self) -> bool:
        return self.highlighted_id is not None
