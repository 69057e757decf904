"""Single global highlight and the host notification it emits."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

import plotly.graph_objects as go

from ..utils import Item, item_codes, make_id_string
from ..visualization.interaction import reset_region_styles, select_region
from .state import ViewState

logger = logging.getLogger(__name__)

HIGHLIGHT_MESSAGE_TYPE = "pattern_highlight"

# sink(channel, message)
Sink = Callable[[str, Dict[str, Any]], None]


def build_message(msg_type: str, codes: Sequence[str], now: Optional[float] = None) -> Dict[str, Any]:
    """Message body for the host; a leading timestamp keeps every value distinct."""
    now = time.time() if now is None else now
    return {"type": msg_type, "payload": [str(int(now * 1000)), *codes]}


class HostNotifier:
    """Best-effort sender of highlight messages to the host channel.

    A missing sink is a valid configuration and a failing sink is logged and
    ignored; notifications never interrupt rendering.
    """

    def __init__(self, sink: Optional[Sink], channel: str, clock: Callable[[], float] = time.time) -> None:
        self.sink = sink
        self.channel = channel
        self.clock = clock

    def send(self, codes: Sequence[str], msg_type: str = HIGHLIGHT_MESSAGE_TYPE) -> None:
        if self.sink is None:
            return
        message = build_message(msg_type, codes, self.clock())
        try:
            self.sink(self.channel, message)
        except Exception:
            logger.debug("host channel %r dropped a message", self.channel, exc_info=True)


class HighlightMachine:
    """``Unhighlighted`` / ``Highlighted(id)`` transitions over a ViewState.

    Every transition resets hit-region styling, selects the highlighted region
    if there is one and sends exactly one host notification.
    """

    def __init__(self, state: ViewState, notifier: HostNotifier) -> None:
        self.state = state
        self.notifier = notifier

    @property
    def highlighted_id(self) -> Optional[str]:
        return self.state.highlighted_id

    def click(self, fig: go.Figure, item: Item, kind: str) -> None:
        """Toggle the highlight for ``item`` (``kind`` is 'pattern' or 'code')."""
        region_id = make_id_string(item, kind)
        undoing = region_id == self.state.highlighted_id

        reset_region_styles(fig)
        if undoing:
            self._clear()
            return

        select_region(fig, region_id)
        self.state.highlighted_id = region_id
        codes: List[str] = item_codes(item)
        logger.info("highlighting %s", region_id)
        self.notifier.send(codes)

    def refresh(self, fig: go.Figure) -> None:
        """Re-apply the highlight after a render, dropping it if filtered out."""
        if not self.state.is_highlighted:
            return
        reset_region_styles(fig)
        if not select_region(fig, self.state.highlighted_id):
            logger.info("%s no longer visible, clearing highlight", self.state.highlighted_id)
            self._clear()

    def clear(self, fig: Optional[go.Figure] = None) -> None:
        if not self.state.is_highlighted:
            return
        if fig is not None:
            reset_region_styles(fig)
        self._clear()

    def _clear(self) -> None:
        self.state.highlighted_id = None
        self.notifier.send([])
