"""Dash app factory and server-side state."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..explorer import UpsetExplorer
from ..models import Pattern, UpsetOptions

logger = logging.getLogger(__name__)


@dataclass
class ServerState:
    """Mutable server-side state for the single-user Dash app.

    The explorer's notifications land in ``outbox``; the figure callback
    forwards the newest one to the host channel store.
    """

    explorer: Optional[UpsetExplorer] = None
    outbox: List[Dict[str, Any]] = field(default_factory=list)

    def receive(self, channel: str, message: Dict[str, Any]) -> None:
        self.outbox.append(message)

    def take_message(self) -> Optional[Dict[str, Any]]:
        """Newest undelivered message, clearing the outbox."""
        if not self.outbox:
            return None
        message = self.outbox[-1]
        self.outbox.clear()
        return message


# Module-level singleton, set by create_app()
state: ServerState | None = None


def create_app(
    patterns: Sequence[Union[Pattern, Mapping[str, Any]]],
    options: Union[UpsetOptions, Mapping[str, Any], None] = None,
    width: float = 1100,
    height: float = 700,
) -> "dash.Dash":
    """Create and configure the Dash application.

    Parameters
    ----------
    patterns : sequence of Pattern or mapping
        Pattern records to plot.
    options : UpsetOptions or mapping, optional
        Host options; ``msg_loc`` names the store that receives highlights.
    width, height : float
        Initial chart size until the browser reports its viewport.

    Returns
    -------
    dash.Dash
    """
    import dash

    from .layout import build_layout
    from . import callbacks

    global state
    if not isinstance(options, UpsetOptions):
        options = UpsetOptions.from_dict(options)

    server_state = ServerState()
    server_state.explorer = UpsetExplorer(
        patterns, options, width=width, height=height, sink=server_state.receive,
    )
    state = server_state

    assets_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "assets")

    app = dash.Dash(
        __name__,
        assets_folder=assets_dir,
        suppress_callback_exceptions=True,
    )
    app.layout = build_layout(state)
    callbacks.register(app, msg_loc=options.msg_loc)
    logger.info("dash app ready, highlights go to store %r", options.msg_loc)

    return app
