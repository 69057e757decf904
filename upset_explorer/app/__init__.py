"""Dash front end for the upset explorer."""

from .app import ServerState, create_app

__all__ = ["ServerState", "create_app"]
