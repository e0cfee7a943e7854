"""Viewer/admin client for the poll service."""

from __future__ import annotations

from pollbox.client.api_client import PollboxClient
from pollbox.client.session_state import SessionState

__all__ = ["PollboxClient", "SessionState"]
