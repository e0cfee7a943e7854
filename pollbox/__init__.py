"""Pollbox: a small survey/polling service.

Admins create free-text or multiple-choice questions, viewers answer each
question once, and admins read aggregated results. `pollbox.main` builds
the FastAPI application; business logic lives in `pollbox/logic/`, route
handlers in `pollbox/routes/`, and the viewer/admin client in
`pollbox/client/`.
"""

from __future__ import annotations

from pollbox.main import create_app

__all__ = ["create_app"]
