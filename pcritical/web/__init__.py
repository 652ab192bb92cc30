"""JSON API for running analyses (requires the ``web`` extra)."""

from __future__ import annotations

from pcritical.web.app import create_app

__all__ = ["create_app"]
