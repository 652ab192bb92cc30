"""Graph serialization."""

from __future__ import annotations

from pcritical.render.dot import render_dot, write_dot

__all__ = ["render_dot", "write_dot"]
