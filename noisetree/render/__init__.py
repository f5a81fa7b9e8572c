"""Frame rendering CLI."""

from .grid_render import render_frames

__all__ = ["render_frames"]
