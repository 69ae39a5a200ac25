"""Exact cover search with dancing links."""

from .dancing_links import Universe, DLXNode, ColumnNode

__all__ = ["Universe", "DLXNode", "ColumnNode"]
