"""Headless stand-ins for the platform glue: layout and input mapping."""

from bezier_rope.adapters.layout import ViewportLayout
from bezier_rope.adapters.input import PointerInputMapper, TiltInputMapper

__all__ = [
    "ViewportLayout",
    "PointerInputMapper",
    "TiltInputMapper",
]
