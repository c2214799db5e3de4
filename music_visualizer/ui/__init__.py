"""
User interface layer: menu state, drawing primitives and the Qt window.

Everything except ``window`` is plain Python so it can be exercised without a display.
"""

from __future__ import annotations

from .button import Button, Rect
from .menu import Menu

__all__ = ["Button", "Menu", "Rect"]
