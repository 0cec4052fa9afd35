"""Display collaborator boundary.

:mod:`pixelkit.gui.texture` needs PySide6 and is imported explicitly by
applications that present images on screen.
"""

from __future__ import annotations

from .events import DisplayEvent, EventKind, map_to_image

__all__ = ["DisplayEvent", "EventKind", "map_to_image"]
