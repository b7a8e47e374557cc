"""Built-in overlay factory: uniform solid-color layers.

Composite steps ask an overlay factory for a layer matching the current
buffer size. Callers that need gradients or textures pass their own
``(width, height) -> PixelBuffer`` callable; this module covers the plain
color fills that presets use by default.
"""

from __future__ import annotations

from typing import Any, Mapping

import numpy as np

from instafilter.core.buffer import PixelBuffer
from instafilter.core.system import OverlayFactory

DEFAULT_COLOR = (255, 255, 255, 255)


def _parse_color(color: Any) -> tuple[int, int, int, int]:
    values = [int(v) for v in color]
    if len(values) == 3:
        values.append(255)
    if len(values) != 4:
        raise ValueError(f"Overlay color must have 3 or 4 components, got {len(values)}")
    if any(not 0 <= v <= 255 for v in values):
        raise ValueError(f"Overlay color components must be in 0..255, got {values}")
    r, g, b, a = values
    return (r, g, b, a)


def solid_overlay(
    width: int,
    height: int,
    overlay_spec: Mapping[str, Any] | None = None,
) -> PixelBuffer:
    """Create a buffer filled with one color.

    Args:
        width: Overlay width
        height: Overlay height
        overlay_spec: Mapping with an optional ``color`` entry of 3 (RGB) or
            4 (RGBA) ints; defaults to opaque white

    Raises:
        ValueError: If the color is malformed
    """
    spec = dict(overlay_spec or {})
    color = _parse_color(spec.get("color", DEFAULT_COLOR))
    arr = np.empty((height, width, 4), dtype=np.uint8)
    arr[:] = color
    return PixelBuffer.from_array(arr)


def solid_overlay_factory(overlay_spec: Mapping[str, Any] | None = None) -> OverlayFactory:
    """Bind an overlay spec into a ``(width, height) -> PixelBuffer`` factory."""
    spec = dict(overlay_spec or {})
    _parse_color(spec.get("color", DEFAULT_COLOR))

    def factory(width: int, height: int) -> PixelBuffer:
        return solid_overlay(width, height, spec)

    return factory
