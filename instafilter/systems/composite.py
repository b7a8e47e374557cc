"""Blend-mode compositing system.

Combines a foreground ("top") buffer with a background ("bottom") buffer of
the same size, channel by channel. For R, G and B each value is normalized
to [0, 1], passed through the formula of the selected BlendMode, scaled back
by 255, rounded half up and clamped. Alpha is copied from the foreground.

Formulas (s = foreground, d = background) follow the W3C Compositing and
Blending definitions, with the divisions in colorBurn/colorDodge guarded:

    screen      1 - (1 - s) * (1 - d)
    multiply    s * d
    colorBurn   0 if d == 0 else 1 - min(1, (1 - s) / d)
    colorDodge  0 if d == 0, 1 if s == 1, else min(1, d / (1 - s))
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

import numpy as np

from instafilter.core.buffer import PixelBuffer
from instafilter.core.system import OverlayFactory, System
from instafilter.errors import DimensionMismatch, InvalidBlendMode
from instafilter.overlays import solid_overlay_factory

logger = logging.getLogger(__name__)

BlendFormula = Callable[[np.ndarray, np.ndarray], np.ndarray]


class BlendMode(str, Enum):
    """Closed set of supported blend modes, valued by their config names."""

    NORMAL = "normal"
    SCREEN = "screen"
    MULTIPLY = "multiply"
    OVERLAY = "overlay"
    DARKEN = "darken"
    LIGHTEN = "lighten"
    COLOR_DODGE = "colorDodge"
    COLOR_BURN = "colorBurn"
    HARD_LIGHT = "hardLight"
    SOFT_LIGHT = "softLight"
    DIFFERENCE = "difference"
    EXCLUSION = "exclusion"

    @classmethod
    def parse(cls, value: BlendMode | str) -> BlendMode:
        """Resolve a BlendMode from a member or its name.

        Raises:
            InvalidBlendMode: If the name is not a known blend mode
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise InvalidBlendMode(
                f"Unknown blend mode {value!r}; expected one of: {valid}"
            ) from None


def _screen(s: np.ndarray, d: np.ndarray) -> np.ndarray:
    return 1.0 - (1.0 - s) * (1.0 - d)


def _multiply(s: np.ndarray, d: np.ndarray) -> np.ndarray:
    return s * d


def _hard_light(s: np.ndarray, d: np.ndarray) -> np.ndarray:
    return np.where(s <= 0.5, _multiply(2.0 * s, d), _screen(2.0 * s - 1.0, d))


def _color_burn(s: np.ndarray, d: np.ndarray) -> np.ndarray:
    ratio = np.divide(1.0 - s, d, out=np.ones_like(d), where=d > 0)
    return np.where(d == 0, 0.0, 1.0 - np.minimum(1.0, ratio))


def _color_dodge(s: np.ndarray, d: np.ndarray) -> np.ndarray:
    ratio = np.divide(d, 1.0 - s, out=np.ones_like(d), where=s < 1)
    result = np.where(s >= 1, 1.0, np.minimum(1.0, ratio))
    return np.where(d == 0, 0.0, result)


def _soft_light(s: np.ndarray, d: np.ndarray) -> np.ndarray:
    dd = np.where(d <= 0.25, ((16.0 * d - 12.0) * d + 4.0) * d, np.sqrt(d))
    return np.where(
        s <= 0.5,
        d - (1.0 - 2.0 * s) * d * (1.0 - d),
        d + (2.0 * s - 1.0) * (dd - d),
    )


_FORMULAS: dict[BlendMode, BlendFormula] = {
    BlendMode.NORMAL: lambda s, d: s,
    BlendMode.SCREEN: _screen,
    BlendMode.MULTIPLY: _multiply,
    BlendMode.OVERLAY: lambda s, d: _hard_light(d, s),
    BlendMode.DARKEN: np.minimum,
    BlendMode.LIGHTEN: np.maximum,
    BlendMode.COLOR_DODGE: _color_dodge,
    BlendMode.COLOR_BURN: _color_burn,
    BlendMode.HARD_LIGHT: _hard_light,
    BlendMode.SOFT_LIGHT: _soft_light,
    BlendMode.DIFFERENCE: lambda s, d: np.abs(s - d),
    BlendMode.EXCLUSION: lambda s, d: s + d - 2.0 * s * d,
}


def blend(mode: BlendMode | str, s: Any, d: Any) -> np.ndarray:
    """Evaluate a blend formula on normalized values in [0, 1].

    Args:
        mode: Blend mode or its name
        s: Foreground value(s)
        d: Background value(s)

    Returns:
        Blended value(s) as float64
    """
    formula = _FORMULAS[BlendMode.parse(mode)]
    s_arr, d_arr = np.broadcast_arrays(
        np.asarray(s, dtype=np.float64), np.asarray(d, dtype=np.float64)
    )
    return np.asarray(formula(s_arr, d_arr), dtype=np.float64)


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Round half up and clamp 0..255 floats to uint8."""
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


def composite(
    background: PixelBuffer,
    foreground: PixelBuffer,
    mode: BlendMode | str,
    opacity: float = 1.0,
) -> PixelBuffer:
    """Blend foreground over background.

    Args:
        background: Bottom layer
        foreground: Top layer; its alpha channel is copied to the result
        mode: Blend mode or its name
        opacity: Strength of the blend in [0, 1]; 1.0 applies the formula
            as is, 0.0 keeps the background colors

    Returns:
        New buffer with the blended pixels

    Raises:
        DimensionMismatch: If the buffers differ in width or height
        InvalidBlendMode: If mode is not a known blend mode
        ValueError: If opacity is outside [0, 1]
    """
    if background.width != foreground.width or background.height != foreground.height:
        raise DimensionMismatch(
            f"Cannot composite {foreground.width}x{foreground.height} foreground "
            f"onto {background.width}x{background.height} background"
        )
    if not 0.0 <= opacity <= 1.0:
        raise ValueError(f"opacity must be in [0, 1], got {opacity}")
    blend_mode = BlendMode.parse(mode)

    bottom = background.as_array()
    top = foreground.as_array()

    d = bottom[..., :3].astype(np.float64) / 255.0
    s = top[..., :3].astype(np.float64) / 255.0
    result = _FORMULAS[blend_mode](s, d)
    if opacity < 1.0:
        result = d + (result - d) * opacity

    out = np.empty(bottom.shape, dtype=np.uint8)
    out[..., :3] = to_uint8(result * 255.0)
    out[..., 3] = top[..., 3]
    return PixelBuffer.from_array(out)


class CompositeSystem(System):
    """Composite an overlay onto the current buffer.

    The overlay is requested from the overlay factory at the size of the
    buffer being processed.

    Attributes:
        mode: Blend mode name (resolved when the system runs)
        opacity: Blend strength in [0, 1]
        overlay_spec: Parameters for the default solid-color overlay
    """

    def __init__(
        self,
        mode: BlendMode | str,
        opacity: float = 1.0,
        overlay_spec: dict[str, Any] | None = None,
    ) -> None:
        self.mode = mode
        self.opacity = opacity
        self.overlay_spec = dict(overlay_spec or {})

    def run(
        self,
        buffer: PixelBuffer,
        overlay_factory: OverlayFactory | None = None,
    ) -> PixelBuffer:
        """Build the overlay and blend it over ``buffer``."""
        mode = BlendMode.parse(self.mode)
        if overlay_factory is None:
            overlay_factory = solid_overlay_factory(self.overlay_spec)

        overlay = overlay_factory(buffer.width, buffer.height)
        logger.debug(
            "Compositing %dx%d overlay with mode=%s opacity=%.3f",
            overlay.width, overlay.height, mode.value, self.opacity,
        )
        return composite(buffer, overlay, mode, opacity=self.opacity)

    def __repr__(self) -> str:
        mode = self.mode.value if isinstance(self.mode, BlendMode) else self.mode
        return f"{self.__class__.__name__}(mode={mode}, opacity={self.opacity})"
