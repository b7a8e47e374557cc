"""Color matrix system: brightness, contrast, saturation and hue.

A ColorMatrix is a 4x5 affine transform on the (R, G, B, A, 1) vector of a
pixel, expressed on the 0..255 channel scale. Adjustments are built from
four elementary matrices and composed in a fixed order:

    M = brightness @ contrast @ saturation @ hue

so hue rotation is applied first and the brightness offset last.

The hue and saturation coefficients are the W3C Filter Effects
``hue-rotate`` and ``saturate`` matrices, built around the luminance
weights (0.213, 0.715, 0.072). Parameters use UI-style ranges: brightness,
contrast and saturation in -100..100 with 0 neutral, hue in degrees.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from instafilter.core.buffer import PixelBuffer
from instafilter.core.system import OverlayFactory, System
from instafilter.systems.composite import to_uint8

logger = logging.getLogger(__name__)

LUMA_R = 0.213
LUMA_G = 0.715
LUMA_B = 0.072

_IDENTITY = np.hstack([np.eye(4), np.zeros((4, 1))])


@dataclass(frozen=True, eq=False)
class ColorMatrix:
    """Immutable 4x5 color transform.

    Rows are output channels (R, G, B, A); columns are input channels
    (R, G, B, A) followed by a bias term.

    Attributes:
        m: Read-only (4, 5) float64 coefficient array
    """

    m: np.ndarray

    def __post_init__(self) -> None:
        arr = np.array(self.m, dtype=np.float64)
        if arr.shape != (4, 5):
            raise ValueError(f"Expected 4x5 matrix, got {arr.shape}")
        arr.flags.writeable = False
        object.__setattr__(self, "m", arr)

    @classmethod
    def identity(cls) -> ColorMatrix:
        return cls(_IDENTITY)

    def homogeneous(self) -> np.ndarray:
        """Return the equivalent 5x5 matrix (bottom row [0, 0, 0, 0, 1])."""
        out = np.eye(5)
        out[:4, :] = self.m
        return out

    def __matmul__(self, other: ColorMatrix) -> ColorMatrix:
        """Compose two matrices: ``(a @ b)`` applies ``b`` first, then ``a``."""
        if not isinstance(other, ColorMatrix):
            return NotImplemented
        return ColorMatrix((self.homogeneous() @ other.homogeneous())[:4, :])

    def is_identity(self) -> bool:
        return bool(np.array_equal(self.m, _IDENTITY))

    def identity_rows(self) -> list[bool]:
        """Per output channel, whether that row passes its channel through."""
        return [bool(np.array_equal(self.m[c], _IDENTITY[c])) for c in range(4)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColorMatrix):
            return NotImplemented
        return bool(np.array_equal(self.m, other.m))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ColorMatrix({self.m.tolist()})"


def _rgb_matrix(rgb: Any, bias: Any = (0.0, 0.0, 0.0)) -> ColorMatrix:
    """Embed a 3x3 RGB matrix and RGB bias in a 4x5 matrix, alpha untouched."""
    m = _IDENTITY.copy()
    m[:3, :3] = rgb
    m[:3, 4] = bias
    return ColorMatrix(m)


def hue_rotation(degrees: float) -> ColorMatrix:
    """Rotate hue about the luminance axis by ``degrees``."""
    if degrees % 360 == 0:
        return ColorMatrix.identity()

    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    lum = np.array([LUMA_R, LUMA_G, LUMA_B])
    rgb = np.array([
        lum + cos * np.array([1 - LUMA_R, -LUMA_G, -LUMA_B])
        + sin * np.array([-LUMA_R, -LUMA_G, 1 - LUMA_B]),
        lum + cos * np.array([-LUMA_R, 1 - LUMA_G, -LUMA_B])
        + sin * np.array([0.143, 0.140, -0.283]),
        lum + cos * np.array([-LUMA_R, -LUMA_G, 1 - LUMA_B])
        + sin * np.array([-(1 - LUMA_R), LUMA_G, LUMA_B]),
    ])
    return _rgb_matrix(rgb)


def saturation_matrix(amount: float) -> ColorMatrix:
    """Scale saturation; -100 is grayscale, 0 neutral, 100 doubles it."""
    if amount == 0:
        return ColorMatrix.identity()

    s = 1.0 + amount / 100.0
    lum = np.array([LUMA_R, LUMA_G, LUMA_B])
    # Each row interpolates from pure luminance (s=0) to the identity (s=1).
    rgb = np.tile(lum, (3, 1)) * (1.0 - s) + np.eye(3) * s
    return _rgb_matrix(rgb)


def contrast_matrix(amount: float) -> ColorMatrix:
    """Scale channels about the midpoint 127.5; -100 flattens to gray."""
    if amount == 0:
        return ColorMatrix.identity()

    factor = 1.0 + amount / 100.0
    bias = 127.5 * (1.0 - factor)
    return _rgb_matrix(np.eye(3) * factor, (bias, bias, bias))


def brightness_matrix(amount: float) -> ColorMatrix:
    """Add ``255 * amount / 100`` to every color channel."""
    if amount == 0:
        return ColorMatrix.identity()

    offset = 255.0 * amount / 100.0
    return _rgb_matrix(np.eye(3), (offset, offset, offset))


def build_matrix(
    brightness: float = 0.0,
    contrast: float = 0.0,
    saturation: float = 0.0,
    hue_degrees: float = 0.0,
) -> ColorMatrix:
    """Build the combined adjustment matrix.

    Args:
        brightness: -100..100, 0 is neutral
        contrast: -100..100, 0 is neutral
        saturation: -100..100, 0 is neutral
        hue_degrees: Hue rotation in degrees, 0 is neutral

    Returns:
        ``brightness @ contrast @ saturation @ hue``; exactly the identity
        when every argument is neutral
    """
    return (
        brightness_matrix(brightness)
        @ contrast_matrix(contrast)
        @ saturation_matrix(saturation)
        @ hue_rotation(hue_degrees)
    )


def apply(buffer: PixelBuffer, matrix: ColorMatrix) -> PixelBuffer:
    """Apply a color matrix to every pixel.

    Each output channel is ``clamp(round(sum(m[c][k] * in[k]) + m[c][4]))``
    with rounding half up. Channels whose row is the identity row are
    copied through untouched, so alpha survives a default matrix exactly.

    Returns:
        New buffer; ``buffer`` is not modified
    """
    src = buffer.as_array()
    passthrough = matrix.identity_rows()
    if all(passthrough):
        return PixelBuffer(buffer.width, buffer.height, buffer.data)

    pixels = src.reshape(-1, 4).astype(np.float64)
    transformed = pixels @ matrix.m[:, :4].T + matrix.m[:, 4]
    out = to_uint8(transformed)
    for c, keep in enumerate(passthrough):
        if keep:
            out[:, c] = src.reshape(-1, 4)[:, c]
    return PixelBuffer(buffer.width, buffer.height, out)


class ColorMatrixSystem(System):
    """Apply brightness/contrast/saturation/hue adjustments.

    The matrix is built once at construction time.

    Attributes:
        brightness: -100..100
        contrast: -100..100
        saturation: -100..100
        hue_degrees: Hue rotation in degrees
        matrix: The composed ColorMatrix
    """

    def __init__(
        self,
        brightness: float = 0.0,
        contrast: float = 0.0,
        saturation: float = 0.0,
        hue_degrees: float = 0.0,
    ) -> None:
        self.brightness = brightness
        self.contrast = contrast
        self.saturation = saturation
        self.hue_degrees = hue_degrees
        self.matrix = build_matrix(brightness, contrast, saturation, hue_degrees)

    def run(
        self,
        buffer: PixelBuffer,
        overlay_factory: OverlayFactory | None = None,
    ) -> PixelBuffer:
        """Apply the adjustment matrix to ``buffer``."""
        logger.debug(
            "Applying color matrix brightness=%s contrast=%s saturation=%s hue=%s",
            self.brightness, self.contrast, self.saturation, self.hue_degrees,
        )
        return apply(buffer, self.matrix)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(brightness={self.brightness}, "
            f"contrast={self.contrast}, saturation={self.saturation}, "
            f"hue_degrees={self.hue_degrees})"
        )
