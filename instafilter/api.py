"""High-level API for applying filters to NumPy images.

Provides ``apply_filter()`` which wraps an image array in a PixelBuffer,
runs a preset or FilterSpec over it and hands back an array.
"""

from __future__ import annotations

import numpy as np

from instafilter.components.filter_spec import FilterSpec
from instafilter.core.buffer import PixelBuffer
from instafilter.core.pipeline import run
from instafilter.core.system import OverlayFactory
from instafilter.presets import get_preset, load_presets


def apply_filter(
    image: np.ndarray,
    preset: str | FilterSpec,
    overlay_factory: OverlayFactory | None = None,
    config_path: str | None = None,
) -> np.ndarray:
    """Apply a filter to an RGB or RGBA image.

    Args:
        image: Input image as (H, W, 3) or (H, W, 4) uint8 array
        preset: Preset name (built-in or from config) or a FilterSpec
        overlay_factory: Optional ``(width, height) -> PixelBuffer`` used by
            composite steps instead of the preset's solid overlays
        config_path: Path to instafilter.toml (auto-detected if None)

    Returns:
        New uint8 array with the same shape as ``image``

    Raises:
        TypeError: If image is not a NumPy array
        ValueError: If image has invalid shape or dtype
        KeyError: If the preset name is unknown

    Example:
        >>> import numpy as np
        >>> from instafilter import apply_filter
        >>> img = np.random.randint(0, 256, (64, 64, 3), dtype=np.uint8)
        >>> out = apply_filter(img, "clarendon")
        >>> out.shape
        (64, 64, 3)
    """
    if not isinstance(image, np.ndarray):
        raise TypeError(f"Expected ndarray, got {type(image)}")
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected shape (H, W, 3) or (H, W, 4), got {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Expected uint8 dtype, got {image.dtype}")

    spec = preset if isinstance(preset, FilterSpec) else get_preset(preset, config_path)

    if image.shape[2] == 3:
        rgba = np.empty(image.shape[:2] + (4,), dtype=np.uint8)
        rgba[..., :3] = image
        rgba[..., 3] = 255
    else:
        rgba = image

    result = run(PixelBuffer.from_array(rgba), spec, overlay_factory).as_array()
    return result[..., : image.shape[2]].copy()


def list_presets(config_path: str | None = None) -> list[str]:
    """Return the sorted names of all available presets."""
    return sorted(load_presets(config_path))
