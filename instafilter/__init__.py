"""Instagram-style image filters on RGBA pixel buffers.

This package applies filters by compositing tinted overlays onto an image
with a named blend mode and adjusting brightness, contrast, saturation and
hue through a 4x5 color matrix. Every step is a pure transformation that
returns a new buffer.

Quick Start:
    >>> import numpy as np
    >>> from instafilter import apply_filter
    >>>
    >>> img = np.random.randint(0, 256, (256, 256, 3), dtype=np.uint8)
    >>> filtered = apply_filter(img, "clarendon")

For more control, build a pipeline from systems:
    >>> from instafilter import FilterPipeline, PixelBuffer
    >>> from instafilter.systems.composite import CompositeSystem
    >>> from instafilter.systems.color_matrix import ColorMatrixSystem
    >>>
    >>> pipeline = (
    ...     FilterPipeline()
    ...     .to(CompositeSystem("screen", overlay_spec={"color": [60, 30, 0]}))
    ...     | ColorMatrixSystem(contrast=20, saturation=35)
    ... )
    >>> result = pipeline.run(PixelBuffer.from_array(rgba))
"""

__version__ = "0.1.0"

from instafilter.api import apply_filter, list_presets
from instafilter.components.filter_spec import ColorMatrixStep, CompositeStep, FilterSpec
from instafilter.core.buffer import PixelBuffer
from instafilter.core.pipeline import FilterPipeline, run
from instafilter.errors import (
    DimensionMismatch,
    FilterError,
    IndexOutOfRange,
    InvalidBlendMode,
    InvalidDimensions,
)
from instafilter.systems.color_matrix import ColorMatrix, apply, build_matrix
from instafilter.systems.composite import BlendMode, composite

__all__ = [
    "__version__",
    "apply_filter",
    "list_presets",
    "PixelBuffer",
    "FilterSpec",
    "CompositeStep",
    "ColorMatrixStep",
    "FilterPipeline",
    "run",
    "BlendMode",
    "composite",
    "ColorMatrix",
    "build_matrix",
    "apply",
    "FilterError",
    "InvalidDimensions",
    "IndexOutOfRange",
    "DimensionMismatch",
    "InvalidBlendMode",
]
