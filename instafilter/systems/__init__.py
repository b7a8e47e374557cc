"""Filter systems: blend-mode compositing and color matrix adjustments."""

from instafilter.systems.color_matrix import ColorMatrixSystem
from instafilter.systems.composite import CompositeSystem

__all__ = ["ColorMatrixSystem", "CompositeSystem"]
