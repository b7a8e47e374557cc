"""Filter pipeline.

Implements a fluent API for composing systems into a filter, and the
functional ``run()`` entry point that executes a FilterSpec.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from instafilter.components.filter_spec import ColorMatrixStep, CompositeStep, FilterSpec
from instafilter.core.buffer import PixelBuffer
from instafilter.systems.color_matrix import ColorMatrixSystem
from instafilter.systems.composite import CompositeSystem

if TYPE_CHECKING:
    from instafilter.core.system import OverlayFactory, System

logger = logging.getLogger(__name__)


class FilterPipeline:
    """Ordered sequence of systems applied to a buffer.

    Systems can be chained with `.to()` or the pipe operator `|`, and the
    whole chain is executed with `.run()`.

    Example:
        >>> pipeline = (
        ...     FilterPipeline()
        ...     .to(CompositeSystem("screen", overlay_spec={"color": [40, 20, 0]}))
        ...     | ColorMatrixSystem(contrast=20, saturation=35)
        ... )
        >>> result = pipeline.run(buffer)
    """

    def __init__(self, systems: list[System] | None = None, name: str = "") -> None:
        """Initialize pipeline.

        Args:
            systems: Initial systems, run in order
            name: Optional label used in log messages
        """
        self.systems: list[System] = list(systems or [])
        self.name = name

    @classmethod
    def from_spec(cls, spec: FilterSpec) -> FilterPipeline:
        """Build a pipeline with one system per step of ``spec``."""
        systems: list[System] = []
        for step in spec.steps:
            if isinstance(step, CompositeStep):
                systems.append(
                    CompositeSystem(
                        step.blend_mode,
                        opacity=step.opacity,
                        overlay_spec=step.overlay_spec,
                    )
                )
            elif isinstance(step, ColorMatrixStep):
                systems.append(
                    ColorMatrixSystem(
                        brightness=step.brightness,
                        contrast=step.contrast,
                        saturation=step.saturation,
                        hue_degrees=step.hue_degrees,
                    )
                )
            else:
                raise TypeError(f"Unsupported step type: {type(step).__name__}")
        return cls(systems, name=spec.name)

    def to(self, system: System) -> FilterPipeline:
        """Add system to pipeline.

        Returns:
            Self for method chaining
        """
        self.systems.append(system)
        return self

    def __or__(self, system: System) -> FilterPipeline:
        """Pipe operator for chaining systems; equivalent to `.to(system)`."""
        return self.to(system)

    def run(
        self,
        source: PixelBuffer,
        overlay_factory: OverlayFactory | None = None,
    ) -> PixelBuffer:
        """Run all systems in order, threading the buffer through them.

        The first exception raised by a system propagates unchanged and no
        later system runs.

        Args:
            source: Input buffer (not modified)
            overlay_factory: Overlay source for composite systems; when None
                each composite system fills a solid overlay from its spec

        Returns:
            Output of the last system, or ``source`` itself if there are none
        """
        buffer = source
        for index, system in enumerate(self.systems):
            logger.debug(
                "Filter %r step %d/%d: %r",
                self.name, index + 1, len(self.systems), system,
            )
            buffer = system.run(buffer, overlay_factory)
        return buffer

    def __len__(self) -> int:
        return len(self.systems)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, systems={self.systems})"


def run(
    source: PixelBuffer,
    spec: FilterSpec,
    overlay_factory: OverlayFactory | None = None,
) -> PixelBuffer:
    """Apply a filter spec to a buffer.

    Args:
        source: Input buffer
        spec: Filter to apply
        overlay_factory: ``(width, height) -> PixelBuffer`` used by composite
            steps; defaults to a solid overlay built from each step's
            ``overlay_spec``

    Returns:
        Filtered buffer

    Raises:
        DimensionMismatch: If an overlay does not match the buffer size
        InvalidBlendMode: If a composite step names an unknown blend mode
        InvalidDimensions: If an overlay factory builds a malformed buffer
        IndexOutOfRange: If a collaborator accesses pixels out of bounds
    """
    return FilterPipeline.from_spec(spec).run(source, overlay_factory)
