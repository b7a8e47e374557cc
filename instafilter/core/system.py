"""System base class for filter steps.

Systems are the "logic" layer of a filter: each one takes the current
PixelBuffer and returns a new one. The data describing a step lives in the
pydantic models of ``instafilter.components.filter_spec``; a System is the
runnable counterpart built from such a model.

Example:
    >>> class Invert(System):
    ...     def run(self, buffer, overlay_factory=None):
    ...         arr = buffer.as_array().copy()
    ...         arr[..., :3] = 255 - arr[..., :3]
    ...         return PixelBuffer.from_array(arr)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from instafilter.core.buffer import PixelBuffer

OverlayFactory = Callable[[int, int], PixelBuffer]


class System(ABC):
    """Base class for all filter systems.

    Systems must be pure: they never mutate the input buffer and keep no
    state between calls to ``run()``.
    """

    @abstractmethod
    def run(
        self,
        buffer: PixelBuffer,
        overlay_factory: OverlayFactory | None = None,
    ) -> PixelBuffer:
        """Transform a buffer.

        Args:
            buffer: Input buffer (read-only)
            overlay_factory: Callable producing an overlay of a given size;
                only used by systems that composite

        Returns:
            Newly allocated output buffer
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
