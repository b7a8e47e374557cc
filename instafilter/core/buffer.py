"""PixelBuffer: immutable RGBA pixel grid.

A PixelBuffer holds width, height and a flat row-major sequence of
``width * height * 4`` bytes in R, G, B, A order with no row padding.
The bytes live in a read-only NumPy array, so a buffer can be shared freely
between steps: every transformation allocates and returns a new buffer.

Example:
    >>> buf = PixelBuffer(2, 1, bytes([255, 0, 0, 255, 0, 0, 255, 255]))
    >>> buf.pixel(1, 0)
    (0, 0, 255, 255)
    >>> red = buf.set_channel(1, 0, 0, 255)  # new buffer, buf unchanged
    >>> buf.get_channel(1, 0, 0), red.get_channel(1, 0, 0)
    (0, 255)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from instafilter.errors import IndexOutOfRange, InvalidDimensions

CHANNELS = 4


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Immutable RGBA pixel buffer.

    Attributes:
        width: Number of pixels per row (positive)
        height: Number of rows (positive)
        data: Read-only flat uint8 array of length width * height * 4
    """

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        """Validate dimensions and freeze a private copy of the data."""
        for name, value in (("width", self.width), ("height", self.height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidDimensions(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidDimensions(f"{name} must be positive, got {value}")

        arr = _to_uint8(self.data).reshape(-1)
        expected = int(self.width) * int(self.height) * CHANNELS
        if arr.size != expected:
            raise InvalidDimensions(
                f"Expected {expected} bytes for {self.width}x{self.height} RGBA, "
                f"got {arr.size}"
            )

        arr = arr.copy()
        arr.flags.writeable = False
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))
        object.__setattr__(self, "data", arr)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> PixelBuffer:
        """Create a buffer from an (H, W, 4) array.

        Raises:
            InvalidDimensions: If the array is not (H, W, 4)
        """
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] != CHANNELS:
            raise InvalidDimensions(f"Expected array with shape (H, W, 4), got {arr.shape}")
        return cls(width=arr.shape[1], height=arr.shape[0], data=arr)

    @property
    def shape(self) -> tuple[int, int, int]:
        """Array shape (height, width, 4)."""
        return (self.height, self.width, CHANNELS)

    def as_array(self) -> np.ndarray:
        """Return a read-only (H, W, 4) view of the pixel data."""
        return self.data.reshape(self.shape)

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def get_channel(self, x: int, y: int, channel: int) -> int:
        """Return one channel value of the pixel at (x, y).

        Raises:
            IndexOutOfRange: If x, y or channel is outside the buffer
        """
        return int(self.data[self._index(x, y, channel)])

    def set_channel(self, x: int, y: int, channel: int, value: int) -> PixelBuffer:
        """Return a copy of this buffer with one channel value replaced.

        The receiver is left untouched.

        Raises:
            IndexOutOfRange: If x, y or channel is outside the buffer
            ValueError: If value is outside 0..255
        """
        index = self._index(x, y, channel)
        if not 0 <= value <= 255:
            raise ValueError(f"Channel value must be in 0..255, got {value}")
        data = self.data.copy()
        data[index] = value
        return PixelBuffer(self.width, self.height, data)

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the (R, G, B, A) tuple at (x, y)."""
        start = self._index(x, y, 0)
        r, g, b, a = (int(v) for v in self.data[start:start + CHANNELS])
        return (r, g, b, a)

    def _index(self, x: int, y: int, channel: int) -> int:
        if x < 0 or y < 0 or channel < 0:
            raise IndexOutOfRange(
                f"Negative coordinate in ({x}, {y}, channel={channel})"
            )
        if x >= self.width or y >= self.height or channel >= CHANNELS:
            raise IndexOutOfRange(
                f"({x}, {y}, channel={channel}) out of bounds for "
                f"{self.width}x{self.height} buffer"
            )
        return (y * self.width + x) * CHANNELS + channel

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.data, other.data)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def _to_uint8(data: Any) -> np.ndarray:
    """Convert supported byte containers to a uint8 array."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(data, dtype=np.uint8)

    arr = np.asarray(data)
    if arr.dtype == np.uint8:
        return arr
    if arr.size and not np.issubdtype(arr.dtype, np.integer):
        raise ValueError(f"Expected integer channel values, got dtype {arr.dtype}")
    if arr.size and (arr.min() < 0 or arr.max() > 255):
        raise ValueError(
            f"Channel values must be in 0..255, got range [{arr.min()}, {arr.max()}]"
        )
    return arr.astype(np.uint8)
