#!/usr/bin/env python3
"""Run every preset over a synthetic image and report channel statistics.

This example shows both the high-level ``apply_filter()`` API and a
hand-built pipeline with a caller-supplied overlay factory.
"""

from __future__ import annotations

import argparse
import logging

import numpy as np

from instafilter import FilterPipeline, PixelBuffer, apply_filter, list_presets
from instafilter.systems.color_matrix import ColorMatrixSystem
from instafilter.systems.composite import CompositeSystem


def make_test_image(width: int, height: int) -> np.ndarray:
    """Horizontal red ramp, vertical green ramp, constant blue."""
    x = np.linspace(0, 255, width, dtype=np.float64)
    y = np.linspace(0, 255, height, dtype=np.float64)
    img = np.empty((height, width, 3), dtype=np.uint8)
    img[..., 0] = x[None, :]
    img[..., 1] = y[:, None]
    img[..., 2] = 128
    return img


def vignette_factory(width: int, height: int) -> PixelBuffer:
    """Dark-edged overlay: white in the center fading to black at the corners."""
    yy, xx = np.mgrid[0:height, 0:width]
    cx, cy = (width - 1) / 2, (height - 1) / 2
    dist = np.hypot((xx - cx) / max(cx, 1), (yy - cy) / max(cy, 1)) / np.sqrt(2)
    level = np.clip(255 * (1 - dist), 0, 255).astype(np.uint8)
    arr = np.empty((height, width, 4), dtype=np.uint8)
    arr[..., :3] = level[..., None]
    arr[..., 3] = 255
    return PixelBuffer.from_array(arr)


def main() -> None:
    parser = argparse.ArgumentParser(description="Preset gallery example")
    parser.add_argument("--width", type=int, default=320, help="Image width")
    parser.add_argument("--height", type=int, default=240, help="Image height")
    parser.add_argument("--config", default=None, help="Path to instafilter.toml")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    img = make_test_image(args.width, args.height)
    print(f"Input image {img.shape}, mean RGB {img.reshape(-1, 3).mean(axis=0).round(1)}")

    for name in list_presets(args.config):
        out = apply_filter(img, name, config_path=args.config)
        mean = out.reshape(-1, 3).mean(axis=0).round(1)
        print(f"  {name:<12} mean RGB {mean}")

    pipeline = (
        FilterPipeline(name="vignette")
        .to(CompositeSystem("multiply"))
        | ColorMatrixSystem(contrast=15, saturation=20)
    )
    rgba = np.dstack([img, np.full(img.shape[:2], 255, dtype=np.uint8)])
    result = pipeline.run(PixelBuffer.from_array(rgba), vignette_factory)
    corner, center = result.pixel(0, 0), result.pixel(args.width // 2, args.height // 2)
    print(f"Vignette pipeline: corner {corner}, center {center}")


if __name__ == "__main__":
    main()
