"""Tests for color matrix construction and application."""

import numpy as np
import pytest

from instafilter.core.buffer import PixelBuffer
from instafilter.systems.color_matrix import (
    ColorMatrix,
    ColorMatrixSystem,
    apply,
    brightness_matrix,
    build_matrix,
    contrast_matrix,
    hue_rotation,
    saturation_matrix,
)


def solid(color: tuple[int, int, int, int], width: int = 2, height: int = 2) -> PixelBuffer:
    arr = np.empty((height, width, 4), dtype=np.uint8)
    arr[:] = color
    return PixelBuffer.from_array(arr)


def random_buffer(width: int = 16, height: int = 9, seed: int = 0) -> PixelBuffer:
    rng = np.random.default_rng(seed)
    return PixelBuffer.from_array(rng.integers(0, 256, (height, width, 4), dtype=np.uint8))


class TestColorMatrix:
    """Tests for the ColorMatrix type."""

    def test_identity(self) -> None:
        """Test identity is diag(1, 1, 1, 1) with zero bias."""
        m = ColorMatrix.identity().m
        assert m.shape == (4, 5)
        assert np.array_equal(m[:, :4], np.eye(4))
        assert np.all(m[:, 4] == 0)

    def test_wrong_shape(self) -> None:
        """Test non-4x5 coefficients are rejected."""
        with pytest.raises(ValueError):
            ColorMatrix(np.eye(4))

    def test_read_only(self) -> None:
        """Test coefficients cannot be modified in place."""
        matrix = ColorMatrix.identity()
        with pytest.raises(ValueError):
            matrix.m[0, 0] = 2.0

    def test_compose_with_identity(self) -> None:
        """Test identity is neutral under composition."""
        matrix = build_matrix(10, 20, 30, 40)
        assert np.allclose((matrix @ ColorMatrix.identity()).m, matrix.m)
        assert np.allclose((ColorMatrix.identity() @ matrix).m, matrix.m)

    def test_compose_applies_right_first(self) -> None:
        """Test (a @ b) applies b then a."""
        scale = ColorMatrix(np.hstack([np.eye(4) * [2, 2, 2, 1], np.zeros((4, 1))]))
        shift = brightness_matrix(10)  # +25.5
        combined = (shift @ scale).m
        assert combined[0, 0] == pytest.approx(2.0)
        assert combined[0, 4] == pytest.approx(25.5)
        combined = (scale @ shift).m
        assert combined[0, 4] == pytest.approx(51.0)

    def test_identity_rows(self) -> None:
        """Test per-row identity detection."""
        m = ColorMatrix.identity().m.copy()
        m[1, 4] = 3.0
        assert ColorMatrix(m).identity_rows() == [True, False, True, True]


class TestElementaryMatrices:
    """Tests for hue, saturation, contrast and brightness matrices."""

    @pytest.mark.parametrize(
        "factory",
        [hue_rotation, saturation_matrix, contrast_matrix, brightness_matrix],
    )
    def test_neutral_is_identity(self, factory) -> None:
        """Test each elementary matrix is the identity at 0."""
        assert factory(0).is_identity()

    @pytest.mark.parametrize("degrees", [360, 720, -360])
    def test_full_turn_is_identity(self, degrees: float) -> None:
        """Test whole turns of hue are exactly the identity."""
        assert hue_rotation(degrees).is_identity()

    def test_neutral_build_matrix(self) -> None:
        """Test all-neutral parameters build the identity matrix."""
        assert build_matrix(0, 0, 0, 0) == ColorMatrix.identity()
        assert build_matrix() == ColorMatrix.identity()

    @pytest.mark.parametrize(
        "matrix",
        [hue_rotation(77), saturation_matrix(40), contrast_matrix(-30), brightness_matrix(20)],
    )
    def test_alpha_row_untouched(self, matrix: ColorMatrix) -> None:
        """Test elementary matrices never touch alpha."""
        assert matrix.identity_rows()[3]

    @pytest.mark.parametrize("degrees", [30, 90, 180, 275])
    def test_hue_preserves_gray(self, degrees: float) -> None:
        """Test hue rotation keeps the gray axis fixed (rows sum to 1)."""
        m = hue_rotation(degrees).m
        assert np.allclose(m[:3, :3].sum(axis=1), 1.0)

    def test_saturation_rows_sum_to_one(self) -> None:
        """Test saturation keeps gray pixels gray."""
        m = saturation_matrix(-60).m
        assert np.allclose(m[:3, :3].sum(axis=1), 1.0)

    def test_contrast_fixes_midpoint(self) -> None:
        """Test contrast scaling pivots on 127.5."""
        m = contrast_matrix(50).m
        assert m[0, 0] == pytest.approx(1.5)
        assert m[0, 0] * 127.5 + m[0, 4] == pytest.approx(127.5)

    def test_brightness_offset(self) -> None:
        """Test brightness adds 255 * amount / 100 to the bias column."""
        m = brightness_matrix(-40).m
        assert np.allclose(m[:3, 4], -102.0)
        assert m[3, 4] == 0.0

    def test_build_order(self) -> None:
        """Test brightness is applied after contrast."""
        expected = brightness_matrix(10) @ contrast_matrix(50)
        assert build_matrix(brightness=10, contrast=50) == expected
        assert build_matrix(brightness=10, contrast=50) != contrast_matrix(50) @ brightness_matrix(10)

    def test_build_full_order(self) -> None:
        """Test hue and saturation come before contrast and brightness."""
        expected = (
            brightness_matrix(5) @ contrast_matrix(10) @ saturation_matrix(20) @ hue_rotation(30)
        )
        assert np.allclose(build_matrix(5, 10, 20, 30).m, expected.m)


class TestApply:
    """Tests for apply()."""

    def test_identity_is_byte_exact(self) -> None:
        """Test the identity matrix leaves every byte unchanged."""
        buf = random_buffer()
        result = apply(buf, ColorMatrix.identity())
        assert result == buf
        assert result is not buf

    def test_brightness_rounds_half_up(self) -> None:
        """Test 100 + 25.5 rounds to 126."""
        result = apply(solid((100, 0, 250, 200)), brightness_matrix(10))
        assert result.pixel(0, 0) == (126, 26, 255, 200)

    def test_full_brightness(self) -> None:
        """Test brightness 100 saturates every color channel."""
        result = apply(random_buffer(), brightness_matrix(100))
        assert np.all(result.as_array()[..., :3] == 255)

    def test_no_brightness(self) -> None:
        """Test brightness -100 blacks out every color channel."""
        buf = random_buffer()
        result = apply(buf, brightness_matrix(-100))
        assert np.all(result.as_array()[..., :3] == 0)
        assert np.array_equal(result.as_array()[..., 3], buf.as_array()[..., 3])

    def test_flat_contrast(self) -> None:
        """Test contrast -100 collapses every channel to mid gray."""
        result = apply(random_buffer(), contrast_matrix(-100))
        assert np.all(result.as_array()[..., :3] == 128)

    def test_double_contrast_clamps(self) -> None:
        """Test contrast 100 scales about the midpoint and clamps."""
        result = apply(solid((100, 200, 0, 255)), contrast_matrix(100))
        assert result.pixel(0, 0) == (73, 255, 0, 255)

    def test_grayscale(self) -> None:
        """Test saturation -100 produces luminance gray."""
        result = apply(solid((255, 0, 0, 255)), saturation_matrix(-100))
        assert result.pixel(0, 0) == (54, 54, 54, 255)

    def test_gray_unchanged_by_hue_and_saturation(self) -> None:
        """Test gray pixels survive hue and saturation changes."""
        buf = solid((90, 90, 90, 255))
        result = apply(buf, build_matrix(saturation=80, hue_degrees=200))
        assert result == buf

    def test_hue_rotates_red_toward_green(self) -> None:
        """Test a 120 degree rotation moves red toward green."""
        r, g, b, a = apply(solid((255, 0, 0, 255)), hue_rotation(120)).pixel(0, 0)
        assert g > r
        assert a == 255

    def test_alpha_row_applied(self) -> None:
        """Test a non-identity alpha row transforms alpha."""
        m = ColorMatrix.identity().m.copy()
        m[3, 3] = 0.5
        result = apply(solid((10, 20, 30, 200)), ColorMatrix(m))
        assert result.pixel(0, 0) == (10, 20, 30, 100)

    def test_input_not_mutated(self) -> None:
        """Test apply leaves its input untouched."""
        buf = random_buffer(seed=5)
        before = buf.to_bytes()
        apply(buf, build_matrix(20, 30, -40, 90))
        assert buf.to_bytes() == before


class TestColorMatrixSystem:
    """Tests for ColorMatrixSystem."""

    def test_run_matches_apply(self) -> None:
        """Test the system applies the built matrix."""
        buf = random_buffer(seed=6)
        system = ColorMatrixSystem(brightness=10, contrast=20, saturation=-30, hue_degrees=45)
        assert system.run(buf) == apply(buf, build_matrix(10, 20, -30, 45))

    def test_neutral_system(self) -> None:
        """Test a neutral system is a no-op."""
        buf = random_buffer(seed=7)
        assert ColorMatrixSystem().run(buf) == buf

    def test_repr(self) -> None:
        """Test repr lists the parameters."""
        assert "contrast=20" in repr(ColorMatrixSystem(contrast=20))
