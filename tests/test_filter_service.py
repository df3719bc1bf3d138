"""
Tests for the kawaii filter chain.

Stage math is checked on small hand-made pixel arrays; the service is checked
for size preservation, purity and the skip-on-failure policy.
"""

import numpy as np
import pytest
from PIL import Image

from kawaii_cam.models.style_model import DEFAULT_FILTER_PARAMETERS, FilterChainParameters
from kawaii_cam.services.filter_service import (
    DEFAULT_STAGES,
    FilterService,
    FilterStage,
    FilterStageError,
    ImageDecodeError,
    color_controls,
    gaussian_blur,
    gaussian_kernel,
    soft_blend,
    source_over,
    tint,
    vignette,
)


def pixels_of(rgb, alpha=1.0, size=(4, 4)):
    h, w = size
    arr = np.zeros((h, w, 4), dtype=np.float32)
    arr[..., :3] = rgb
    arr[..., 3] = alpha
    return arr


class TestStages:
    def test_color_controls_mid_gray(self):
        out = color_controls(pixels_of((0.5, 0.5, 0.5)), DEFAULT_FILTER_PARAMETERS)
        # +0.3 brightness, then (0.8 - 0.5) * 1.2 + 0.5
        assert out[0, 0, :3] == pytest.approx([0.86, 0.86, 0.86], abs=1e-5)
        assert out[0, 0, 3] == pytest.approx(1.0)

    def test_color_controls_clamps_white(self):
        out = color_controls(pixels_of((1.0, 1.0, 1.0)), DEFAULT_FILTER_PARAMETERS)
        assert out[..., :3].max() <= 1.0
        assert out[0, 0, :3] == pytest.approx([1.0, 1.0, 1.0])

    def test_color_controls_increases_saturation(self):
        src = pixels_of((0.4, 0.2, 0.2))
        out = color_controls(src, FilterChainParameters(brightness=0.0, contrast=1.0))
        assert out[0, 0, 0] - out[0, 0, 1] > src[0, 0, 0] - src[0, 0, 1]

    def test_tint_pure_red(self):
        out = tint(pixels_of((1.0, 0.0, 0.0), alpha=0.5), DEFAULT_FILTER_PARAMETERS)
        assert out[0, 0, :3] == pytest.approx([1.0, 0.05, 0.15], abs=1e-6)
        assert out[0, 0, 3] == pytest.approx(0.5)

    def test_tint_rejects_bad_matrix(self):
        params = FilterChainParameters(tint_matrix=((1.0, 0.0), (0.0, 1.0)))
        with pytest.raises(FilterStageError):
            tint(pixels_of((0.2, 0.2, 0.2)), params)

    def test_vignette_darkens_edges_more_than_center(self):
        src = pixels_of((0.8, 0.8, 0.8), size=(41, 41))
        out = vignette(src, DEFAULT_FILTER_PARAMETERS)
        center = out[20, 20, 0]
        corner = out[0, 0, 0]
        assert center == pytest.approx(0.8, abs=1e-3)
        assert corner < center
        # at the corner d ~ half-diagonal, so darkening ~ 0.2 / 1.8^2
        assert corner == pytest.approx(0.8 * (1 - 0.2 / 1.8 ** 2), abs=5e-3)

    def test_vignette_rejects_zero_radius(self):
        with pytest.raises(FilterStageError):
            vignette(pixels_of((0.5, 0.5, 0.5)), FilterChainParameters(vignette_radius=0.0))

    def test_gaussian_kernel_is_normalized(self):
        kernel = gaussian_kernel(0.8)
        assert kernel.sum() == pytest.approx(1.0, abs=1e-6)
        assert len(kernel) == 7
        assert kernel.argmax() == 3

    def test_gaussian_blur_keeps_flat_image(self):
        src = pixels_of((0.3, 0.6, 0.9), size=(9, 9))
        assert np.allclose(gaussian_blur(src, 0.8), src, atol=1e-6)

    def test_source_over_opaque_foreground_wins(self):
        fg = pixels_of((0.1, 0.2, 0.3))
        bg = pixels_of((0.9, 0.9, 0.9))
        assert np.allclose(source_over(fg, bg), fg, atol=1e-6)

    def test_source_over_transparent_foreground_shows_background(self):
        fg = pixels_of((0.1, 0.2, 0.3), alpha=0.0)
        bg = pixels_of((0.9, 0.8, 0.7), alpha=1.0)
        assert np.allclose(source_over(fg, bg), bg, atol=1e-6)

    def test_soft_blend_spreads_alpha_past_hard_edge(self):
        src = np.zeros((20, 20, 4), dtype=np.float32)
        src[6:14, 6:14] = (0.8, 0.2, 0.5, 1.0)
        out = soft_blend(src, DEFAULT_FILTER_PARAMETERS)
        # just outside the square the blurred copy shows through
        assert out[10, 5, 3] > 0
        assert out[5, 10, 3] > 0
        assert out[10, 5, 0] == pytest.approx(0.8, abs=1e-5)
        # the sharp copy fully covers the interior
        assert np.allclose(out[6:14, 6:14], src[6:14, 6:14], atol=1e-6)
        assert out[0, 0, 3] == 0


class TestFilterService:
    @pytest.mark.parametrize("size", [(1, 1), (300, 300), (64, 17), (17, 64)])
    def test_dimensions_preserved(self, size):
        image = Image.new("RGB", size, (200, 100, 50))
        out = FilterService().apply_style_filters(image)
        assert out.size == size
        assert out.mode == "RGBA"

    def test_input_not_mutated(self, solid_image):
        before = solid_image.tobytes()
        FilterService().apply_style_filters(solid_image)
        assert solid_image.tobytes() == before

    def test_bit_reproducible(self):
        rng = np.random.default_rng(3)
        arr = rng.integers(0, 256, size=(40, 50, 3), dtype=np.uint8)
        image = Image.fromarray(arr)
        service = FilterService()
        assert service.apply_style_filters(image).tobytes() == service.apply_style_filters(image).tobytes()

    def test_output_is_brighter_and_pinker(self):
        image = Image.new("RGB", (32, 32), (100, 100, 100))
        out = np.asarray(FilterService().apply_style_filters(image), dtype=np.int32)
        r, g, b = out[16, 16, :3]
        assert min(r, g, b) > 100
        assert r >= g

    @pytest.mark.parametrize("image", [
        Image.new("I;16", (20, 20)),
        Image.new("F", (20, 20)),
        Image.new("LAB", (20, 20)),
        Image.new("HSV", (20, 20)),
        Image.new("RGB", (0, 0)),
        Image.new("RGB", (10, 0)),
    ])
    def test_decode_failure(self, image):
        with pytest.raises(ImageDecodeError):
            FilterService().apply_style_filters(image)

    def test_decode_accepts_palette_and_grayscale(self):
        service = FilterService()
        assert service.decode(Image.new("L", (5, 4), 128)).shape == (4, 5, 4)
        assert service.decode(Image.new("P", (5, 4))).shape == (4, 5, 4)

    def test_no_stage_skipped_on_normal_input(self, solid_image):
        result = FilterService().run(solid_image)
        assert result.skipped_stages == ()

    def test_failing_stage_passes_previous_output_through(self, solid_image):
        def broken(pixels, params):
            raise FilterStageError("unavailable")

        stages = list(DEFAULT_STAGES)
        stages.insert(2, FilterStage("broken", broken))
        result = FilterService(stages=stages).run(solid_image)
        expected = FilterService().run(solid_image)

        assert result.skipped_stages == ("broken",)
        assert result.image.tobytes() == expected.image.tobytes()

    def test_stage_with_wrong_shape_is_skipped(self, solid_image):
        def cropped(pixels, params):
            return pixels[:10, :10]

        result = FilterService(stages=[FilterStage("cropped", cropped)]).run(solid_image)
        assert result.skipped_stages == ("cropped",)
        assert result.image.size == solid_image.size

    def test_stage_producing_nan_is_skipped(self, solid_image):
        def poisoned(pixels, params):
            out = pixels.copy()
            out[0, 0, 0] = np.nan
            return out

        result = FilterService(stages=[FilterStage("poisoned", poisoned)]).run(solid_image)
        assert result.skipped_stages == ("poisoned",)

    def test_stage_returning_non_array_is_skipped(self, solid_image):
        stages = list(DEFAULT_STAGES) + [FilterStage("listy", lambda pixels, params: pixels.tolist())]
        result = FilterService(stages=stages).run(solid_image)
        expected = FilterService().run(solid_image)

        assert result.skipped_stages == ("listy",)
        assert result.image.tobytes() == expected.image.tobytes()

    @pytest.mark.parametrize("error", [RuntimeError("backend unavailable"), TypeError("bad operand"), MemoryError()])
    def test_stage_raising_any_error_is_skipped(self, solid_image, error):
        def boom(pixels, params):
            raise error

        result = FilterService(stages=[FilterStage("boom", boom)]).run(solid_image)
        assert result.skipped_stages == ("boom",)
        assert result.image.tobytes() == solid_image.convert("RGBA").tobytes()

    def test_all_stages_failing_returns_decoded_input(self, solid_image):
        params = FilterChainParameters(tint_matrix=((1.0,),), vignette_radius=-1.0)
        stages = [s for s in DEFAULT_STAGES if s.name in ("tint", "vignette")]
        result = FilterService(params=params, stages=stages).run(solid_image)
        assert result.skipped_stages == ("tint", "vignette")
        assert result.image.tobytes() == solid_image.convert("RGBA").tobytes()
