"""
Unit tests for quantization and histogram building.

Covers:
- grid quantization properties (idempotent, monotonic, bounded)
- first-seen bucket order
- channel stride validation and alpha handling
- sharded counting with a fixed merge order
"""
import numpy as np
import pytest

from coloranalyzer.errors import ValidationError
from coloranalyzer.services.colors.histogram import (
    ColorHistogram, build_histogram, merge_histograms, pack_key, quantize, unpack_key
)

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


class TestQuantize:
    """Test per-channel grid reduction"""

    def test_quantize_floors_to_grid(self):
        assert quantize(255, 0, 0, 10) == (250, 0, 0)
        assert quantize(9, 10, 19, 10) == (0, 10, 10)
        assert quantize(255, 128, 3, 7) == (252, 126, 0)

    def test_quantize_step_one_is_identity(self):
        assert quantize(12, 200, 255, 1) == (12, 200, 255)

    def test_quantize_large_step_collapses_to_zero(self):
        assert quantize(255, 255, 255, 300) == (0, 0, 0)

    @pytest.mark.parametrize("step", [0, -5])
    def test_quantize_rejects_non_positive_step(self, step):
        with pytest.raises(ValidationError):
            quantize(10, 10, 10, step)

    @pytest.mark.parametrize("step", [1, 3, 10, 16, 51, 100])
    def test_quantize_is_idempotent_monotonic_and_bounded(self, step):
        previous = -1
        for value in range(256):
            once = quantize(value, value, value, step)
            assert quantize(*once, step) == once
            assert 0 <= once[0] <= 255
            assert once[0] % step == 0
            assert once[0] >= previous
            previous = once[0]


class TestPackedKeys:
    """Test integer bucket keys"""

    def test_pack_unpack(self):
        assert pack_key(250, 10, 0) == (250 << 16) | (10 << 8)
        assert unpack_key(pack_key(250, 10, 5)) == (250, 10, 5)


class TestBuildHistogram:
    """Test the histogram sweep"""

    def test_counts_sum_to_pixel_count(self):
        rng = np.random.default_rng(7)
        pixels = rng.integers(0, 256, size=(30, 40, 3), dtype=np.uint8)

        histogram = build_histogram(pixels, 10)

        assert histogram.total_pixels == 1200
        assert sum(histogram.counts.values()) == 1200
        assert all(count >= 1 for count in histogram.counts.values())

    def test_uniform_image_single_bucket(self):
        pixels = np.zeros((10, 20, 3), dtype=np.uint8)
        pixels[...] = RED

        histogram = build_histogram(pixels, 10)

        assert len(histogram) == 1
        assert list(histogram.buckets()) == [((250, 0, 0), 200)]
        assert histogram.count_of(255, 1, 2) == 200

    def test_step_one_is_exact_histogram(self):
        pixels = np.array([[[1, 2, 3], [1, 2, 3], [1, 2, 4]]], dtype=np.uint8)

        histogram = build_histogram(pixels, 1)

        assert dict(histogram.buckets()) == {(1, 2, 3): 2, (1, 2, 4): 1}

    def test_buckets_keep_first_seen_order(self):
        pixels = np.array([
            [BLUE, RED, RED],
            [GREEN, BLUE, GREEN],
        ], dtype=np.uint8)

        histogram = build_histogram(pixels, 1)

        assert [rgb for rgb, _ in histogram.buckets()] == [BLUE, RED, GREEN]

    def test_alpha_channel_is_ignored(self):
        """Same RGB with different alpha lands in one bucket"""
        pixels = np.array([[[10, 20, 30, 0], [10, 20, 30, 255], [10, 20, 30, 128]]], dtype=np.uint8)

        histogram = build_histogram(pixels, 1)

        assert dict(histogram.buckets()) == {(10, 20, 30): 3}

    def test_flat_buffer_with_declared_stride(self):
        buffer = np.array([255, 0, 0, 255, 255, 0, 0, 0, 0, 0, 255, 255], dtype=np.uint8)

        histogram = build_histogram(buffer, 10, channels=4)

        assert histogram.total_pixels == 3
        assert dict(histogram.buckets()) == {(250, 0, 0): 2, (0, 0, 250): 1}

    def test_single_channel_image_is_rejected(self):
        grayscale = np.zeros((4, 4), dtype=np.uint8)
        with pytest.raises(ValidationError, match="stride 1"):
            build_histogram(grayscale, 10)

    def test_stride_one_flat_buffer_is_rejected(self):
        with pytest.raises(ValidationError):
            build_histogram(np.zeros(16, dtype=np.uint8), 10, channels=1)

    def test_two_channel_image_is_rejected(self):
        with pytest.raises(ValidationError):
            build_histogram(np.zeros((4, 4, 2), dtype=np.uint8), 10)

    def test_flat_buffer_length_must_match_stride(self):
        with pytest.raises(ValidationError):
            build_histogram(np.zeros(10, dtype=np.uint8), 10, channels=3)

    def test_invalid_step_fails_before_reading(self):
        with pytest.raises(ValidationError):
            build_histogram(np.zeros((4, 4, 3), dtype=np.uint8), 0)

    def test_empty_buffer(self):
        histogram = build_histogram(np.zeros((0, 0, 3), dtype=np.uint8), 10)

        assert len(histogram) == 0
        assert histogram.total_pixels == 0

    def test_large_step_single_bucket(self):
        rng = np.random.default_rng(3)
        pixels = rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8)

        histogram = build_histogram(pixels, 1000)

        assert dict(histogram.buckets()) == {(0, 0, 0): 64}


class TestShardedHistogram:
    """Test parallel row-range counting"""

    @pytest.mark.parametrize("shards", [2, 3, 7, 64])
    def test_sharded_matches_single_pass_including_order(self, shards):
        rng = np.random.default_rng(11)
        pixels = rng.integers(0, 256, size=(50, 40, 3), dtype=np.uint8)

        single = build_histogram(pixels, 32)
        sharded = build_histogram(pixels, 32, shards=shards)

        assert list(sharded.counts.items()) == list(single.counts.items())
        assert sharded.total_pixels == single.total_pixels

    def test_invalid_shard_count(self):
        with pytest.raises(ValidationError):
            build_histogram(np.zeros((4, 4, 3), dtype=np.uint8), 10, shards=0)

    def test_merge_is_keywise_addition_in_shard_order(self):
        merged = merge_histograms([{1: 2, 2: 1}, {3: 1, 1: 1}])

        assert merged == {1: 3, 2: 1, 3: 1}
        assert list(merged) == [1, 2, 3]

    def test_histogram_defaults(self):
        histogram = ColorHistogram()
        assert len(histogram) == 0
        assert list(histogram.buckets()) == []
