"""
Unit tests for bucket ranking and top-N selection.
"""
import numpy as np
import pytest

from coloranalyzer.errors import ValidationError
from coloranalyzer.services.colors.histogram import ColorHistogram, build_histogram, pack_key
from coloranalyzer.services.colors.ranking import make_bucket, rank_buckets, select_top


@pytest.fixture
def three_bucket_histogram():
    """Blue and green tie at 3; blue seen first"""
    counts = {
        pack_key(0, 0, 250): 3,
        pack_key(250, 0, 0): 5,
        pack_key(0, 250, 0): 3,
    }
    return ColorHistogram(counts=counts, total_pixels=11, quantization=10)


class TestMakeBucket:
    """Test color record materialization"""

    def test_make_bucket_fields(self):
        bucket = make_bucket((250, 0, 0), 45, 100)

        assert bucket.hex == "#FA0000"
        assert bucket.rgb_string == "rgb(250, 0, 0)"
        assert (bucket.r, bucket.g, bucket.b) == (250, 0, 0)
        assert bucket.count == 45
        assert bucket.percentage == 45.0
        assert bucket.name == "Red"

    def test_percentage_rounded_to_two_decimals(self):
        assert make_bucket((0, 0, 0), 1, 3).percentage == 33.33
        assert make_bucket((0, 0, 0), 2, 3).percentage == 66.67

    def test_name_omitted_on_request(self):
        assert make_bucket((0, 0, 250), 1, 1, include_name=False).name is None


class TestRankBuckets:
    """Test ordering and tie-breaks"""

    def test_count_descending_with_first_seen_tie_break(self, three_bucket_histogram):
        ranked = rank_buckets(three_bucket_histogram)

        assert [bucket.hex for bucket in ranked] == ["#FA0000", "#0000FA", "#00FA00"]
        assert [bucket.percentage for bucket in ranked] == [45.45, 27.27, 27.27]

    def test_tie_break_is_stable_for_many_equal_counts(self):
        # 16 distinct colors, one pixel each, laid out in a known scan order
        values = np.arange(16, dtype=np.uint8).reshape(4, 4)
        pixels = np.stack([values * 16, 255 - values * 16, np.zeros_like(values)], axis=-1).astype(np.uint8)

        ranked = rank_buckets(build_histogram(pixels, 1))

        assert [bucket.r for bucket in ranked] == [v * 16 for v in range(16)]

    def test_percentages_bounded_and_sum_within_rounding(self):
        rng = np.random.default_rng(5)
        pixels = rng.integers(0, 256, size=(40, 40, 3), dtype=np.uint8)

        ranked = rank_buckets(build_histogram(pixels, 25))

        assert all(0.0 <= bucket.percentage <= 100.0 for bucket in ranked)
        # each bucket's 2-decimal rounding moves the sum by at most 0.005
        total = sum(bucket.percentage for bucket in ranked)
        assert abs(total - 100.0) <= len(ranked) * 0.005 + 1e-9
        assert sum(bucket.count for bucket in ranked) == 1600

    def test_few_buckets_sum_near_100(self):
        rng = np.random.default_rng(5)
        pixels = rng.integers(0, 256, size=(40, 40, 3), dtype=np.uint8)

        ranked = rank_buckets(build_histogram(pixels, 128))

        assert len(ranked) <= 8
        assert abs(sum(bucket.percentage for bucket in ranked) - 100.0) <= 1.0


class TestSelectTop:
    """Test top-N selection"""

    def test_top_n_truncates(self, three_bucket_histogram):
        ranked = rank_buckets(three_bucket_histogram)

        dominant, top = select_top(ranked, 2)

        assert len(top) == 2
        assert dominant == top[0]
        assert dominant.hex == "#FA0000"

    @pytest.mark.parametrize("n", [1, 3, 10])
    def test_length_is_min_of_n_and_bucket_count(self, three_bucket_histogram, n):
        _, top = select_top(rank_buckets(three_bucket_histogram), n)
        assert len(top) == min(n, 3)

    def test_empty_histogram_has_no_dominant_color(self):
        dominant, top = select_top(rank_buckets(ColorHistogram()), 5)

        assert dominant is None
        assert top == []

    @pytest.mark.parametrize("n", [0, -1])
    def test_non_positive_n_is_rejected(self, three_bucket_histogram, n):
        with pytest.raises(ValidationError):
            select_top(rank_buckets(three_bucket_histogram), n)

    def test_numpy_integer_n_is_accepted(self, three_bucket_histogram):
        _, top = select_top(rank_buckets(three_bucket_histogram), np.int64(2))
        assert len(top) == 2
