"""
Unit tests for aggregate color statistics.
"""
from coloranalyzer.services.colors.ranking import make_bucket
from coloranalyzer.services.colors.stats import get_color_stats


def test_empty_color_set_returns_none():
    assert get_color_stats([]) is None


def test_distribution_and_averages():
    colors = [
        make_bucket((255, 0, 0), 60, 100),
        make_bucket((0, 0, 255), 40, 100),
    ]

    stats = get_color_stats(colors)

    assert stats.total_colors == 2
    assert stats.total_pixels == 100
    assert stats.processed_pixels == 100
    assert stats.color_distribution == {"Red": 60.0, "Blue": 40.0}
    assert stats.average_saturation == 100.0
    assert stats.average_lightness == 50.0


def test_buckets_sharing_a_name_are_summed():
    colors = [
        make_bucket((255, 0, 0), 30, 100),
        make_bucket((250, 0, 0), 20, 100),
        make_bucket((0, 0, 0), 50, 100),
    ]

    stats = get_color_stats(colors)

    assert stats.color_distribution == {"Red": 50.0, "Black": 50.0}


def test_averages_are_not_weighted_by_share():
    colors = [
        make_bucket((0, 0, 0), 90, 100),
        make_bucket((255, 255, 255), 10, 100),
    ]

    stats = get_color_stats(colors)

    assert stats.average_lightness == 50.0
    assert stats.average_saturation == 0.0


def test_unnamed_buckets_are_classified():
    colors = [make_bucket((0, 250, 0), 5, 5, include_name=False)]

    stats = get_color_stats(colors, total_pixels=5, processed_pixels=5)

    assert stats.color_distribution == {"Green": 100.0}


def test_serializes_with_camel_case_names():
    stats = get_color_stats([make_bucket((255, 0, 0), 1, 1)])

    payload = stats.model_dump(by_alias=True)

    assert set(payload) == {
        "totalColors", "totalPixels", "processedPixels",
        "colorDistribution", "averageSaturation", "averageLightness",
    }
