"""
Color analysis pipeline.

decode -> histogram -> rank -> stats -> assemble, run once per call with no
state shared between calls. Every stage either produces its output or fails
fast; errors carry the name of the stage that raised them.
"""
import asyncio
import time
from contextlib import contextmanager
from dataclasses import asdict
from typing import Any, List, Mapping, Optional, Union

from coloranalyzer.config import AnalysisOptions, canonical_option_name
from coloranalyzer.errors import AnalysisError, ColorAnalysisError
from coloranalyzer.schemas import AnalysisResult, ColorBucket
from coloranalyzer.services.colors.histogram import build_histogram
from coloranalyzer.services.colors.ranking import rank_buckets, select_top
from coloranalyzer.services.colors.stats import get_color_stats
from coloranalyzer.services.imaging import PathLike, load_pixels
from coloranalyzer.utils.ids import generate_analysis_id
from coloranalyzer.utils.logging import StructuredLogger, get_logger
from coloranalyzer.utils.metrics import get_metrics

OptionsLike = Union[AnalysisOptions, Mapping[str, Any], None]


@contextmanager
def pipeline_stage(stage: str, log: StructuredLogger):
    """
    Time one pipeline stage and tag its failures with the stage name.

    ColorAnalysisError subclasses are re-raised with ``stage`` attached;
    anything else is wrapped in AnalysisError.
    """
    start_time = time.perf_counter()
    try:
        yield
    except ColorAnalysisError as e:
        if e.stage is None:
            e.stage = stage
        log.error(f"Stage {stage} failed: {e.message}",
                  extra={"stage": stage, "error_type": type(e).__name__})
        raise
    except Exception as e:
        log.error(f"Stage {stage} failed unexpectedly: {e}",
                  extra={"stage": stage, "error_type": type(e).__name__})
        raise AnalysisError(f"{type(e).__name__}: {e}", stage=stage) from e

    duration_ms = (time.perf_counter() - start_time) * 1000
    get_metrics().record_timing(stage, duration_ms)
    log.debug(f"Stage {stage} complete", extra={"stage": stage, "ms": round(duration_ms, 3)})


def resolve_options(options: OptionsLike = None, **overrides: Any) -> AnalysisOptions:
    """
    Merge defaults, caller options and keyword overrides into AnalysisOptions.

    Options may be an AnalysisOptions instance or a mapping using snake_case
    or camelCase names. Keyword overrides win. Unknown keys are ignored.

    Raises:
        ValidationError: Any resulting integer option <= 0
    """
    if isinstance(options, AnalysisOptions):
        if not overrides:
            return options
        merged = asdict(options)
    else:
        merged = {canonical_option_name(key): value for key, value in (options or {}).items()}
    merged.update((canonical_option_name(key), value) for key, value in overrides.items())
    return AnalysisOptions.from_mapping(merged)


def analyze_image_colors(path: PathLike, options: AnalysisOptions) -> AnalysisResult:
    """
    Run the full pipeline on one image file.

    Args:
        path: Image file path
        options: Validated analysis options

    Returns:
        AnalysisResult with dominant color, top colors, image info and optional stats

    Raises:
        ImageIOError: Missing or unreadable file
        DecodeError: File is not a decodable image
        ValidationError: Pixel buffer has fewer than 3 channels
        AnalysisError: Unexpected failure in any stage
    """
    start_time = time.perf_counter()
    analysis_id = generate_analysis_id()
    log = get_logger().bind(analysis_id=analysis_id)
    metrics = get_metrics()
    metrics.increment_analysis_count()

    log.info(f"Starting color analysis of {path}", extra={
        "max_dimension": options.max_dimension,
        "top_colors_count": options.top_colors_count,
        "color_quantization": options.color_quantization,
    })

    try:
        with pipeline_stage("decode", log):
            buffer = load_pixels(path, options.max_dimension)

        with pipeline_stage("histogram", log):
            histogram = build_histogram(
                buffer.pixels,
                options.color_quantization,
                shards=options.histogram_shards,
            )
            metrics.record_bucket_count(len(histogram))

        with pipeline_stage("rank", log):
            ranked = rank_buckets(histogram, include_names=options.include_names)
            dominant_color, top_colors = select_top(ranked, options.top_colors_count)

        color_stats = None
        if options.include_stats:
            with pipeline_stage("stats", log):
                color_stats = get_color_stats(
                    ranked,
                    total_pixels=histogram.total_pixels,
                    processed_pixels=buffer.pixel_count,
                )

        with pipeline_stage("assemble", log):
            result = AnalysisResult(
                analysis_id=analysis_id,
                dominant_color=dominant_color,
                top_colors=top_colors,
                image_info=buffer.info,
                color_stats=color_stats,
                processing_time_ms=round((time.perf_counter() - start_time) * 1000, 3),
            )
    except ColorAnalysisError as e:
        metrics.increment_failure_count(type(e).__name__)
        raise

    metrics.increment_success_count()
    log.info("Color analysis complete", extra={
        "distinct_colors": len(histogram),
        "pixels": histogram.total_pixels,
        "dominant": dominant_color.hex if dominant_color else None,
        "ms_total": result.processing_time_ms,
    })
    return result


def analyze(path: PathLike, options: OptionsLike = None, **overrides: Any) -> AnalysisResult:
    """
    Analyze an image and return its ranked color histogram.

    Options are validated before the file is opened.
    """
    return analyze_image_colors(path, resolve_options(options, **overrides))


async def analyze_async(path: PathLike, options: OptionsLike = None, **overrides: Any) -> AnalysisResult:
    """Run analyze() on a worker thread."""
    resolved = resolve_options(options, **overrides)
    return await asyncio.to_thread(analyze_image_colors, path, resolved)


def get_dominant_color(path: PathLike, options: OptionsLike = None) -> Optional[ColorBucket]:
    """Highest-count color of an image, or None for an image without pixels."""
    return analyze(path, options, top_colors_count=1).dominant_color


def get_color_palette(path: PathLike, count: int = 5, options: OptionsLike = None) -> List[ColorBucket]:
    """The ``count`` highest-count colors, most frequent first."""
    return analyze(path, options, top_colors_count=count).top_colors
