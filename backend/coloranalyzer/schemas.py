"""
Color Analyzer Schemas
Pydantic models for analysis results and the HTTP service envelopes.

Fields are snake_case in Python and serialize with camelCase aliases
(``dominantColor``, ``topColors``, ``processingTimeMs`` ...).
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing with camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColorBucket(CamelModel):
    """One quantized color with its pixel count and share of the image."""
    r: int = Field(..., ge=0, le=255, description="Quantized red channel")
    g: int = Field(..., ge=0, le=255, description="Quantized green channel")
    b: int = Field(..., ge=0, le=255, description="Quantized blue channel")
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-F]{6}$",
        description="Uppercase hex code of the quantized color"
    )
    rgb_string: str = Field(..., description="CSS notation, e.g. 'rgb(250, 0, 0)'")
    count: int = Field(..., ge=1, description="Pixels that fell into this bucket")
    percentage: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="100 * count / total pixels, rounded to 2 decimals"
    )
    name: Optional[str] = Field(None, description="Canonical color name (when names are requested)")

    @property
    def rgb(self):
        return self.r, self.g, self.b


class ImageInfo(CamelModel):
    """Metadata of the decoded source image (before downsampling)."""
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    format: Optional[str] = Field(None, description="Decoder format name, lowercase")
    channels: int = Field(..., ge=1, description="Channels in the decoded pixel buffer")
    byte_size: int = Field(0, ge=0, description="Size of the source file in bytes")


class ColorStats(CamelModel):
    """Aggregate statistics over the bucket set."""
    total_colors: int = Field(..., ge=0, description="Distinct bucket count")
    total_pixels: int = Field(..., ge=0)
    processed_pixels: int = Field(..., ge=0)
    color_distribution: Dict[str, float] = Field(
        default_factory=dict,
        description="Canonical name -> summed percentage of buckets with that name"
    )
    average_saturation: float = Field(0.0, description="Mean HSL saturation of bucket colors (%)")
    average_lightness: float = Field(0.0, description="Mean HSL lightness of bucket colors (%)")


class AnalysisResult(CamelModel):
    """Final report of one analysis call."""
    success: bool = Field(True)
    analysis_id: Optional[str] = Field(None, description="Id correlating the analysis log lines")
    dominant_color: Optional[ColorBucket] = Field(None, description="Highest-count bucket")
    top_colors: List[ColorBucket] = Field(default_factory=list, description="Buckets by count, descending")
    image_info: ImageInfo
    color_stats: Optional[ColorStats] = None
    processing_time_ms: float = Field(..., ge=0.0, description="Wall-clock pipeline duration")


class FileInfo(BaseModel):
    """Upload metadata echoed by the service."""
    filename: str = Field(..., description="Stored filename")
    originalname: str = Field(..., description="Client-supplied filename")
    size: int = Field(..., ge=0)
    mimetype: Optional[str] = None


class AnalyzeUploadResponse(AnalysisResult):
    """Analysis result augmented with upload metadata."""
    file_info: FileInfo


class ErrorResponse(BaseModel):
    """Error envelope."""
    success: bool = False
    error: str = Field(..., description="Error message")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field("OK", description="Service health status")
    timestamp: str = Field(..., description="ISO-8601 server time")
