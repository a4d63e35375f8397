"""
Color Analyzer HTTP service.

POST /analyze accepts one multipart image (field ``image``) and returns the
analysis result plus upload metadata. Failures use the envelope
``{"success": false, "error": "<message>"}``.
"""
import asyncio
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, File, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coloranalyzer import __version__
from coloranalyzer.config import config
from coloranalyzer.errors import ColorAnalysisError, UploadValidationError
from coloranalyzer.schemas import AnalyzeUploadResponse, ErrorResponse, FileInfo, HealthResponse
from coloranalyzer.services.analyzer import analyze_async
from coloranalyzer.services.imaging import save_upload, validate_upload_filename, validate_upload_size
from coloranalyzer.utils.ids import generate_upload_filename
from coloranalyzer.utils.logging import get_logger
from coloranalyzer.utils.metrics import get_metrics

logger = get_logger()

app = FastAPI(
    title="Image Color Analyzer API",
    description="Ranked color histograms with canonical color names and statistics",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(UploadValidationError)
async def upload_validation_error_handler(request: Request, exc: UploadValidationError):
    logger.warning(f"Rejected upload: {exc}", extra={"path": request.url.path})
    return error_response(400, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    messages = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return error_response(400, f"Invalid request: {messages}")


@app.exception_handler(ColorAnalysisError)
async def analysis_error_handler(request: Request, exc: ColorAnalysisError):
    logger.error(f"Analysis failed: {exc}", extra={"path": request.url.path, "error_type": type(exc).__name__})
    return error_response(500, str(exc))


@app.get("/")
def root():
    """Endpoint index."""
    return {
        "message": "Image Color Analyzer API",
        "endpoints": {
            "analyze": "POST /analyze",
            "health": "GET /health",
            "metrics": "GET /metrics"
        }
    }


@app.get("/health", response_model=HealthResponse)
def health_check():
    """Service health check."""
    return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc).isoformat())


@app.get("/metrics")
def metrics_summary():
    """In-process analysis counters and stage timings."""
    return get_metrics().get_summary()


@app.post(
    "/analyze",
    response_model=AnalyzeUploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def analyze_upload(
    image: Optional[UploadFile] = File(None, description="Image file (jpg, jpeg, png, gif, webp, bmp)"),
    top_colors_count: int = Query(config.TOP_COLORS_COUNT, ge=1, description="Number of ranked colors"),
    color_quantization: int = Query(config.COLOR_QUANTIZATION, ge=1, description="Bucket edge size"),
    max_dimension: int = Query(config.MAX_DIMENSION, ge=1, le=4096, description="Longest edge after downsampling")
):
    """
    Analyze an uploaded image.

    - **image**: multipart image file, at most 10 MiB by default
    - **top_colors_count**: number of colors in ``topColors``
    - **color_quantization**: per-channel bucket size (1 = exact colors)
    - **max_dimension**: longer side is downsampled to this bound before counting

    Returns the analysis result augmented with ``fileInfo``.
    """
    if image is None:
        raise UploadValidationError("No image file provided")
    validate_upload_filename(image.filename)
    # size may be None for some clients; the read length is checked again below
    if image.size:
        validate_upload_size(image.size)

    data = await image.read()
    validate_upload_size(len(data))

    stored_name = generate_upload_filename(image.filename)
    stored_path = await asyncio.to_thread(save_upload, data, stored_name)
    logger.info(f"Stored upload {image.filename} as {stored_name}", extra={"size": len(data)})

    result = await analyze_async(
        stored_path,
        top_colors_count=top_colors_count,
        color_quantization=color_quantization,
        max_dimension=max_dimension,
        include_names=True
    )

    return AnalyzeUploadResponse(
        **result.model_dump(),
        file_info=FileInfo(
            filename=stored_name,
            originalname=image.filename,
            size=len(data),
            mimetype=image.content_type
        )
    )
