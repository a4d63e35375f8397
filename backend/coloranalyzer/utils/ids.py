"""
Color Analyzer ID Utilities
Analysis correlation ids and stored upload filenames.
"""
import os
import time
import uuid
from datetime import datetime


def generate_analysis_id() -> str:
    """
    Generate a unique id correlating the log lines of one analysis.

    Returns:
        Id of the form ``color-<YYYYmmddHHMMSS>-<8 hex>``
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = uuid.uuid4().hex[:8]
    return f"color-{timestamp}-{short_uuid}"


def generate_upload_filename(original_name: str) -> str:
    """
    Name under which an uploaded image is stored.

    Millisecond timestamp and a short random suffix, followed by the
    original (lowercased) extension.
    """
    ext = os.path.splitext(original_name or "")[1].lower()
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}{ext}"
