"""Core utilities package.

This package contains pure utility functions used across the codebase:
codec knowledge, display formatting, URL extraction, and short subprocess
invocation.
"""

from sushe.core.codecs import (
    DEFAULT_ENCODER_SETTINGS,
    H264_CODEC_ALIASES,
    MERGE_OUTPUT_FORMAT,
    EncoderSettings,
    is_h264_compatible,
    normalize_codec,
)
from sushe.core.formatting import (
    content_type_for,
    format_file_size,
    resolution_label,
    title_from_path,
)
from sushe.core.subprocess_utils import run_command
from sushe.core.urls import extract_urls, is_valid_url

__all__ = [
    # Codecs
    "DEFAULT_ENCODER_SETTINGS",
    "H264_CODEC_ALIASES",
    "MERGE_OUTPUT_FORMAT",
    "EncoderSettings",
    "is_h264_compatible",
    "normalize_codec",
    # Formatting
    "content_type_for",
    "format_file_size",
    "resolution_label",
    "title_from_path",
    # Subprocess
    "run_command",
    # URLs
    "extract_urls",
    "is_valid_url",
]
