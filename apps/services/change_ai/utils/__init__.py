"""
Service Utility Modules

Provides HTML normalization, JSON-LD scanning, and timestamp helpers.
"""

from apps.services.change_ai.utils.html_parser import (
    clean_html,
    extract_text_content,
    extract_json_ld,
    iter_json_ld_nodes,
    TRUNCATION_MARKER,
)
from apps.services.change_ai.utils.requests import require_fields
from apps.services.change_ai.utils.timestamps import utc_timestamp

__all__ = [
    "require_fields",
    "clean_html",
    "extract_text_content",
    "extract_json_ld",
    "iter_json_ld_nodes",
    "TRUNCATION_MARKER",
    "utc_timestamp",
]
