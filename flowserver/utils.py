"""Utility helper functions for the Flow server."""

import json
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple, TypeVar

from common.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from common.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def load_version_document(path: str) -> Dict[str, Any]:
    """
    Read the version document served by the API.

    Returns:
        Parsed JSON object, or {"version": "unknown"} if it cannot be read
    """
    try:
        document = json.loads(Path(path).read_text())
    except (OSError, ValueError) as e:
        logger.warning(f"Cannot read version document {path}: {e}")
        return {"version": "unknown"}
    if not isinstance(document, dict):
        return {"version": "unknown"}
    return document


def generate_uuid() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def current_unix_time() -> int:
    """
    Get current time as whole Unix seconds.
    """
    return int(time.time())


def normalize_page(page: int, limit: int) -> Tuple[int, int]:
    """
    Clamp page/limit query values and convert them to (limit, offset).

    Args:
        page: 1-based page number; values below 1 become DEFAULT_PAGE
        limit: Page size; values below 1 become DEFAULT_PAGE_LIMIT

    Returns:
        Tuple of (limit, offset)
    """
    if page < 1:
        page = DEFAULT_PAGE
    if limit < 1:
        limit = DEFAULT_PAGE_LIMIT
    return limit, (page - 1) * limit


def paginate(items: Sequence[T], limit: int, offset: int) -> List[T]:
    """
    Slice one page out of items.

    offset past the end yields an empty page; limit <= 0 means no upper bound.
    """
    total = len(items)
    start = min(max(offset, 0), total)
    end = total if limit <= 0 else min(start + limit, total)
    return list(items[start:end])
