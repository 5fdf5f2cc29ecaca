"""
Cache key, ETag and long-lived cache headers for concatenated resources.
"""
import hashlib
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Dict, Optional

from .matcher import DELIMITER

TEN_YEARS_SECONDS = 315360000

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def build_cache_key(version: str, file_list: str) -> str:
    """Build the cache key from the version and the raw file list."""
    return f"{version}{DELIMITER}{file_list}"


def compute_etag(key: str) -> str:
    """SHA-1 hex digest of the cache key."""
    return hashlib.sha1(key.encode("utf-8")).hexdigest()


def build_cache_control(max_age: int = TEN_YEARS_SECONDS) -> str:
    """Build the Cache-Control value for shared resources."""
    return f"public, max-age={max_age}, s-maxage={max_age}"


def format_http_date(dt: datetime) -> str:
    """Format a datetime as an RFC 7231 HTTP date."""
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def add_years(dt: datetime, years: int) -> datetime:
    """Add calendar years, clamping 29 February to 28 February."""
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        return dt.replace(year=dt.year + years, day=28)


def build_shared_headers(
    etag: str,
    content_type: str,
    now: Optional[datetime] = None,
    max_age: int = TEN_YEARS_SECONDS,
    expires_years: int = 10,
) -> Dict[str, str]:
    """
    Build response headers for a concatenated resource.

    Both Last-Modified and ETag are sent; Last-Modified is pinned to the
    epoch so the ETag is the only meaningful validator. Expires is relative
    to the time the response is built.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return {
        "Cache-Control": build_cache_control(max_age),
        "Expires": format_http_date(add_years(now, expires_years)),
        "Last-Modified": format_http_date(EPOCH),
        "ETag": etag,
        "Content-Type": content_type,
    }
