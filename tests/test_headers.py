"""
Tests for cache key, ETag and response headers (headers.py)
"""
import hashlib
from datetime import datetime, timezone

from static_shared import (
    TEN_YEARS_SECONDS,
    add_years,
    build_cache_control,
    build_cache_key,
    build_shared_headers,
    compute_etag,
    format_http_date,
)


class TestCacheKey:
    """Tests for build_cache_key() and compute_etag()."""

    def test_key_joins_version_and_raw_file_list(self):
        assert build_cache_key("v1", "/a.js,/b.js") == "v1:/a.js,/b.js"

    def test_etag_is_sha1_hex_of_key(self):
        expected = hashlib.sha1(b"v1:/a.js,/b.js").hexdigest()

        assert compute_etag("v1:/a.js,/b.js") == expected
        assert len(compute_etag("v1:/a.js")) == 40

    def test_etag_is_deterministic(self):
        key = build_cache_key("v1", "/a.js")

        assert compute_etag(key) == compute_etag(build_cache_key("v1", "/a.js"))

    def test_etag_changes_with_version(self):
        assert compute_etag(build_cache_key("v1", "/a.js")) != compute_etag(
            build_cache_key("v2", "/a.js")
        )

    def test_etag_changes_with_file_order(self):
        assert compute_etag(build_cache_key("v1", "/a.js,/b.js")) != compute_etag(
            build_cache_key("v1", "/b.js,/a.js")
        )


class TestDates:
    """Tests for date helpers."""

    def test_format_http_date_epoch(self):
        epoch = datetime.fromtimestamp(0, tz=timezone.utc)

        assert format_http_date(epoch) == "Thu, 01 Jan 1970 00:00:00 GMT"

    def test_add_years(self):
        dt = datetime(2024, 3, 15, 12, 30, tzinfo=timezone.utc)

        assert add_years(dt, 10) == datetime(2034, 3, 15, 12, 30, tzinfo=timezone.utc)

    def test_add_years_leap_day(self):
        dt = datetime(2024, 2, 29, tzinfo=timezone.utc)

        assert add_years(dt, 10) == datetime(2034, 2, 28, tzinfo=timezone.utc)


class TestBuildSharedHeaders:
    """Tests for build_shared_headers()."""

    def test_cache_control(self):
        assert TEN_YEARS_SECONDS == 315360000
        assert build_cache_control() == (
            "public, max-age=315360000, s-maxage=315360000"
        )

    def test_headers(self):
        now = datetime(2024, 5, 1, 8, 0, 0, tzinfo=timezone.utc)

        headers = build_shared_headers("abc", "text/javascript", now=now)

        assert list(headers) == [
            "Cache-Control",
            "Expires",
            "Last-Modified",
            "ETag",
            "Content-Type",
        ]
        assert headers["Cache-Control"] == build_cache_control()
        assert headers["Expires"] == "Mon, 01 May 2034 08:00:00 GMT"
        assert headers["Last-Modified"] == "Thu, 01 Jan 1970 00:00:00 GMT"
        assert headers["ETag"] == "abc"
        assert headers["Content-Type"] == "text/javascript"

    def test_expires_follows_response_time(self):
        first = build_shared_headers(
            "abc", "text/css", now=datetime(2024, 5, 1, tzinfo=timezone.utc)
        )
        second = build_shared_headers(
            "abc", "text/css", now=datetime(2024, 5, 2, tzinfo=timezone.utc)
        )

        assert first["Expires"] != second["Expires"]
        assert first["ETag"] == second["ETag"]

    def test_custom_max_age_and_years(self):
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)

        headers = build_shared_headers(
            "abc", "text/css", now=now, max_age=60, expires_years=1
        )

        assert headers["Cache-Control"] == "public, max-age=60, s-maxage=60"
        assert headers["Expires"] == "Thu, 01 May 2025 00:00:00 GMT"

    def test_defaults_to_current_time(self):
        headers = build_shared_headers("abc", "text/css")

        assert headers["Expires"].endswith(" GMT")
        assert str(datetime.now(timezone.utc).year + 10) in headers["Expires"]
