"""
Configuration for the static_shared middleware.
"""
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from .headers import TEN_YEARS_SECONDS
from .types import Binding


@dataclass
class StaticSharedConfig:
    """Middleware configuration."""

    max_age_seconds: Optional[int] = None
    """max-age and s-maxage of successful responses."""

    expires_years: Optional[int] = None
    """Calendar years added to the response time for Expires."""

    retry_after_seconds: Optional[int] = None
    """Retry-After value of 503 responses."""

    concurrent_fetch: Optional[bool] = None
    """Fetch sub-resources concurrently instead of one after another."""

    single_flight: Optional[bool] = None
    """Share one build between concurrent misses on the same key."""


DEFAULT_STATIC_SHARED_CONFIG = StaticSharedConfig(
    max_age_seconds=TEN_YEARS_SECONDS,
    expires_years=10,
    retry_after_seconds=10,
    concurrent_fetch=False,
    single_flight=False,
)


def merge_static_shared_config(
    config: Optional[StaticSharedConfig] = None,
) -> StaticSharedConfig:
    """Merge user config with defaults."""
    defaults = DEFAULT_STATIC_SHARED_CONFIG
    if config is None:
        return StaticSharedConfig(
            max_age_seconds=defaults.max_age_seconds,
            expires_years=defaults.expires_years,
            retry_after_seconds=defaults.retry_after_seconds,
            concurrent_fetch=defaults.concurrent_fetch,
            single_flight=defaults.single_flight,
        )

    return StaticSharedConfig(
        max_age_seconds=config.max_age_seconds
        if config.max_age_seconds is not None
        else defaults.max_age_seconds,
        expires_years=config.expires_years
        if config.expires_years is not None
        else defaults.expires_years,
        retry_after_seconds=config.retry_after_seconds
        if config.retry_after_seconds is not None
        else defaults.retry_after_seconds,
        concurrent_fetch=config.concurrent_fetch
        if config.concurrent_fetch is not None
        else defaults.concurrent_fetch,
        single_flight=config.single_flight
        if config.single_flight is not None
        else defaults.single_flight,
    )


def load_bindings(
    items: Iterable[Union[Binding, Mapping[str, Any]]],
) -> Tuple[Binding, ...]:
    """Normalize configured bindings, preserving their order."""
    binds = tuple(
        item if isinstance(item, Binding) else Binding.from_dict(item)
        for item in items
    )
    if not binds:
        raise ValueError("At least one binding is required")
    return binds
