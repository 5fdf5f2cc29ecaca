"""
Types for static_shared package.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union


ContentFilter = Callable[[bytes], Union[bytes, str, Awaitable[Union[bytes, str]]]]
"""Post-processing applied to the concatenated content before it is cached."""

VersionVerifier = Callable[[str, str], Union[bool, Awaitable[bool]]]
"""Predicate called as verifier(version, prefix)."""


@dataclass(frozen=True)
class Binding:
    """A URL prefix served as a concatenated resource."""

    prefix: str
    """Literal path prefix, e.g. "/.shared.js"."""

    content_type: str
    """Content-Type of the concatenated response."""

    filter: Optional[ContentFilter] = None
    """Optional transform applied before caching."""

    def __post_init__(self) -> None:
        if not isinstance(self.prefix, str) or not self.prefix.startswith("/"):
            raise ValueError(f"Binding prefix must start with '/': {self.prefix!r}")
        if not self.content_type:
            raise ValueError(f"Binding {self.prefix!r} requires a content_type")
        if self.filter is not None and not callable(self.filter):
            raise ValueError(f"Binding {self.prefix!r} filter must be callable")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Binding":
        """Build a binding from a configuration mapping."""
        content_type = data.get("content_type") or data.get("contentType")
        return cls(
            prefix=data.get("prefix", ""),
            content_type=content_type or "",
            filter=data.get("filter"),
        )


@dataclass(frozen=True)
class RequestMatch:
    """Result of matching a request path against the bindings."""

    binding: Binding
    version: str
    file_list: str

    @property
    def files(self) -> List[str]:
        """Sub-resource paths in concatenation order."""
        return [name for name in self.file_list.split(",") if name]


class SharedContentStore(ABC):
    """Key/value store for concatenated content."""

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """Get content by cache key, None when absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        """Store content under a cache key."""
        pass


class StaticSharedEventType(str, Enum):
    """Event types emitted by the middleware."""

    MATCH = "match"
    REJECT = "reject"
    NOT_MODIFIED = "not_modified"
    CACHE_HIT = "cache:hit"
    CACHE_MISS = "cache:miss"
    STORE = "cache:store"
    BUILD_ERROR = "build:error"
    SINGLEFLIGHT_JOIN = "singleflight:join"


@dataclass
class StaticSharedEvent:
    """Middleware event."""

    type: StaticSharedEventType
    prefix: str
    key: str
    timestamp: float
    metadata: Optional[Dict[str, Any]] = None


StaticSharedEventListener = Callable[[StaticSharedEvent], None]
"""Event listener type."""
