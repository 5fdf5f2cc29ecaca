"""
Concatenated static resources for ASGI apps.

Serves ``<prefix>:<version>:<file>,<file>,...`` as a single long-lived,
ETag-validated response built from the wrapped app's own responses.
"""
from .types import (
    Binding,
    ContentFilter,
    RequestMatch,
    SharedContentStore,
    StaticSharedEvent,
    StaticSharedEventListener,
    StaticSharedEventType,
    VersionVerifier,
)
from .matcher import (
    DELIMITER,
    MAX_VERSION_LENGTH,
    build_shared_path,
    compile_binding_pattern,
    is_valid_version,
    match_binding,
    match_request,
)
from .headers import (
    TEN_YEARS_SECONDS,
    add_years,
    build_cache_control,
    build_cache_key,
    build_shared_headers,
    compute_etag,
    format_http_date,
)
from .config import (
    StaticSharedConfig,
    DEFAULT_STATIC_SHARED_CONFIG,
    merge_static_shared_config,
    load_bindings,
)
from .assembler import ContentAssembler, build_sub_scope
from .singleflight import Singleflight, SingleflightResult
from .middleware import StaticSharedMiddleware, describe_error
from .stores import (
    MemorySharedContentStore,
    MemorySingleflightStore,
    MemoryStoreStats,
    create_memory_store,
)


__all__ = [
    # Types
    "Binding",
    "ContentFilter",
    "RequestMatch",
    "SharedContentStore",
    "StaticSharedEvent",
    "StaticSharedEventListener",
    "StaticSharedEventType",
    "VersionVerifier",
    # Matching
    "DELIMITER",
    "MAX_VERSION_LENGTH",
    "build_shared_path",
    "compile_binding_pattern",
    "is_valid_version",
    "match_binding",
    "match_request",
    # Headers
    "TEN_YEARS_SECONDS",
    "add_years",
    "build_cache_control",
    "build_cache_key",
    "build_shared_headers",
    "compute_etag",
    "format_http_date",
    # Config
    "StaticSharedConfig",
    "DEFAULT_STATIC_SHARED_CONFIG",
    "merge_static_shared_config",
    "load_bindings",
    # Assembly
    "ContentAssembler",
    "build_sub_scope",
    "Singleflight",
    "SingleflightResult",
    # Middleware
    "StaticSharedMiddleware",
    "describe_error",
    # Stores
    "MemorySharedContentStore",
    "MemorySingleflightStore",
    "MemoryStoreStats",
    "create_memory_store",
]

__version__ = "1.0.0"
