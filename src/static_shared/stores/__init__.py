"""
Store implementations for static_shared.
"""
from .memory import (
    MemorySharedContentStore,
    MemorySingleflightStore,
    MemoryStoreStats,
    create_memory_store,
)

__all__ = [
    "MemorySharedContentStore",
    "MemorySingleflightStore",
    "MemoryStoreStats",
    "create_memory_store",
]
