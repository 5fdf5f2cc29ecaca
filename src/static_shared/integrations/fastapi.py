"""
FastAPI integration for static_shared.
"""
import logging
from typing import Any, Iterable, Mapping, Optional, Union

from fastapi import FastAPI

from ..config import StaticSharedConfig, load_bindings
from ..middleware import StaticSharedMiddleware
from ..settings import get_settings, load_config_from_settings
from ..stores.memory import MemorySharedContentStore
from ..types import Binding, SharedContentStore, VersionVerifier

logger = logging.getLogger(__name__)


def add_static_shared(
    app: FastAPI,
    *,
    binds: Iterable[Union[Binding, Mapping[str, Any]]],
    cache: Optional[SharedContentStore] = None,
    verifier: Optional[VersionVerifier] = None,
    config: Optional[StaticSharedConfig] = None,
) -> SharedContentStore:
    """
    Register StaticSharedMiddleware on a FastAPI application.

    Sub-resources are served by the app's own routes and mounts.

    Args:
        app: The FastAPI (or Starlette) application.
        binds: Bindings or binding mappings, in matching order.
        cache: Content store. A MemorySharedContentStore is created if omitted.
        verifier: Optional version verifier called as verifier(version, prefix).
        config: Optional middleware configuration. Read from STATIC_SHARED_*
            environment settings if omitted.

    Returns:
        The content store used by the middleware.

    Example:
        app = FastAPI()
        app.mount("/js", StaticFiles(directory="static/js"))
        add_static_shared(
            app,
            binds=[{"prefix": "/.shared.js", "content_type": "text/javascript"}],
        )
    """
    binds = load_bindings(binds)
    settings = get_settings()
    if config is None:
        config = load_config_from_settings(settings)
    if cache is None:
        cache = MemorySharedContentStore(
            max_size=settings.CACHE_MAX_SIZE,
            max_entries=settings.CACHE_MAX_ENTRIES,
        )

    app.add_middleware(
        StaticSharedMiddleware,
        binds=binds,
        cache=cache,
        verifier=verifier,
        config=config,
    )
    logger.info(
        f"Registered static shared resources: {', '.join(b.prefix for b in binds)}"
    )
    return cache
