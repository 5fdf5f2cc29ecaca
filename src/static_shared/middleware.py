"""
StaticShared middleware - serve several static files as one resource.

A request for ``/.shared.js:v1:/js/foo.js,/js/app.js`` is answered with the
concatenation of ``/js/foo.js`` and ``/js/app.js`` as served by the wrapped
app, cached under the version and file list, with long-lived cache headers.

Example:
    app = StaticSharedMiddleware(
        downstream,
        binds=[
            Binding(prefix="/.shared.js", content_type="text/javascript; charset=utf-8"),
            Binding(prefix="/.shared.css", content_type="text/css; charset=utf-8"),
        ],
        cache=MemorySharedContentStore(),
        verifier=lambda version, prefix: version.startswith("v"),
    )
"""
import inspect
import logging
import time
from typing import Any, Callable, Iterable, Mapping, Optional, Set, Union

from starlette.datastructures import Headers
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from .assembler import ContentAssembler
from .config import StaticSharedConfig, load_bindings, merge_static_shared_config
from .headers import build_cache_key, build_shared_headers, compute_etag
from .matcher import match_request
from .singleflight import Singleflight
from .types import (
    Binding,
    RequestMatch,
    SharedContentStore,
    StaticSharedEvent,
    StaticSharedEventListener,
    StaticSharedEventType,
    VersionVerifier,
)

logger = logging.getLogger(__name__)


async def _resolve(value: Any) -> Any:
    """Await value if it is awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


def describe_error(error: BaseException) -> str:
    """Text sent as the body of a 503 response."""
    return str(error) or type(error).__name__


class StaticSharedMiddleware:
    """
    ASGI middleware serving concatenated resources.

    Requests that match no binding go to the wrapped app untouched.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        binds: Iterable[Union[Binding, Mapping[str, Any]]],
        cache: SharedContentStore,
        verifier: Optional[VersionVerifier] = None,
        config: Optional[StaticSharedConfig] = None,
    ) -> None:
        if cache is None:
            raise ValueError("A cache store is required")

        self.app = app
        self.binds = load_bindings(binds)
        self.cache = cache
        self.verifier = verifier
        self.config = merge_static_shared_config(config)
        self.assembler = ContentAssembler(app, concurrent=self.config.concurrent_fetch)
        self._singleflight = Singleflight() if self.config.single_flight else None
        self._listeners: Set[StaticSharedEventListener] = set()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        matched = match_request(scope["path"], self.binds)
        if matched is None:
            await self.app(scope, receive, send)
            return

        response = await self.build_response(scope, matched)
        await response(scope, receive, send)

    async def build_response(self, scope: Scope, matched: RequestMatch) -> Response:
        """Build the response for a matched request."""
        binding = matched.binding
        key = build_cache_key(matched.version, matched.file_list)
        self._emit(StaticSharedEventType.MATCH, binding, key)

        try:
            verified = await self.verify(matched)
        except Exception as error:
            # A failing verifier rejects; the error text is not sent to the client
            logger.warning(
                f"Verifier failed for {matched.version!r} on {binding.prefix}: {error!r}"
            )
            self._emit(
                StaticSharedEventType.REJECT,
                binding,
                key,
                {"error": describe_error(error)},
            )
            return Response(status_code=400)

        if not verified:
            logger.debug(f"Rejected version {matched.version!r} for {binding.prefix}")
            self._emit(StaticSharedEventType.REJECT, binding, key)
            return Response(status_code=400)

        etag = compute_etag(key)

        if Headers(scope=scope).get("if-none-match", "") == etag:
            self._emit(StaticSharedEventType.NOT_MODIFIED, binding, key)
            return Response(status_code=304)

        try:
            if self._singleflight is not None:
                result = await self._singleflight.do(
                    key, lambda: self.load_content(scope, matched, key)
                )
                if result.shared:
                    self._emit(StaticSharedEventType.SINGLEFLIGHT_JOIN, binding, key)
                content = result.value
            else:
                content = await self.load_content(scope, matched, key)
        except Exception as error:
            logger.warning(f"Failed to build {binding.prefix} {key}: {error!r}")
            self._emit(
                StaticSharedEventType.BUILD_ERROR,
                binding,
                key,
                {"error": describe_error(error)},
            )
            return Response(
                content=describe_error(error),
                status_code=503,
                headers={"Retry-After": str(self.config.retry_after_seconds)},
            )

        return Response(
            content=content,
            status_code=200,
            headers=build_shared_headers(
                etag,
                binding.content_type,
                max_age=self.config.max_age_seconds,
                expires_years=self.config.expires_years,
            ),
        )

    async def verify(self, matched: RequestMatch) -> bool:
        """Run the version verifier; no verifier accepts everything."""
        if self.verifier is None:
            return True
        return bool(
            await _resolve(self.verifier(matched.version, matched.binding.prefix))
        )

    async def load_content(self, scope: Scope, matched: RequestMatch, key: str) -> bytes:
        """Read content from the cache, building and storing it on a miss."""
        binding = matched.binding

        content = await _resolve(self.cache.get(key))
        if content is not None:
            self._emit(StaticSharedEventType.CACHE_HIT, binding, key)
            return content

        self._emit(StaticSharedEventType.CACHE_MISS, binding, key)
        content = await self.assembler.assemble(scope, matched.files)

        if binding.filter is not None:
            content = await _resolve(binding.filter(content))
            if isinstance(content, str):
                content = content.encode("utf-8")

        await _resolve(self.cache.set(key, content))
        self._emit(StaticSharedEventType.STORE, binding, key, {"size": len(content)})
        return content

    def on(self, listener: StaticSharedEventListener) -> Callable[[], None]:
        """Add event listener."""
        self._listeners.add(listener)
        return lambda: self._listeners.discard(listener)

    def off(self, listener: StaticSharedEventListener) -> None:
        """Remove event listener."""
        self._listeners.discard(listener)

    def _emit(
        self,
        event_type: StaticSharedEventType,
        binding: Binding,
        key: str,
        metadata: Optional[dict] = None,
    ) -> None:
        """Emit an event to all listeners."""
        if not self._listeners:
            return

        event = StaticSharedEvent(
            type=event_type,
            prefix=binding.prefix,
            key=key,
            timestamp=time.time(),
            metadata=metadata,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                pass  # Ignore listener errors
