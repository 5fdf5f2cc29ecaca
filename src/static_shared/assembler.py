"""
Concatenation of sub-resources served by the downstream ASGI app.
"""
import asyncio
import logging
from typing import List, Sequence

from starlette.types import ASGIApp, Message, Scope

logger = logging.getLogger(__name__)

# Extensions that would let a downstream file response bypass http.response.body
_BODY_BYPASS_EXTENSIONS = ("http.response.pathsend", "http.response.zerocopy")


def build_sub_scope(scope: Scope, path: str) -> Scope:
    """Copy the inbound scope with its path replaced."""
    sub_scope = dict(scope)
    sub_scope["path"] = path
    sub_scope["raw_path"] = path.encode("utf-8")

    # Built content is cached, so it must never come from a bodiless HEAD
    if scope.get("method") == "HEAD":
        sub_scope["method"] = "GET"

    extensions = scope.get("extensions")
    if extensions:
        sub_scope["extensions"] = {
            name: value
            for name, value in extensions.items()
            if name not in _BODY_BYPASS_EXTENSIONS
        }

    return sub_scope


class SubResponse:
    """Collects the response of one sub-request."""

    def __init__(self) -> None:
        self.status_code: int = 0
        self.chunks: List[bytes] = []

    async def send(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status_code = message["status"]
        elif message["type"] == "http.response.body":
            body = message.get("body", b"")
            if body:
                self.chunks.append(body)

    @property
    def body(self) -> bytes:
        return b"".join(self.chunks)


class ContentAssembler:
    """
    Builds a concatenated resource by calling the downstream app once per file.

    Only sub-responses with status 200 contribute; anything else is skipped
    and yields an empty segment. Exceptions raised by the downstream app
    propagate to the caller.
    """

    def __init__(self, app: ASGIApp, concurrent: bool = False) -> None:
        self.app = app
        self.concurrent = concurrent

    async def fetch(self, scope: Scope, path: str) -> bytes:
        """Fetch one sub-resource, returning b"" unless it answers 200."""
        request_sent = False

        async def receive() -> Message:
            nonlocal request_sent
            if not request_sent:
                request_sent = True
                return {"type": "http.request", "body": b"", "more_body": False}
            return {"type": "http.disconnect"}

        response = SubResponse()
        await self.app(build_sub_scope(scope, path), receive, response.send)

        if response.status_code != 200:
            logger.debug(f"Skipping {path}: downstream answered {response.status_code}")
            return b""

        return response.body

    async def assemble(self, scope: Scope, files: Sequence[str]) -> bytes:
        """Concatenate the files in the given order."""
        if self.concurrent:
            tasks = [asyncio.ensure_future(self.fetch(scope, path)) for path in files]
            try:
                parts = await asyncio.gather(*tasks)
            except BaseException:
                # gather leaves the remaining sub-requests running on failure
                for task in tasks:
                    task.cancel()
                raise
        else:
            parts = [await self.fetch(scope, path) for path in files]

        return b"".join(parts)
