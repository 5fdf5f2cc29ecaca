"""
Path matching for concatenated resources.

A shared resource path looks like ``<prefix>:<version>:<file>,<file>,...``.
Some browsers always revalidate URLs carrying a query string, so the
parameters live in the path, separated by ``:``.
"""
import re
from functools import lru_cache
from typing import Iterable, Optional, Pattern, Sequence

from .types import Binding, RequestMatch

DELIMITER = ":"
MAX_VERSION_LENGTH = 32

_VERSION_PATTERN = re.compile(r"[^:\s]{1,%d}" % MAX_VERSION_LENGTH)


@lru_cache(maxsize=128)
def compile_binding_pattern(prefix: str) -> Pattern[str]:
    """Compile the match pattern for a binding prefix."""
    return re.compile(
        r"%s:([^:\s]{1,%d}):(.+)" % (re.escape(prefix), MAX_VERSION_LENGTH)
    )


def match_binding(path: str, binding: Binding) -> Optional[RequestMatch]:
    """Match a path against a single binding."""
    if not path.startswith(binding.prefix):
        return None

    matched = compile_binding_pattern(binding.prefix).fullmatch(path)
    if matched is None:
        return None

    return RequestMatch(
        binding=binding,
        version=matched.group(1),
        file_list=matched.group(2),
    )


def match_request(path: str, binds: Iterable[Binding]) -> Optional[RequestMatch]:
    """
    Find the first binding matching a request path.

    Bindings are tried in configured order; a path that fails the grammar
    of one binding is tried against the next.
    """
    for binding in binds:
        matched = match_binding(path, binding)
        if matched is not None:
            return matched
    return None


def is_valid_version(version: str) -> bool:
    """Check whether a version token fits the path grammar."""
    return _VERSION_PATTERN.fullmatch(version) is not None


def build_shared_path(prefix: str, version: str, files: Sequence[str]) -> str:
    """Build the request path for a concatenated resource."""
    if not is_valid_version(version):
        raise ValueError(f"Invalid version token: {version!r}")
    if not files:
        raise ValueError("At least one file is required")

    for name in files:
        if not name or "," in name or DELIMITER in name or "\n" in name:
            raise ValueError(f"Invalid file identifier: {name!r}")

    return f"{prefix}{DELIMITER}{version}{DELIMITER}{','.join(files)}"
