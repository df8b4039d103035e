"""Contract for key/value stores that hold serialized contexts."""

from __future__ import annotations

from typing import Any, Awaitable, Optional, Protocol, Union, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Minimal TTL key/value store; methods may be sync or return awaitables."""

    def connect(self) -> Union[None, Awaitable[Any]]:
        ...

    def disconnect(self) -> Union[None, Awaitable[Any]]:
        ...

    def get(self, key: str) -> Union[Optional[str], Awaitable[Optional[str]]]:
        ...

    def setex(self, key: str, ttl_seconds: int, value: str) -> Union[bool, Awaitable[Any]]:
        ...


__all__ = ["CacheStore"]
