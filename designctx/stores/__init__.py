"""Cache stores for extracted contexts."""

from .base import CacheStore
from .context_cache import ContextCache

__all__ = ["CacheStore", "ContextCache"]
