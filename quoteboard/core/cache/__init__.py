from quoteboard.core.cache.fallback_cache import CacheEntry, FallbackCache, is_fresh
from quoteboard.core.cache.keys import build_key, symbol_key
from quoteboard.core.cache.registry import CacheRegistry

__all__ = ["CacheEntry", "CacheRegistry", "FallbackCache", "build_key", "is_fresh", "symbol_key"]
