"""In-memory caches shared across planner services."""

from .generation_cache import GenerationCache, generation_cache

__all__ = ["generation_cache", "GenerationCache"]
