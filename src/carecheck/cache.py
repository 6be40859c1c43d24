"""
CareCheck Context Cache

Holds reference text shared by advisory calls (framework guidance, criterion
descriptions) so it is built once and passed around by reference.

Usage:
    cache = ContextCache(loader=build_reference_text)
    text = cache.get()      # loads on first use
    cache.invalidate()      # next get() reloads
"""
from __future__ import annotations

import threading
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar("T")


class ContextCache(Generic[T]):
    """Thread-safe single-value cache with an optional loader."""

    def __init__(self, loader: Optional[Callable[[], T]] = None):
        self._loader = loader
        self._value: Optional[T] = None
        self._loaded = False
        self._lock = threading.Lock()

    def init(self, value: T) -> None:
        """Set the cached value directly."""
        with self._lock:
            self._value = value
            self._loaded = True

    def get(self) -> Optional[T]:
        """
        Cached value, loading it on first access.

        Returns None when nothing was set and there is no loader.
        """
        with self._lock:
            if not self._loaded and self._loader is not None:
                self._value = self._loader()
                self._loaded = True
            return self._value

    def invalidate(self) -> None:
        with self._lock:
            self._value = None
            self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded
