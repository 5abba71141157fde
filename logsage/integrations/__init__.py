"""Log store backends and the shared result normalizer."""

from .base import LogBackend
from .registry import BACKENDS, get_backend, get_backend_class

__all__ = ["BACKENDS", "LogBackend", "get_backend", "get_backend_class"]
