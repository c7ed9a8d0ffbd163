"""Adapters: how planned generator actions reach a JVM (or a mock)."""

from restgen.adapters.base import Adapter, ExecutionContext
from restgen.adapters.mock import MockAdapter
from restgen.adapters.registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
]
