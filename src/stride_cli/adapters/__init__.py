"""Adapters module - Repository implementations for different storage backends.

This package contains concrete implementations (adapters) for the repository interface:
- local_project_repository: key/value backed stub with zero latency
- storage: the key/value backends it writes through (memory, file)
"""

from .local_project_repository import LocalProjectRepository
from .storage import FileStorage, KeyValueStorage, MemoryStorage

__all__ = [
    "LocalProjectRepository",
    "KeyValueStorage",
    "MemoryStorage",
    "FileStorage",
]
