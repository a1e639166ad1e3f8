"""Repository interfaces for STRIDE CLI.

This package contains the abstract base class that defines the contract for
Project aggregate persistence. This is the "Port" in the Hexagonal Architecture.

Implementations (Adapters) are in:
- stride_cli.adapters.local_project_repository (local storage stub)
"""

from .repository import ProjectRepository

__all__ = [
    "ProjectRepository",
]
