"""STRIDE domain models.

This package contains the Pydantic models for the Project aggregate, the
task board and the application configuration.
"""

from .config_models import AppConfig, StorageConfig, SyncConfig, UserConfig
from .core import (
    DEFAULT_MEMBER_COLOR,
    DayColumn,
    InviteStatus,
    Priority,
    Project,
    ProjectCreate,
    ProjectInvite,
    ProjectMember,
    ProjectMode,
    ProjectNote,
    ProjectRole,
    ProjectStatus,
    ProjectTag,
    ProjectUpdate,
    ProjectViewMode,
    Tag,
    Task,
)
from .exceptions import NotFoundError, StorageError, StorageQuotaError, StrideError

__all__ = [
    # Project aggregate
    "Project",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectMember",
    "ProjectInvite",
    "ProjectNote",
    "ProjectTag",
    "ProjectRole",
    "ProjectMode",
    "ProjectStatus",
    "ProjectViewMode",
    "InviteStatus",
    "DEFAULT_MEMBER_COLOR",
    # Task board
    "Task",
    "Tag",
    "DayColumn",
    "Priority",
    # Config
    "AppConfig",
    "StorageConfig",
    "SyncConfig",
    "UserConfig",
    # Errors
    "StrideError",
    "NotFoundError",
    "StorageError",
    "StorageQuotaError",
]
