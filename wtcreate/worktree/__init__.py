"""Worktree creation core for wtcreate."""

from .branch_manager import BranchManager
from .config import WtConfig, get_wt_config
from .env_files import find_env_files, migrate_env_files
from .errors import (
    EmptyInventoryError,
    GitCommandError,
    NotAGitRepositoryError,
    PathAlreadyExistsError,
    WorktreeCreationError,
    WtCreateError,
)
from .models import BranchKind, WorktreeDescriptor, safe_branch_name
from .worktree_manager import WorktreeManager, resolve_worktree_path

__all__ = [
    "BranchKind",
    "WorktreeDescriptor",
    "safe_branch_name",
    "WtConfig",
    "get_wt_config",
    "BranchManager",
    "WorktreeManager",
    "resolve_worktree_path",
    "find_env_files",
    "migrate_env_files",
    "WtCreateError",
    "NotAGitRepositoryError",
    "EmptyInventoryError",
    "PathAlreadyExistsError",
    "GitCommandError",
    "WorktreeCreationError",
]
