"""Data models for worktree creation."""

from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Dict


def safe_branch_name(branch: str) -> str:
    """Flatten a branch name for use as a directory name."""
    return branch.replace("/", "-")


class BranchKind(Enum):
    """Where a requested branch already exists, checked local first."""

    LOCAL_EXISTING = "local"
    REMOTE_EXISTING = "remote"
    NEW = "new"


@dataclass(frozen=True)
class WorktreeDescriptor:
    """Everything needed to create one worktree."""

    branch: str  # Original name, used for git refs
    safe_name: str  # Flattened name, used for paths
    path: Path
    kind: BranchKind

    @classmethod
    def for_branch(cls, branch: str, path: Path, kind: BranchKind) -> "WorktreeDescriptor":
        """Create a descriptor, deriving the safe name from the branch."""
        return cls(branch=branch, safe_name=safe_branch_name(branch), path=Path(path), kind=kind)

    def to_dict(self) -> Dict:
        """Convert to a plain dictionary (for logging and debug output)."""
        data = asdict(self)
        data["path"] = str(self.path)
        data["kind"] = self.kind.value
        return data
