"""Worktree creation.

Creating a worktree happens in two phases:

1. ``git worktree add``, with the branch source chosen by the branch's
   classification:

   ============== =================================================
   local          attach the existing branch
   remote         new branch from ``<remote>/<branch>``
   new            new branch from ``<remote>/<default_branch>``
   ============== =================================================

   New branches start from the remote default branch rather than the local
   one, so creation works while the default branch is checked out in
   another worktree.

2. Tracking setup, run inside the new worktree. Remote branches get an
   upstream; new branches get ``branch.<name>.remote``/``merge`` so that the
   first plain ``git push`` creates ``<remote>/<name>``. Failures in this
   phase are logged and do not undo the worktree.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .branch_manager import BranchManager
from .errors import (
    GitCommandError,
    PathAlreadyExistsError,
    WorktreeCreationError,
)
from .models import BranchKind, WorktreeDescriptor, safe_branch_name
from .shell import run_git

logger = logging.getLogger(__name__)


def resolve_worktree_path(
    repo_root: Path, branch: str, prefix: str = "", location: str = ""
) -> Path:
    """Work out where the worktree for branch goes.

    Without a location template the worktree is a sibling of the repository
    named ``<prefix>-<safe branch>``. Relative templates are resolved against
    the repository root.
    """
    repo_root = Path(repo_root)
    safe_name = safe_branch_name(branch)
    prefix = prefix or repo_root.name

    if location:
        expanded = (
            location.replace("{prefix}", prefix)
            .replace("{branch}", safe_name)
            .replace("{original-branch}", branch)
        )
        path = Path(expanded).expanduser()
    else:
        path = Path("..") / f"{prefix}-{safe_name}"

    if not path.is_absolute():
        path = repo_root / path
    return Path(os.path.normpath(path))


class WorktreeManager:
    """Creates git worktrees for a repository."""

    def __init__(self, repo_root: Path, branch_manager: Optional[BranchManager] = None):
        """Initialize worktree manager."""
        self.repo_root = Path(repo_root)
        self.branch_manager = branch_manager or BranchManager()

    def build_descriptor(
        self, branch: str, remote: str = "origin", prefix: str = "", location: str = ""
    ) -> WorktreeDescriptor:
        """Resolve path and classification for branch."""
        path = resolve_worktree_path(self.repo_root, branch, prefix, location)
        kind = self.branch_manager.classify(self.repo_root, branch, remote)
        return WorktreeDescriptor.for_branch(branch, path, kind)

    def check_path_available(self, path: Path) -> None:
        """Raise PathAlreadyExistsError if path is already on disk."""
        if Path(path).exists():
            raise PathAlreadyExistsError(str(path))

    def create_worktree(
        self,
        descriptor: WorktreeDescriptor,
        remote: str = "origin",
        default_branch: str = "main",
        push_new_branches: bool = False,
    ) -> WorktreeDescriptor:
        """Create the worktree described by descriptor and set up tracking."""
        self.check_path_available(descriptor.path)

        strategies: Dict[BranchKind, Callable[[], List[str]]] = {
            BranchKind.LOCAL_EXISTING: lambda: self._attach_local(descriptor),
            BranchKind.REMOTE_EXISTING: lambda: self._branch_from_remote(descriptor, remote),
            BranchKind.NEW: lambda: self._branch_from_default(descriptor, remote, default_branch),
        }
        if descriptor.kind not in strategies:
            raise ValueError(f"Unhandled branch kind: {descriptor.kind}")

        args = strategies[descriptor.kind]()
        try:
            run_git(args, cwd=self.repo_root)
        except GitCommandError as e:
            logger.error(f"Failed to create worktree: {e.stderr}")
            raise WorktreeCreationError(
                e.command,
                e.returncode,
                e.stderr,
                message=f"Failed to create worktree for {descriptor.branch}",
            ) from e

        logger.info(f"Created worktree for {descriptor.branch} at {descriptor.path}")

        self.setup_tracking(descriptor, remote, push_new_branches)
        return descriptor

    def setup_tracking(
        self, descriptor: WorktreeDescriptor, remote: str = "origin", push_new_branches: bool = False
    ) -> None:
        """Configure upstream/push settings inside the new worktree."""
        branch = descriptor.branch
        cwd = descriptor.path

        try:
            if descriptor.kind is BranchKind.REMOTE_EXISTING:
                logger.info(f"Setting upstream for {branch} to track {remote}/{branch}")
                run_git(["branch", f"--set-upstream-to={remote}/{branch}", branch], cwd=cwd)
            elif descriptor.kind is BranchKind.NEW:
                logger.info(
                    f"New branch {branch} created locally. "
                    f"Configuring to push to {remote}/{branch}"
                )
                run_git(["config", f"branch.{branch}.remote", remote], cwd=cwd)
                run_git(["config", f"branch.{branch}.merge", f"refs/heads/{branch}"], cwd=cwd)
                run_git(["config", "push.default", "simple"], cwd=cwd)
        except GitCommandError as e:
            logger.warning(f"Warning: Could not set upstream tracking: {e}")
            return

        if descriptor.kind is BranchKind.NEW and push_new_branches:
            self.push_new_branch(descriptor, remote)

    def push_new_branch(self, descriptor: WorktreeDescriptor, remote: str = "origin") -> bool:
        """Push a new branch upstream. Failure is a warning only."""
        logger.info(f"Pushing new branch to {remote}...")
        try:
            run_git(
                ["push", "-u", remote, descriptor.branch],
                cwd=descriptor.path,
                env={"GIT_TERMINAL_PROMPT": "0"},
            )
        except GitCommandError as e:
            logger.warning(f"Warning: Could not push new branch: {e}")
            return False

        logger.info(f"Successfully pushed {descriptor.branch} to {remote}")
        return True

    def _attach_local(self, descriptor: WorktreeDescriptor) -> List[str]:
        logger.info(f"Creating worktree with existing local branch: {descriptor.branch}")
        return ["worktree", "add", str(descriptor.path), descriptor.branch]

    def _branch_from_remote(self, descriptor: WorktreeDescriptor, remote: str) -> List[str]:
        logger.info(f"Creating worktree from remote branch: {descriptor.branch}")
        return [
            "worktree",
            "add",
            "-b",
            descriptor.branch,
            str(descriptor.path),
            f"{remote}/{descriptor.branch}",
        ]

    def _branch_from_default(
        self, descriptor: WorktreeDescriptor, remote: str, default_branch: str
    ) -> List[str]:
        logger.info(f"Creating worktree with new branch: {descriptor.branch}")
        return [
            "worktree",
            "add",
            "-b",
            descriptor.branch,
            str(descriptor.path),
            f"{remote}/{default_branch}",
        ]
