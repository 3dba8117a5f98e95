"""Branch queries: inventory, existence checks and classification."""

import logging
from pathlib import Path
from typing import List

from .errors import GitCommandError
from .models import BranchKind
from .shell import run_git

logger = logging.getLogger(__name__)


class BranchManager:
    """Read-only git branch operations (apart from fetch)."""

    def is_git_repository(self, path: Path) -> bool:
        """Check if a directory is inside a git work tree."""
        try:
            run_git(["rev-parse", "--git-dir"], cwd=path)
            return True
        except GitCommandError:
            return False

    def get_toplevel(self, path: Path) -> Path:
        """Get the root directory of the work tree containing path."""
        result = run_git(["rev-parse", "--show-toplevel"], cwd=path)
        return Path(result.stdout.strip())

    def get_main_checkout(self, path: Path) -> Path:
        """Get the root of the main checkout, even from a linked worktree.

        Linked worktrees share the main checkout's ``.git`` directory, which
        ``--git-common-dir`` reports. When that directory is not a ``.git``
        inside a checkout (bare repositories, submodules) the work tree
        containing path is used instead.
        """
        result = run_git(["rev-parse", "--git-common-dir"], cwd=path)
        common_dir = Path(result.stdout.strip())
        if not common_dir.is_absolute():
            common_dir = Path(path) / common_dir
        common_dir = common_dir.resolve()

        if common_dir.name == ".git":
            return common_dir.parent
        return self.get_toplevel(path)

    def fetch(self, repo_path: Path, remote: str = "origin") -> None:
        """Fetch from a remote."""
        logger.info(f"Fetching latest from {remote}...")
        run_git(["fetch", remote], cwd=repo_path)

    def list_remote_branches(self, repo_path: Path, remote: str = "origin") -> List[str]:
        """Fetch a remote and list its branches, sorted.

        The remote's symbolic HEAD is left out. Raises GitCommandError when
        the fetch or the listing fails.
        """
        self.fetch(repo_path, remote)

        prefix = f"refs/remotes/{remote}/"
        result = run_git(
            ["for-each-ref", "--format=%(refname)", prefix.rstrip("/")],
            cwd=repo_path,
        )

        branches = []
        for line in result.stdout.splitlines():
            ref = line.strip()
            if not ref.startswith(prefix):
                continue
            name = ref[len(prefix) :]
            if name == "HEAD":
                continue
            branches.append(name)

        return sorted(branches)

    def local_branch_exists(self, repo_path: Path, branch: str) -> bool:
        """Check if a branch exists locally (refs/heads/)."""
        return self._ref_exists(repo_path, f"refs/heads/{branch}")

    def remote_branch_exists(self, repo_path: Path, branch: str, remote: str = "origin") -> bool:
        """Check if a remote-tracking ref exists (refs/remotes/<remote>/)."""
        return self._ref_exists(repo_path, f"refs/remotes/{remote}/{branch}")

    def classify(self, repo_path: Path, branch: str, remote: str = "origin") -> BranchKind:
        """Decide how a worktree for branch must be created.

        Local branches win over same-named remote ones; anything found in
        neither place is a new branch.
        """
        if self.local_branch_exists(repo_path, branch):
            kind = BranchKind.LOCAL_EXISTING
        elif self.remote_branch_exists(repo_path, branch, remote):
            kind = BranchKind.REMOTE_EXISTING
        else:
            kind = BranchKind.NEW

        logger.debug(f"Branch {branch} classified as {kind.value}")
        return kind

    def _ref_exists(self, repo_path: Path, ref: str) -> bool:
        try:
            result = run_git(["show-ref", "--verify", "--quiet", ref], cwd=repo_path, check=False)
        except GitCommandError:
            return False
        return result.returncode == 0
