"""Example usage of wtcreate library functions."""

from pathlib import Path

from wtcreate.worktree import resolve_worktree_path, safe_branch_name
from wtcreate.worktree.installer import detect_package_manager

# Branch names are flattened for directory names
print(f"Safe name for 'feature/login': {safe_branch_name('feature/login')}")  # feature-login

# Default location: sibling of the repository, prefixed with its name
print(resolve_worktree_path(Path("/work/myapp"), "feature/login"))  # /work/myapp-feature-login

# Custom location template
print(
    resolve_worktree_path(
        Path("/work/myapp"), "feature/login", prefix="app", location="../trees/{prefix}/{branch}"
    )
)  # /work/trees/app/feature-login

# Package manager detection by lockfile (npm when none is found)
print(f"Package manager here: {detect_package_manager(Path.cwd())}")
