"""Exceptions raised while creating a worktree."""

from typing import Optional, Sequence


class WtCreateError(RuntimeError):
    """Base exception for all fatal wtcreate errors."""


class NotAGitRepositoryError(WtCreateError):
    """Raised when the working directory is not inside a git repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not in a git repository: {path}")


class EmptyInventoryError(WtCreateError):
    """Raised when interactive selection has no remote branches to offer."""

    def __init__(self, remote: str):
        self.remote = remote
        super().__init__(f"No remote branches found on {remote}")


class PathAlreadyExistsError(WtCreateError):
    """Raised when the target worktree path is already on disk."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Directory {path} already exists")


class ConfigError(WtCreateError):
    """Raised for configuration values that cannot be used."""


class GitCommandError(WtCreateError):
    """Raised when a git command exits with a non-zero status."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: int = 1,
        stderr: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()

        error_msg = message or f"Command '{' '.join(self.command)}' failed"
        if self.stderr:
            error_msg += f": {self.stderr}"

        super().__init__(error_msg)


class WorktreeCreationError(GitCommandError):
    """Raised when `git worktree add` fails."""


class InstallError(WtCreateError):
    """Raised when dependency installation fails in the new worktree."""

    def __init__(self, command: Sequence[str], reason: str):
        self.command = list(command)
        self.reason = reason
        super().__init__(f"Dependency installation failed ({' '.join(self.command)}): {reason}")
