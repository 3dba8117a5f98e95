"""Dependency installation in a fresh worktree."""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Dict, List

from .errors import InstallError
from .shell import run_command

logger = logging.getLogger(__name__)

# Checked in order; the first lockfile found decides.
LOCKFILES = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
    ("bun.lockb", "bun"),
)

INSTALL_COMMANDS: Dict[str, List[str]] = {
    "pnpm": ["pnpm", "install", "--frozen-lockfile"],
    "yarn": ["yarn", "install", "--frozen-lockfile"],
    "bun": ["bun", "install", "--frozen-lockfile"],
    "npm": ["npm", "ci"],
}


def detect_package_manager(path: Path) -> str:
    """Pick a package manager from the lockfile in path (npm if none)."""
    for lockfile, manager in LOCKFILES:
        if (Path(path) / lockfile).exists():
            return manager
    return "npm"


def install_command(path: Path, force: str = "", command: str = "") -> List[str]:
    """Build the install command for path.

    A custom command wins over everything; otherwise a forced package
    manager wins over lockfile detection.
    """
    if command:
        return shlex.split(command)
    manager = force or detect_package_manager(path)
    return list(INSTALL_COMMANDS[manager])


def install_dependencies(path: Path, force: str = "", command: str = "") -> bool:
    """Install dependencies in path, streaming output to the terminal.

    Skipped (returns False) when there is no package.json and no custom
    command. Raises InstallError when the install command fails.
    """
    path = Path(path)
    if not command and not (path / "package.json").exists():
        logger.info("No package.json found, skipping dependency installation")
        return False

    cmd = install_command(path, force, command)
    if command:
        logger.info(f"Running custom install command: {command}")
    else:
        logger.info(f"Installing dependencies with {cmd[0]}...")

    try:
        run_command(cmd, cwd=path, capture=False)
    except (subprocess.CalledProcessError, OSError) as e:
        raise InstallError(cmd, str(e)) from e

    return True
