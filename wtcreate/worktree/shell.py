"""Running external commands.

Every call takes its working directory and output mode as arguments; nothing
here keeps process-wide state between calls.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .errors import GitCommandError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def run_command(
    args: Sequence[str],
    cwd: Optional[PathLike] = None,
    capture: bool = True,
    check: bool = True,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """Run a command and wait for it to finish.

    Args:
        args: Argument vector, no shell interpretation.
        cwd: Directory to run in. Defaults to the process working directory.
        capture: Capture stdout/stderr as text. When False the child writes
            straight to the terminal.
        check: Raise subprocess.CalledProcessError on a non-zero exit.
        env: Extra environment variables layered over os.environ.
    """
    cmd: List[str] = [str(a) for a in args]
    logger.debug(f"Running: {' '.join(cmd)} (cwd={cwd or os.getcwd()})")

    run_env = None
    if env:
        run_env = {**os.environ, **env}

    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=capture,
        text=True,
        env=run_env,
        check=check,
    )
    if capture and result.stdout:
        logger.debug(f"Output: {result.stdout.strip()}")
    return result


def run_git(
    args: Sequence[str],
    cwd: Optional[PathLike] = None,
    check: bool = True,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """Run a git subcommand, raising GitCommandError on failure."""
    cmd = ["git", *args]
    try:
        return run_command(cmd, cwd=cwd, check=check, env=env)
    except subprocess.CalledProcessError as e:
        logger.debug(f"git failed ({e.returncode}): {e.stderr}")
        raise GitCommandError(cmd, e.returncode, e.stderr) from e
    except FileNotFoundError as e:
        raise GitCommandError(cmd, 127, message="git executable not found") from e

