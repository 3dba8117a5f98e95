"""Post-creation steps: editor and hooks."""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Sequence

from .shell import run_command

logger = logging.getLogger(__name__)


def open_editor(path: Path, command: str = "code", args: Sequence[str] = ()) -> bool:
    """Open path in an editor. Failure is logged, not raised."""
    target = Path(path).resolve()
    logger.info(f"Opening {command} at: {target}")

    try:
        run_command([command, *args, str(target)])
    except (subprocess.CalledProcessError, OSError) as e:
        logger.warning(
            f"Warning: Failed to open {command}: {e}. "
            f"You can manually open the project at: {target}"
        )
        return False
    return True


def run_post_create_hooks(hooks: Sequence[str], cwd: Path) -> int:
    """Run each hook in cwd, in order. Returns the number that failed."""
    if not hooks:
        return 0

    logger.info("Running post-create hooks...")
    failed = 0
    for hook in hooks:
        logger.info(f"Running: {hook}")
        try:
            run_command(shlex.split(hook), cwd=cwd, capture=False)
        except (subprocess.CalledProcessError, OSError, ValueError) as e:
            failed += 1
            logger.warning(f"Warning: Hook failed: {hook}: {e}")
    return failed
