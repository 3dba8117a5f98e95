"""wtc - create a git worktree for a branch.

Usage:
    wtc                 Pick a remote branch (or a new one) interactively
    wtc <branch>        Create a worktree for <branch>
"""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import List, Optional

from .prompts import select_branch_interactive
from .worktree.branch_manager import BranchManager
from .worktree.config import WtConfig, get_config_path, get_wt_config, save_config
from .worktree.env_files import migrate_env_files
from .worktree.errors import (
    EmptyInventoryError,
    GitCommandError,
    NotAGitRepositoryError,
    WtCreateError,
)
from .worktree.installer import install_dependencies
from .worktree.launch import open_editor, run_post_create_hooks
from .worktree.worktree_manager import WorktreeManager, resolve_worktree_path

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def get_version() -> str:
    """Get the installed package version."""
    try:
        return version("wtcreate")
    except PackageNotFoundError:
        return "unknown"


def print_help() -> None:
    """Print usage information."""
    print(
        f"""wtc - create a git worktree for a branch ({get_version()})

Usage:
  wtc                  Select a remote branch interactively
  wtc <branch>         Create a worktree for <branch>

The branch is attached if it exists locally, checked out from the remote if
it exists there, and otherwise created from <remote>/<default_branch>.
Afterwards env files are copied, dependencies installed, the editor opened
and post-create hooks run.

Options:
  -h, --help           Show this help
  --version            Show version
  -v, --verbose        Show the git commands being run
  --init-config        Write the default config to {get_config_path()}

Config:
  {get_config_path()}  (user)
  <repo>/.worktreerc.toml  (project, overrides user)
"""
    )


def init_config() -> int:
    """Write the default configuration file if none exists yet."""
    path = get_config_path()
    if path.exists():
        logger.error(f"Error: Config file {path} already exists")
        return EXIT_ERROR
    save_config(WtConfig().to_dict(), path)
    print(f"Wrote default config to {path}")
    return EXIT_OK


def choose_branch(branch_manager: BranchManager, repo_root: Path, remote: str) -> Optional[str]:
    """Fetch the remote inventory and let the user pick from it."""
    logger.info("Fetching latest branches...")
    branches = branch_manager.list_remote_branches(repo_root, remote)
    if not branches:
        raise EmptyInventoryError(remote)
    return select_branch_interactive(branches)


def create_worktree_flow(branch_name: Optional[str] = None, cwd: Optional[Path] = None) -> int:
    """Run the whole worktree creation sequence.

    Fatal problems raise WtCreateError; everything optional is logged and
    skipped. Returns the process exit code.
    """
    cwd = Path(cwd or Path.cwd())
    branch_manager = BranchManager()

    if not branch_manager.is_git_repository(cwd):
        raise NotAGitRepositoryError(str(cwd))

    # Env files come from the current checkout; naming and project config
    # from the main one.
    source_root = branch_manager.get_toplevel(cwd)
    repo_root = branch_manager.get_main_checkout(cwd)
    config = get_wt_config(repo_root)
    remote = config.git.remote
    default_branch = config.git.default_branch

    fetched = False
    if not branch_name:
        selected = choose_branch(branch_manager, repo_root, remote)
        if not selected:
            return EXIT_OK
        branch_name = selected
        fetched = True

    worktree_path = resolve_worktree_path(
        repo_root, branch_name, config.worktree.prefix, config.worktree.location
    )
    print(f"Creating worktree for branch: {branch_name}")
    print(f"Worktree path: {worktree_path}")

    manager = WorktreeManager(repo_root, branch_manager)
    manager.check_path_available(worktree_path)

    if config.git.fetch and not fetched:
        try:
            branch_manager.fetch(repo_root, remote)
        except GitCommandError as e:
            logger.warning(
                f"Warning: Could not fetch from {remote} "
                f"(continuing with local state): {e}"
            )

    descriptor = manager.build_descriptor(
        branch_name, remote, config.worktree.prefix, config.worktree.location
    )
    manager.create_worktree(
        descriptor,
        remote=remote,
        default_branch=default_branch,
        push_new_branches=config.git.push_new_branches,
    )

    if config.env.copy:
        logger.info("Copying .env files...")
        migrate_env_files(
            source_root, descriptor.path, config.env.patterns, config.env.exclude
        )
    else:
        logger.info("Skipping .env file copying (disabled in config)")

    if config.package_manager.install:
        install_dependencies(
            descriptor.path,
            force=config.package_manager.force,
            command=config.package_manager.command,
        )
    else:
        logger.info("Skipping dependency installation (disabled in config)")

    if config.editor.open:
        open_editor(descriptor.path, config.editor.command, config.editor.args)

    run_post_create_hooks(config.post_create, descriptor.path)

    print("Worktree created successfully!")
    print(f"  Location: {descriptor.path}")
    print(f"  Branch:   {descriptor.branch}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the wtc command."""
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = False
    positional = []
    for arg in args:
        if arg in ("-h", "--help"):
            print_help()
            return EXIT_OK
        if arg == "--version":
            print(f"wtc {get_version()}")
            return EXIT_OK
        if arg in ("-v", "--verbose"):
            verbose = True
        elif arg == "--init-config":
            logging.basicConfig(level=logging.INFO, format="%(message)s")
            return init_config()
        elif arg.startswith("-"):
            print(f"Unknown option: {arg}", file=sys.stderr)
            print("Run 'wtc --help' for usage.", file=sys.stderr)
            return EXIT_USAGE
        else:
            positional.append(arg)

    if len(positional) > 1:
        print("Too many arguments: expected at most one branch name", file=sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")

    try:
        return create_worktree_flow(positional[0] if positional else None)
    except WtCreateError as e:
        logger.error(f"Error: {e}")
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\nInterrupted")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
