"""Tests for worktree creation with git calls mocked."""
# pylint: disable=redefined-outer-name

import logging
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from wtcreate.worktree.errors import PathAlreadyExistsError, WorktreeCreationError
from wtcreate.worktree.models import BranchKind, WorktreeDescriptor
from wtcreate.worktree.worktree_manager import WorktreeManager, resolve_worktree_path


@pytest.fixture
def manager(tmp_path):
    """Create a worktree manager rooted in a temp directory."""
    repo_root = tmp_path / "myrepo"
    repo_root.mkdir()
    return WorktreeManager(repo_root)


def descriptor_for(manager, branch, kind):
    """Build a descriptor next to the manager's repo."""
    path = resolve_worktree_path(manager.repo_root, branch)
    return WorktreeDescriptor.for_branch(branch, path, kind)


def git_calls(mock_run):
    """Return the argument vectors of all mocked subprocess.run calls."""
    return [call[0][0] for call in mock_run.call_args_list]


class TestResolveWorktreePath:
    """Tests for worktree path resolution."""

    def test_default_is_sibling_with_repo_prefix(self):
        """Test the default path is ../<repo>-<safe branch>."""
        path = resolve_worktree_path(Path("/work/myrepo"), "feature/login")
        assert path == Path("/work/myrepo-feature-login")

    def test_explicit_prefix(self):
        """Test a configured prefix replaces the repo name."""
        path = resolve_worktree_path(Path("/work/myrepo"), "fix", prefix="app")
        assert path == Path("/work/app-fix")

    def test_location_template(self):
        """Test {prefix} and {branch} placeholders in a relative template."""
        path = resolve_worktree_path(
            Path("/work/myrepo"),
            "feature/login",
            prefix="app",
            location="../worktrees/{prefix}/{branch}",
        )
        assert path == Path("/work/worktrees/app/feature-login")

    def test_original_branch_placeholder(self):
        """Test {original-branch} keeps the slashes."""
        path = resolve_worktree_path(
            Path("/work/myrepo"), "feature/login", location="/trees/{original-branch}"
        )
        assert path == Path("/trees/feature/login")


class TestCreateWorktree:
    """Tests for WorktreeManager.create_worktree."""

    @patch("wtcreate.worktree.shell.subprocess.run")
    def test_existing_path_fails_before_git(self, mock_run, manager):
        """Test an existing target path raises without running git."""
        descriptor = descriptor_for(manager, "feature/x", BranchKind.NEW)
        descriptor.path.mkdir(parents=True)

        with pytest.raises(PathAlreadyExistsError, match="already exists"):
            manager.create_worktree(descriptor)

        mock_run.assert_not_called()

    @patch("wtcreate.worktree.shell.subprocess.run")
    def test_local_existing_attaches(self, mock_run, manager):
        """Test a local branch is attached without -b and without tracking changes."""
        mock_run.return_value = MagicMock(returncode=0, stdout="")
        descriptor = descriptor_for(manager, "feature/x", BranchKind.LOCAL_EXISTING)

        manager.create_worktree(descriptor)

        assert git_calls(mock_run) == [
            ["git", "worktree", "add", str(descriptor.path), "feature/x"],
        ]
        assert mock_run.call_args_list[0][1]["cwd"] == manager.repo_root

    @patch("wtcreate.worktree.shell.subprocess.run")
    def test_remote_existing_branches_and_tracks(self, mock_run, manager):
        """Test a remote branch is checked out with -b and given an upstream."""
        mock_run.return_value = MagicMock(returncode=0, stdout="")
        descriptor = descriptor_for(manager, "feature/x", BranchKind.REMOTE_EXISTING)

        manager.create_worktree(descriptor, remote="upstream")

        calls = git_calls(mock_run)
        assert calls[0] == [
            "git",
            "worktree",
            "add",
            "-b",
            "feature/x",
            str(descriptor.path),
            "upstream/feature/x",
        ]
        assert calls[1] == [
            "git",
            "branch",
            "--set-upstream-to=upstream/feature/x",
            "feature/x",
        ]
        assert mock_run.call_args_list[1][1]["cwd"] == descriptor.path

    @patch("wtcreate.worktree.shell.subprocess.run")
    def test_new_branch_from_remote_default(self, mock_run, manager):
        """Test a new branch starts from <remote>/<default> and gets push config."""
        mock_run.return_value = MagicMock(returncode=0, stdout="")
        descriptor = descriptor_for(manager, "feature/y", BranchKind.NEW)

        manager.create_worktree(descriptor, remote="origin", default_branch="develop")

        calls = git_calls(mock_run)
        assert calls[0][-1] == "origin/develop"
        assert calls[0][3:5] == ["-b", "feature/y"]
        assert ["git", "config", "branch.feature/y.remote", "origin"] in calls
        assert ["git", "config", "branch.feature/y.merge", "refs/heads/feature/y"] in calls
        assert not any(call[1] == "push" for call in calls)

    @patch("wtcreate.worktree.shell.subprocess.run")
    def test_new_branch_auto_push(self, mock_run, manager):
        """Test push_new_branches pushes with -u."""
        mock_run.return_value = MagicMock(returncode=0, stdout="")
        descriptor = descriptor_for(manager, "feature/y", BranchKind.NEW)

        manager.create_worktree(descriptor, push_new_branches=True)

        calls = git_calls(mock_run)
        assert calls[-1] == ["git", "push", "-u", "origin", "feature/y"]
        assert mock_run.call_args_list[-1][1]["env"]["GIT_TERMINAL_PROMPT"] == "0"

    @patch("wtcreate.worktree.shell.subprocess.run")
    def test_push_failure_is_warning(self, mock_run, manager, caplog):
        """Test a failing push is logged and does not raise."""

        def fake_run(cmd, **kwargs):
            if cmd[1] == "push":
                raise subprocess.CalledProcessError(1, cmd, stderr="rejected")
            return MagicMock(returncode=0, stdout="")

        mock_run.side_effect = fake_run
        descriptor = descriptor_for(manager, "feature/y", BranchKind.NEW)

        with caplog.at_level(logging.WARNING):
            result = manager.create_worktree(descriptor, push_new_branches=True)

        assert result == descriptor
        assert "Could not push new branch" in caplog.text

    @patch("wtcreate.worktree.shell.subprocess.run")
    def test_tracking_failure_is_warning(self, mock_run, manager, caplog):
        """Test a failing upstream setup is logged and does not raise."""

        def fake_run(cmd, **kwargs):
            if cmd[1] == "branch":
                raise subprocess.CalledProcessError(128, cmd, stderr="no such branch")
            return MagicMock(returncode=0, stdout="")

        mock_run.side_effect = fake_run
        descriptor = descriptor_for(manager, "feature/x", BranchKind.REMOTE_EXISTING)

        with caplog.at_level(logging.WARNING):
            manager.create_worktree(descriptor)

        assert "Could not set upstream tracking" in caplog.text

    @patch("wtcreate.worktree.shell.subprocess.run")
    def test_worktree_add_failure(self, mock_run, manager):
        """Test a failing git worktree add raises WorktreeCreationError."""
        mock_run.side_effect = subprocess.CalledProcessError(
            128, ["git", "worktree", "add"], stderr="fatal: 'main' is already checked out"
        )
        descriptor = descriptor_for(manager, "main", BranchKind.LOCAL_EXISTING)

        with pytest.raises(WorktreeCreationError, match="already checked out"):
            manager.create_worktree(descriptor)


class TestBuildDescriptor:
    """Tests for WorktreeManager.build_descriptor."""

    def test_uses_classification_and_safe_name(self, manager):
        """Test the descriptor carries both names and the classification."""
        with patch.object(
            manager.branch_manager, "classify", return_value=BranchKind.REMOTE_EXISTING
        ) as mock_classify:
            descriptor = manager.build_descriptor("feature/login", remote="upstream")

        mock_classify.assert_called_once_with(manager.repo_root, "feature/login", "upstream")
        assert descriptor.branch == "feature/login"
        assert descriptor.safe_name == "feature-login"
        assert descriptor.path.name == "myrepo-feature-login"
        assert descriptor.kind is BranchKind.REMOTE_EXISTING
