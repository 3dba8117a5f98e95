"""wtcreate - create a git worktree for a branch, ready to work in."""
