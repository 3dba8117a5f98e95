"""Interactive branch selection."""

from typing import Optional, Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError, Validator

CREATE_NEW = "+ Create new branch"


def validate_new_branch_name(name: str, existing: Sequence[str]) -> Optional[str]:
    """Return an error message if name cannot be used for a new branch."""
    if not name.strip():
        return "Branch name cannot be empty"
    if name in existing:
        return "Branch already exists"
    return None


class NewBranchValidator(Validator):
    """Rejects empty names and names already in the inventory."""

    def __init__(self, existing: Sequence[str]):
        self.existing = list(existing)

    def validate(self, document: Document) -> None:
        error = validate_new_branch_name(document.text, self.existing)
        if error:
            raise ValidationError(message=error, cursor_position=len(document.text))


def select_branch_interactive(branches: Sequence[str]) -> Optional[str]:
    """Let the user pick a remote branch or name a new one.

    Returns None if the user cancels.
    """
    choices = [Choice(value=CREATE_NEW, name=CREATE_NEW)]
    choices.extend(Choice(value=branch, name=branch) for branch in branches)

    try:
        selected = inquirer.select(
            message="Select a branch to create worktree:",
            choices=choices,
        ).execute()

        if selected is None:
            return None

        if selected == CREATE_NEW:
            branch_name = inquirer.text(
                message="Enter the new branch name:",
                validate=NewBranchValidator(branches),
            ).execute()
            if branch_name is None:
                return None
            print(f"\nCreating new branch: {branch_name}")
            return branch_name
    except KeyboardInterrupt:
        print("\nCancelled")
        return None

    print(f"\nSelected branch: {selected}")
    return selected
