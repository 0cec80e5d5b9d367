from __future__ import annotations

from typing import Optional


class ShelfwatchError(Exception):
    """Base class for every error raised by shelfwatch."""


class CollaboratorError(ShelfwatchError):
    """An external collaborator call failed, timed out or returned an error status."""

    def __init__(self, collaborator: str, message: str) -> None:
        self.collaborator = collaborator
        self.message = message
        super().__init__(f"{collaborator}: {message}")


class MalformedCollaboratorOutput(CollaboratorError):
    """A collaborator answered, but the payload could not be parsed or validated."""


class ItemNotFoundError(ShelfwatchError):
    """The persistence layer has no such item (for this user, when one is given)."""

    def __init__(self, item: str, user_id: Optional[str] = None) -> None:
        self.item = item
        self.user_id = user_id
        owner = f" for user {user_id}" if user_id else ""
        super().__init__(f"No inventory item '{item}'{owner}")
