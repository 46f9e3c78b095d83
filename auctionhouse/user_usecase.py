"""Reading users."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserOutput:
    id: str
    name: str

    def to_dict(self) -> dict:
        """Return the JSON body for this user."""
        return {"id": self.id, "name": self.name}


class UserUseCase:
    """Application operations on users."""

    def __init__(self, user_repository) -> None:
        self.user_repository = user_repository

    def find_user_by_id(self, user_id: str) -> UserOutput:
        """The user with the given id."""
        user = self.user_repository.find_user_by_id(user_id)
        return UserOutput(id=user.id, name=user.name)