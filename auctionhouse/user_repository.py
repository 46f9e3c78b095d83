"""Reading users from MongoDB."""

from __future__ import annotations

from pymongo.errors import PyMongoError

from auctionhouse import logger
from auctionhouse.entities import User
from auctionhouse.errors import InternalServerError, NotFoundError

COLLECTION = "users"


class UserRepository:
    """Users kept in the "users" collection."""

    def __init__(self, database) -> None:
        self.collection = database[COLLECTION]

    def find_user_by_id(self, user_id: str) -> User:
        """The user with the given id; NotFoundError if there is none."""
        try:
            document = self.collection.find_one({"_id": user_id})
        except PyMongoError as exc:
            logger.error("Error trying to find user by userId", exc)
            raise InternalServerError("Error trying to find user by userId") from exc

        if document is None:
            message = f"User not found with this id = {user_id}"
            logger.error(message, None)
            raise NotFoundError(message)

        try:
            return User(id=document["_id"], name=document.get("name", ""))
        except (LookupError, TypeError) as exc:
            logger.error("Error trying to find user by userId", exc)
            raise InternalServerError("Error trying to find user by userId") from exc