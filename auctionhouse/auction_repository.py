"""Storage of auctions in MongoDB, and their closing once the interval has passed."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Any

from pymongo.errors import PyMongoError

from auctionhouse import logger, settings
from auctionhouse.entities import Auction, AuctionStatus, ProductCondition
from auctionhouse.errors import InternalError, InternalServerError

COLLECTION = "auctions"


def _condition(value: int) -> ProductCondition | int:
    try:
        return ProductCondition(value)
    except ValueError:
        return int(value)


def _status(value: int) -> AuctionStatus | int:
    try:
        return AuctionStatus(value)
    except ValueError:
        return int(value)


def _to_document(auction: Auction) -> dict[str, Any]:
    return {
        "_id": auction.id,
        "product_name": auction.product_name,
        "category": auction.category,
        "description": auction.description,
        "condition": int(auction.condition),
        "status": int(auction.status),
        "timestamp": int(auction.timestamp.timestamp()),
    }


def _from_document(document: dict[str, Any]) -> Auction:
    return Auction(
        id=document["_id"],
        product_name=document.get("product_name", ""),
        category=document.get("category", ""),
        description=document.get("description", ""),
        condition=_condition(document.get("condition", 0)),
        status=_status(document.get("status", 0)),
        timestamp=datetime.fromtimestamp(document.get("timestamp", 0), timezone.utc),
    )


class AuctionRepository:
    """Auctions kept in the "auctions" collection.

    Every auction created here is marked completed once ``auction_interval``
    has passed, unless it already is.
    """

    def __init__(self, database, auction_interval: timedelta | None = None) -> None:
        self.collection = database[COLLECTION]
        self.auction_interval = (
            settings.auction_interval() if auction_interval is None else auction_interval
        )

    def create_auction(self, auction: Auction) -> None:
        """Store an auction and schedule its closing."""
        document = _to_document(auction)
        try:
            self.collection.insert_one(document)
        except PyMongoError as exc:
            logger.error("Error trying to insert auction", exc)
            raise InternalServerError("Error trying to insert auction") from exc

        timer = threading.Timer(
            max(self.auction_interval.total_seconds(), 0.0),
            self._complete,
            args=(auction.id,),
        )
        timer.daemon = True
        timer.start()

    def _complete(self, auction_id: str) -> None:
        try:
            auction = self.find_auction_by_id(auction_id)
        except InternalError as exc:
            logger.error("Error trying to find auction by id", exc)
            return

        if auction.status == AuctionStatus.COMPLETED:
            return

        try:
            self.collection.update_one(
                {"_id": auction_id},
                {"$set": {"status": int(AuctionStatus.COMPLETED)}},
            )
        except PyMongoError as exc:
            logger.error("Error trying to update auction status", exc)

    def find_auction_by_id(self, auction_id: str) -> Auction:
        """The auction with the given id; raise InternalServerError if it cannot be read."""
        try:
            document = self.collection.find_one({"_id": auction_id})
            if document is None:
                raise LookupError("no documents in result")
            return _from_document(document)
        except (PyMongoError, LookupError, TypeError, ValueError) as exc:
            logger.error(f"Error trying to find auction by id = {auction_id}", exc)
            raise InternalServerError("Error trying to find auction by id") from exc

    def find_auctions(self, status: int, category: str, product_name: str) -> list[Auction]:
        """Auctions filtered by status (0 for any), category and product name."""
        query: dict[str, Any] = {}
        if status != 0:
            query["status"] = int(status)
        if category:
            query["category"] = category
        if product_name:
            query["productName"] = {"$regex": product_name, "$options": "i"}

        try:
            cursor = self.collection.find(query)
        except PyMongoError as exc:
            logger.error("Error finding auctions", exc)
            raise InternalServerError("Error finding auctions") from exc

        try:
            return [_from_document(document) for document in cursor]
        except (PyMongoError, LookupError, TypeError, ValueError) as exc:
            logger.error("Error decoding auctions", exc)
            raise InternalServerError("Error decoding auctions") from exc