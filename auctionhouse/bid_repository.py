"""Storage of bids in MongoDB."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Any

from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from auctionhouse import logger, settings
from auctionhouse.entities import AuctionStatus, Bid
from auctionhouse.errors import InternalError, InternalServerError

COLLECTION = "bids"


def _to_document(bid: Bid) -> dict[str, Any]:
    return {
        "_id": bid.id,
        "user_id": bid.user_id,
        "auction_id": bid.auction_id,
        "amount": bid.amount,
        "timestamp": int(bid.timestamp.timestamp()),
    }


def _from_document(document: dict[str, Any]) -> Bid:
    return Bid(
        id=document["_id"],
        user_id=document.get("user_id", ""),
        auction_id=document.get("auction_id", ""),
        amount=document.get("amount", 0.0),
        timestamp=datetime.fromtimestamp(document.get("timestamp", 0), timezone.utc),
    )


class BidRepository:
    """Bids kept in the "bids" collection.

    A bid is only stored while its auction is open. The status and end time
    of each auction are cached after the first lookup.
    """

    def __init__(
        self, database, auction_repository, auction_interval: timedelta | None = None
    ) -> None:
        self.collection = database[COLLECTION]
        self.auction_repository = auction_repository
        self.auction_interval = (
            settings.auction_interval() if auction_interval is None else auction_interval
        )
        self._statuses: dict[str, int] = {}
        self._end_times: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def create_bid(self, bids: list[Bid]) -> None:
        """Store every bid whose auction is still open; failures are logged."""
        if not bids:
            return
        with ThreadPoolExecutor(max_workers=len(bids)) as pool:
            list(pool.map(self._store, bids))

    def _insert(self, document: dict[str, Any]) -> None:
        try:
            self.collection.insert_one(document)
        except PyMongoError as exc:
            logger.error("Error trying to insert bid", exc)

    def _store(self, bid: Bid) -> None:
        document = _to_document(bid)
        with self._lock:
            status = self._statuses.get(bid.auction_id)
            end_time = self._end_times.get(bid.auction_id)

        if status is not None and end_time is not None:
            if status == AuctionStatus.COMPLETED or datetime.now(timezone.utc) > end_time:
                return
            self._insert(document)
            return

        try:
            auction = self.auction_repository.find_auction_by_id(bid.auction_id)
        except InternalError as exc:
            logger.error("Error trying to find auction by id", exc)
            return
        if auction.status == AuctionStatus.COMPLETED:
            return

        with self._lock:
            self._statuses[bid.auction_id] = auction.status
            self._end_times[bid.auction_id] = auction.timestamp + self.auction_interval

        self._insert(document)

    def find_bid_by_auction_id(self, auction_id: str) -> list[Bid]:
        """Bids recorded for an auction."""
        message = f"Error trying to find bids by auctionId {auction_id}"
        try:
            cursor = self.collection.find({"auctionId": auction_id})
            return [_from_document(document) for document in cursor]
        except (PyMongoError, LookupError, TypeError, ValueError) as exc:
            logger.error(message, exc)
            raise InternalServerError(message) from exc

    def find_winning_bid_by_auction_id(self, auction_id: str) -> Bid:
        """The bid with the highest amount for an auction."""
        try:
            document = self.collection.find_one(
                {"auction_id": auction_id}, sort=[("amount", DESCENDING)]
            )
            if document is None:
                raise LookupError("no documents in result")
            return _from_document(document)
        except (PyMongoError, LookupError, TypeError, ValueError) as exc:
            logger.error("Error trying to find the auction winner", exc)
            raise InternalServerError("Error trying to find the auction winner") from exc