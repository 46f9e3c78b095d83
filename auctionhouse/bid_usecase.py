"""Accepting bids in batches and reading them back."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta

from auctionhouse import logger, settings
from auctionhouse.entities import Bid, create_bid
from auctionhouse.errors import InternalError, InternalServerError

_STOP = object()


@dataclass(frozen=True)
class BidInput:
    user_id: str
    auction_id: str
    amount: float


@dataclass(frozen=True)
class BidOutput:
    id: str
    user_id: str
    auction_id: str
    amount: float
    timestamp: datetime

    def to_dict(self) -> dict:
        """Return the JSON body for this bid."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "auction_id": self.auction_id,
            "amount": self.amount,
            "timestamp": self.timestamp.isoformat(),
        }


def _output(bid: Bid) -> BidOutput:
    return BidOutput(
        id=bid.id,
        user_id=bid.user_id,
        auction_id=bid.auction_id,
        amount=bid.amount,
        timestamp=bid.timestamp,
    )


class BidUseCase:
    """Collects new bids and writes them to the repository in batches.

    A batch is written once it holds ``max_batch_size`` bids, or when
    ``batch_insert_interval`` has passed since the last write.
    """

    def __init__(
        self,
        bid_repository,
        max_batch_size: int | None = None,
        batch_insert_interval: timedelta | None = None,
    ) -> None:
        self.bid_repository = bid_repository
        self.max_batch_size = (
            settings.max_batch_size() if max_batch_size is None else max_batch_size
        )
        self.batch_insert_interval = (
            settings.batch_insert_interval()
            if batch_insert_interval is None
            else batch_insert_interval
        )
        self._queue: queue.Queue = queue.Queue(maxsize=max(self.max_batch_size, 1))
        self._batch: list[Bid] = []
        self._closed = False
        self._lock = threading.Lock()
        self._worker = threading.Thread(target=self._run, daemon=True)
        self._worker.start()

    def __enter__(self) -> BidUseCase:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _flush(self) -> None:
        batch, self._batch = self._batch, []
        try:
            self.bid_repository.create_bid(batch)
        except InternalError as exc:
            logger.error("error trying to process bid batch list", exc)

    def _run(self) -> None:
        interval = self.batch_insert_interval.total_seconds()
        deadline = time.monotonic() + interval
        while True:
            timeout = max(deadline - time.monotonic(), 0.0)
            try:
                item = self._queue.get(timeout=timeout)
            except queue.Empty:
                self._flush()
                deadline = time.monotonic() + interval
                continue

            if item is _STOP:
                if self._batch:
                    self._flush()
                return

            self._batch.append(item)
            if len(self._batch) >= self.max_batch_size:
                self._flush()
                deadline = time.monotonic() + interval

    def create_bid(self, bid_input: BidInput) -> None:
        """Validate a bid and queue it for the next batch."""
        bid = create_bid(bid_input.user_id, bid_input.auction_id, bid_input.amount)
        with self._lock:
            if self._closed:
                raise InternalServerError("bid processing has stopped")
            self._queue.put(bid)

    def find_bid_by_auction_id(self, auction_id: str) -> list[BidOutput]:
        """All bids stored for an auction."""
        return [_output(bid) for bid in self.bid_repository.find_bid_by_auction_id(auction_id)]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> BidOutput:
        """The highest bid stored for an auction."""
        return _output(self.bid_repository.find_winning_bid_by_auction_id(auction_id))

    def close(self) -> None:
        """Stop accepting bids and write whatever is still pending."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_STOP)
        self._worker.join()