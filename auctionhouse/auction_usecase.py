"""Creating auctions and reading them back together with their winners."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from auctionhouse import logger
from auctionhouse.bid_usecase import BidOutput
from auctionhouse.entities import Auction, create_auction
from auctionhouse.errors import InternalError


@dataclass(frozen=True)
class AuctionInput:
    product_name: str
    category: str
    description: str
    condition: int = 0


@dataclass(frozen=True)
class AuctionOutput:
    id: str
    product_name: str
    category: str
    description: str
    condition: int
    status: int
    timestamp: datetime

    def to_dict(self) -> dict:
        """Return the JSON body for this auction."""
        return {
            "id": self.id,
            "product_name": self.product_name,
            "category": self.category,
            "description": self.description,
            "condition": int(self.condition),
            "status": int(self.status),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class WinningInfoOutput:
    auction: AuctionOutput
    bid: BidOutput | None = None

    def to_dict(self) -> dict:
        """Return the JSON body; the bid is left out when there is none."""
        body = {"auction": self.auction.to_dict()}
        if self.bid is not None:
            body["bid"] = self.bid.to_dict()
        return body


def _output(auction: Auction) -> AuctionOutput:
    return AuctionOutput(
        id=auction.id,
        product_name=auction.product_name,
        category=auction.category,
        description=auction.description,
        condition=int(auction.condition),
        status=int(auction.status),
        timestamp=auction.timestamp,
    )


class AuctionUseCase:
    """Application operations on auctions."""

    def __init__(self, auction_repository, bid_repository) -> None:
        self.auction_repository = auction_repository
        self.bid_repository = bid_repository

    def create_auction(self, auction_input: AuctionInput) -> None:
        """Validate and store a new auction."""
        auction = create_auction(
            auction_input.product_name,
            auction_input.category,
            auction_input.description,
            auction_input.condition,
        )
        self.auction_repository.create_auction(auction)

    def find_auction_by_id(self, auction_id: str) -> AuctionOutput:
        """The auction with the given id."""
        return _output(self.auction_repository.find_auction_by_id(auction_id))

    def find_auctions(self, status: int, category: str, product_name: str) -> list[AuctionOutput]:
        """Auctions matching the given status, category and product name."""
        found = self.auction_repository.find_auctions(status, category, product_name)
        return [_output(auction) for auction in found]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> WinningInfoOutput:
        """The auction with its highest bid, or with no bid if none can be found."""
        auction = _output(self.auction_repository.find_auction_by_id(auction_id))
        try:
            winner = self.bid_repository.find_winning_bid_by_auction_id(auction.id)
        except InternalError as exc:
            logger.error("", exc)
            return WinningInfoOutput(auction=auction, bid=None)

        bid = BidOutput(
            id=winner.id,
            user_id=winner.user_id,
            auction_id=winner.auction_id,
            amount=winner.amount,
            timestamp=winner.timestamp,
        )
        return WinningInfoOutput(auction=auction, bid=bid)