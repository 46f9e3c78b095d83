"""Auctions, bids and users."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from auctionhouse.errors import BadRequestError


class ProductCondition(IntEnum):
    NEW = 1
    USED = 2
    REFURBISHED = 3


class AuctionStatus(IntEnum):
    ACTIVE = 0
    COMPLETED = 1


_HEX = "[0-9a-fA-F]"
_UUID = re.compile(
    rf"(?:urn:uuid:)?({_HEX}{{8}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{12}})"
    rf"|\{{{_HEX}{{8}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{12}}\}}"
    rf"|{_HEX}{{32}}",
    re.IGNORECASE,
)


def is_valid_uuid(value: str) -> bool:
    """Whether the text is a UUID in one of the usual textual forms."""
    return bool(_UUID.fullmatch(value))


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_condition(value: int) -> ProductCondition | int:
    try:
        return ProductCondition(value)
    except ValueError:
        return int(value)


@dataclass
class Auction:
    id: str
    product_name: str
    category: str
    description: str
    condition: ProductCondition | int
    status: AuctionStatus = AuctionStatus.ACTIVE
    timestamp: datetime = field(default_factory=_now)

    def validate(self) -> None:
        """Raise BadRequestError if the auction is not acceptable."""
        known_condition = self.condition in (
            ProductCondition.NEW,
            ProductCondition.REFURBISHED,
            ProductCondition.USED,
        )
        if (
            len(self.product_name.encode()) <= 1
            or len(self.category.encode()) <= 2
            or (len(self.description.encode()) <= 10 and not known_condition)
        ):
            raise BadRequestError("invalid auction object")


def create_auction(
    product_name: str, category: str, description: str, condition: int
) -> Auction:
    """Create a new, active auction; raise BadRequestError if it is invalid."""
    auction = Auction(
        id=str(uuid.uuid4()),
        product_name=product_name,
        category=category,
        description=description,
        condition=_as_condition(condition),
        status=AuctionStatus.ACTIVE,
        timestamp=_now(),
    )
    auction.validate()
    return auction


@dataclass
class Bid:
    id: str
    user_id: str
    auction_id: str
    amount: float
    timestamp: datetime = field(default_factory=_now)

    def validate(self) -> None:
        """Raise BadRequestError if the bid is not acceptable."""
        if not is_valid_uuid(self.user_id):
            raise BadRequestError("UserId is not a valid id")
        if not is_valid_uuid(self.auction_id):
            raise BadRequestError("AuctionId is not a valid id")
        if self.amount <= 0:
            raise BadRequestError("Amount is not a valid value")


def create_bid(user_id: str, auction_id: str, amount: float) -> Bid:
    """Create a new bid; raise BadRequestError if it is invalid."""
    bid = Bid(
        id=str(uuid.uuid4()),
        user_id=user_id,
        auction_id=auction_id,
        amount=amount,
        timestamp=_now(),
    )
    bid.validate()
    return bid


@dataclass
class User:
    id: str
    name: str