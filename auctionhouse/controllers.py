"""HTTP-facing operations, each returning a status code and a JSON body."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from auctionhouse.entities import is_valid_uuid
from auctionhouse.errors import (
    Cause,
    InternalError,
    RestError,
    bad_request_rest_error,
    convert_error,
)
from auctionhouse.validation import bind_auction_input, bind_bid_input

Response = tuple[int, Any]


def _error(err: RestError) -> Response:
    return err.code, err.to_dict()


def _invalid_id(field: str) -> Response:
    return _error(
        bad_request_rest_error("Invalid fields", Cause(field, "Invalid UUID value"))
    )


def _list_body(items: list) -> list | None:
    # An empty result is sent as JSON null, not as an empty array.
    return [item.to_dict() for item in items] or None


class AuctionController:
    """Requests about auctions."""

    def __init__(self, auction_use_case) -> None:
        self.auction_use_case = auction_use_case

    def create_auction(self, payload: Any) -> Response:
        """Create an auction from a JSON body."""
        try:
            auction_input = bind_auction_input(payload)
        except RestError as err:
            return _error(err)
        try:
            self.auction_use_case.create_auction(auction_input)
        except InternalError as err:
            return _error(convert_error(err))
        return HTTPStatus.CREATED, None

    def find_auction_by_id(self, auction_id: str) -> Response:
        """Look up one auction."""
        if not is_valid_uuid(auction_id):
            return _invalid_id("auctionId")
        try:
            auction = self.auction_use_case.find_auction_by_id(auction_id)
        except InternalError as err:
            return _error(convert_error(err))
        return HTTPStatus.OK, auction.to_dict()

    def find_auctions(self, status: str, category: str, product_name: str) -> Response:
        """List auctions; the status must be given as an integer."""
        try:
            status_number = int(status.strip("\t\n\r ") if False else status, 10)
            if status != status.strip() or "_" in status:
                raise ValueError(status)
        except ValueError:
            return _error(
                bad_request_rest_error("Error trying to validate auction status param")
            )
        try:
            auctions = self.auction_use_case.find_auctions(
                status_number, category, product_name
            )
        except InternalError as err:
            return _error(convert_error(err))
        return HTTPStatus.OK, _list_body(auctions)

    def find_winning_bid_by_auction_id(self, auction_id: str) -> Response:
        """Look up an auction together with its highest bid."""
        if not is_valid_uuid(auction_id):
            return _invalid_id("auctionId")
        try:
            info = self.auction_use_case.find_winning_bid_by_auction_id(auction_id)
        except InternalError as err:
            return _error(convert_error(err))
        return HTTPStatus.OK, info.to_dict()


class BidController:
    """Requests about bids."""

    def __init__(self, bid_use_case) -> None:
        self.bid_use_case = bid_use_case

    def create_bid(self, payload: Any) -> Response:
        """Place a bid from a JSON body."""
        try:
            bid_input = bind_bid_input(payload)
        except RestError as err:
            return _error(err)
        try:
            self.bid_use_case.create_bid(bid_input)
        except InternalError as err:
            return _error(convert_error(err))
        return HTTPStatus.CREATED, None

    def find_bid_by_auction_id(self, auction_id: str) -> Response:
        """List the bids of an auction."""
        if not is_valid_uuid(auction_id):
            return _invalid_id("auctionId")
        try:
            bids = self.bid_use_case.find_bid_by_auction_id(auction_id)
        except InternalError as err:
            return _error(convert_error(err))
        return HTTPStatus.OK, _list_body(bids)


class UserController:
    """Requests about users."""

    def __init__(self, user_use_case) -> None:
        self.user_use_case = user_use_case

    def find_user_by_id(self, user_id: str) -> Response:
        """Look up one user."""
        if not is_valid_uuid(user_id):
            return _invalid_id("userId")
        try:
            user = self.user_use_case.find_user_by_id(user_id)
        except InternalError as err:
            return _error(convert_error(err))
        return HTTPStatus.OK, user.to_dict()