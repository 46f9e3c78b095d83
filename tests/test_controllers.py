import uuid
from datetime import datetime, timezone
from http import HTTPStatus

import pytest

from auctionhouse.auction_usecase import AuctionInput, AuctionOutput, WinningInfoOutput
from auctionhouse.bid_usecase import BidInput, BidOutput
from auctionhouse.controllers import AuctionController, BidController, UserController
from auctionhouse.errors import BadRequestError, InternalServerError, NotFoundError
from auctionhouse.user_usecase import UserOutput

AUCTION_ID = str(uuid.uuid4())
USER_ID = str(uuid.uuid4())
STAMP = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

AUCTION = AuctionOutput(
    id=AUCTION_ID,
    product_name="Camaro",
    category="Carro esportivo",
    description="Camaro Amarelo",
    condition=2,
    status=0,
    timestamp=STAMP,
)
BID = BidOutput(
    id=str(uuid.uuid4()),
    user_id=USER_ID,
    auction_id=AUCTION_ID,
    amount=100.0,
    timestamp=STAMP,
)


class FakeAuctionUseCase:
    def __init__(self, error=None, auctions=()):
        self.error = error
        self.auctions = list(auctions)
        self.calls = []

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    def create_auction(self, auction_input):
        self.calls.append(("create", auction_input))
        self._maybe_fail()

    def find_auction_by_id(self, auction_id):
        self.calls.append(("find", auction_id))
        self._maybe_fail()
        return AUCTION

    def find_auctions(self, status, category, product_name):
        self.calls.append(("list", status, category, product_name))
        self._maybe_fail()
        return self.auctions

    def find_winning_bid_by_auction_id(self, auction_id):
        self.calls.append(("winner", auction_id))
        self._maybe_fail()
        return WinningInfoOutput(auction=AUCTION, bid=BID)


class FakeBidUseCase:
    def __init__(self, error=None, bids=()):
        self.error = error
        self.bids = list(bids)
        self.created = []

    def create_bid(self, bid_input):
        self.created.append(bid_input)
        if self.error is not None:
            raise self.error

    def find_bid_by_auction_id(self, auction_id):
        if self.error is not None:
            raise self.error
        return self.bids


class FakeUserUseCase:
    def __init__(self, error=None):
        self.error = error

    def find_user_by_id(self, user_id):
        if self.error is not None:
            raise self.error
        return UserOutput(id=user_id, name="Ana")


VALID_PAYLOAD = {
    "product_name": "Camaro",
    "category": "Carro esportivo",
    "description": "Camaro Amarelo esportivo",
    "condition": 1,
}


def test_create_auction_succeeds():
    use_case = FakeAuctionUseCase()
    status, body = AuctionController(use_case).create_auction(VALID_PAYLOAD)
    assert (status, body) == (HTTPStatus.CREATED, None)
    assert use_case.calls == [
        ("create", AuctionInput("Camaro", "Carro esportivo", "Camaro Amarelo esportivo", 1))
    ]


def test_create_auction_with_malformed_body():
    use_case = FakeAuctionUseCase()
    status, body = AuctionController(use_case).create_auction(b"{oops")
    assert status == HTTPStatus.BAD_REQUEST
    assert body["message"] == "Error trying to convert fields"
    assert use_case.calls == []


def test_create_auction_reports_domain_error():
    use_case = FakeAuctionUseCase(error=BadRequestError("invalid auction object"))
    status, body = AuctionController(use_case).create_auction(VALID_PAYLOAD)
    assert status == HTTPStatus.BAD_REQUEST
    assert body["message"] == "invalid auction object"
    assert body["err"] == "bad_request"


def test_find_auction_rejects_bad_id():
    use_case = FakeAuctionUseCase()
    status, body = AuctionController(use_case).find_auction_by_id("nope")
    assert status == HTTPStatus.BAD_REQUEST
    assert body["message"] == "Invalid fields"
    assert body["causes"] == [{"field": "auctionId", "message": "Invalid UUID value"}]
    assert use_case.calls == []


def test_find_auction_returns_auction():
    status, body = AuctionController(FakeAuctionUseCase()).find_auction_by_id(AUCTION_ID)
    assert status == HTTPStatus.OK
    assert body == AUCTION.to_dict()


def test_find_auction_not_found():
    use_case = FakeAuctionUseCase(error=NotFoundError("missing"))
    status, body = AuctionController(use_case).find_auction_by_id(AUCTION_ID)
    assert status == HTTPStatus.NOT_FOUND
    assert body["err"] == "not_found"


@pytest.mark.parametrize("status_text", ["abc", "", "1.0"])
def test_find_auctions_rejects_non_integer_status(status_text):
    use_case = FakeAuctionUseCase()
    status, body = AuctionController(use_case).find_auctions(status_text, "", "")
    assert status == HTTPStatus.BAD_REQUEST
    assert body["message"] == "Error trying to validate auction status param"
    assert use_case.calls == []


def test_find_auctions_passes_filters():
    use_case = FakeAuctionUseCase(auctions=[AUCTION])
    status, body = AuctionController(use_case).find_auctions("1", "Carro", "Camaro")
    assert status == HTTPStatus.OK
    assert body == [AUCTION.to_dict()]
    assert use_case.calls == [("list", 1, "Carro", "Camaro")]


def test_find_auctions_accepts_signed_status():
    use_case = FakeAuctionUseCase()
    AuctionController(use_case).find_auctions("+0", "", "")
    assert use_case.calls == [("list", 0, "", "")]


def test_find_auctions_empty_is_null():
    status, body = AuctionController(FakeAuctionUseCase()).find_auctions("0", "", "")
    assert (status, body) == (HTTPStatus.OK, None)


def test_find_auctions_internal_error():
    use_case = FakeAuctionUseCase(error=InternalServerError("Error finding auctions"))
    status, body = AuctionController(use_case).find_auctions("0", "", "")
    assert status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert body["err"] == "internal_server"
    assert body["message"] == "Error finding auctions"


def test_find_winner():
    status, body = AuctionController(FakeAuctionUseCase()).find_winning_bid_by_auction_id(
        AUCTION_ID
    )
    assert status == HTTPStatus.OK
    assert body == {"auction": AUCTION.to_dict(), "bid": BID.to_dict()}


def test_find_winner_rejects_bad_id():
    status, body = AuctionController(FakeAuctionUseCase()).find_winning_bid_by_auction_id("x")
    assert status == HTTPStatus.BAD_REQUEST
    assert body["causes"][0]["field"] == "auctionId"


def test_create_bid_succeeds():
    use_case = FakeBidUseCase()
    payload = {"user_id": USER_ID, "auction_id": AUCTION_ID, "amount": 10}
    status, body = BidController(use_case).create_bid(payload)
    assert (status, body) == (HTTPStatus.CREATED, None)
    assert use_case.created == [BidInput(USER_ID, AUCTION_ID, 10.0)]


def test_create_bid_type_error():
    use_case = FakeBidUseCase()
    status, body = BidController(use_case).create_bid({"amount": "ten"})
    assert status == HTTPStatus.NOT_FOUND
    assert body["message"] == "Invalid type error"
    assert use_case.created == []


def test_create_bid_domain_error():
    use_case = FakeBidUseCase(error=BadRequestError("Amount is not a valid value"))
    payload = {"user_id": USER_ID, "auction_id": AUCTION_ID, "amount": 0}
    status, body = BidController(use_case).create_bid(payload)
    assert status == HTTPStatus.BAD_REQUEST
    assert body["message"] == "Amount is not a valid value"


def test_find_bids():
    status, body = BidController(FakeBidUseCase(bids=[BID])).find_bid_by_auction_id(AUCTION_ID)
    assert status == HTTPStatus.OK
    assert body == [BID.to_dict()]


def test_find_bids_rejects_bad_id():
    status, body = BidController(FakeBidUseCase()).find_bid_by_auction_id("123")
    assert status == HTTPStatus.BAD_REQUEST
    assert body["causes"] == [{"field": "auctionId", "message": "Invalid UUID value"}]


def test_find_user():
    status, body = UserController(FakeUserUseCase()).find_user_by_id(USER_ID)
    assert status == HTTPStatus.OK
    assert body == {"id": USER_ID, "name": "Ana"}


def test_find_user_rejects_bad_id():
    status, body = UserController(FakeUserUseCase()).find_user_by_id("bad")
    assert status == HTTPStatus.BAD_REQUEST
    assert body["causes"] == [{"field": "userId", "message": "Invalid UUID value"}]


def test_find_user_not_found():
    use_case = FakeUserUseCase(error=NotFoundError(f"User not found with this id = {USER_ID}"))
    status, body = UserController(use_case).find_user_by_id(USER_ID)
    assert status == HTTPStatus.NOT_FOUND
    assert body["message"] == f"User not found with this id = {USER_ID}"