"""The HTTP server and its wiring."""

from __future__ import annotations

import argparse
import json
import os
from http import HTTPStatus
from typing import Any

from dotenv import load_dotenv
from flask import Flask, request
from pymongo.errors import PyMongoError

from auctionhouse import logger, settings
from auctionhouse.auction_repository import AuctionRepository
from auctionhouse.auction_usecase import AuctionUseCase
from auctionhouse.bid_repository import BidRepository
from auctionhouse.bid_usecase import BidUseCase
from auctionhouse.controllers import AuctionController, BidController, UserController
from auctionhouse.user_repository import UserRepository
from auctionhouse.user_usecase import UserUseCase


def init_dependencies(
    database,
) -> tuple[UserController, BidController, AuctionController]:
    """Build the repositories, use cases and controllers over one database."""
    auction_repository = AuctionRepository(database)
    bid_repository = BidRepository(database, auction_repository)
    user_repository = UserRepository(database)

    user_controller = UserController(UserUseCase(user_repository))
    auction_controller = AuctionController(
        AuctionUseCase(auction_repository, bid_repository)
    )
    bid_controller = BidController(BidUseCase(bid_repository))
    return user_controller, bid_controller, auction_controller


def create_app(
    user_controller: UserController,
    bid_controller: BidController,
    auction_controller: AuctionController,
) -> Flask:
    """The web application routing requests to the controllers."""
    app = Flask("auctionhouse")

    def respond(result: tuple[int, Any]):
        status, body = result
        if status == HTTPStatus.CREATED:
            return app.response_class(status=int(status))
        return app.response_class(
            json.dumps(body), status=int(status), mimetype="application/json"
        )

    @app.get("/auction")
    def find_auctions():
        return respond(
            auction_controller.find_auctions(
                request.args.get("status", ""),
                request.args.get("category", ""),
                request.args.get("productName", ""),
            )
        )

    @app.get("/auction/<auctionId>")
    def find_auction_by_id(auctionId: str):
        return respond(auction_controller.find_auction_by_id(auctionId))

    @app.post("/auction")
    def create_auction():
        return respond(auction_controller.create_auction(request.get_data()))

    @app.get("/auction/winner/<auctionId>")
    def find_winning_bid(auctionId: str):
        return respond(auction_controller.find_winning_bid_by_auction_id(auctionId))

    @app.post("/bid")
    def create_bid():
        return respond(bid_controller.create_bid(request.get_data()))

    @app.get("/bid/<auctionId>")
    def find_bids(auctionId: str):
        return respond(bid_controller.find_bid_by_auction_id(auctionId))

    @app.get("/user/<userId>")
    def find_user(userId: str):
        return respond(user_controller.find_user_by_id(userId))

    return app


def main(argv: list[str] | None = None) -> int:
    """Load the environment, connect to the database and serve requests."""
    parser = argparse.ArgumentParser(prog="auctionhouse", description="Run the auction server.")
    parser.add_argument("--env-file", default=".env", help="file of environment variables")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)

    if not os.path.isfile(args.env_file):
        logger.error("Error trying to load env variables", None)
        return 1
    load_dotenv(args.env_file)

    try:
        database = settings.connect_database()
    except (PyMongoError, ValueError):
        return 1

    user_controller, bid_controller, auction_controller = init_dependencies(database)
    app = create_app(user_controller, bid_controller, auction_controller)
    try:
        app.run(host=args.host, port=args.port)
    finally:
        bid_controller.bid_use_case.close()
    return 0