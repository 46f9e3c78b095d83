"""Binding of JSON request bodies to use-case inputs."""

from __future__ import annotations

import json
from typing import Any

from auctionhouse.auction_usecase import AuctionInput
from auctionhouse.bid_usecase import BidInput
from auctionhouse.errors import (
    Cause,
    RestError,
    bad_request_rest_error,
    not_found_rest_error,
)

_CONVERT_MESSAGE = "Error trying to convert fields"
_TYPE_MESSAGE = "Invalid type error"
_INVALID_MESSAGE = "Invalid field values"
_CONDITIONS = (0, 1, 2)


class _TypeMismatch(Exception):
    """A JSON value had the wrong type for its field."""


def _decode(payload: Any) -> dict[str, Any]:
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise bad_request_rest_error(_CONVERT_MESSAGE) from exc
    if isinstance(payload, str):
        if not payload.strip():
            raise bad_request_rest_error(_CONVERT_MESSAGE)
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise bad_request_rest_error(_CONVERT_MESSAGE) from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise not_found_rest_error(_TYPE_MESSAGE)
    return payload


def _lookup(data: dict[str, Any], key: str) -> Any:
    if key in data:
        return data[key]
    # Keys are matched without regard to case, the exact spelling winning.
    for name, value in data.items():
        if isinstance(name, str) and name.casefold() == key.casefold():
            return value
    return None


def _string(data: dict[str, Any], key: str) -> str:
    value = _lookup(data, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _TypeMismatch(key)
    return value


def _integer(data: dict[str, Any], key: str) -> int:
    value = _lookup(data, key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise _TypeMismatch(key)
    return value


def _number(data: dict[str, Any], key: str) -> float:
    value = _lookup(data, key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _TypeMismatch(key)
    return float(value)


def _characters(count: int) -> str:
    return f"{count} character" if count == 1 else f"{count} characters"


def _check_text(
    field: str, value: str, minimum: int, maximum: int | None = None
) -> Cause | None:
    if not value:
        return Cause(field, f"{field} is a required field")
    if len(value) < minimum:
        return Cause(field, f"{field} must be at least {_characters(minimum)}")
    if maximum is not None and len(value) > maximum:
        return Cause(
            field, f"{field} must be a maximum of {_characters(maximum)} in length"
        )
    return None


def bind_auction_input(payload: Any) -> AuctionInput:
    """Read and validate an auction from a JSON body; raise RestError if it is unusable."""
    data = _decode(payload)
    try:
        auction_input = AuctionInput(
            product_name=_string(data, "product_name"),
            category=_string(data, "category"),
            description=_string(data, "description"),
            condition=_integer(data, "condition"),
        )
    except _TypeMismatch as exc:
        raise not_found_rest_error(_TYPE_MESSAGE) from exc

    checks = [
        _check_text("ProductName", auction_input.product_name, 1),
        _check_text("Category", auction_input.category, 2),
        _check_text("Description", auction_input.description, 10, 200),
    ]
    if auction_input.condition not in _CONDITIONS:
        allowed = " ".join(str(value) for value in _CONDITIONS)
        checks.append(Cause("Condition", f"Condition must be one of [{allowed}]"))

    causes = [cause for cause in checks if cause is not None]
    if causes:
        raise bad_request_rest_error(_INVALID_MESSAGE, *causes)
    return auction_input


def bind_bid_input(payload: Any) -> BidInput:
    """Read a bid from a JSON body; raise RestError if it is unusable."""
    data = _decode(payload)
    try:
        return BidInput(
            user_id=_string(data, "user_id"),
            auction_id=_string(data, "auction_id"),
            amount=_number(data, "amount"),
        )
    except _TypeMismatch as exc:
        raise not_found_rest_error(_TYPE_MESSAGE) from exc


__all__ = ["RestError", "bind_auction_input", "bind_bid_input"]