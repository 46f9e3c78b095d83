"""Settings read from the environment and the database connection."""

from __future__ import annotations

import os
import re
from datetime import timedelta
from fractions import Fraction

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from auctionhouse import logger

MONGODB_URL = "MONGODB_URL"
MONGODB_DB = "MONGODB_DB"

_UNITS_NS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")
_MAX_NS = 2**63 - 1
_INTEGER = re.compile(r"[+-]?\d+")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "300ms", "1.5h" or "2h45m"; raise ValueError if invalid."""
    s = text
    negative = False
    if s and s[0] in "+-":
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total = Fraction(0)
    pos = 0
    while pos < len(s):
        match = _COMPONENT.match(s, pos)
        whole, frac, unit = match.groups()
        if not whole and not frac:
            raise ValueError(f"invalid duration {text!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {text!r}")
        if unit not in _UNITS_NS:
            raise ValueError(f"unknown unit {unit!r} in duration {text!r}")
        value = Fraction(int(whole or "0"))
        if frac:
            value += Fraction(int(frac), 10 ** len(frac))
        total += value * _UNITS_NS[unit]
        pos = match.end()

    nanoseconds = int(total)
    if nanoseconds > _MAX_NS + (1 if negative else 0):
        raise ValueError(f"invalid duration {text!r}")
    seconds, rest = divmod(nanoseconds, 1_000_000_000)
    duration = timedelta(seconds=seconds, microseconds=rest // 1000)
    return -duration if negative else duration


def _duration_from_env(name: str, default: timedelta) -> timedelta:
    try:
        return parse_duration(os.environ.get(name, ""))
    except ValueError:
        return default


def auction_interval() -> timedelta:
    """How long an auction stays open (AUCTION_INTERVAL, default five minutes)."""
    return _duration_from_env("AUCTION_INTERVAL", timedelta(minutes=5))


def batch_insert_interval() -> timedelta:
    """How long bids wait before being flushed (BATCH_INSERT_INTERVAL, default three minutes)."""
    return _duration_from_env("BATCH_INSERT_INTERVAL", timedelta(minutes=3))


def max_batch_size() -> int:
    """How many bids make a full batch (MAX_BATCH_SIZE, default five)."""
    value = os.environ.get("MAX_BATCH_SIZE", "")
    if not _INTEGER.fullmatch(value):
        return 5
    return int(value)


def connect_database() -> Database:
    """Connect to MongoDB using MONGODB_URL and MONGODB_DB and return the database."""
    url = os.environ.get(MONGODB_URL, "")
    name = os.environ.get(MONGODB_DB, "")

    try:
        client = MongoClient(url)
    except (PyMongoError, ValueError) as exc:
        logger.error("Error trying to connect to mongodb database", exc)
        raise

    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        logger.error("Error trying to ping mongodb database", exc)
        client.close()
        raise

    return client[name]