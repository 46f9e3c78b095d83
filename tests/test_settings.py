from datetime import timedelta

import pytest
from pymongo.errors import PyMongoError

from auctionhouse.settings import (
    auction_interval,
    batch_insert_interval,
    connect_database,
    max_batch_size,
    parse_duration,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0", timedelta(0)),
        ("20s", timedelta(seconds=20)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5s", timedelta(seconds=1, milliseconds=500)),
        ("300ms", timedelta(milliseconds=300)),
        ("-2m", -timedelta(minutes=2)),
        ("+5m", timedelta(minutes=5)),
        ("10us", timedelta(microseconds=10)),
        (".5s", timedelta(milliseconds=500)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "5", "abc", "1x", ".s", "-", "1h2"])
def test_parse_duration_rejects_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_parse_duration_rejects_overflow():
    with pytest.raises(ValueError):
        parse_duration("9999999999h")


def test_auction_interval_default_and_override(monkeypatch):
    monkeypatch.delenv("AUCTION_INTERVAL", raising=False)
    assert auction_interval() == timedelta(minutes=5)
    monkeypatch.setenv("AUCTION_INTERVAL", "20s")
    assert auction_interval() == timedelta(seconds=20)
    monkeypatch.setenv("AUCTION_INTERVAL", "soon")
    assert auction_interval() == timedelta(minutes=5)


def test_batch_insert_interval_default_and_override(monkeypatch):
    monkeypatch.delenv("BATCH_INSERT_INTERVAL", raising=False)
    assert batch_insert_interval() == timedelta(minutes=3)
    monkeypatch.setenv("BATCH_INSERT_INTERVAL", "10s")
    assert batch_insert_interval() == timedelta(seconds=10)


def test_max_batch_size(monkeypatch):
    monkeypatch.delenv("MAX_BATCH_SIZE", raising=False)
    assert max_batch_size() == 5
    monkeypatch.setenv("MAX_BATCH_SIZE", "10")
    assert max_batch_size() == 10
    monkeypatch.setenv("MAX_BATCH_SIZE", "ten")
    assert max_batch_size() == 5
    monkeypatch.setenv("MAX_BATCH_SIZE", " 7")
    assert max_batch_size() == 5


def test_connect_database_rejects_bad_url(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "http://localhost")
    monkeypatch.setenv("MONGODB_DB", "auctions")
    with pytest.raises(PyMongoError):
        connect_database()