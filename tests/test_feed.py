"""Tests for the smart trolley feed adapter"""
import asyncio
import json

import pytest

from smartcart.cart import TrolleyFeed, normalize_name, parse_quantity, quantity_for


@pytest.mark.parametrize(
    "value,expected",
    [
        ("3", 3),
        (" 12 ", 12),
        ("3pcs", 3),
        ("0", 0),
        ("", 0),
        (None, 0),
        ("abc", 0),
        ("-4", 0),
        (7, 7),
    ],
)
def test_parse_quantity(value, expected):
    assert parse_quantity(value) == expected


def test_quantity_for_uses_normalized_name():
    snapshot = {"apple": "3", "totalPrice": "6"}

    assert normalize_name("Green APPLE") == "green apple"
    assert quantity_for(snapshot, "Apple") == 3
    assert quantity_for(snapshot, "Mango") == 0


@pytest.mark.asyncio
async def test_get_snapshot_empty_namespace(feed):
    assert await feed.get_snapshot() == {}


@pytest.mark.asyncio
async def test_writes_are_lower_cased_and_announced(feed, fake_redis):
    await feed.set_quantity("Apple", 2)
    await feed.set_quantity("MANGO", 1)
    await feed.delete_key("Mango")

    assert fake_redis.hashes["smart_trolley"] == {"apple": "2"}

    events = [json.loads(fields["data"])["event"] for _, fields in fake_redis.streams["stream:smart_trolley"]]
    assert events == ["trolley.item.set", "trolley.item.set", "trolley.item.deleted"]


@pytest.mark.asyncio
async def test_reset_namespace_keeps_total_price_marker(feed, fake_redis):
    fake_redis.hashes["smart_trolley"] = {"apple": "2", "mango": "4", "totalPrice": "10.00"}

    await feed.reset_namespace()

    assert await feed.get_snapshot() == {"totalPrice": "0"}


@pytest.mark.asyncio
async def test_subscribe_delivers_initial_and_changed_snapshots(feed, fake_redis):
    fake_redis.hashes["smart_trolley"] = {"apple": "1"}
    received = []

    unsubscribe = feed.subscribe(received.append)
    try:
        await asyncio.sleep(0.03)
        assert received == [{"apple": "1"}]

        await feed.set_quantity("apple", 2)
        await asyncio.sleep(0.05)

        assert received[-1] == {"apple": "2"}
    finally:
        unsubscribe()


@pytest.mark.asyncio
async def test_subscribe_to_missing_namespace_delivers_empty_snapshot(feed):
    received = []

    unsubscribe = feed.subscribe(received.append)
    await asyncio.sleep(0.03)
    unsubscribe()

    assert received == [{}]


@pytest.mark.asyncio
async def test_subscribe_ignores_history_before_subscription(feed, fake_redis):
    await feed.set_quantity("apple", 1)
    await feed.set_quantity("apple", 2)
    received = []

    unsubscribe = feed.subscribe(received.append)
    await asyncio.sleep(0.05)
    unsubscribe()

    assert received == [{"apple": "2"}]


@pytest.mark.asyncio
async def test_unsubscribe_stops_delivery_and_is_idempotent(feed, fake_redis):
    received = []

    unsubscribe = feed.subscribe(received.append)
    await asyncio.sleep(0.03)
    unsubscribe()
    unsubscribe()

    await feed.set_quantity("apple", 5)
    await asyncio.sleep(0.05)

    assert received == [{}]


@pytest.mark.asyncio
async def test_subscription_failure_stops_delivery(fake_redis):
    calls = {"n": 0}
    real_xrange = fake_redis.xrange

    async def flaky_xrange(*args, **kwargs):
        calls["n"] += 1
        raise ConnectionError("upstash unreachable")

    fake_redis.xrange = flaky_xrange
    feed = TrolleyFeed(poll_interval=0.01, redis=fake_redis)
    received = []

    unsubscribe = feed.subscribe(received.append)
    await asyncio.sleep(0.05)
    fake_redis.xrange = real_xrange
    await feed.set_quantity("apple", 1)
    await asyncio.sleep(0.05)
    unsubscribe()

    assert received == [{}]
    assert calls["n"] == 1


@pytest.mark.asyncio
async def test_callback_errors_do_not_end_subscription(feed):
    received = []

    def callback(snapshot):
        received.append(snapshot)
        if len(received) == 1:
            raise RuntimeError("consumer bug")

    unsubscribe = feed.subscribe(callback)
    await asyncio.sleep(0.03)
    await feed.set_quantity("apple", 1)
    await asyncio.sleep(0.05)
    unsubscribe()

    assert received[-1] == {"apple": "1"}


@pytest.mark.asyncio
async def test_subscribe_sees_unannounced_hash_writes(feed, fake_redis):
    received = []

    unsubscribe = feed.subscribe(received.append)
    try:
        await asyncio.sleep(0.03)
        # Device writes the hash without XADD
        fake_redis.hashes["smart_trolley"] = {"apple": "2"}
        await asyncio.sleep(0.1)
    finally:
        unsubscribe()

    assert received[0] == {}
    assert received[-1] == {"apple": "2"}
    assert received.count({"apple": "2"}) == 1
