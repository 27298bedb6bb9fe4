"""Tests for the in-memory receipt store."""

import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest

from models import Item, Receipt
from store import ReceiptNotFound, ReceiptStore


@pytest.fixture
def receipt():
    return Receipt(
        retailer="Target",
        purchaseDate="2022-01-02",
        purchaseTime="13:13",
        items=[Item(shortDescription="Pepsi - 12-oz", price="1.25")],
        total="1.25",
    )


def test_insert_then_lookup(receipt):
    store = ReceiptStore()
    receipt_id = store.insert(receipt, 31)
    assert store.lookup_points(receipt_id) == 31


def test_insert_returns_uuid4(receipt):
    receipt_id = ReceiptStore().insert(receipt, 31)
    assert str(uuid.UUID(receipt_id)) == receipt_id
    assert uuid.UUID(receipt_id).version == 4


def test_zero_points_are_found(receipt):
    store = ReceiptStore()
    receipt_id = store.insert(receipt, 0)
    assert store.lookup_points(receipt_id) == 0


@pytest.mark.parametrize("receipt_id", ["", "test", str(uuid.uuid4())])
def test_unknown_id(receipt_id):
    with pytest.raises(ReceiptNotFound, match=r"^No receipt found for that ID\.$") as excinfo:
        ReceiptStore().lookup_points(receipt_id)
    assert excinfo.value.receipt_id == receipt_id


def test_same_receipt_gets_distinct_ids(receipt):
    store = ReceiptStore()
    first = store.insert(receipt, 31)
    second = store.insert(receipt, 31)
    assert first != second
    assert store.lookup_points(first) == store.lookup_points(second) == 31


def test_concurrent_inserts(receipt):
    store = ReceiptStore()

    with ThreadPoolExecutor(max_workers=20) as pool:
        receipt_ids = list(pool.map(lambda points: (store.insert(receipt, points), points), range(500)))

    assert len({receipt_id for receipt_id, _ in receipt_ids}) == 500
    for receipt_id, points in receipt_ids:
        assert store.lookup_points(receipt_id) == points
