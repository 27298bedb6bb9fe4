"""Tests for the receipt grammar."""

import pytest

from models import Item, Receipt
from validation import (
    InvalidReceipt,
    is_valid_amount,
    is_valid_item_description,
    is_valid_purchase_date,
    is_valid_purchase_time,
    is_valid_retailer,
    validate,
)


def make_receipt(**overrides):
    fields = dict(
        retailer="M&M Corner Market",
        purchaseDate="2022-03-20",
        purchaseTime="14:33",
        items=[Item(shortDescription="Gatorade", price="2.25")],
        total="2.25",
    )
    fields.update(overrides)
    return Receipt(**fields)


class TestRetailer:
    @pytest.mark.parametrize("name", ["Target", "M&M Corner Market", "Walmart-Super", "Shop_Express", "7-Eleven", "   ", "Target\tStore\n"])
    def test_valid(self, name):
        assert is_valid_retailer(name)

    @pytest.mark.parametrize("name", ["", "Target@Home", "Shop*Name", "Store#1", "Trader Joe's", "Café", "Target\x0bStore"])
    def test_invalid(self, name):
        assert not is_valid_retailer(name)


class TestPurchaseDate:
    @pytest.mark.parametrize("date", ["2022-01-01", "2020-02-29", "1999-12-31"])
    def test_valid(self, date):
        assert is_valid_purchase_date(date)

    @pytest.mark.parametrize("date", ["2022-13-01", "2021-02-29", "2022-01-32", "2022-1-1", "22-01-01",
                                      "2022/01/01", "2022-01-01T00:00", "", "today"])
    def test_invalid(self, date):
        assert not is_valid_purchase_date(date)


class TestPurchaseTime:
    @pytest.mark.parametrize("time", ["00:00", "13:01", "14:00", "23:59"])
    def test_valid(self, time):
        assert is_valid_purchase_time(time)

    @pytest.mark.parametrize("time", ["24:00", "25:00", "12:60", "9:05", "09:5", "09:05:00", "1pm", ""])
    def test_invalid(self, time):
        assert not is_valid_purchase_time(time)


class TestAmount:
    @pytest.mark.parametrize("amount", ["0.00", "6.49", "12.25", "100.00", "0012.30"])
    def test_valid(self, amount):
        assert is_valid_amount(amount)

    @pytest.mark.parametrize("amount", ["12.5", "12.500", "12", ".25", "-1.00", "+1.00", "1e2", "1,00", " 1.00", "1.00\n", ""])
    def test_invalid(self, amount):
        assert not is_valid_amount(amount)


class TestItemDescription:
    @pytest.mark.parametrize("description", ["Mountain Dew 12PK", "   Klarbrunn 12-PK 12 FL OZ  ", "Pepsi - 12-oz", "snake_case"])
    def test_valid(self, description):
        assert is_valid_item_description(description)

    @pytest.mark.parametrize("description", ["", "M&M", "Pepsi (12oz)", "???", "\\\\", "Pepsi\x0b12oz"])
    def test_invalid(self, description):
        assert not is_valid_item_description(description)


class TestValidate:
    def test_valid_receipt_passes(self):
        assert validate(make_receipt()) is None

    @pytest.mark.parametrize("field", ["retailer", "purchaseDate", "purchaseTime", "total"])
    def test_empty_field_is_rejected(self, field):
        with pytest.raises(InvalidReceipt):
            validate(make_receipt(**{field: ""}))

    def test_empty_items_is_rejected(self):
        with pytest.raises(InvalidReceipt):
            validate(make_receipt(items=[]))

    @pytest.mark.parametrize("overrides", [
        {"retailer": "Target@Home"},
        {"purchaseDate": "2022-13-01"},
        {"purchaseTime": "25:00"},
        {"total": "12.5"},
        {"total": "12.500"},
    ])
    def test_malformed_field_is_rejected(self, overrides):
        with pytest.raises(InvalidReceipt):
            validate(make_receipt(**overrides))

    @pytest.mark.parametrize("item", [
        Item(shortDescription="", price="1.00"),
        Item(shortDescription="Gatorade", price=""),
        Item(shortDescription="Gatorade!", price="1.00"),
        Item(shortDescription="Gatorade", price="1.0"),
    ])
    def test_any_bad_item_is_rejected(self, item):
        items = [Item(shortDescription="Gatorade", price="2.25"), item]
        with pytest.raises(InvalidReceipt):
            validate(make_receipt(items=items))

    def test_error_does_not_name_the_failed_rule(self):
        messages = set()
        for overrides in [{"retailer": "@"}, {"total": "1"}, {"items": []}]:
            with pytest.raises(InvalidReceipt) as excinfo:
                validate(make_receipt(**overrides))
            messages.add(str(excinfo.value))
        assert messages == {"The receipt is invalid."}
