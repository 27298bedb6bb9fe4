import logging
import re
from datetime import datetime

logger = logging.getLogger(__name__)

INVALID_RECEIPT_MESSAGE = "The receipt is invalid."
RECEIPT_DATE_FORMAT = '%Y-%m-%d'
RECEIPT_TIME_FORMAT = '%H:%M'

# whitespace is spelled out: \s would also take the vertical tab
RETAILER_PATTERN = re.compile(r"[\w\t\n\f\r \-&]+", re.ASCII)
ITEM_DESCRIPTION_PATTERN = re.compile(r"[\w\t\n\f\r \-]+", re.ASCII)
AMOUNT_PATTERN = re.compile(r"\d+\.\d{2}", re.ASCII)
# strptime alone accepts unpadded fields such as 2022-1-1 or 9:05
DATE_SHAPE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
TIME_SHAPE_PATTERN = re.compile(r"\d{2}:\d{2}", re.ASCII)


class InvalidReceipt(ValueError):
    """ Raised for any malformed receipt; deliberately says nothing about which rule failed """

    def __init__(self):
        super().__init__(INVALID_RECEIPT_MESSAGE)


def is_valid_retailer(retailer: str) -> bool:
    return RETAILER_PATTERN.fullmatch(retailer) is not None


def is_valid_purchase_date(date: str) -> bool:
    if not DATE_SHAPE_PATTERN.fullmatch(date):
        return False
    try:
        datetime.strptime(date, RECEIPT_DATE_FORMAT)
    except ValueError:
        return False
    return True


def is_valid_purchase_time(time: str) -> bool:
    if not TIME_SHAPE_PATTERN.fullmatch(time):
        return False
    try:
        datetime.strptime(time, RECEIPT_TIME_FORMAT)
    except ValueError:
        return False
    return True


def is_valid_amount(amount: str) -> bool:
    """ Non-negative amount with exactly two decimals, no sign and no exponent (e.g. 6.49) """
    return AMOUNT_PATTERN.fullmatch(amount) is not None


def is_valid_item_description(description: str) -> bool:
    return ITEM_DESCRIPTION_PATTERN.fullmatch(description) is not None


def has_required_fields(receipt) -> bool:
    """ Every top level field is a non-empty string and there is at least one item """
    return all((receipt.retailer, receipt.purchaseDate, receipt.purchaseTime, receipt.total)) \
        and len(receipt.items) > 0


def is_valid_item(item) -> bool:
    return bool(item.shortDescription) and bool(item.price) \
        and is_valid_item_description(item.shortDescription) \
        and is_valid_amount(item.price)


def validate(receipt):
    """
    Checks a decoded receipt against the receipt grammar. Returns None when every
    rule passes and raises InvalidReceipt on the first failure. The failing rule
    is only ever logged, the caller gets the same uniform error every time.
    """
    checks = [
        ("required fields", lambda: has_required_fields(receipt)),
        ("retailer", lambda: is_valid_retailer(receipt.retailer)),
        ("purchase date", lambda: is_valid_purchase_date(receipt.purchaseDate)),
        ("purchase time", lambda: is_valid_purchase_time(receipt.purchaseTime)),
        ("total", lambda: is_valid_amount(receipt.total)),
        ("items", lambda: all(is_valid_item(item) for item in receipt.items)),
    ]
    for name, check in checks:
        if not check():
            logger.debug("Receipt rejected: invalid %s", name)
            raise InvalidReceipt()
