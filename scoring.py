"""
Reward points rule set. Each rule is scored independently and the results are
summed. The rules assume an already validated receipt but never raise on a
number that fails to parse: such a value simply counts as 0 for that rule.
"""
import math
import re
from typing import List

POINTS_RETAILER_NAME_ALPHANUM_CHARACTER = 1
POINTS_TOTAL_HAS_NO_CENTS = 50
POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS = 25
POINTS_ITEMS_PAIR = 5
POINTS_ITEM_DESCRIPTION = 0.2
POINTS_ODD_PURCHASE_DAY = 6
POINTS_AFTERNOON_PURCHASE = 10
REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR = 3
REWARD_WINDOW_START_MINUTE = 14 * 60
REWARD_WINDOW_END_MINUTE = 16 * 60

NON_ALPHANUM_PATTERN = re.compile(r"[^a-zA-Z0-9]")


def _parse_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        return 0.0
    # float() also takes "inf" and "nan", which would break the ceil in the item rule
    return value if math.isfinite(value) else 0.0


def _parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def score_retailer(retailer: str) -> int:
    """ One point per ASCII letter or digit in the retailer name """
    return len(NON_ALPHANUM_PATTERN.sub("", retailer)) * POINTS_RETAILER_NAME_ALPHANUM_CHARACTER


def score_total(total: str) -> int:
    """ Round-dollar and quarter-multiple bonuses; both can apply to the same total """
    parsed_total = _parse_float(total)
    points = 0
    if parsed_total % 1 == 0:
        points += POINTS_TOTAL_HAS_NO_CENTS
    if parsed_total % 0.25 == 0:
        points += POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS
    return points


def score_item_pairs(items: List) -> int:
    return (len(items) // 2) * POINTS_ITEMS_PAIR


def score_item_description(description: str, price: str) -> int:
    # a blank description has length 0 and qualifies too
    if len(description.strip()) % REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR != 0:
        return 0
    return math.ceil(_parse_float(price) * POINTS_ITEM_DESCRIPTION)


def score_purchase_date(date: str) -> int:
    parts = date.split("-")
    if len(parts) != 3:
        return 0
    if _parse_int(parts[2]) % 2 != 0:
        return POINTS_ODD_PURCHASE_DAY
    return 0


def score_purchase_time(time: str) -> int:
    """ Bonus for purchases from 14:00 up to, but not including, 16:00 """
    parts = time.split(":")
    if len(parts) != 2:
        return 0
    minute_of_day = _parse_int(parts[0]) * 60 + _parse_int(parts[1])
    if REWARD_WINDOW_START_MINUTE <= minute_of_day < REWARD_WINDOW_END_MINUTE:
        return POINTS_AFTERNOON_PURCHASE
    return 0


def calculate_points(receipt) -> int:
    """ Calculates points earned from each component of the receipt """
    points = 0
    points += score_retailer(receipt.retailer)
    points += score_total(receipt.total)
    points += score_item_pairs(receipt.items)
    points += sum(score_item_description(item.shortDescription, item.price) for item in receipt.items)
    points += score_purchase_date(receipt.purchaseDate)
    points += score_purchase_time(receipt.purchaseTime)
    return points
