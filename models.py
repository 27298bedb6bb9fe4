from typing import List, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from validation import InvalidReceipt


class Item(BaseModel):
    """ A single purchased item, owned by exactly one receipt """
    model_config = ConfigDict(strict=True, frozen=True)

    shortDescription: str
    price: str


class Receipt(BaseModel):
    """
    A submitted receipt as decoded from the request body. All fields, including
    the numeric-looking ones (price, total), are carried as the original strings.
    """
    model_config = ConfigDict(strict=True, frozen=True)

    retailer: str
    purchaseDate: str
    purchaseTime: str
    items: List[Item]
    total: str


def parse_receipt(raw: Union[bytes, str]) -> Receipt:
    """ Decodes a JSON request body into a Receipt, rejecting anything not shaped like one """
    try:
        return Receipt.model_validate_json(raw)
    except ValidationError as e:
        raise InvalidReceipt() from e
