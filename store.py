import threading
from uuid import uuid4

NOT_FOUND_MESSAGE = "No receipt found for that ID."


class ReceiptNotFound(LookupError):
    def __init__(self, receipt_id: str):
        super().__init__(NOT_FOUND_MESSAGE)
        self.receipt_id = receipt_id


class ReceiptStore:
    """
    In-memory (receipt id -> receipt, points) mapping for the lifetime of the
    application. Entries are written once and never changed or removed. A single
    lock covers the paired write on insert and the read on lookup, so no reader
    can see an id that has points but no receipt or the other way around.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._receipts = {}
        self._points = {}

    def insert(self, receipt, points: int) -> str:
        receipt_id = str(uuid4())
        with self._lock:
            self._receipts[receipt_id] = receipt
            self._points[receipt_id] = points
        return receipt_id

    def lookup_points(self, receipt_id: str) -> int:
        with self._lock:
            points = self._points.get(receipt_id)
        if points is None:
            raise ReceiptNotFound(receipt_id)
        return points
